"""Load locale dictionaries shipped with the package.

Dictionaries are flat JSON files under ``locales/`` keyed by dotted names
(``rsvp.attending``). Lookups fall back to the default locale and finally to
the key itself so a missing translation never breaks a response.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from typing import Any

from boda_api.settings import Settings

logger = logging.getLogger(__name__)

_PACKAGE = "boda_api.i18n"


@lru_cache(maxsize=1)
def available_locales() -> frozenset[str]:
    root = resources.files(_PACKAGE).joinpath("locales")
    return frozenset(
        entry.name.removesuffix(".json")
        for entry in root.iterdir()
        if entry.name.endswith(".json")
    )


@lru_cache(maxsize=16)
def get_dictionary(locale: str) -> dict[str, str]:
    """Return the flat message dictionary for ``locale`` (empty when unknown)."""

    if locale not in available_locales():
        return {}
    raw = resources.files(_PACKAGE).joinpath("locales", f"{locale}.json").read_text("utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Locale dictionary for {locale!r} must be a JSON object")
    return {str(key): str(value) for key, value in data.items()}


def resolve_locale(lang: str | None, settings: Settings) -> str:
    """Map a requested language tag onto a supported locale."""

    candidate = (lang or "").strip().lower().replace("_", "-")
    primary = candidate.split("-", 1)[0]
    supported = [loc for loc in settings.supported_locales if loc in available_locales()]
    if primary in supported:
        return primary
    return settings.default_locale


def negotiate_locale(accept_language: str | None, settings: Settings) -> str:
    """Pick the best supported locale from an ``Accept-Language`` header."""

    if not accept_language:
        return settings.default_locale

    weighted: list[tuple[float, str]] = []
    for part in accept_language.split(","):
        tag, _, params = part.strip().partition(";")
        weight = 1.0
        if params.strip().startswith("q="):
            try:
                weight = float(params.strip()[2:])
            except ValueError:
                weight = 0.0
        if tag:
            weighted.append((weight, tag))

    for _, tag in sorted(weighted, key=lambda item: item[0], reverse=True):
        locale = resolve_locale(tag, settings)
        if locale.split("-", 1)[0] == tag.strip().lower().split("-", 1)[0]:
            return locale
    return settings.default_locale


def translate(locale: str, key: str, *, default_locale: str = "es", **params: Any) -> str:
    """Return the message for ``key`` formatted with ``params``."""

    message = get_dictionary(locale).get(key)
    if message is None and locale != default_locale:
        message = get_dictionary(default_locale).get(key)
    if message is None:
        logger.warning("i18n.missing_key", extra={"locale": locale, "key": key})
        return key
    if params:
        try:
            return message.format(**params)
        except (KeyError, IndexError, ValueError):
            logger.warning("i18n.format_failed", extra={"locale": locale, "key": key})
            return message
    return message


__all__ = [
    "available_locales",
    "get_dictionary",
    "negotiate_locale",
    "resolve_locale",
    "translate",
]
