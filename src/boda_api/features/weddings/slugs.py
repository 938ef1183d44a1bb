"""Slug helpers for public wedding URLs."""

from __future__ import annotations

import re
import unicodedata

SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 100

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
_VALID_SLUG = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_CONJUNCTIONS = {"es": "y", "en": "and"}

# Route segments the frontend uses next to /[lang]/boda/[slug].
RESERVED_SLUGS = frozenset({"admin", "api", "dashboard", "login", "new", "register", "settings"})


def slugify(value: str) -> str:
    """Lowercase ASCII slug: accents folded, runs of other characters become '-'."""

    folded = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    candidate = _SLUG_PATTERN.sub("-", folded.lower()).strip("-")
    candidate = re.sub(r"-{2,}", "-", candidate)
    return candidate[:SLUG_MAX_LENGTH].rstrip("-")


def is_valid_slug(value: str) -> bool:
    return (
        SLUG_MIN_LENGTH <= len(value) <= SLUG_MAX_LENGTH
        and bool(_VALID_SLUG.match(value))
        and value not in RESERVED_SLUGS
    )


def slug_base_for_couple(partner_one: str, partner_two: str, *, locale: str = "es") -> str:
    """Default slug for a couple, e.g. 'ana-y-luis'."""

    conjunction = _CONJUNCTIONS.get(locale, _CONJUNCTIONS["es"])
    base = slugify(f"{partner_one} {conjunction} {partner_two}")
    if len(base) < SLUG_MIN_LENGTH or base in RESERVED_SLUGS:
        base = f"boda-{base}".strip("-") if base else "boda"
    return base


def with_suffix(base: str, counter: int) -> str:
    """Return ``base`` with ``-counter`` appended, trimming to the max length."""

    suffix = f"-{counter}"
    return f"{base[: SLUG_MAX_LENGTH - len(suffix)].rstrip('-')}{suffix}"


__all__ = [
    "RESERVED_SLUGS",
    "SLUG_MAX_LENGTH",
    "SLUG_MIN_LENGTH",
    "is_valid_slug",
    "slug_base_for_couple",
    "slugify",
    "with_suffix",
]
