"""Dictionary-based translations for public-facing labels."""

from .loader import (
    available_locales,
    get_dictionary,
    negotiate_locale,
    resolve_locale,
    translate,
)

__all__ = [
    "available_locales",
    "get_dictionary",
    "negotiate_locale",
    "resolve_locale",
    "translate",
]
