"""URL slug helpers."""

import re
import unicodedata

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")


def slugify(text: str) -> str:
    """Lowercase ASCII, hyphen-separated slug.

    Accents are folded to their base letter and anything that is not a
    letter, digit, space or hyphen is dropped:

        >>> slugify("Missa de Natal — 2024!")
        'missa-de-natal-2024'
    """
    normalized = unicodedata.normalize("NFD", text.lower())
    ascii_text = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    ascii_text = _NON_SLUG_CHARS.sub("", ascii_text)
    ascii_text = _WHITESPACE.sub("-", ascii_text.strip())
    return _DASHES.sub("-", ascii_text).strip("-")


def resolve_slug(explicit: str | None, title: str) -> str:
    """Return the explicit slug when given, otherwise one derived from title."""
    if explicit and explicit.strip():
        return explicit.strip()
    return slugify(title)
