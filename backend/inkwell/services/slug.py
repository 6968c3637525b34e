"""
Slug generation for taxonomy names.

Folds Vietnamese diacritics to plain ASCII through a fixed table, then keeps
only ``[a-z0-9]`` runs joined by single hyphens:

    slugify("Học lập trình JavaScript")  -> "hoc-lap-trinh-javascript"
    slugify("10 tips để học code")       -> "10-tips-de-hoc-code"

``slugify`` is idempotent. An empty result means the name has no usable
characters and the caller must reject it or ask for an explicit slug.
"""

import re
from typing import Optional

_FOLDS = {
    "a": "àáạảãâầấậẩẫăằắặẳẵ",
    "e": "èéẹẻẽêềếệểễ",
    "i": "ìíịỉĩ",
    "o": "òóọỏõôồốộổỗơờớợởỡ",
    "u": "ùúụủũưừứựửữ",
    "y": "ỳýỵỷỹ",
    "d": "đ",
}

DIACRITIC_MAP: dict[str, str] = {}
for _base, _chars in _FOLDS.items():
    for _char in _chars:
        DIACRITIC_MAP[_char] = _base
        DIACRITIC_MAP[_char.upper()] = _base.upper()

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def remove_diacritics(text: Optional[str]) -> str:
    """Fold diacritics to base letters, preserving case and everything else."""
    if not text:
        return ""
    return "".join(DIACRITIC_MAP.get(char, char) for char in text)


def has_diacritics(text: Optional[str]) -> bool:
    if not text:
        return False
    return any(char in DIACRITIC_MAP for char in text)


def slugify(text: Optional[str]) -> str:
    """Canonical URL-safe slug for a display name."""
    if not text or not isinstance(text, str):
        return ""

    slug = remove_diacritics(text.strip().lower()).lower()
    slug = _DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")
