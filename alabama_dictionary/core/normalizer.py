"""Text canonicalisation for accent-insensitive matching."""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache

# Pitch accents fold off a, o and i only (à á ò ó ì í). ɬ, ⁿ and ◌ are
# phonemic and are left exactly as written.
_FOLDED_VOWELS = frozenset("aoi")
_TONE_MARKS = frozenset("\u0300\u0301")

# Subscript digits disambiguate homophones (e.g. "ayo₁", "ayo₂").
_SUBSCRIPT_DIGITS = re.compile("[₀-₉]")

_PUNCTUATION = re.compile(r"[^\w\s'\-ⁿ◌]")
_WHITESPACE = re.compile(r"\s+")


def _fold_tone_marks(decomposed: str) -> str:
    folded = []
    base = ""
    for char in decomposed:
        if unicodedata.combining(char):
            if char in _TONE_MARKS and base in _FOLDED_VOWELS:
                continue
        else:
            base = char
        folded.append(char)
    return "".join(folded)


def normalize(text: str | None) -> str:
    """Lowercase ``text``, fold accented vowels and drop subscript indices.

    Precomposed (``á``) and decomposed (``a`` + U+0301) spellings fold to the
    same result. ``normalize(normalize(x)) == normalize(x)`` for any input.
    """

    if not text:
        return ""
    lowered = _SUBSCRIPT_DIGITS.sub("", text.lower())
    decomposed = unicodedata.normalize("NFD", lowered)
    return unicodedata.normalize("NFC", _fold_tone_marks(decomposed))


@lru_cache(maxsize=65536)
def normalize_field(text: str) -> str:
    """Memoised :func:`normalize` for lexicon fields, which repeat on every query."""

    return normalize(text)


def neutralize_punctuation(term: str) -> str:
    """Strip regex-significant punctuation from a search term for ranking."""

    stripped = _PUNCTUATION.sub("", term or "")
    return _WHITESPACE.sub(" ", stripped).strip()


__all__ = ["normalize", "normalize_field", "neutralize_punctuation"]
