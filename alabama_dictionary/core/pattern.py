"""Phonological shorthand for pattern-mode queries.

``C`` stands for any consonant and ``V`` for any vowel of the Alabama
orthography. Everything else in a pattern is passed to :mod:`re` as written:
pattern mode is a power-user feature, so callers are expected to write valid
regular expressions around the shorthand and no escaping is done.
"""

from __future__ import annotations

import re
from typing import Pattern

from .errors import PatternSyntaxError

CONSONANT_CLASS = "[bcdfhklɬmnpstwy]"
VOWEL_CLASS = "[aeoiáóéíàòìè]"

_SHORTHAND = {"C": CONSONANT_CLASS, "V": VOWEL_CLASS}


def to_regex(pattern: str) -> str:
    """Expand ``C``/``V`` shorthand in ``pattern`` into character classes."""

    return "".join(_SHORTHAND.get(char, char) for char in pattern or "")


def compile_pattern(pattern: str) -> Pattern[str]:
    """Translate and compile ``pattern``.

    Raises :class:`PatternSyntaxError` when the translated text is not a
    valid regular expression.
    """

    regex = to_regex(pattern)
    try:
        return re.compile(regex)
    except re.error as exc:
        raise PatternSyntaxError(pattern, regex, str(exc)) from exc


__all__ = ["CONSONANT_CLASS", "VOWEL_CLASS", "compile_pattern", "to_regex"]
