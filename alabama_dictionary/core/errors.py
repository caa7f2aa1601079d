"""Exceptions raised by the dictionary core."""

from __future__ import annotations


class DictionaryError(Exception):
    """Base class for dictionary core failures."""


class LexiconLoadError(DictionaryError):
    """The lexicon artifact is missing or malformed; the app cannot start."""


class PatternSyntaxError(DictionaryError):
    """A pattern-mode query did not translate into a valid regular expression."""

    def __init__(self, pattern: str, regex: str, reason: str) -> None:
        super().__init__(f"invalid pattern {pattern!r} ({regex!r}): {reason}")
        self.pattern = pattern
        self.regex = regex
        self.reason = reason


__all__ = ["DictionaryError", "LexiconLoadError", "PatternSyntaxError"]
