"""Parsing of ``#tag`` filter directives embedded in query text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional


class FilterTag(str, Enum):
    """Filters a query can switch on with a ``#directive``."""

    ENGLISH = "english"
    ALABAMA = "alabama"
    NOUN = "noun"
    VERB = "verb"
    LI = "li"
    CHA = "cha"
    AM = "am"
    AM_P = "am-p"
    TRANSITIVE = "transitive"
    AUDIO = "audio"


SCOPE_TAGS: FrozenSet[FilterTag] = frozenset({FilterTag.ENGLISH, FilterTag.ALABAMA})

# Spelling accepted after ``#`` (lowercase) -> tag.
DIRECTIVES: Dict[str, FilterTag] = {
    "en": FilterTag.ENGLISH,
    "english": FilterTag.ENGLISH,
    "akz": FilterTag.ALABAMA,
    "alabama": FilterTag.ALABAMA,
    "noun": FilterTag.NOUN,
    "verb": FilterTag.VERB,
    "li": FilterTag.LI,
    "cha": FilterTag.CHA,
    "am": FilterTag.AM,
    "am-p": FilterTag.AM_P,
    "transitive": FilterTag.TRANSITIVE,
    "audio": FilterTag.AUDIO,
}

# A directive is a whole whitespace-delimited token, so "#am-p" never
# matches as "#am" and "x#noun" is not a directive.
_DIRECTIVE_PATTERN = re.compile(
    r"(?<!\S)#("
    + "|".join(re.escape(name) for name in sorted(DIRECTIVES, key=len, reverse=True))
    + r")(?!\S)",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ExtractedQuery:
    term: str
    tags: FrozenSet[FilterTag] = field(default_factory=frozenset)

    @property
    def scopes(self) -> FrozenSet[FilterTag]:
        return self.tags & SCOPE_TAGS

    @property
    def filters(self) -> FrozenSet[FilterTag]:
        return self.tags - SCOPE_TAGS


def parse_directive(token: str) -> Optional[FilterTag]:
    """Return the tag for a single ``#token``, or ``None`` if unrecognised."""

    if not token.startswith("#"):
        return None
    return DIRECTIVES.get(token[1:].lower())


def extract_tags(query: str) -> ExtractedQuery:
    """Split ``query`` into its residual search term and its filter tags.

    Unrecognised ``#words`` are kept in the term verbatim. Text without any
    directive is returned untouched; otherwise the whitespace left behind by
    the removed directives is collapsed.
    """

    text = query or ""
    tags = {DIRECTIVES[match.group(1).lower()] for match in _DIRECTIVE_PATTERN.finditer(text)}
    if not tags:
        return ExtractedQuery(term=text)
    residual = _DIRECTIVE_PATTERN.sub(" ", text)
    return ExtractedQuery(term=_WHITESPACE.sub(" ", residual).strip(), tags=frozenset(tags))


__all__ = [
    "DIRECTIVES",
    "ExtractedQuery",
    "FilterTag",
    "SCOPE_TAGS",
    "extract_tags",
    "parse_directive",
]
