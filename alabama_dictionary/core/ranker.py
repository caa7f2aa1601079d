"""Relevance ordering of matched entries.

Candidates are ordered by a ladder of tests, the first decisive one winning:

1. exact match: the normalised headword, or the joined glosses, equal the term;
2. field selection: the headword when a ``#alabama`` scope is active, the
   glosses under ``#english``; otherwise the headword if it contains the
   term and the glosses if not;
3. within that field, a prefix match beats a non-prefix match;
4. then a match at the start of any ``;``-separated segment;
5. then natural, case-insensitive order of the headword.

Field selection is decided per entry, which keeps the ladder a total order
even when one candidate matched on its headword and the other only on a
gloss.
"""

from __future__ import annotations

import re
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .lexicon import LexiconEntry
from .normalizer import normalize_field
from .tags import FilterTag

_DIGITS = re.compile(r"(\d+)")

NaturalKey = Tuple[Tuple[int, object], ...]
RankKey = Tuple[int, int, int, NaturalKey, str]


def natural_key(text: str) -> NaturalKey:
    """Case-insensitive key that orders embedded numbers numerically."""

    parts = _DIGITS.split(text.casefold())
    return tuple((0, int(part)) if part.isdigit() else (1, part) for part in parts if part)


def resolve_scope(scopes: FrozenSet[FilterTag]) -> Optional[FilterTag]:
    if FilterTag.ALABAMA in scopes:
        return FilterTag.ALABAMA
    if FilterTag.ENGLISH in scopes:
        return FilterTag.ENGLISH
    return None


def _selected_field(entry: LexiconEntry, term: str, scope: Optional[FilterTag]) -> str:
    headword = normalize_field(entry.headword)
    if scope is FilterTag.ALABAMA:
        return headword
    if scope is FilterTag.ENGLISH:
        return normalize_field(entry.joined_gloss)
    if term in headword:
        return headword
    return normalize_field(entry.joined_gloss)


def is_exact_match(entry: LexiconEntry, term: str) -> bool:
    if not term:
        return False
    return normalize_field(entry.headword) == term or normalize_field(entry.joined_gloss) == term


def rank_key(term: str, entry: LexiconEntry, scope: Optional[FilterTag] = None) -> RankKey:
    field = _selected_field(entry, term, scope)
    prefix = field.startswith(term)
    segment = any(segment.strip().startswith(term) for segment in field.split(";"))
    headword = normalize_field(entry.headword)
    return (
        0 if is_exact_match(entry, term) else 1,
        0 if prefix else 1,
        0 if segment else 1,
        natural_key(headword),
        entry.headword,
    )


def compare(
    term: str,
    a: LexiconEntry,
    b: LexiconEntry,
    scope: Optional[FilterTag] = None,
) -> int:
    """Return -1, 0 or 1 as ``a`` ranks before, level with or after ``b``."""

    key_a = rank_key(term, a, scope)
    key_b = rank_key(term, b, scope)
    return (key_a > key_b) - (key_a < key_b)


def rank(
    entries: Iterable[LexiconEntry],
    term: str,
    scope: Optional[FilterTag] = None,
) -> List[LexiconEntry]:
    """Sort ``entries`` for ``term``; ties keep lexicon order."""

    return sorted(entries, key=lambda entry: rank_key(term, entry, scope))


__all__ = ["compare", "is_exact_match", "natural_key", "rank", "rank_key", "resolve_scope"]
