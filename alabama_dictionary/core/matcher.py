"""Candidate selection: does one lexicon entry answer a query?"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional, Pattern, Tuple

from .errors import PatternSyntaxError
from .lexicon import LexiconEntry
from .normalizer import neutralize_punctuation, normalize, normalize_field
from .pattern import compile_pattern
from .tags import FilterTag, extract_tags

EntryPredicate = Callable[[LexiconEntry], bool]

AFFIX_MARKERS = ("-", "<", ">")
VERB_GLOSS_PREFIX = "to "


class SearchMode(str, Enum):
    LITERAL = "literal"
    PATTERN = "pattern"


@dataclass(frozen=True)
class Query:
    """One search request as typed by the user.

    ``filters`` adds tags on top of any ``#directives`` found in
    ``raw_text``; ``audio_only`` is the settings toggle and behaves like
    ``#audio``.
    """

    raw_text: str
    mode: SearchMode = SearchMode.LITERAL
    filters: FrozenSet[FilterTag] = frozenset()
    audio_only: bool = False


@dataclass(frozen=True)
class ClassLabelRule:
    """One observed spelling of a morphological class label.

    ``kind`` is ``"contains"`` (substring of the label) or ``"equals"``
    (whole label). Labels compare case-sensitively because ``AM-p`` and
    ``AM-P`` would otherwise collide.
    """

    tag: FilterTag
    kind: str
    literal: str

    def matches(self, label: Optional[str]) -> bool:
        if not label:
            return False
        if self.kind == "contains":
            return self.literal in label
        return label.strip() == self.literal


# Class labels as they occur in the source data. The classification is not a
# clean enum; new spellings belong here, not in the predicates below.
CLASS_LABEL_RULES: Tuple[ClassLabelRule, ...] = (
    ClassLabelRule(FilterTag.TRANSITIVE, "contains", "-LI/CHA-"),
    ClassLabelRule(FilterTag.TRANSITIVE, "contains", "-LI/AM-"),
    ClassLabelRule(FilterTag.TRANSITIVE, "contains", "CHA-/AM-"),
    ClassLabelRule(FilterTag.LI, "contains", "-LI"),
    ClassLabelRule(FilterTag.CHA, "equals", "CHA-"),
    ClassLabelRule(FilterTag.CHA, "equals", "CHA-/AM-"),
    ClassLabelRule(FilterTag.AM, "equals", "AM-"),
    ClassLabelRule(FilterTag.AM, "equals", "CHA-/AM-"),
    ClassLabelRule(FilterTag.AM_P, "equals", "AM-p"),
)


def _has_affix_marker(entry: LexiconEntry) -> bool:
    return any(marker in entry.headword for marker in AFFIX_MARKERS)


def _is_verb_gloss(gloss: str) -> bool:
    return gloss.lstrip().lower().startswith(VERB_GLOSS_PREFIX)


def _has_audio(entry: LexiconEntry) -> bool:
    return entry.has_audio


def _is_noun(entry: LexiconEntry) -> bool:
    if _has_affix_marker(entry):
        return False
    return any(not _is_verb_gloss(sense.gloss) for sense in entry.senses)


def _is_verb(entry: LexiconEntry) -> bool:
    if _has_affix_marker(entry):
        return False
    return any(_is_verb_gloss(sense.gloss) for sense in entry.senses)


def _class_label_predicate(tag: FilterTag) -> EntryPredicate:
    rules = tuple(rule for rule in CLASS_LABEL_RULES if rule.tag is tag)

    def predicate(entry: LexiconEntry) -> bool:
        return any(rule.matches(sense.part_of_speech) for sense in entry.senses for rule in rules)

    predicate.__name__ = f"has_class_{tag.value.replace('-', '_')}"
    return predicate


TAG_PREDICATES: Dict[FilterTag, EntryPredicate] = {
    FilterTag.AUDIO: _has_audio,
    FilterTag.NOUN: _is_noun,
    FilterTag.VERB: _is_verb,
}
TAG_PREDICATES.update(
    {tag: _class_label_predicate(tag) for tag in {rule.tag for rule in CLASS_LABEL_RULES}}
)


@dataclass(frozen=True)
class PreparedQuery:
    """A :class:`Query` with its text parsed and its predicates resolved."""

    query: Query
    term: str
    rank_term: str
    scopes: FrozenSet[FilterTag] = frozenset()
    predicates: Tuple[Tuple[FilterTag, EntryPredicate], ...] = ()
    gloss_pattern: Optional[Pattern[str]] = None
    headword_pattern: Optional[Pattern[str]] = None
    pattern_error: Optional[PatternSyntaxError] = field(default=None, compare=False)

    @property
    def mode(self) -> SearchMode:
        return self.query.mode

    @property
    def tags(self) -> FrozenSet[FilterTag]:
        return self.scopes | frozenset(tag for tag, _ in self.predicates)


def prepare_query(query: Query) -> PreparedQuery:
    """Normalise, extract tags from, and compile ``query``.

    A pattern that fails to compile is recorded on the result rather than
    raised; such a query matches nothing.
    """

    literal = query.mode is SearchMode.LITERAL
    text = normalize(query.raw_text) if literal else (query.raw_text or "")
    extracted = extract_tags(text)

    tags = set(extracted.tags) | set(query.filters)
    if query.audio_only:
        tags.add(FilterTag.AUDIO)
    predicates = tuple(
        (tag, TAG_PREDICATES[tag])
        for tag in sorted(tags, key=lambda tag: tag.value)
        if tag in TAG_PREDICATES
    )

    term = extracted.term
    rank_term = neutralize_punctuation(term if literal else normalize(term))
    scopes = frozenset(tag for tag in tags if tag in (FilterTag.ENGLISH, FilterTag.ALABAMA))

    if literal:
        gloss_pattern = re.compile(r"(?:^|\b)" + re.escape(term), re.IGNORECASE)
        return PreparedQuery(
            query=query,
            term=term,
            rank_term=rank_term,
            scopes=scopes,
            predicates=predicates,
            gloss_pattern=gloss_pattern,
        )

    try:
        headword_pattern = compile_pattern(term)
    except PatternSyntaxError as exc:
        return PreparedQuery(
            query=query,
            term=term,
            rank_term=rank_term,
            scopes=scopes,
            predicates=predicates,
            pattern_error=exc,
        )
    return PreparedQuery(
        query=query,
        term=term,
        rank_term=rank_term,
        scopes=scopes,
        predicates=predicates,
        headword_pattern=headword_pattern,
    )


def _headword_contains(entry: LexiconEntry, prepared: PreparedQuery) -> bool:
    return prepared.term in normalize_field(entry.headword)


def _gloss_matches(entry: LexiconEntry, prepared: PreparedQuery) -> bool:
    pattern = prepared.gloss_pattern
    if pattern is None:
        return False
    return any(pattern.search(normalize_field(gloss)) for gloss in entry.glosses)


_SCOPE_CHECKS: Dict[FilterTag, Callable[[LexiconEntry, PreparedQuery], bool]] = {
    FilterTag.ALABAMA: _headword_contains,
    FilterTag.ENGLISH: _gloss_matches,
}


def matches_text(entry: LexiconEntry, prepared: PreparedQuery) -> bool:
    """Text part of the match, before any tag predicate is applied."""

    if prepared.mode is SearchMode.PATTERN:
        if prepared.headword_pattern is None:
            return False
        return prepared.headword_pattern.search(entry.headword) is not None

    if prepared.scopes:
        return all(_SCOPE_CHECKS[scope](entry, prepared) for scope in prepared.scopes)
    return _headword_contains(entry, prepared) or _gloss_matches(entry, prepared)


def matches(entry: LexiconEntry, prepared: PreparedQuery) -> bool:
    if not matches_text(entry, prepared):
        return False
    return all(predicate(entry) for _, predicate in prepared.predicates)


__all__ = [
    "AFFIX_MARKERS",
    "CLASS_LABEL_RULES",
    "ClassLabelRule",
    "EntryPredicate",
    "PreparedQuery",
    "Query",
    "SearchMode",
    "TAG_PREDICATES",
    "matches",
    "matches_text",
    "prepare_query",
]
