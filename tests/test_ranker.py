"""Tests for the relevance ordering ladder."""

from __future__ import annotations

import itertools

from alabama_dictionary.core.lexicon import LexiconEntry, Sense
from alabama_dictionary.core.ranker import compare, natural_key, rank
from alabama_dictionary.core.tags import FilterTag


def _entry(headword: str, *glosses: str) -> LexiconEntry:
    return LexiconEntry(headword=headword, senses=tuple(Sense(gloss) for gloss in glosses))


def _order(entries, term, scope=None):
    return [entry.headword for entry in rank(entries, term, scope)]


def test_empty_term_is_plain_lexicographic():
    entries = [_entry("oki"), _entry("ayó"), _entry("am-"), _entry("ɬakchi"), _entry("Ifa")]
    assert _order(entries, "") == ["am-", "ayó", "Ifa", "oki", "ɬakchi"]


def test_exact_headword_match_comes_first():
    entries = [_entry("ayohli", "road"), _entry("ayó", "to go")]
    assert _order(entries, "ayo") == ["ayó", "ayohli"]


def test_exact_gloss_match_comes_first():
    entries = [_entry("aa", "water jug"), _entry("zz", "water")]
    assert _order(entries, "water") == ["zz", "aa"]


def test_prefix_beats_containment():
    entries = [_entry("chaaha"), _entry("hoopa"), _entry("ayohli"), _entry("am-")]
    assert _order(entries, "a") == ["am-", "ayohli", "chaaha", "hoopa"]


def test_segment_prefix_beats_lexicographic_order():
    entries = [
        _entry("aa", "salt water"),
        _entry("bb", "big river", "water"),
        _entry("cc", "water"),
        _entry("dd", "water jug"),
    ]
    assert _order(entries, "water") == ["cc", "dd", "bb", "aa"]


def test_scope_selects_the_compared_field():
    entries = [_entry("bok", "okay"), _entry("oki", "water")]
    assert _order(entries, "ok") == ["oki", "bok"]
    assert _order(entries, "ok", FilterTag.ALABAMA) == ["oki", "bok"]
    assert _order(entries, "ok", FilterTag.ENGLISH) == ["bok", "oki"]


def test_numbers_sort_naturally():
    entries = [_entry("form10"), _entry("form9"), _entry("form1")]
    assert _order(entries, "") == ["form1", "form9", "form10"]
    assert natural_key("A2") == natural_key("a2")


def test_compare_is_a_consistent_total_order():
    entries = [
        _entry("ayó", "to go"),
        _entry("ayohli", "road; path"),
        _entry("bayo", "to walk"),
        _entry("xx", "ayo"),
        _entry("yy", "goes; ayo bird"),
        _entry("zz", "go"),
    ]
    for a, b in itertools.permutations(entries, 2):
        assert compare("ayo", a, b) == -compare("ayo", b, a)
    for a, b, c in itertools.permutations(entries, 3):
        if compare("ayo", a, b) <= 0 and compare("ayo", b, c) <= 0:
            assert compare("ayo", a, c) <= 0


def test_compare_identical_entries_tie():
    entry = _entry("ifa", "dog")
    assert compare("if", entry, entry) == 0
