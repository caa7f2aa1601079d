"""Tests for the C/V pattern shorthand."""

from __future__ import annotations

import re

import pytest

from alabama_dictionary.core.errors import PatternSyntaxError
from alabama_dictionary.core.pattern import CONSONANT_CLASS, VOWEL_CLASS, compile_pattern, to_regex


def test_shorthand_expands_to_character_classes():
    assert to_regex("CV") == CONSONANT_CLASS + VOWEL_CLASS


def test_cv_matches_consonant_vowel_only():
    regex = re.compile(to_regex("CV"))
    assert regex.search("ba")
    assert regex.search("ɬá")
    assert not regex.search("aa")


def test_other_characters_pass_through_unescaped():
    assert to_regex("^aC+$") == "^a" + CONSONANT_CLASS + "+$"
    assert to_regex("a.b") == "a.b"


def test_compile_pattern_reports_invalid_regex():
    with pytest.raises(PatternSyntaxError) as excinfo:
        compile_pattern("C(")
    assert excinfo.value.pattern == "C("
    assert excinfo.value.regex.startswith(CONSONANT_CLASS)
