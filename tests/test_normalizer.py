"""Tests for accent folding and punctuation handling."""

from __future__ import annotations

import unicodedata

import pytest

from alabama_dictionary.core.normalizer import neutralize_punctuation, normalize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Ayó", "ayo"),
        ("ÀÁÒÓÌÍ", "aaooii"),
        ("hokfà", "hokfa"),
        ("ayo₁", "ayo"),
        ("ayo₂ ayo₃", "ayo ayo"),
        ("", ""),
    ],
)
def test_normalize_folds_accents_and_subscripts(raw, expected):
    assert normalize(raw) == expected


def test_normalize_handles_decomposed_accents():
    decomposed = unicodedata.normalize("NFD", "ayó")
    assert decomposed != "ayó"
    assert normalize(decomposed) == "ayo"


def test_normalize_keeps_phonemic_characters():
    assert normalize("ɬáⁿ") == "ɬaⁿ"
    assert normalize("◌ⁿ") == "◌ⁿ"
    assert normalize("ɬ") == "ɬ"


def test_normalize_leaves_other_accents_alone():
    assert normalize("é") == "é"
    assert normalize("è") == "è"


@pytest.mark.parametrize(
    "sample",
    ["Ayó", "ɬÁkchi₂", "á́", "a₁́", "İstanbul", "AM-p", "to GO; tó", "◌ⁿ"],
)
def test_normalize_is_idempotent(sample):
    once = normalize(sample)
    assert normalize(once) == once


def test_normalize_none_is_empty():
    assert normalize(None) == ""


def test_neutralize_punctuation_strips_regex_characters():
    assert neutralize_punctuation("ay(o)*") == "ayo"
    assert neutralize_punctuation("#foo  bar.") == "foo bar"


def test_neutralize_punctuation_keeps_orthographic_marks():
    assert neutralize_punctuation("am-") == "am-"
    assert neutralize_punctuation("ɬaⁿ'") == "ɬaⁿ'"
