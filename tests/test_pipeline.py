"""Tests for the end-to-end query pipeline."""

from __future__ import annotations

import pytest

from alabama_dictionary.core import Lexicon, LexiconEntry, Query, QueryPipeline, SearchMode, Sense
from alabama_dictionary.core.matcher import matches, prepare_query


def _headwords(entries):
    return [entry.headword for entry in entries]


@pytest.fixture
def large_lexicon() -> Lexicon:
    return Lexicon(
        LexiconEntry(headword=f"w{index:03d}", senses=(Sense(f"gloss {index}"),))
        for index in range(120)
    )


def test_empty_query_returns_lexicon_in_lexicographic_order(pipeline, sample_lexicon):
    page = pipeline.search("", SearchMode.LITERAL, False)
    assert page.total_count == len(sample_lexicon)
    assert _headwords(page.items) == [
        "am-",
        "ayó",
        "ayohli",
        "chaaha",
        "hoopa",
        "ibisa",
        "ifa",
        "isko",
        "oki",
        "ɬakchi",
    ]


def test_ayo_scenario_orders_exact_match_first(pipeline):
    page = pipeline.search("ayo")
    assert _headwords(page.items) == ["ayó", "ayohli"]


def test_exact_match_is_first_result(pipeline):
    assert pipeline.search("ifa").items[0].headword == "ifa"
    assert pipeline.search("Oki").items[0].headword == "oki"


@pytest.mark.parametrize("text", ["", "a", "to", "#verb", "be #en", "zzz"])
def test_total_count_matches_filtered_count(pipeline, sample_lexicon, text):
    prepared = prepare_query(Query(raw_text=text))
    expected = sum(1 for entry in sample_lexicon if matches(entry, prepared))
    page = pipeline.search(text)
    assert page.total_count == expected
    assert len(page.items) <= pipeline.page_size


def test_zero_matches_returns_empty_page(pipeline):
    page = pipeline.search("zzzz")
    assert page.items == ()
    assert page.total_count == 0
    assert page.offset == 0


def test_audio_only_excludes_entries_without_audio(pipeline):
    page = pipeline.search("", audio_only=True)
    assert _headwords(page.items) == ["ayó", "ifa", "isko", "oki"]
    assert all(entry.audio_refs for entry in page.items)


def test_pagination_slices_and_clamps(large_lexicon):
    pipeline = QueryPipeline(large_lexicon)
    results = pipeline.execute(Query(raw_text=""))
    assert results is not None

    first = results.page(0, 50)
    assert len(first.items) == 50
    assert first.items[0].headword == "w000"

    last = results.page(100, 50)
    assert _headwords(last.items)[-1] == "w119"
    assert len(last.items) == 20

    beyond = results.page(500, 50)
    assert beyond.offset == 120
    assert beyond.items == ()

    before = results.page(-10, 50)
    assert before.offset == 0


def test_search_respects_page_size_and_offset(large_lexicon):
    pipeline = QueryPipeline(large_lexicon, page_size=25)
    page = pipeline.search("", offset=30)
    assert page.offset == 30
    assert page.total_count == 120
    assert _headwords(page.items)[0] == "w030"
    assert len(page.items) == 25


def test_invalid_pattern_yields_empty_result(pipeline):
    page = pipeline.search("C(", SearchMode.PATTERN)
    assert page.total_count == 0
    assert pipeline.telemetry.snapshot()["counters"]["search.pattern_error"] == 1


def test_pattern_search_ranks_lexicographically(pipeline):
    page = pipeline.search("^CV", SearchMode.PATTERN)
    assert _headwords(page.items) == ["hoopa", "ɬakchi"]


def test_execute_abandons_when_superseded(pipeline):
    assert pipeline.execute(Query(raw_text="a"), should_continue=lambda: False) is None


def test_pipeline_records_stage_timings(pipeline):
    pipeline.search("a")
    timings = pipeline.telemetry.snapshot()["timings"]
    assert {"search.prepare", "search.filter", "search.rank"} <= set(timings)


def test_pipeline_does_not_mutate_lexicon(pipeline, sample_lexicon):
    before = sample_lexicon.entries
    pipeline.search("a #verb")
    pipeline.search("CV", SearchMode.PATTERN)
    assert sample_lexicon.entries == before


def test_search_rejects_an_abandoned_result(pipeline, monkeypatch):
    monkeypatch.setattr(pipeline, "execute", lambda query, should_continue=None: None)
    with pytest.raises(RuntimeError):
        pipeline.search("ifa")
