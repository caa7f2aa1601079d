import json

import pytest

from alabama_dictionary.core.errors import LexiconLoadError
from alabama_dictionary.core.lexicon import (
    ExampleSentence,
    LexiconEntry,
    Sense,
    load_lexicon,
    parse_lexicon,
)


def test_legacy_record_is_split_into_senses(sample_lexicon):
    (hoopa,) = sample_lexicon.find("hoopa")
    assert hoopa.senses == (Sense("to be sick", "AM-p"), Sense("sickness", "AM-p"))
    assert hoopa.joined_gloss == "to be sick; sickness"
    assert not hoopa.has_audio


def test_canonical_record_keeps_per_sense_labels():
    entry = LexiconEntry.from_dict(
        {
            "headword": "hopóoni",
            "senses": [
                {"gloss": "to cook", "partOfSpeech": "-LI"},
                {"gloss": "cooking"},
                "  ",
            ],
            "principalParts": "hopoonili, hopoonilka",
            "derivation": "hopoo-",
            "relatedTerms": ["hopoonka"],
            "audio": "hopooni.mp3",
            "examples": [{"sourceText": "hopóoli", "translation": "I cook"}],
        }
    )
    assert entry.senses == (Sense("to cook", "-LI"), Sense("cooking", None))
    assert entry.audio_refs == ("hopooni.mp3",)
    assert entry.related_terms == frozenset({"hopoonka"})
    assert entry.examples == (ExampleSentence("hopóoli", "I cook"),)


def test_to_dict_round_trips_through_from_dict(sample_lexicon):
    (ayo,) = sample_lexicon.find("ayó")
    payload = ayo.to_dict()
    assert payload["headword"] == "ayó"
    assert payload["senses"] == [{"gloss": "to go", "partOfSpeech": "-LI"}]
    assert LexiconEntry.from_dict(json.loads(json.dumps(payload))) == ayo


def test_principal_parts_are_labelled_by_position(sample_lexicon):
    (ayo,) = sample_lexicon.find("ayó")
    assert ayo.principal_part_forms() == {"2sg": "ayóli", "1pl": "ayóhilka", "2pl": "ayóhaska"}

    extra = LexiconEntry(headword="x", principal_parts="a, b, c, d")
    assert extra.principal_part_forms()["part4"] == "d"
    assert LexiconEntry(headword="y").principal_part_forms() == {}


def test_parse_accepts_bare_list():
    lexicon = parse_lexicon([{"headword": "ifa", "senses": ["dog"]}])
    assert len(lexicon) == 1
    assert lexicon[0].glosses == ("dog",)


@pytest.mark.parametrize(
    "payload",
    [
        {"entries": []},
        "not a lexicon",
        [{"definition": "no headword"}],
        [["not", "an", "object"]],
        [{"headword": "x", "senses": 5}],
        [{"headword": "x", "relatedTerms": 5}],
    ],
)
def test_malformed_payload_raises(payload):
    with pytest.raises(LexiconLoadError):
        parse_lexicon(payload)


def test_malformed_entry_reports_its_index():
    with pytest.raises(LexiconLoadError, match="entry 1"):
        parse_lexicon([{"headword": "ok"}, {"gloss": "missing headword"}])


def test_load_lexicon_reads_json_file(tmp_path):
    path = tmp_path / "dict.json"
    path.write_text(json.dumps({"words": [{"lemma": "oki", "definition": "water"}]}), encoding="utf-8")
    lexicon = load_lexicon(path)
    assert [entry.headword for entry in lexicon] == ["oki"]


def test_load_lexicon_missing_file(tmp_path):
    with pytest.raises(LexiconLoadError):
        load_lexicon(tmp_path / "absent.json")


def test_load_lexicon_invalid_json(tmp_path):
    path = tmp_path / "dict.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(LexiconLoadError):
        load_lexicon(path)


def test_back_references(sample_lexicon):
    assert [entry.headword for entry in sample_lexicon.back_references("ayó")] == ["oki"]
    assert sample_lexicon.back_references("ibisa") == []


def test_related_entries_follow_links_both_ways(sample_lexicon):
    (ayo,) = sample_lexicon.find("ayó")
    assert [entry.headword for entry in sample_lexicon.related_entries(ayo)] == ["ayohli", "oki"]
    (ayohli,) = sample_lexicon.find("ayohli")
    assert [entry.headword for entry in sample_lexicon.related_entries(ayohli)] == ["ayó"]


def test_duplicate_headwords_are_distinct_entries():
    lexicon = parse_lexicon(
        [{"headword": "hachi", "senses": ["you all"]}, {"headword": "hachi", "senses": ["river"]}]
    )
    assert len(lexicon.find("hachi")) == 2
