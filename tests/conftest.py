import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from alabama_dictionary.core import Lexicon, QueryPipeline, parse_lexicon


# Records in the legacy export shape: ``lemma``, a ``;``-separated
# ``definition`` and one ``class`` label shared by every sense.
SAMPLE_WORDS: List[Dict[str, Any]] = [
    {
        "lemma": "ayó",
        "definition": "to go",
        "class": "-LI",
        "audio": ["ayo_1.mp3"],
        "principalPart": "ayóli, ayóhilka, ayóhaska",
        "relatedTerms": ["ayohli"],
    },
    {"lemma": "ayohli", "definition": "road; path", "audio": []},
    {"lemma": "ifa", "definition": "dog", "audio": ["ifa.mp3"]},
    {"lemma": "isko", "definition": "to drink", "class": "-LI/CHA-", "audio": ["isko.mp3"]},
    {"lemma": "hoopa", "definition": "to be sick; sickness", "class": "AM-p"},
    {"lemma": "chaaha", "definition": "to be tall", "class": "CHA-"},
    {"lemma": "am-", "definition": "to me; for me", "class": "AM-"},
    {"lemma": "ɬakchi", "definition": "to be tired; tiredness", "class": "CHA-/AM-"},
    {"lemma": "oki", "definition": "water", "audio": ["oki.mp3"], "relatedTerms": ["ayó"]},
    {"lemma": "ibisa", "definition": "nose"},
]


@pytest.fixture
def sample_lexicon() -> Lexicon:
    return parse_lexicon({"words": [dict(word) for word in SAMPLE_WORDS]})


@pytest.fixture
def pipeline(sample_lexicon: Lexicon) -> QueryPipeline:
    return QueryPipeline(sample_lexicon)
