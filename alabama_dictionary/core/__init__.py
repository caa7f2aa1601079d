"""Search and ranking core for the Alabama dictionary."""

from .errors import DictionaryError, LexiconLoadError, PatternSyntaxError
from .lexicon import (
    ExampleSentence,
    Lexicon,
    LexiconEntry,
    Sense,
    load_lexicon,
    parse_lexicon,
)
from .matcher import (
    CLASS_LABEL_RULES,
    TAG_PREDICATES,
    PreparedQuery,
    Query,
    SearchMode,
    matches,
    prepare_query,
)
from .normalizer import neutralize_punctuation, normalize
from .pattern import compile_pattern, to_regex
from .pipeline import DEFAULT_PAGE_SIZE, QueryPipeline, ResultPage, SearchResults
from .ranker import compare, rank, rank_key
from .tags import ExtractedQuery, FilterTag, extract_tags

__all__ = [
    "CLASS_LABEL_RULES",
    "DEFAULT_PAGE_SIZE",
    "DictionaryError",
    "ExampleSentence",
    "ExtractedQuery",
    "FilterTag",
    "Lexicon",
    "LexiconEntry",
    "LexiconLoadError",
    "PatternSyntaxError",
    "PreparedQuery",
    "Query",
    "QueryPipeline",
    "ResultPage",
    "SearchMode",
    "SearchResults",
    "Sense",
    "TAG_PREDICATES",
    "compare",
    "compile_pattern",
    "extract_tags",
    "load_lexicon",
    "matches",
    "neutralize_punctuation",
    "normalize",
    "parse_lexicon",
    "prepare_query",
    "rank",
    "rank_key",
    "to_regex",
]
