"""Service layer for dictionary searches."""

from .result_formatter import DictionaryResultFormatter
from .search_service import SearchRequest, SearchService

__all__ = ["DictionaryResultFormatter", "SearchRequest", "SearchService"]
