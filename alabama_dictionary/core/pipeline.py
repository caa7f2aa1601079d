"""Query pipeline: extract, filter, rank and paginate over the lexicon."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..utils.observability import get_logger
from ..utils.telemetry import StructuredTelemetry
from .lexicon import Lexicon, LexiconEntry
from .matcher import PreparedQuery, Query, SearchMode, matches, prepare_query
from .ranker import rank, resolve_scope

DEFAULT_PAGE_SIZE = 50

ContinueProbe = Callable[[], bool]


def clamp_offset(offset: int, total_count: int) -> int:
    return max(0, min(int(offset), total_count))


@dataclass(frozen=True)
class ResultPage:
    items: Tuple[LexiconEntry, ...]
    total_count: int
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.items)


@dataclass(frozen=True)
class SearchResults:
    """Every match of one query, already in rank order."""

    prepared: PreparedQuery
    entries: Tuple[LexiconEntry, ...]

    @property
    def total_count(self) -> int:
        return len(self.entries)

    def page(self, offset: int = 0, count: int = DEFAULT_PAGE_SIZE) -> ResultPage:
        """Slice ``[offset, offset + count)``, clamping ``offset`` to the result."""

        start = clamp_offset(offset, self.total_count)
        size = max(0, int(count))
        return ResultPage(
            items=self.entries[start : start + size],
            total_count=self.total_count,
            offset=start,
        )


class QueryPipeline:
    """Stateless search over an immutable lexicon.

    The pipeline keeps no per-query state, so one instance may serve
    concurrent searches from several threads.
    """

    def __init__(
        self,
        lexicon: Lexicon,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        telemetry: Optional[StructuredTelemetry] = None,
    ) -> None:
        self.lexicon = lexicon
        self.page_size = max(1, int(page_size))
        self.telemetry = telemetry or StructuredTelemetry()
        self._logger = get_logger(__name__).bind(component="query_pipeline")

    def execute(
        self,
        query: Query,
        should_continue: Optional[ContinueProbe] = None,
    ) -> Optional[SearchResults]:
        """Run ``query`` to a fully ranked result.

        ``should_continue`` is polled between stages; once it returns false
        the work is abandoned and ``None`` is returned.
        """

        def _abandoned() -> bool:
            return should_continue is not None and not should_continue()

        with self.telemetry.timer("search.prepare", {"mode": query.mode.value}):
            prepared = prepare_query(query)

        if prepared.pattern_error is not None:
            self.telemetry.increment("search.pattern_error")
            self._logger.warning(
                "Pattern query rejected",
                context={"pattern": prepared.term, "error": prepared.pattern_error.reason},
            )
            return SearchResults(prepared=prepared, entries=())

        if _abandoned():
            return None

        with self.telemetry.timer("search.filter") as details:
            candidates = [entry for entry in self.lexicon if matches(entry, prepared)]
            details["candidates"] = len(candidates)

        if _abandoned():
            return None

        with self.telemetry.timer("search.rank"):
            ordered = rank(candidates, prepared.rank_term, resolve_scope(prepared.scopes))

        return SearchResults(prepared=prepared, entries=tuple(ordered))

    def search(
        self,
        raw_text: str,
        mode: SearchMode = SearchMode.LITERAL,
        audio_only: bool = False,
        offset: int = 0,
    ) -> ResultPage:
        results = self.execute(Query(raw_text=raw_text, mode=mode, audio_only=audio_only))
        if results is None:
            raise RuntimeError("search without a continuation probe was abandoned")
        return results.page(offset, self.page_size)


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "QueryPipeline",
    "ResultPage",
    "SearchResults",
    "clamp_offset",
]
