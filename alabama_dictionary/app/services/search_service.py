"""Search service running dictionary queries off the caller's thread."""

from __future__ import annotations

import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from alabama_dictionary.core import (
    DEFAULT_PAGE_SIZE,
    FilterTag,
    Lexicon,
    LexiconEntry,
    Query,
    QueryPipeline,
    ResultPage,
    SearchMode,
    SearchResults,
)
from alabama_dictionary.core.pipeline import clamp_offset

from ...utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from ...utils.telemetry import StructuredTelemetry

ResultListener = Callable[[ResultPage], None]


@dataclass
class SearchRequest:
    """Handle on one submitted search.

    :meth:`result` yields the page the request applied, or ``None`` when a
    newer request superseded it before or after it finished.
    """

    request_id: int
    query: Query
    future: "Future[Optional[ResultPage]]" = field(repr=False)

    def done(self) -> bool:
        return self.future.done()

    def cancelled(self) -> bool:
        return self.future.cancelled()

    def result(self, timeout: Optional[float] = None) -> Optional[ResultPage]:
        try:
            return self.future.result(timeout)
        except CancelledError:
            return None


class SearchService:
    """Owns the visible search state and the latest-request token.

    Every search takes a new, strictly increasing request id. Results are
    applied to :attr:`current_page` only while their id is still the newest
    one started, so a slow query can never overwrite the answer to a query
    typed after it. Superseded work is cancelled if still queued and
    abandoned at the next pipeline stage if already running.
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        *,
        pipeline: Optional[QueryPipeline] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_workers: int = 2,
        debounce_seconds: float = 0.0,
        telemetry: Optional[StructuredTelemetry] = None,
    ) -> None:
        if pipeline is None:
            if lexicon is None:
                raise ValueError("SearchService needs a lexicon or a pipeline")
            pipeline = QueryPipeline(lexicon, page_size=page_size, telemetry=telemetry)
        self.pipeline = pipeline
        self.telemetry = telemetry or getattr(pipeline, "telemetry", None) or StructuredTelemetry()
        self.page_size = max(1, int(page_size))
        self.debounce_seconds = max(0.0, float(debounce_seconds))

        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="dictionary-search",
        )
        self._lock = threading.RLock()
        self._latest_id = 0
        self._applied_id = 0
        self._results: Optional[SearchResults] = None
        self._offset = 0
        self._pending: Dict[int, Future] = {}
        self._listeners: List[ResultListener] = []

        self._logger = get_logger(__name__).bind(component="search_service")

        self._metric_requests = create_counter(
            "alabama_search_requests_total",
            "Dictionary searches started.",
            label_names=("mode",),
        )
        self._metric_failures = create_counter(
            "alabama_search_failures_total",
            "Dictionary searches that raised an exception.",
        )
        self._metric_superseded = create_counter(
            "alabama_search_superseded_total",
            "Searches dropped because a newer search had started.",
            label_names=("stage",),
        )
        self._metric_pattern_errors = create_counter(
            "alabama_search_pattern_errors_total",
            "Pattern-mode searches whose pattern failed to compile.",
        )
        self._metric_duration = create_histogram(
            "alabama_search_seconds",
            "Latency of dictionary searches.",
        )

        self._logger.info(
            "Search service initialised",
            context={
                "page_size": self.page_size,
                "max_workers": max_workers,
                "debounce_seconds": self.debounce_seconds,
            },
        )

    # Request bookkeeping ----------------------------------------------------
    def _begin_request(self) -> int:
        with self._lock:
            self._latest_id += 1
            request_id = self._latest_id
            for stale_id, future in list(self._pending.items()):
                if future.cancel():
                    self._metric_superseded.labels(stage="queued").inc()
                if future.done():
                    del self._pending[stale_id]
        return request_id

    def is_current(self, request_id: int) -> bool:
        with self._lock:
            return request_id == self._latest_id

    def _forget(self, request_id: int) -> None:
        with self._lock:
            self._pending.pop(request_id, None)

    def _apply(self, request_id: int, results: SearchResults) -> Optional[ResultPage]:
        with self._lock:
            if request_id != self._latest_id:
                self._metric_superseded.labels(stage="completed").inc()
                self._logger.debug(
                    "Discarding superseded result",
                    context={"request_id": request_id, "latest_id": self._latest_id},
                )
                return None
            self._results = results
            self._applied_id = request_id
            self._offset = 0
            page = results.page(0, self.page_size)
            listeners = tuple(self._listeners)

        self.telemetry.annotate("result.latest_request_id", request_id)
        self._notify(listeners, page)
        return page

    def _notify(self, listeners: Iterable[ResultListener], page: ResultPage) -> None:
        for listener in listeners:
            try:
                listener(page)
            except Exception:
                self._logger.exception(
                    "Result listener failed",
                    context={"listener": getattr(listener, "__name__", repr(listener))},
                )

    # Execution ----------------------------------------------------------------
    def _execute(self, request_id: int, query: Query, *, cancellable: bool) -> Optional[SearchResults]:
        context = {
            "request_id": request_id,
            "mode": query.mode.value,
            "query": query.raw_text,
            "audio_only": query.audio_only,
        }
        self._metric_requests.labels(mode=query.mode.value).inc()
        self.telemetry.increment("search.invoked")
        self._logger.debug("Search started", context=context)

        probe = (lambda: self.is_current(request_id)) if cancellable else None
        with start_span("search.request", context) as span:
            try:
                with self._metric_duration.time():
                    results = self.pipeline.execute(query, should_continue=probe)
            except Exception as exc:
                self._metric_failures.inc()
                self.telemetry.increment("search.failed")
                self._logger.error("Search failed", context={**context, "error": str(exc)})
                record_exception(span, exc)
                raise

            if results is None:
                self._metric_superseded.labels(stage="running").inc()
                self.telemetry.increment("search.abandoned")
                add_span_attributes(span, {"search.abandoned": True})
                return None

            if results.prepared.pattern_error is not None:
                self._metric_pattern_errors.inc()

            self.telemetry.increment("search.completed")
            add_span_attributes(
                span,
                {"search.success": True, "result.total": results.total_count},
            )
            self._logger.debug(
                "Search completed",
                context={**context, "total_count": results.total_count},
            )
            return results

    def _run_request(self, request_id: int, query: Query) -> Optional[ResultPage]:
        try:
            if self.debounce_seconds:
                time.sleep(self.debounce_seconds)
            if not self.is_current(request_id):
                self._metric_superseded.labels(stage="debounce").inc()
                return None
            results = self._execute(request_id, query, cancellable=True)
            if results is None:
                return None
            return self._apply(request_id, results)
        finally:
            self._forget(request_id)

    # Public API ---------------------------------------------------------------
    def submit(
        self,
        text: str,
        mode: SearchMode = SearchMode.LITERAL,
        audio_only: bool = False,
        filters: Iterable[FilterTag] = (),
    ) -> SearchRequest:
        """Start a search in the background and return its handle."""

        query = Query(raw_text=text, mode=mode, filters=frozenset(filters), audio_only=audio_only)
        with self._lock:
            request_id = self._begin_request()
            future = self._executor.submit(self._run_request, request_id, query)
            self._pending[request_id] = future
        return SearchRequest(request_id=request_id, query=query, future=future)

    def search(
        self,
        text: str,
        mode: SearchMode = SearchMode.LITERAL,
        audio_only: bool = False,
        filters: Iterable[FilterTag] = (),
    ) -> ResultPage:
        """Search on the calling thread and return the first page.

        The page is returned even if a newer background search started in
        the meantime; it is only made visible if this search is still the
        newest.
        """

        query = Query(raw_text=text, mode=mode, filters=frozenset(filters), audio_only=audio_only)
        request_id = self._begin_request()
        results = self._execute(request_id, query, cancellable=False)
        if results is None:
            raise RuntimeError("pipeline abandoned a search that cannot be superseded")
        self._apply(request_id, results)
        return results.page(0, self.page_size)

    def page(self, offset: int, count: Optional[int] = None) -> Tuple[LexiconEntry, ...]:
        """Re-slice the visible result without searching again."""

        with self._lock:
            if self._results is None:
                return ()
            size = self.page_size if count is None else count
            return self._results.page(offset, size).items

    def step(self, delta: int) -> ResultPage:
        """Move the visible page by ``delta`` entries, clamped to the result."""

        with self._lock:
            if self._results is None:
                return ResultPage(items=(), total_count=0, offset=0)
            self._offset = clamp_offset(self._offset + int(delta), self._results.total_count)
            return self._results.page(self._offset, self.page_size)

    @property
    def current_page(self) -> Optional[ResultPage]:
        with self._lock:
            if self._results is None:
                return None
            return self._results.page(self._offset, self.page_size)

    @property
    def current_results(self) -> Optional[SearchResults]:
        with self._lock:
            return self._results

    @property
    def latest_request_id(self) -> int:
        with self._lock:
            return self._latest_id

    @property
    def applied_request_id(self) -> int:
        with self._lock:
            return self._applied_id

    def add_listener(self, listener: ResultListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ResultListener) -> None:
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry is not listener]

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> "SearchService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


__all__ = ["ResultListener", "SearchRequest", "SearchService"]
