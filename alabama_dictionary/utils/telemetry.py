"""Structured telemetry for the search pipeline stages."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .observability import get_logger

_logger = get_logger(__name__).bind(component="telemetry")

TelemetryListener = Callable[[str, Dict[str, Any]], None]


@dataclass
class TimingBucket:
    """Aggregate of every measurement recorded under one stage name."""

    count: int = 0
    total: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0

    def add(self, duration: float) -> None:
        self.minimum = duration if self.count == 0 else min(self.minimum, duration)
        self.maximum = max(self.maximum, duration)
        self.count += 1
        self.total += duration

    def as_dict(self) -> Dict[str, float]:
        average = self.total / self.count if self.count else 0.0
        return {
            "count": self.count,
            "total": self.total,
            "min": self.minimum,
            "max": self.maximum,
            "avg": average,
        }


class StructuredTelemetry:
    """Thread-safe collector for stage timings, counters and metadata.

    Measurements accumulate across searches until :meth:`start_trace` resets
    them, so concurrent workers feed one shared view of pipeline cost.
    """

    def __init__(
        self,
        time_fn: Optional[Callable[[], float]] = None,
        *,
        max_events: int = 256,
        listeners: Optional[Iterable[TelemetryListener]] = None,
    ) -> None:
        self._time_fn = time_fn or time.perf_counter
        self._max_events = max(1, int(max_events))
        self._lock = threading.RLock()
        self._trace_id = 0
        self._trace_name: Optional[str] = None
        self._timings: Dict[str, TimingBucket] = {}
        self._counters: Dict[str, float] = {}
        self._events: List[Dict[str, Any]] = []
        self._metadata: Dict[str, Any] = {}
        self._listeners: List[TelemetryListener] = list(listeners or [])

    def _notify(self, event_type: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            listeners: Tuple[TelemetryListener, ...] = tuple(self._listeners)
        for listener in listeners:
            try:
                listener(event_type, dict(payload))
            except Exception:
                _logger.exception(
                    "Telemetry listener failed",
                    context={
                        "event": event_type,
                        "listener": getattr(listener, "__name__", repr(listener)),
                    },
                )

    def now(self) -> float:
        return float(self._time_fn())

    def start_trace(self, name: str) -> int:
        """Discard accumulated data and open a new named trace."""

        with self._lock:
            self._trace_id += 1
            self._trace_name = name
            self._timings = {}
            self._counters = {}
            self._events = []
            self._metadata = {"trace_name": name, "start_time": self.now()}
            trace_id = self._trace_id

        self._notify("trace_started", {"trace_id": trace_id, "name": name})
        return trace_id

    def record_timing(
        self,
        name: str,
        duration: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        duration = max(0.0, float(duration))
        details = dict(metadata) if metadata else {}
        with self._lock:
            self._timings.setdefault(name, TimingBucket()).add(duration)
            event: Dict[str, Any] = {"name": name, "duration": duration}
            if details:
                event["metadata"] = details
            self._events.append(event)
            del self._events[: -self._max_events]

        self._notify("timing", {"name": name, "duration": duration, "metadata": details})

    @contextmanager
    def timer(
        self,
        name: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Time the body of the ``with`` block under ``name``.

        The yielded dict may be filled in by the caller; its contents are
        stored as the measurement's metadata.
        """

        payload: Dict[str, Any] = dict(metadata) if metadata else {}
        start = self.now()
        try:
            yield payload
        finally:
            self.record_timing(name, self.now() - start, payload)

    def increment(self, name: str, amount: float = 1.0) -> None:
        value = float(amount)
        with self._lock:
            current = self._counters.get(name, 0.0) + value
            self._counters[name] = current

        self._notify("counter", {"name": name, "delta": value, "value": current})

    def annotate(self, key: str, value: Any) -> None:
        with self._lock:
            self._metadata[key] = value

        self._notify("metadata", {"key": key, "value": value})

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "trace_id": self._trace_id,
                "name": self._trace_name,
                "timings": {key: bucket.as_dict() for key, bucket in self._timings.items()},
                "counters": dict(self._counters),
                "events": [dict(event) for event in self._events],
                "metadata": dict(self._metadata),
            }

    def add_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry is not listener]


class TelemetryLogger:
    """Listener that emits telemetry activity to the project logger."""

    def __init__(
        self,
        *,
        logger: Optional[logging.LoggerAdapter] = None,
        level: int = logging.DEBUG,
        level_map: Optional[Dict[str, int]] = None,
    ) -> None:
        self._logger = logger or _logger
        self._default_level = level
        self._level_map = dict(level_map or {})

    def __call__(self, event_type: str, payload: Dict[str, Any]) -> None:
        level = self._level_map.get(event_type, self._default_level)
        if not self._logger.isEnabledFor(level):
            return

        context = {"telemetry.event": event_type}
        context.update({str(key): value for key, value in payload.items()})
        name = payload.get("name") or payload.get("key") or payload.get("trace_id") or "event"
        self._logger.log(level, f"Telemetry {event_type}: {name}", context=context)


__all__ = ["StructuredTelemetry", "TelemetryLogger", "TelemetryListener", "TimingBucket"]
