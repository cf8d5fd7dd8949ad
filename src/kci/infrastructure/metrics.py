"""Process-wide request/error counters for insight operations."""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass(frozen=True)
class CounterSnapshot:
    """Point-in-time copy of the counters."""

    requests: int
    errors: int
    total_duration_seconds: float


class RequestCounters:
    """Thread-safe request, error and duration counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._requests = 0
        self._errors = 0
        self._duration = 0.0

    def increment_requests(self) -> None:
        with self._lock:
            self._requests += 1

    def increment_errors(self) -> None:
        with self._lock:
            self._errors += 1

    def add_duration(self, seconds: float) -> None:
        with self._lock:
            self._duration += seconds

    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return CounterSnapshot(
                requests=self._requests,
                errors=self._errors,
                total_duration_seconds=self._duration,
            )

    def reset(self) -> None:
        with self._lock:
            self._requests = 0
            self._errors = 0
            self._duration = 0.0


_COUNTERS = RequestCounters()


def increment_requests() -> None:
    _COUNTERS.increment_requests()


def increment_errors() -> None:
    _COUNTERS.increment_errors()


def get_counters() -> CounterSnapshot:
    """Return current values of the process-wide counters."""
    return _COUNTERS.snapshot()


def reset_counters() -> None:
    _COUNTERS.reset()


class RequestTimer:
    """Context manager adding elapsed wall time to the counters."""

    def __init__(self, counters: RequestCounters | None = None) -> None:
        self._counters = counters or _COUNTERS
        self._started = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> RequestTimer:
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed = time.perf_counter() - self._started
        self._counters.add_duration(self.elapsed)


@contextmanager
def track_request() -> Iterator[RequestTimer]:
    """Count one request, time it, and count an error if it raises."""
    increment_requests()
    with RequestTimer() as timer:
        try:
            yield timer
        except BaseException:
            increment_errors()
            raise
