"""Tests for request/error counters."""

from __future__ import annotations

import pytest

from kci.infrastructure.metrics import (
    RequestCounters,
    RequestTimer,
    get_counters,
    increment_errors,
    increment_requests,
    reset_counters,
    track_request,
)


def test_track_request_counts_success() -> None:
    with track_request() as timer:
        pass
    counters = get_counters()
    assert counters.requests == 1
    assert counters.errors == 0
    assert timer.elapsed >= 0.0
    assert counters.total_duration_seconds == pytest.approx(timer.elapsed)


def test_track_request_counts_error_and_reraises() -> None:
    with pytest.raises(RuntimeError), track_request():
        raise RuntimeError("boom")
    counters = get_counters()
    assert counters.requests == 1
    assert counters.errors == 1


def test_module_counters_reset() -> None:
    increment_requests()
    increment_requests()
    increment_errors()
    assert get_counters().requests == 2
    reset_counters()
    assert get_counters().requests == 0
    assert get_counters().errors == 0


def test_timer_with_private_counters() -> None:
    counters = RequestCounters()
    with RequestTimer(counters):
        pass
    assert counters.snapshot().total_duration_seconds >= 0.0
    assert get_counters().total_duration_seconds == 0.0
