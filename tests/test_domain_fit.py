"""Tests for fit evaluation and replica projection."""

from __future__ import annotations

import pytest

from kci.domain.fit import evaluate_fit, max_affordable_replicas, project_replicas
from kci.domain.models import ClusterCapacitySnapshot, ReplicaCost


@pytest.fixture
def snapshot() -> ClusterCapacitySnapshot:
    return ClusterCapacitySnapshot.build(
        total_cpu_cores=8.0,
        total_memory_gib=32.0,
        allocated_cpu_cores=0.5,
        allocated_memory_gib=0.5,
        node_count=1,
    )


def test_fit_within_availability(snapshot: ClusterCapacitySnapshot) -> None:
    verdict = evaluate_fit(snapshot, 2.0, 8.0)
    assert verdict.fits
    assert verdict.projected_cpu_utilization_percent == pytest.approx(31.25)
    assert verdict.projected_memory_utilization_percent == pytest.approx(26.5625)
    assert verdict.cpu_shortfall_cores == 0.0
    assert verdict.explanation.startswith("Resources FIT in cluster.")
    assert "31.2% CPU" in verdict.explanation


def test_memory_shortfall_reported(snapshot: ClusterCapacitySnapshot) -> None:
    verdict = evaluate_fit(snapshot, 4.0, 40.0)
    assert not verdict.fits
    assert verdict.cpu_fits
    assert not verdict.memory_fits
    assert verdict.memory_shortfall_gib == pytest.approx(8.5)
    assert "Memory shortage: 8.50 GiB" in verdict.explanation
    assert "CPU shortage" not in verdict.explanation


def test_both_dimensions_short(snapshot: ClusterCapacitySnapshot) -> None:
    verdict = evaluate_fit(snapshot, 10.0, 40.0)
    assert "CPU shortage: 2.50 cores" in verdict.explanation
    assert "Memory shortage: 8.50 GiB" in verdict.explanation


def test_exact_availability_fits(snapshot: ClusterCapacitySnapshot) -> None:
    assert evaluate_fit(snapshot, 7.5, 31.5).fits


def test_zero_capacity_guards_utilization() -> None:
    empty = ClusterCapacitySnapshot.build(
        total_cpu_cores=0.0,
        total_memory_gib=0.0,
        allocated_cpu_cores=0.0,
        allocated_memory_gib=0.0,
        node_count=0,
    )
    verdict = evaluate_fit(empty, 1.0, 1.0)
    assert not verdict.fits
    assert verdict.projected_cpu_utilization_percent == 0.0
    assert verdict.projected_memory_utilization_percent == 0.0


def test_max_affordable_replicas() -> None:
    assert max_affordable_replicas(7.5, 0.5) == 15
    assert max_affordable_replicas(1.0, 0.3) == 3
    assert max_affordable_replicas(5.0, 0.0) == 0
    assert max_affordable_replicas(-1.0, 0.5) == 0


def test_project_replicas_fits(snapshot: ClusterCapacitySnapshot) -> None:
    cost = ReplicaCost(reference_pod="web-1", cpu_cores=0.1, memory_gib=0.125)
    projection = project_replicas(snapshot, cost, 10)
    assert projection.total_cpu_cores == pytest.approx(1.0)
    assert projection.total_memory_gib == pytest.approx(1.25)
    assert projection.verdict.fits
    assert projection.max_replicas_by_cpu is None
    assert projection.max_replicas_by_memory is None


def test_project_replicas_ceiling_for_failing_dimension(
    snapshot: ClusterCapacitySnapshot,
) -> None:
    cost = ReplicaCost(reference_pod="big-1", cpu_cores=1.0, memory_gib=0.0)
    projection = project_replicas(snapshot, cost, 10)
    assert not projection.verdict.fits
    assert projection.max_replicas_by_cpu == 7
    assert projection.max_replicas_by_memory is None
