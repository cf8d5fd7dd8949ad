"""Fit evaluation of a resource demand against cluster availability."""

from __future__ import annotations

import math
from dataclasses import dataclass

from kci.domain.models import (
    ClusterCapacitySnapshot,
    FitVerdict,
    ReplicaCost,
    utilization_percent,
)


def _explain_fit(
    snapshot: ClusterCapacitySnapshot,
    cpu_cores: float,
    memory_gib: float,
    *,
    fits: bool,
    projected_cpu: float,
    projected_memory: float,
) -> str:
    requested = f"Requested: {cpu_cores:.2f} CPU cores, {memory_gib:.2f} GiB memory."
    available = (
        f"Available: {snapshot.available_cpu_cores:.2f} CPU cores, "
        f"{snapshot.available_memory_gib:.2f} GiB memory."
    )
    if fits:
        return (
            f"Resources FIT in cluster. {requested} {available} "
            f"After allocation, cluster would be at {projected_cpu:.1f}% CPU "
            f"and {projected_memory:.1f}% memory utilization."
        )

    shortages: list[str] = []
    if snapshot.available_cpu_cores < cpu_cores:
        shortages.append(
            f"CPU shortage: {cpu_cores - snapshot.available_cpu_cores:.2f} cores "
            f"needed but only {snapshot.available_cpu_cores:.2f} available."
        )
    if snapshot.available_memory_gib < memory_gib:
        shortages.append(
            f"Memory shortage: {memory_gib - snapshot.available_memory_gib:.2f} GiB "
            f"needed but only {snapshot.available_memory_gib:.2f} GiB available."
        )
    return " ".join(
        [f"Resources DO NOT FIT in cluster. {requested} {available}", *shortages]
    )


def evaluate_fit(
    snapshot: ClusterCapacitySnapshot, cpu_cores: float, memory_gib: float
) -> FitVerdict:
    """Check whether a demand fits the snapshot's available resources.

    Projected utilization assumes the demand is admitted on top of current
    allocations.
    """
    fits = (
        snapshot.available_cpu_cores >= cpu_cores
        and snapshot.available_memory_gib >= memory_gib
    )
    projected_cpu = utilization_percent(
        snapshot.allocated_cpu_cores + cpu_cores, snapshot.total_cpu_cores
    )
    projected_memory = utilization_percent(
        snapshot.allocated_memory_gib + memory_gib, snapshot.total_memory_gib
    )
    return FitVerdict(
        fits=fits,
        requested_cpu_cores=cpu_cores,
        requested_memory_gib=memory_gib,
        available_cpu_cores=snapshot.available_cpu_cores,
        available_memory_gib=snapshot.available_memory_gib,
        projected_cpu_utilization_percent=projected_cpu,
        projected_memory_utilization_percent=projected_memory,
        cpu_shortfall_cores=max(cpu_cores - snapshot.available_cpu_cores, 0.0),
        memory_shortfall_gib=max(memory_gib - snapshot.available_memory_gib, 0.0),
        explanation=_explain_fit(
            snapshot,
            cpu_cores,
            memory_gib,
            fits=fits,
            projected_cpu=projected_cpu,
            projected_memory=projected_memory,
        ),
    )


def max_affordable_replicas(available: float, per_replica: float) -> int:
    """Return how many whole replicas `available` covers.

    Zero-cost replicas and exhausted capacity both yield 0.
    """
    if per_replica <= 0 or available <= 0:
        return 0
    return math.floor(available / per_replica)


@dataclass(frozen=True)
class ReplicaProjection:
    """Demand of N replicas and the resulting fit verdict."""

    cost: ReplicaCost
    replica_count: int
    total_cpu_cores: float
    total_memory_gib: float
    verdict: FitVerdict
    max_replicas_by_cpu: int | None = None
    max_replicas_by_memory: int | None = None


def project_replicas(
    snapshot: ClusterCapacitySnapshot, cost: ReplicaCost, replica_count: int
) -> ReplicaProjection:
    """Scale per-replica cost and evaluate the total demand.

    Replica ceilings are computed only for dimensions that do not fit.
    """
    total_cpu = cost.cpu_cores * replica_count
    total_memory = cost.memory_gib * replica_count
    verdict = evaluate_fit(snapshot, total_cpu, total_memory)

    max_by_cpu = max_by_memory = None
    if not verdict.fits:
        if not verdict.cpu_fits:
            max_by_cpu = max_affordable_replicas(
                snapshot.available_cpu_cores, cost.cpu_cores
            )
        if not verdict.memory_fits:
            max_by_memory = max_affordable_replicas(
                snapshot.available_memory_gib, cost.memory_gib
            )

    return ReplicaProjection(
        cost=cost,
        replica_count=replica_count,
        total_cpu_cores=total_cpu,
        total_memory_gib=total_memory,
        verdict=verdict,
        max_replicas_by_cpu=max_by_cpu,
        max_replicas_by_memory=max_by_memory,
    )
