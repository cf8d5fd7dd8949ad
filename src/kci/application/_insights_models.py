"""Response models returned by the cluster insights operations."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from kci.domain.models import NamespaceUsage, NodeCapacity, PodResourceProfile

SORTED_BY_CPU_REQUESTS = "CPU requests (descending)"


class _Serializable:
    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return asdict(self)  # type: ignore[call-overload]


@dataclass(frozen=True)
class ClusterCapacityResponse(_Serializable):
    """Cluster totals, allocations and availability."""

    total_cpu_cores: float
    total_memory_gib: float
    allocated_cpu_cores: float
    allocated_memory_gib: float
    available_cpu_cores: float
    available_memory_gib: float
    node_count: int
    explanation: str


@dataclass(frozen=True)
class ResourceFitResponse(_Serializable):
    """Verdict for an explicit CPU/memory demand."""

    fits: bool
    available_cpu_cores: float
    available_memory_gib: float
    cpu_utilization_percent: float
    memory_utilization_percent: float
    cpu_shortfall_cores: float
    memory_shortfall_gib: float
    explanation: str


@dataclass(frozen=True)
class NodeBreakdownResponse(_Serializable):
    """Per-node capacity records."""

    nodes: list[NodeCapacity]
    total_nodes: int
    explanation: str


@dataclass(frozen=True)
class NamespaceUsageResponse(_Serializable):
    """Per-namespace requests and limits."""

    namespaces: list[NamespaceUsage]
    total_namespaces: int
    explanation: str


@dataclass(frozen=True)
class PodResourceStatsResponse(_Serializable):
    """Top pods by CPU requests and the true pod total."""

    top_pods: list[PodResourceProfile]
    total_pods: int
    sorted_by: str
    explanation: str


@dataclass(frozen=True)
class ReplicaCapacityResponse(_Serializable):
    """Verdict for adding replicas of an existing application."""

    fits: bool
    reference_pod: str
    cpu_per_replica_cores: float
    memory_per_replica_gib: float
    total_cpu_required_cores: float
    total_memory_required_gib: float
    available_cpu_cores: float
    available_memory_gib: float
    current_pod_count: int
    projected_cpu_utilization_percent: float
    projected_memory_utilization_percent: float
    max_replicas_by_cpu: int | None
    max_replicas_by_memory: int | None
    explanation: str


InsightsResponse = (
    ClusterCapacityResponse
    | ResourceFitResponse
    | NodeBreakdownResponse
    | NamespaceUsageResponse
    | PodResourceStatsResponse
    | ReplicaCapacityResponse
)
