"""Capacity data models built from a single inventory snapshot."""

from __future__ import annotations

from dataclasses import dataclass

UNSCHEDULED_NODE = "unscheduled"
DEFAULT_NAMESPACE = "default"


def utilization_percent(allocated: float, total: float) -> float:
    """Return allocated/total as a percentage, 0 when total is not positive."""
    if total <= 0:
        return 0.0
    return allocated / total * 100


@dataclass(frozen=True)
class NodeCapacity:
    """Declared capacity and request allocation of a single node."""

    name: str
    total_cpu_cores: float
    total_memory_gib: float
    allocated_cpu_cores: float
    allocated_memory_gib: float
    available_cpu_cores: float
    available_memory_gib: float
    pod_count: int

    @classmethod
    def build(
        cls,
        name: str,
        *,
        total_cpu_cores: float,
        total_memory_gib: float,
        allocated_cpu_cores: float,
        allocated_memory_gib: float,
        pod_count: int,
    ) -> NodeCapacity:
        """Create node record deriving availability from totals."""
        return cls(
            name=name,
            total_cpu_cores=total_cpu_cores,
            total_memory_gib=total_memory_gib,
            allocated_cpu_cores=allocated_cpu_cores,
            allocated_memory_gib=allocated_memory_gib,
            available_cpu_cores=total_cpu_cores - allocated_cpu_cores,
            available_memory_gib=total_memory_gib - allocated_memory_gib,
            pod_count=pod_count,
        )


@dataclass(frozen=True)
class NamespaceUsage:
    """Aggregated requests and limits of all pods in a namespace."""

    namespace: str
    cpu_requests_cores: float = 0.0
    memory_requests_gib: float = 0.0
    cpu_limits_cores: float = 0.0
    memory_limits_gib: float = 0.0
    pod_count: int = 0


@dataclass(frozen=True)
class PodResourceProfile:
    """Pod requests and limits in millicores and mebibytes."""

    name: str
    namespace: str
    cpu_requests_millicores: int
    memory_requests_mib: int
    cpu_limits_millicores: int
    memory_limits_mib: int
    node: str


@dataclass(frozen=True)
class ClusterCapacitySnapshot:
    """Cluster-wide declared capacity versus requested resources."""

    total_cpu_cores: float
    total_memory_gib: float
    allocated_cpu_cores: float
    allocated_memory_gib: float
    available_cpu_cores: float
    available_memory_gib: float
    node_count: int

    @classmethod
    def build(
        cls,
        *,
        total_cpu_cores: float,
        total_memory_gib: float,
        allocated_cpu_cores: float,
        allocated_memory_gib: float,
        node_count: int,
    ) -> ClusterCapacitySnapshot:
        """Create snapshot deriving availability from totals."""
        return cls(
            total_cpu_cores=total_cpu_cores,
            total_memory_gib=total_memory_gib,
            allocated_cpu_cores=allocated_cpu_cores,
            allocated_memory_gib=allocated_memory_gib,
            available_cpu_cores=total_cpu_cores - allocated_cpu_cores,
            available_memory_gib=total_memory_gib - allocated_memory_gib,
            node_count=node_count,
        )

    @property
    def cpu_utilization_percent(self) -> float:
        """Current CPU request utilization."""
        return utilization_percent(self.allocated_cpu_cores, self.total_cpu_cores)

    @property
    def memory_utilization_percent(self) -> float:
        """Current memory request utilization."""
        return utilization_percent(self.allocated_memory_gib, self.total_memory_gib)


@dataclass(frozen=True)
class FitVerdict:
    """Outcome of checking a demand against available cluster capacity."""

    fits: bool
    requested_cpu_cores: float
    requested_memory_gib: float
    available_cpu_cores: float
    available_memory_gib: float
    projected_cpu_utilization_percent: float
    projected_memory_utilization_percent: float
    cpu_shortfall_cores: float
    memory_shortfall_gib: float
    explanation: str

    @property
    def cpu_fits(self) -> bool:
        """Whether the CPU dimension alone fits."""
        return self.cpu_shortfall_cores <= 0

    @property
    def memory_fits(self) -> bool:
        """Whether the memory dimension alone fits."""
        return self.memory_shortfall_gib <= 0


@dataclass(frozen=True)
class ReplicaCost:
    """Per-replica resource cost inferred from running pods."""

    reference_pod: str
    cpu_cores: float
    memory_gib: float
