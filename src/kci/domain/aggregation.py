"""Fold node and pod descriptors into capacity and allocation totals.

Descriptors are the raw objects returned by `kubectl get ... -o json`. Every
function here is a pure fold: inputs are never mutated and nothing is cached.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Literal

from kci.domain.models import (
    DEFAULT_NAMESPACE,
    UNSCHEDULED_NODE,
    ClusterCapacitySnapshot,
    NamespaceUsage,
    NodeCapacity,
    PodResourceProfile,
)
from kci.domain.quantity_parser import (
    LENIENT_PARSER,
    QuantityParser,
    to_mebibytes,
    to_millicores,
)

ResourceSection = Literal["requests", "limits"]
TOP_PODS_LIMIT = 20


def _container_quantities(
    pod: dict[str, Any], section: ResourceSection
) -> Iterator[tuple[str | None, str | None]]:
    """Yield raw (cpu, memory) quantities of one resource section per container."""
    spec = pod.get("spec") or {}
    for container in spec.get("containers") or ():
        resources = container.get("resources") or {}
        values = resources.get(section) or {}
        yield values.get("cpu"), values.get("memory")


def pod_resources(
    pod: dict[str, Any],
    section: ResourceSection = "requests",
    *,
    parser: QuantityParser = LENIENT_PARSER,
) -> tuple[float, float]:
    """Return summed (cores, GiB) of a pod's requests or limits."""
    cpu = 0.0
    memory = 0.0
    for raw_cpu, raw_memory in _container_quantities(pod, section):
        cpu += parser.cpu_cores(raw_cpu)
        memory += parser.memory_gib(raw_memory)
    return cpu, memory


def pod_name(pod: dict[str, Any]) -> str:
    return (pod.get("metadata") or {}).get("name") or ""


def pod_namespace(pod: dict[str, Any]) -> str:
    """Return pod namespace, falling back to `default` when unset."""
    return (pod.get("metadata") or {}).get("namespace") or DEFAULT_NAMESPACE


def pod_node_name(pod: dict[str, Any]) -> str | None:
    """Return assigned node name or None for unscheduled pods."""
    return (pod.get("spec") or {}).get("nodeName") or None


def node_capacity(
    node: dict[str, Any], *, parser: QuantityParser = LENIENT_PARSER
) -> tuple[float, float]:
    """Return declared (cores, GiB) capacity of a node."""
    capacity = (node.get("status") or {}).get("capacity") or {}
    return parser.cpu_cores(capacity.get("cpu")), parser.memory_gib(
        capacity.get("memory")
    )


def aggregate_cluster_capacity(
    nodes: Sequence[dict[str, Any]],
    pods: Iterable[dict[str, Any]],
    *,
    parser: QuantityParser = LENIENT_PARSER,
) -> ClusterCapacitySnapshot:
    """Sum node capacity and every pod's requests into a cluster snapshot.

    Pods count here whether or not they are scheduled on a node.
    """
    total_cpu = 0.0
    total_memory = 0.0
    for node in nodes:
        cpu, memory = node_capacity(node, parser=parser)
        total_cpu += cpu
        total_memory += memory

    allocated_cpu = 0.0
    allocated_memory = 0.0
    for pod in pods:
        cpu, memory = pod_resources(pod, "requests", parser=parser)
        allocated_cpu += cpu
        allocated_memory += memory

    return ClusterCapacitySnapshot.build(
        total_cpu_cores=total_cpu,
        total_memory_gib=total_memory,
        allocated_cpu_cores=allocated_cpu,
        allocated_memory_gib=allocated_memory,
        node_count=len(nodes),
    )


def aggregate_node_breakdown(
    nodes: Iterable[dict[str, Any]],
    pods: Iterable[dict[str, Any]],
    *,
    parser: QuantityParser = LENIENT_PARSER,
) -> list[NodeCapacity]:
    """Build per-node capacity records in node listing order.

    A pod counts toward a node only when its `spec.nodeName` equals the node
    name exactly. Unscheduled pods belong to no node.
    """
    by_node: dict[str, list[float]] = {}
    for pod in pods:
        node_name = pod_node_name(pod)
        if node_name is None:
            continue
        cpu, memory = pod_resources(pod, "requests", parser=parser)
        totals = by_node.setdefault(node_name, [0.0, 0.0, 0])
        totals[0] += cpu
        totals[1] += memory
        totals[2] += 1

    records: list[NodeCapacity] = []
    for node in nodes:
        name = (node.get("metadata") or {}).get("name") or ""
        total_cpu, total_memory = node_capacity(node, parser=parser)
        allocated_cpu, allocated_memory, pod_count = by_node.get(name, (0.0, 0.0, 0))
        records.append(
            NodeCapacity.build(
                name,
                total_cpu_cores=total_cpu,
                total_memory_gib=total_memory,
                allocated_cpu_cores=allocated_cpu,
                allocated_memory_gib=allocated_memory,
                pod_count=int(pod_count),
            )
        )
    return records


def aggregate_namespace_usage(
    namespaces: Iterable[dict[str, Any]],
    pods: Iterable[dict[str, Any]],
    *,
    parser: QuantityParser = LENIENT_PARSER,
) -> list[NamespaceUsage]:
    """Group requests and limits by namespace, busiest CPU requester first.

    Every listed namespace appears, including ones without pods. Pods in a
    namespace missing from the listing still get their own record.
    """
    totals: dict[str, list[float]] = {}
    for namespace in namespaces:
        name = (namespace.get("metadata") or {}).get("name") or ""
        totals.setdefault(name, [0.0, 0.0, 0.0, 0.0, 0])

    for pod in pods:
        row = totals.setdefault(pod_namespace(pod), [0.0, 0.0, 0.0, 0.0, 0])
        req_cpu, req_memory = pod_resources(pod, "requests", parser=parser)
        lim_cpu, lim_memory = pod_resources(pod, "limits", parser=parser)
        row[0] += req_cpu
        row[1] += req_memory
        row[2] += lim_cpu
        row[3] += lim_memory
        row[4] += 1

    usages = [
        NamespaceUsage(
            namespace=name,
            cpu_requests_cores=row[0],
            memory_requests_gib=row[1],
            cpu_limits_cores=row[2],
            memory_limits_gib=row[3],
            pod_count=int(row[4]),
        )
        for name, row in totals.items()
    ]
    usages.sort(key=lambda usage: usage.cpu_requests_cores, reverse=True)
    return usages


def profile_pod(
    pod: dict[str, Any], *, parser: QuantityParser = LENIENT_PARSER
) -> PodResourceProfile:
    """Sum a pod's container requests/limits in integer sub-units."""
    cpu_req = memory_req = cpu_lim = memory_lim = 0
    for raw_cpu, raw_memory in _container_quantities(pod, "requests"):
        cpu_req += to_millicores(parser.cpu_cores(raw_cpu))
        memory_req += to_mebibytes(parser.memory_gib(raw_memory))
    for raw_cpu, raw_memory in _container_quantities(pod, "limits"):
        cpu_lim += to_millicores(parser.cpu_cores(raw_cpu))
        memory_lim += to_mebibytes(parser.memory_gib(raw_memory))
    return PodResourceProfile(
        name=pod_name(pod),
        namespace=pod_namespace(pod),
        cpu_requests_millicores=cpu_req,
        memory_requests_mib=memory_req,
        cpu_limits_millicores=cpu_lim,
        memory_limits_mib=memory_lim,
        node=pod_node_name(pod) or UNSCHEDULED_NODE,
    )


def profile_pods(
    pods: Iterable[dict[str, Any]], *, parser: QuantityParser = LENIENT_PARSER
) -> list[PodResourceProfile]:
    return [profile_pod(pod, parser=parser) for pod in pods]


def rank_pods(
    profiles: Iterable[PodResourceProfile], limit: int = TOP_PODS_LIMIT
) -> list[PodResourceProfile]:
    """Return at most `limit` profiles ordered by CPU requests, highest first."""
    ranked = sorted(
        profiles, key=lambda profile: profile.cpu_requests_millicores, reverse=True
    )
    return ranked[: max(limit, 0)]
