"""Explanation text and report artifacts for cluster insights."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

import pandas as pd

from kci.application._insights_models import (
    InsightsResponse,
    NamespaceUsageResponse,
    NodeBreakdownResponse,
    PodResourceStatsResponse,
)
from kci.domain.fit import ReplicaProjection, max_affordable_replicas
from kci.domain.models import ClusterCapacitySnapshot


def explain_cluster_capacity(snapshot: ClusterCapacitySnapshot) -> str:
    return (
        f"Cluster has {snapshot.node_count} nodes. "
        f"Total capacity: {snapshot.total_cpu_cores:.2f} CPU cores, "
        f"{snapshot.total_memory_gib:.2f} GiB memory. "
        f"Allocated (requests): {snapshot.allocated_cpu_cores:.2f} CPU cores "
        f"({snapshot.cpu_utilization_percent:.1f}%), "
        f"{snapshot.allocated_memory_gib:.2f} GiB memory "
        f"({snapshot.memory_utilization_percent:.1f}%). "
        f"Available: {snapshot.available_cpu_cores:.2f} CPU cores, "
        f"{snapshot.available_memory_gib:.2f} GiB memory."
    )


def explain_node_breakdown(total_nodes: int) -> str:
    return (
        f"Cluster has {total_nodes} nodes. Each node shows total capacity, "
        "allocated resources (requests), available resources, and pod count."
    )


def explain_namespace_usage(total_namespaces: int) -> str:
    return (
        f"Cluster has {total_namespaces} namespaces. Resource usage shows "
        "CPU/memory requests and limits for each namespace, sorted by CPU "
        "requests (descending)."
    )


def explain_pod_resource_stats(shown: int, total_pods: int) -> str:
    return (
        f"Showing top {shown} pods (out of {total_pods}) by CPU requests. "
        "Each pod shows CPU/memory requests and limits, along with the node "
        "it's scheduled on."
    )


def _demand_lines(projection: ReplicaProjection) -> list[str]:
    cost = projection.cost
    return [
        f"Reference pod: {cost.reference_pod}",
        f"- CPU per replica: {cost.cpu_cores:.3f} cores",
        f"- Memory per replica: {cost.memory_gib:.3f} GiB",
        "",
        f"Total required for {projection.replica_count} replicas:",
        f"- CPU: {projection.total_cpu_cores:.3f} cores",
        f"- Memory: {projection.total_memory_gib:.3f} GiB",
        "",
    ]


def explain_replica_capacity(
    projection: ReplicaProjection,
    snapshot: ClusterCapacitySnapshot,
    *,
    app_name: str,
    namespace: str,
    matching_pods: int,
) -> str:
    """Describe a replica capacity verdict over multiple lines."""
    verdict = projection.verdict
    cost = projection.cost
    count = projection.replica_count

    if verdict.fits:
        lines = [
            f"Capacity CHECK PASSED: You can add {count} more replicas of "
            f"'{app_name}' in namespace '{namespace}'.",
            "",
            *_demand_lines(projection),
            "Cluster availability:",
            f"- Available CPU: {snapshot.available_cpu_cores:.3f} cores "
            f"(enough for {max_affordable_replicas(snapshot.available_cpu_cores, cost.cpu_cores)} replicas)",
            f"- Available Memory: {snapshot.available_memory_gib:.3f} GiB "
            f"(enough for {max_affordable_replicas(snapshot.available_memory_gib, cost.memory_gib)} replicas)",
            "",
            "Projected utilization after adding replicas:",
            f"- CPU: {verdict.projected_cpu_utilization_percent:.1f}% "
            f"(current: {snapshot.cpu_utilization_percent:.1f}%)",
            f"- Memory: {verdict.projected_memory_utilization_percent:.1f}% "
            f"(current: {snapshot.memory_utilization_percent:.1f}%)",
        ]
    else:
        issues: list[str] = []
        if projection.max_replicas_by_cpu is not None:
            issues.append(
                f"CPU shortage: Need {projection.total_cpu_cores:.3f} cores but only "
                f"{snapshot.available_cpu_cores:.3f} available (shortfall: "
                f"{verdict.cpu_shortfall_cores:.3f} cores). Maximum possible "
                f"replicas based on CPU: {projection.max_replicas_by_cpu}"
            )
        if projection.max_replicas_by_memory is not None:
            issues.append(
                f"Memory shortage: Need {projection.total_memory_gib:.3f} GiB but "
                f"only {snapshot.available_memory_gib:.3f} GiB available "
                f"(shortfall: {verdict.memory_shortfall_gib:.3f} GiB). Maximum "
                f"possible replicas based on memory: "
                f"{projection.max_replicas_by_memory}"
            )
        lines = [
            f"Capacity CHECK FAILED: Cannot add {count} replicas of "
            f"'{app_name}' in namespace '{namespace}'.",
            "",
            *_demand_lines(projection),
            "Issues:",
            *issues,
        ]

    lines.extend(["", f"Current pods matching '{app_name}': {matching_pods}"])
    return "\n".join(lines)


def response_records(response: InsightsResponse) -> dict[str, list[dict[str, Any]]]:
    """Return tabular record lists carried by a response, keyed by table name."""
    if isinstance(response, NodeBreakdownResponse):
        return {"nodes": [asdict(node) for node in response.nodes]}
    if isinstance(response, NamespaceUsageResponse):
        return {"namespaces": [asdict(ns) for ns in response.namespaces]}
    if isinstance(response, PodResourceStatsResponse):
        return {"top_pods": [asdict(pod) for pod in response.top_pods]}
    return {}


def response_figures(response: InsightsResponse) -> dict[str, Any]:
    """Return scalar fields of a response other than the explanation."""
    return {
        key: value
        for key, value in response.to_dict().items()
        if key != "explanation" and not isinstance(value, list)
    }


def generate_result_json(response: InsightsResponse, data_dir: Path) -> Path:
    """Write the full response as pretty JSON."""
    filename = data_dir / "result.json"
    filename.write_text(
        json.dumps(response.to_dict(), ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return filename


def generate_records_csv(response: InsightsResponse, data_dir: Path) -> list[Path]:
    """Write one CSV per record table of the response."""
    written: list[Path] = []
    for table, rows in response_records(response).items():
        filename = data_dir / f"{table}.csv"
        pd.DataFrame(rows).to_csv(filename, index=False)
        written.append(filename)
    return written
