"""Cluster insights use-cases.

Each use-case runs one service operation. When `reports_root` is None the
response is printed to stdout and nothing is kept; otherwise artifacts are
written under `reports_root/<capability>/<run_id>/`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from kci.application._insights_models import InsightsResponse
from kci.application.insights_service import ClusterInsightsService, build_service
from kci.application.run_writer import RunResult
from kci.application.use_case_utils import (
    persist_response_run,
    render_response_stdout,
    run_tracked,
)
from kci.config import load_config
from kci.domain.replica_cost import get_estimator


def _execute(
    capability: str,
    title: str,
    operation: Callable[[ClusterInsightsService], InsightsResponse],
    *,
    service: ClusterInsightsService | None,
    inputs: dict[str, Any],
    reports_root: str | None,
    as_json: bool,
) -> RunResult | None:
    svc = service or build_service(load_config())
    response = run_tracked(capability, lambda: operation(svc))
    if reports_root is None:
        render_response_stdout(response, title=title, as_json=as_json)
        return None
    return persist_response_run(
        response,
        capability=capability,
        title=title,
        inputs=inputs,
        reports_root=reports_root,
    )


def execute_cluster_capacity(
    *,
    service: ClusterInsightsService | None = None,
    reports_root: str | None = None,
    as_json: bool = False,
) -> RunResult | None:
    """Report cluster capacity, requests and availability."""
    return _execute(
        "cluster-capacity",
        "Cluster Capacity",
        lambda svc: svc.get_cluster_capacity(),
        service=service,
        inputs={},
        reports_root=reports_root,
        as_json=as_json,
    )


def execute_resource_fit(
    cpu_cores: float,
    memory_gib: float,
    *,
    service: ClusterInsightsService | None = None,
    reports_root: str | None = None,
    as_json: bool = False,
) -> RunResult | None:
    """Check whether an explicit demand fits the cluster."""
    return _execute(
        "resource-fit",
        "Resource Fit",
        lambda svc: svc.check_resource_fit(cpu_cores, memory_gib),
        service=service,
        inputs={"cpu_cores": cpu_cores, "memory_gib": memory_gib},
        reports_root=reports_root,
        as_json=as_json,
    )


def execute_node_breakdown(
    *,
    service: ClusterInsightsService | None = None,
    reports_root: str | None = None,
    as_json: bool = False,
) -> RunResult | None:
    """Report per-node capacity and allocation."""
    return _execute(
        "node-breakdown",
        "Node Breakdown",
        lambda svc: svc.get_node_breakdown(),
        service=service,
        inputs={},
        reports_root=reports_root,
        as_json=as_json,
    )


def execute_namespace_usage(
    *,
    service: ClusterInsightsService | None = None,
    reports_root: str | None = None,
    as_json: bool = False,
) -> RunResult | None:
    """Report requests and limits per namespace."""
    return _execute(
        "namespace-usage",
        "Namespace Usage",
        lambda svc: svc.get_namespace_usage(),
        service=service,
        inputs={},
        reports_root=reports_root,
        as_json=as_json,
    )


def execute_pod_resource_stats(
    *,
    service: ClusterInsightsService | None = None,
    reports_root: str | None = None,
    as_json: bool = False,
) -> RunResult | None:
    """Report top pods by CPU requests."""
    return _execute(
        "pod-resource-stats",
        "Pod Resource Stats",
        lambda svc: svc.get_pod_resource_stats(),
        service=service,
        inputs={},
        reports_root=reports_root,
        as_json=as_json,
    )


def execute_replica_capacity(
    app_name: str,
    namespace: str,
    replica_count: int,
    *,
    strategy: str = "first",
    service: ClusterInsightsService | None = None,
    reports_root: str | None = None,
    as_json: bool = False,
) -> RunResult | None:
    """Check whether more replicas of an application fit.

    `strategy` selects how per-replica cost is inferred and is ignored when an
    explicit `service` is given.
    """
    if service is None:
        service = build_service(load_config(), estimator=get_estimator(strategy))
    return _execute(
        "replica-capacity",
        "Replica Capacity",
        lambda svc: svc.check_replica_capacity(app_name, namespace, replica_count),
        service=service,
        inputs={
            "app_name": app_name,
            "namespace": namespace,
            "replica_count": replica_count,
            "strategy": service.estimator.name,
        },
        reports_root=reports_root,
        as_json=as_json,
    )


__all__ = [
    "execute_cluster_capacity",
    "execute_namespace_usage",
    "execute_node_breakdown",
    "execute_pod_resource_stats",
    "execute_replica_capacity",
    "execute_resource_fit",
]
