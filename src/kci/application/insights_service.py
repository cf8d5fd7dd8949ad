"""Cluster capacity and fit operations over a live inventory.

Every operation validates its inputs, fetches a fresh inventory snapshot, and
folds it into a response. Nothing is cached between calls.
"""

from __future__ import annotations

import logging

from kci.application._insights_models import (
    SORTED_BY_CPU_REQUESTS,
    ClusterCapacityResponse,
    NamespaceUsageResponse,
    NodeBreakdownResponse,
    PodResourceStatsResponse,
    ReplicaCapacityResponse,
    ResourceFitResponse,
)
from kci.application._insights_reports import (
    explain_cluster_capacity,
    explain_namespace_usage,
    explain_node_breakdown,
    explain_pod_resource_stats,
    explain_replica_capacity,
)
from kci.config import InsightsConfig
from kci.domain.aggregation import (
    TOP_PODS_LIMIT,
    aggregate_cluster_capacity,
    aggregate_namespace_usage,
    aggregate_node_breakdown,
    profile_pods,
    rank_pods,
)
from kci.domain.fit import evaluate_fit, project_replicas
from kci.domain.models import ClusterCapacitySnapshot
from kci.domain.quantity_parser import LENIENT_PARSER, QuantityParser
from kci.domain.replica_cost import (
    FirstMatchEstimator,
    ReplicaCostEstimator,
    select_matching_pods,
)
from kci.infrastructure.inventory import InventorySource, KubectlInventory

logger = logging.getLogger(__name__)


class InputValidationError(ValueError):
    """Raised when operation arguments are rejected before any inventory access."""


class NoMatchingPodsError(LookupError):
    """Raised when no pod in the namespace matches the application name."""

    def __init__(self, app_name: str, namespace: str) -> None:
        super().__init__(
            f"No pods found matching '{app_name}' in namespace '{namespace}'"
        )
        self.app_name = app_name
        self.namespace = namespace


class ClusterInsightsService:
    """Entry point for the six capacity operations."""

    def __init__(
        self,
        inventory: InventorySource,
        *,
        parser: QuantityParser = LENIENT_PARSER,
        estimator: ReplicaCostEstimator | None = None,
        top_pods_limit: int = TOP_PODS_LIMIT,
    ) -> None:
        self.inventory = inventory
        self.parser = parser
        self.estimator = estimator or FirstMatchEstimator()
        self.top_pods_limit = top_pods_limit

    def _cluster_snapshot(self) -> ClusterCapacitySnapshot:
        nodes = self.inventory.list_nodes()
        pods = self.inventory.list_pods()
        logger.debug("Aggregating %d nodes and %d pods", len(nodes), len(pods))
        return aggregate_cluster_capacity(nodes, pods, parser=self.parser)

    def get_cluster_capacity(self) -> ClusterCapacityResponse:
        """Return cluster-wide capacity, requests and availability."""
        snapshot = self._cluster_snapshot()
        return ClusterCapacityResponse(
            total_cpu_cores=snapshot.total_cpu_cores,
            total_memory_gib=snapshot.total_memory_gib,
            allocated_cpu_cores=snapshot.allocated_cpu_cores,
            allocated_memory_gib=snapshot.allocated_memory_gib,
            available_cpu_cores=snapshot.available_cpu_cores,
            available_memory_gib=snapshot.available_memory_gib,
            node_count=snapshot.node_count,
            explanation=explain_cluster_capacity(snapshot),
        )

    def check_resource_fit(
        self, cpu_cores: float, memory_gib: float
    ) -> ResourceFitResponse:
        """Check whether an explicit CPU/memory demand fits the cluster.

        Raises
        ------
        InputValidationError
            If either amount is negative or NaN.
        """
        if not cpu_cores >= 0:
            raise InputValidationError("CPU cores must be non-negative")
        if not memory_gib >= 0:
            raise InputValidationError("Memory GiB must be non-negative")

        verdict = evaluate_fit(self._cluster_snapshot(), cpu_cores, memory_gib)
        logger.debug(
            "Fit check %.3f cores / %.3f GiB: %s", cpu_cores, memory_gib, verdict.fits
        )
        return ResourceFitResponse(
            fits=verdict.fits,
            available_cpu_cores=verdict.available_cpu_cores,
            available_memory_gib=verdict.available_memory_gib,
            cpu_utilization_percent=verdict.projected_cpu_utilization_percent,
            memory_utilization_percent=verdict.projected_memory_utilization_percent,
            cpu_shortfall_cores=verdict.cpu_shortfall_cores,
            memory_shortfall_gib=verdict.memory_shortfall_gib,
            explanation=verdict.explanation,
        )

    def get_node_breakdown(self) -> NodeBreakdownResponse:
        nodes = self.inventory.list_nodes()
        pods = self.inventory.list_pods()
        records = aggregate_node_breakdown(nodes, pods, parser=self.parser)
        return NodeBreakdownResponse(
            nodes=records,
            total_nodes=len(records),
            explanation=explain_node_breakdown(len(records)),
        )

    def get_namespace_usage(self) -> NamespaceUsageResponse:
        namespaces = self.inventory.list_namespaces()
        pods = self.inventory.list_pods()
        usages = aggregate_namespace_usage(namespaces, pods, parser=self.parser)
        return NamespaceUsageResponse(
            namespaces=usages,
            total_namespaces=len(usages),
            explanation=explain_namespace_usage(len(usages)),
        )

    def get_pod_resource_stats(self) -> PodResourceStatsResponse:
        """Return the top pods by CPU requests and the total pod count."""
        profiles = profile_pods(self.inventory.list_pods(), parser=self.parser)
        top_pods = rank_pods(profiles, self.top_pods_limit)
        return PodResourceStatsResponse(
            top_pods=top_pods,
            total_pods=len(profiles),
            sorted_by=SORTED_BY_CPU_REQUESTS,
            explanation=explain_pod_resource_stats(len(top_pods), len(profiles)),
        )

    def check_replica_capacity(
        self, app_name: str, namespace: str, replica_count: int
    ) -> ReplicaCapacityResponse:
        """Check whether `replica_count` more replicas of an application fit.

        Per-replica cost is inferred from running pods in `namespace` whose
        name contains `app_name`, using the configured estimator.

        Raises
        ------
        InputValidationError
            If the count is not positive or the name/namespace is empty.
        NoMatchingPodsError
            If no pod in the namespace matches `app_name`.
        """
        if replica_count <= 0:
            raise InputValidationError("Replica count must be positive")
        if not app_name:
            raise InputValidationError("Application name cannot be empty")
        if not namespace:
            raise InputValidationError("Namespace cannot be empty")

        matching = select_matching_pods(
            self.inventory.list_pods(namespace=namespace), app_name
        )
        if not matching:
            raise NoMatchingPodsError(app_name, namespace)

        cost = self.estimator.estimate(matching, parser=self.parser)
        snapshot = self._cluster_snapshot()
        projection = project_replicas(snapshot, cost, replica_count)
        verdict = projection.verdict
        logger.debug(
            "Replica check %s/%s x%d using %s (%s): %s",
            namespace,
            app_name,
            replica_count,
            cost.reference_pod,
            self.estimator.name,
            verdict.fits,
        )

        return ReplicaCapacityResponse(
            fits=verdict.fits,
            reference_pod=cost.reference_pod,
            cpu_per_replica_cores=cost.cpu_cores,
            memory_per_replica_gib=cost.memory_gib,
            total_cpu_required_cores=projection.total_cpu_cores,
            total_memory_required_gib=projection.total_memory_gib,
            available_cpu_cores=snapshot.available_cpu_cores,
            available_memory_gib=snapshot.available_memory_gib,
            current_pod_count=len(matching),
            projected_cpu_utilization_percent=verdict.projected_cpu_utilization_percent,
            projected_memory_utilization_percent=verdict.projected_memory_utilization_percent,
            max_replicas_by_cpu=projection.max_replicas_by_cpu,
            max_replicas_by_memory=projection.max_replicas_by_memory,
            explanation=explain_replica_capacity(
                projection,
                snapshot,
                app_name=app_name,
                namespace=namespace,
                matching_pods=len(matching),
            ),
        )


def build_service(
    config: InsightsConfig, *, estimator: ReplicaCostEstimator | None = None
) -> ClusterInsightsService:
    """Create a kubectl-backed service from configuration."""
    return ClusterInsightsService(
        KubectlInventory(config.kubectl),
        parser=QuantityParser(strict=config.strict_quantities),
        estimator=estimator,
        top_pods_limit=config.top_pods_limit,
    )
