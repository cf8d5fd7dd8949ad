"""Application facade exports for stable use-case API."""

from kci.application.insights_service import (
    ClusterInsightsService,
    InputValidationError,
    NoMatchingPodsError,
    build_service,
)
from kci.application.insights_use_cases import (
    execute_cluster_capacity,
    execute_namespace_usage,
    execute_node_breakdown,
    execute_pod_resource_stats,
    execute_replica_capacity,
    execute_resource_fit,
)
from kci.application.run_writer import RunResult

__all__ = [
    "ClusterInsightsService",
    "InputValidationError",
    "NoMatchingPodsError",
    "build_service",
    "execute_cluster_capacity",
    "execute_namespace_usage",
    "execute_node_breakdown",
    "execute_pod_resource_stats",
    "execute_replica_capacity",
    "execute_resource_fit",
    "RunResult",
]
