"""Strategies inferring per-replica cost from running pods.

The default strategy takes the first pod whose name contains the application
name, in listing order, as representative of every replica. That is an
approximation: the verdict is only as accurate as that pod is typical.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol

from kci.domain.aggregation import pod_name, pod_resources
from kci.domain.models import ReplicaCost
from kci.domain.quantity_parser import LENIENT_PARSER, QuantityParser


class ReplicaCostEstimator(Protocol):
    """Infer per-replica requests from pods of the same application."""

    name: str

    def estimate(
        self, pods: Sequence[dict[str, Any]], *, parser: QuantityParser
    ) -> ReplicaCost: ...


def select_matching_pods(
    pods: Iterable[dict[str, Any]], app_name: str
) -> list[dict[str, Any]]:
    """Return pods whose name contains `app_name`, keeping listing order."""
    return [pod for pod in pods if app_name in pod_name(pod)]


class FirstMatchEstimator:
    """Use the first matching pod as the reference replica."""

    name = "first"

    def estimate(
        self,
        pods: Sequence[dict[str, Any]],
        *,
        parser: QuantityParser = LENIENT_PARSER,
    ) -> ReplicaCost:
        if not pods:
            raise ValueError("cannot estimate replica cost without pods")
        reference = pods[0]
        cpu, memory = pod_resources(reference, "requests", parser=parser)
        return ReplicaCost(
            reference_pod=pod_name(reference), cpu_cores=cpu, memory_gib=memory
        )


class AverageMatchEstimator:
    """Average requests across all matching pods."""

    name = "average"

    def estimate(
        self,
        pods: Sequence[dict[str, Any]],
        *,
        parser: QuantityParser = LENIENT_PARSER,
    ) -> ReplicaCost:
        if not pods:
            raise ValueError("cannot estimate replica cost without pods")
        totals = [pod_resources(pod, "requests", parser=parser) for pod in pods]
        return ReplicaCost(
            reference_pod=pod_name(pods[0]),
            cpu_cores=sum(cpu for cpu, _ in totals) / len(totals),
            memory_gib=sum(memory for _, memory in totals) / len(totals),
        )


ESTIMATORS: dict[str, ReplicaCostEstimator] = {
    FirstMatchEstimator.name: FirstMatchEstimator(),
    AverageMatchEstimator.name: AverageMatchEstimator(),
}


def get_estimator(name: str) -> ReplicaCostEstimator:
    """Return registered estimator by name."""
    try:
        return ESTIMATORS[name]
    except KeyError as exc:
        choices = ", ".join(sorted(ESTIMATORS))
        raise ValueError(
            f"Unknown replica cost strategy {name!r} (choose from: {choices})"
        ) from exc
