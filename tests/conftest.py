"""Shared fixtures: kubectl-shaped descriptors and an in-memory inventory."""

from __future__ import annotations

from typing import Any

import pytest

from kci.application.insights_service import ClusterInsightsService
from kci.infrastructure.inventory import InventoryError
from kci.infrastructure.metrics import reset_counters


def make_node(name: str, cpu: str, memory: str) -> dict[str, Any]:
    return {
        "metadata": {"name": name},
        "status": {"capacity": {"cpu": cpu, "memory": memory, "pods": "110"}},
    }


def make_container(
    name: str = "app",
    *,
    requests: dict[str, str] | None = None,
    limits: dict[str, str] | None = None,
) -> dict[str, Any]:
    resources: dict[str, Any] = {}
    if requests is not None:
        resources["requests"] = requests
    if limits is not None:
        resources["limits"] = limits
    return {"name": name, "resources": resources}


def make_pod(
    name: str,
    namespace: str | None = "default",
    *,
    node: str | None = "node-1",
    containers: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    metadata: dict[str, Any] = {"name": name}
    if namespace is not None:
        metadata["namespace"] = namespace
    spec: dict[str, Any] = {"containers": containers or []}
    if node is not None:
        spec["nodeName"] = node
    return {"metadata": metadata, "spec": spec, "status": {"phase": "Running"}}


def make_namespace(name: str) -> dict[str, Any]:
    return {"metadata": {"name": name}}


class FakeInventory:
    """In-memory inventory recording every listing call."""

    def __init__(
        self,
        *,
        nodes: list[dict[str, Any]] | None = None,
        pods: list[dict[str, Any]] | None = None,
        namespaces: list[dict[str, Any]] | None = None,
        fail_on: str | None = None,
    ) -> None:
        self.nodes = nodes or []
        self.pods = pods or []
        self.namespaces = namespaces or []
        self.fail_on = fail_on
        self.calls: list[str] = []

    def _check(self, what: str) -> None:
        self.calls.append(what)
        if self.fail_on == what:
            raise InventoryError(f"Failed to list {what}: connection refused")

    def list_nodes(self) -> list[dict[str, Any]]:
        self._check("nodes")
        return list(self.nodes)

    def list_pods(self, namespace: str | None = None) -> list[dict[str, Any]]:
        self._check("pods")
        if namespace is None:
            return list(self.pods)
        return [
            pod
            for pod in self.pods
            if pod["metadata"].get("namespace", "default") == namespace
        ]

    def list_namespaces(self) -> list[dict[str, Any]]:
        self._check("namespaces")
        return list(self.namespaces)


@pytest.fixture(autouse=True)
def _reset_metrics() -> None:
    reset_counters()


@pytest.fixture
def single_node_inventory() -> FakeInventory:
    """One 8-core/32Gi node running db-0 (400m/384Mi) and web-7d9f (100m/128Mi)."""
    return FakeInventory(
        nodes=[make_node("node-1", "8", "32Gi")],
        pods=[
            make_pod(
                "db-0",
                containers=[
                    make_container(requests={"cpu": "400m", "memory": "384Mi"})
                ],
            ),
            make_pod(
                "web-7d9f",
                containers=[
                    make_container(requests={"cpu": "100m", "memory": "128Mi"})
                ],
            ),
        ],
        namespaces=[make_namespace("default")],
    )


@pytest.fixture
def service(single_node_inventory: FakeInventory) -> ClusterInsightsService:
    return ClusterInsightsService(single_node_inventory)
