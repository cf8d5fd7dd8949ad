"""Read-only cluster inventory backed by kubectl."""

from __future__ import annotations

import logging
import shlex
from typing import Any, Protocol

from kci.infrastructure.kubectl_client import KubectlError, KubectlOptions, kubectl_json

logger = logging.getLogger(__name__)


class InventoryError(RuntimeError):
    """Raised when a cluster listing cannot be fetched."""


class InventorySource(Protocol):
    """Source of node, pod and namespace descriptors."""

    def list_nodes(self) -> list[dict[str, Any]]: ...

    def list_pods(self, namespace: str | None = None) -> list[dict[str, Any]]: ...

    def list_namespaces(self) -> list[dict[str, Any]]: ...


class KubectlInventory:
    """Inventory source issuing one `kubectl get -o json` per listing."""

    def __init__(self, options: KubectlOptions | None = None) -> None:
        self.options = options or KubectlOptions()

    def _list(self, command: str, what: str) -> list[dict[str, Any]]:
        try:
            payload = kubectl_json(command, options=self.options)
        except KubectlError as exc:
            raise InventoryError(f"Failed to list {what}: {exc}") from exc
        items = payload.get("items")
        if not isinstance(items, list):
            raise InventoryError(f"Failed to list {what}: response has no items")
        logger.debug("Listed %d %s", len(items), what)
        return items

    def list_nodes(self) -> list[dict[str, Any]]:
        return self._list("get nodes", "nodes")

    def list_pods(self, namespace: str | None = None) -> list[dict[str, Any]]:
        """List pods cluster-wide, or only in `namespace` when given."""
        if namespace is None:
            return self._list("get pods --all-namespaces", "pods")
        return self._list(
            f"get pods --namespace {shlex.quote(namespace)}",
            f"pods in namespace {namespace}",
        )

    def list_namespaces(self) -> list[dict[str, Any]]:
        return self._list("get namespaces", "namespaces")
