"""Tests for the kubectl-backed inventory source."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from kci.infrastructure.inventory import InventoryError, KubectlInventory
from kci.infrastructure.kubectl_client import KubectlError, KubectlOptions


def test_list_nodes_returns_items() -> None:
    with patch(
        "kci.infrastructure.inventory.kubectl_json",
        return_value={"items": [{"metadata": {"name": "node-1"}}]},
    ) as kubectl:
        nodes = KubectlInventory().list_nodes()

    assert nodes == [{"metadata": {"name": "node-1"}}]
    assert kubectl.call_args.args[0] == "get nodes"


def test_list_pods_scope() -> None:
    options = KubectlOptions(context="prod")
    inventory = KubectlInventory(options)
    with patch(
        "kci.infrastructure.inventory.kubectl_json", return_value={"items": []}
    ) as kubectl:
        inventory.list_pods()
        inventory.list_pods(namespace="team-a")

    commands = [call.args[0] for call in kubectl.call_args_list]
    assert commands == ["get pods --all-namespaces", "get pods --namespace team-a"]
    assert all(call.kwargs["options"] is options for call in kubectl.call_args_list)


def test_list_namespaces() -> None:
    with patch(
        "kci.infrastructure.inventory.kubectl_json",
        return_value={"items": [{"metadata": {"name": "default"}}]},
    ) as kubectl:
        assert len(KubectlInventory().list_namespaces()) == 1
    assert kubectl.call_args.args[0] == "get namespaces"


def test_kubectl_failure_is_wrapped() -> None:
    with (
        patch(
            "kci.infrastructure.inventory.kubectl_json",
            side_effect=KubectlError("kubectl command failed: forbidden"),
        ),
        pytest.raises(
            InventoryError,
            match="Failed to list nodes: kubectl command failed: forbidden",
        ),
    ):
        KubectlInventory().list_nodes()


def test_namespaced_failure_names_namespace() -> None:
    with (
        patch(
            "kci.infrastructure.inventory.kubectl_json",
            side_effect=KubectlError("boom"),
        ),
        pytest.raises(InventoryError, match="pods in namespace team-a"),
    ):
        KubectlInventory().list_pods(namespace="team-a")


def test_response_without_items() -> None:
    with (
        patch("kci.infrastructure.inventory.kubectl_json", return_value={}),
        pytest.raises(InventoryError, match="response has no items"),
    ):
        KubectlInventory().list_pods()
