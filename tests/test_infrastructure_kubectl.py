"""Tests for kubectl helper functions."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from kci.infrastructure.kubectl_client import KubectlError, KubectlOptions, kubectl_json


def _completed(stdout: str) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(
        args=["kubectl", "get", "pods", "-o", "json"],
        returncode=0,
        stdout=stdout,
        stderr="",
    )


def test_kubectl_json_success() -> None:
    with patch(
        "kci.infrastructure.kubectl_client.subprocess.run",
        return_value=_completed(json.dumps({"items": []})),
    ) as run:
        assert kubectl_json("get pods") == {"items": []}

    args = run.call_args.args[0]
    assert args == ["kubectl", "get", "pods", "-o", "json"]
    assert run.call_args.kwargs["timeout"] == 30.0


def test_kubectl_json_applies_global_options() -> None:
    options = KubectlOptions(
        kubeconfig=Path("/tmp/kubeconfig"), context="staging", timeout_seconds=5.0
    )
    with patch(
        "kci.infrastructure.kubectl_client.subprocess.run",
        return_value=_completed("{}"),
    ) as run:
        kubectl_json("get nodes", options=options)

    args = run.call_args.args[0]
    assert args[:5] == [
        "kubectl",
        "--kubeconfig",
        "/tmp/kubeconfig",
        "--context",
        "staging",
    ]
    assert args[5:] == ["get", "nodes", "-o", "json"]
    assert run.call_args.kwargs["timeout"] == 5.0


def test_kubectl_json_empty_stdout() -> None:
    with patch(
        "kci.infrastructure.kubectl_client.subprocess.run",
        return_value=_completed(""),
    ):
        assert kubectl_json("get pods") == {}


def test_kubectl_json_invalid_json() -> None:
    with (
        patch(
            "kci.infrastructure.kubectl_client.subprocess.run",
            return_value=_completed("{invalid}"),
        ),
        pytest.raises(KubectlError, match="invalid JSON"),
    ):
        kubectl_json("get pods")


def test_kubectl_command_failure() -> None:
    with (
        patch(
            "kci.infrastructure.kubectl_client.subprocess.run",
            side_effect=subprocess.CalledProcessError(
                1,
                ["kubectl", "get", "pods"],
                stderr="cluster unavailable\n",
            ),
        ),
        pytest.raises(KubectlError, match="kubectl command failed: cluster unavailable"),
    ):
        kubectl_json("get pods")


def test_kubectl_timeout() -> None:
    with (
        patch(
            "kci.infrastructure.kubectl_client.subprocess.run",
            side_effect=subprocess.TimeoutExpired(["kubectl"], 30.0),
        ),
        pytest.raises(KubectlError, match="timed out after 30.0s"),
    ):
        kubectl_json("get pods")


def test_kubectl_missing_executable() -> None:
    with (
        patch(
            "kci.infrastructure.kubectl_client.subprocess.run",
            side_effect=FileNotFoundError("kubectl"),
        ),
        pytest.raises(KubectlError, match="not found in PATH"),
    ):
        kubectl_json("get pods")
