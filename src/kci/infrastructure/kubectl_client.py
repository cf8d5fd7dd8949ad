"""Shared kubectl execution helpers."""

import json
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast


class KubectlError(RuntimeError):
    """Raised when kubectl command execution fails."""


@dataclass(frozen=True)
class KubectlOptions:
    """Cluster selection and timeout applied to every kubectl call."""

    kubeconfig: Path | None = None
    context: str | None = None
    timeout_seconds: float | None = 30.0

    def global_args(self) -> list[str]:
        args: list[str] = []
        if self.kubeconfig is not None:
            args.extend(["--kubeconfig", str(self.kubeconfig)])
        if self.context:
            args.extend(["--context", self.context])
        return args


def _run_kubectl(
    command: str,
    *,
    append_json_output: bool,
    options: KubectlOptions | None = None,
) -> subprocess.CompletedProcess[str]:
    opts = options or KubectlOptions()
    args = ["kubectl", *opts.global_args(), *shlex.split(command)]
    if append_json_output:
        args.extend(["-o", "json"])
    try:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=True,
            timeout=opts.timeout_seconds,
        )
    except subprocess.CalledProcessError as exc:
        stderr = exc.stderr.strip() if exc.stderr else str(exc)
        raise KubectlError(f"kubectl command failed: {stderr}") from exc
    except subprocess.TimeoutExpired as exc:
        raise KubectlError(
            f"kubectl command timed out after {opts.timeout_seconds}s"
        ) from exc
    except FileNotFoundError as exc:
        raise KubectlError("kubectl executable not found in PATH") from exc


def kubectl_json(
    command: str,
    *,
    append_json_output: bool = True,
    options: KubectlOptions | None = None,
) -> dict[str, Any]:
    """Execute kubectl command and parse JSON output."""
    result = _run_kubectl(
        command, append_json_output=append_json_output, options=options
    )
    try:
        return cast(dict[str, Any], json.loads(result.stdout) if result.stdout else {})
    except json.JSONDecodeError as exc:
        raise KubectlError(f"kubectl returned invalid JSON: {exc}") from exc
