"""Application configuration and environment loading."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from kci.infrastructure.kubectl_client import KubectlOptions

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_TOP_PODS_LIMIT = 20
DEFAULT_LOG_LEVEL = "WARNING"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class InsightsConfig:
    """Top-level config for cluster access and reporting."""

    kubectl: KubectlOptions = field(default_factory=KubectlOptions)
    top_pods_limit: int = DEFAULT_TOP_PODS_LIMIT
    strict_quantities: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def kubeconfig(self) -> Path | None:
        """Return kubeconfig path passed to kubectl."""
        return self.kubectl.kubeconfig

    @property
    def kube_context(self) -> str | None:
        """Return kubectl context override."""
        return self.kubectl.context


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def load_config(env_path: Path = Path(".env")) -> InsightsConfig:
    """Load config from environment and optional .env file."""
    load_dotenv(env_path, override=False)
    kubeconfig_raw = os.getenv("KUBECONFIG")
    # kubectl merges multi-file KUBECONFIG itself; --kubeconfig takes one file.
    if kubeconfig_raw and os.pathsep in kubeconfig_raw:
        kubeconfig_raw = None
    return InsightsConfig(
        kubectl=KubectlOptions(
            kubeconfig=Path(kubeconfig_raw) if kubeconfig_raw else None,
            context=os.getenv("KCI_KUBE_CONTEXT") or None,
            timeout_seconds=_env_float(
                "KCI_REQUEST_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
            ),
        ),
        top_pods_limit=_env_int("KCI_TOP_PODS_LIMIT", DEFAULT_TOP_PODS_LIMIT),
        strict_quantities=_env_bool("KCI_STRICT_QUANTITIES", False),
        log_level=(os.getenv("KCI_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
