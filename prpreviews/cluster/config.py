"""Configuration for Kubernetes API access.

Usage
-----
>>> import os
>>> os.environ["PRPREVIEWS_REQUEST_TIMEOUT"] = "10"
>>> ClusterConfig.from_env().request_timeout
10

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path


def _optional_env(env_var: str) -> str | None:
    raw = os.environ.get(env_var, "").strip()
    return raw or None


@dc.dataclass(frozen=True, slots=True)
class ClusterConfig:
    """How to reach the cluster.

    Attributes
    ----------
    kubeconfig
        Kubeconfig file used when in-cluster credentials are unavailable.
        ``None`` means the client library default (``~/.kube/config``).
    context
        Kubeconfig context to select; ``None`` uses the current context.
    request_timeout
        Per-request timeout in seconds passed to every API call.

    """

    kubeconfig: Path | None = None
    context: str | None = None
    request_timeout: int = 30

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls) -> ClusterConfig:
        """Create configuration from environment variables.

        Reads ``PRPREVIEWS_KUBECONFIG``, ``PRPREVIEWS_KUBE_CONTEXT`` and
        ``PRPREVIEWS_REQUEST_TIMEOUT``.

        Raises
        ------
        ValueError
            If ``PRPREVIEWS_REQUEST_TIMEOUT`` is not a positive integer.

        """
        kubeconfig = _optional_env("PRPREVIEWS_KUBECONFIG")
        return cls(
            kubeconfig=Path(kubeconfig) if kubeconfig is not None else None,
            context=_optional_env("PRPREVIEWS_KUBE_CONTEXT"),
            request_timeout=cls._parse_positive_int("PRPREVIEWS_REQUEST_TIMEOUT", 30),
        )
