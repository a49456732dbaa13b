"""Configuration for the preview orchestrator.

Usage
-----
>>> import os
>>> os.environ["PRPREVIEWS_ALLOWED_ACTORS"] = "octocat, hubot"
>>> sorted(PreviewConfig.from_env().allowed_actors)
['hubot', 'octocat']

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

DEFAULT_SERVICE = "nginx"


@dc.dataclass(frozen=True, slots=True)
class PreviewConfig:
    """Settings for preview provisioning.

    Attributes
    ----------
    allowed_actors
        Actors permitted to run ``/preview`` and ``/cleanup``. Empty by
        default, which denies everyone.
    repo_path
        Repository checkout scanned for manifests.
    default_service
        Target used when ``/preview`` or ``/plan`` names none; deployed with
        the built-in workload rather than a manifest.
    readiness_timeout
        Seconds the background readiness wait allows a workload.
    poll_interval
        Seconds between readiness polls.

    """

    allowed_actors: frozenset[str] = frozenset()
    repo_path: Path = Path()
    default_service: str = DEFAULT_SERVICE
    readiness_timeout: int = 180
    poll_interval: int = 10

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

    @staticmethod
    def _parse_actors(raw: str) -> frozenset[str]:
        return frozenset(actor.strip() for actor in raw.split(",") if actor.strip())

    @classmethod
    def from_env(cls) -> PreviewConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``PRPREVIEWS_ALLOWED_ACTORS``: comma-separated actor names.
        - ``PRPREVIEWS_REPO_PATH``: repository root (default ``.``).
        - ``PRPREVIEWS_DEFAULT_SERVICE``: default target (default ``nginx``).
        - ``PRPREVIEWS_READINESS_TIMEOUT``: seconds, positive integer.
        - ``PRPREVIEWS_POLL_INTERVAL``: seconds, positive integer.

        Raises
        ------
        ValueError
            If a numeric setting is not a positive integer.

        """
        repo_path = os.environ.get("PRPREVIEWS_REPO_PATH", "").strip() or "."
        default_service = (
            os.environ.get("PRPREVIEWS_DEFAULT_SERVICE", "").strip() or DEFAULT_SERVICE
        )
        return cls(
            allowed_actors=cls._parse_actors(
                os.environ.get("PRPREVIEWS_ALLOWED_ACTORS", "")
            ),
            repo_path=Path(repo_path),
            default_service=default_service,
            readiness_timeout=cls._parse_positive_int(
                "PRPREVIEWS_READINESS_TIMEOUT", 180
            ),
            poll_interval=cls._parse_positive_int("PRPREVIEWS_POLL_INTERVAL", 10),
        )
