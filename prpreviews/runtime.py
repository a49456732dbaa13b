"""pr-previews runtime entrypoint for Kubernetes deployments.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`prpreviews.api.app.create_app` for application
construction while keeping the ``prpreviews.runtime:create_app`` entrypoint
stable.

Configuration is driven by environment variables:

- ``PRPREVIEWS_HOST``: Bind address (default ``0.0.0.0``)
- ``PRPREVIEWS_PORT``: Listen port (default ``8080``)
- ``PRPREVIEWS_LOG_LEVEL``: Log level (default ``INFO``)
- ``PRPREVIEWS_WEBHOOK_SECRET``: GitHub webhook secret (optional; enables
  signature verification when set)
- ``PRPREVIEWS_COMMAND_TIMEOUT``: Seconds a webhook command may run
  (default ``120``)
- ``PRPREVIEWS_CLUSTER_ENABLED``: Set to ``0`` to serve health probes only

Run the service directly with ``python -m prpreviews.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from prpreviews.cluster.errors import ClusterConfigError
from prpreviews.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535

_DISABLED_VALUES = frozenset({"0", "false", "no", "off"})


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid PRPREVIEWS_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def _cluster_enabled() -> bool:
    raw = os.environ.get("PRPREVIEWS_CLUSTER_ENABLED", "1")
    return raw.strip().lower() not in _DISABLED_VALUES


def _command_timeout() -> float:
    raw = os.environ.get("PRPREVIEWS_COMMAND_TIMEOUT", "").strip()
    if not raw:
        return 120.0
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"PRPREVIEWS_COMMAND_TIMEOUT must be a number, got: {raw!r}"
        raise ValueError(msg) from exc
    if value <= 0:
        msg = f"PRPREVIEWS_COMMAND_TIMEOUT must be positive, got: {value}"
        raise ValueError(msg)
    return value


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    With cluster access enabled and loadable credentials the app serves the
    cluster and webhook endpoints; otherwise it starts in health-only mode.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    from prpreviews.api.app import AppDependencies
    from prpreviews.api.app import create_app as _create_api_app

    if not _cluster_enabled():
        log_info(logger, "Cluster access disabled; serving health probes only")
        return _create_api_app()

    from prpreviews.api.factory import build_dispatcher

    try:
        dispatcher = build_dispatcher()
    except ClusterConfigError as exc:
        log_warning(
            logger,
            "Kubernetes configuration unavailable (%s); serving health probes only",
            exc,
        )
        return _create_api_app()

    secret = os.environ.get("PRPREVIEWS_WEBHOOK_SECRET", "").strip() or None
    if secret is None:
        log_warning(logger, "PRPREVIEWS_WEBHOOK_SECRET not set; webhooks are unsigned")

    deps = AppDependencies(
        dispatcher=dispatcher,
        webhook_secret=secret,
        command_timeout=_command_timeout(),
    )
    return _create_api_app(deps)


def main() -> None:
    """Start the pr-previews runtime server using Granian.

    Reads ``PRPREVIEWS_HOST``, ``PRPREVIEWS_PORT`` and
    ``PRPREVIEWS_LOG_LEVEL`` from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("PRPREVIEWS_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port_str = os.environ.get("PRPREVIEWS_PORT", "8080")
    port = _parse_port(port_str)
    log_level_str = os.environ.get("PRPREVIEWS_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid PRPREVIEWS_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting pr-previews runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "prpreviews.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
