"""Health probe resources for Kubernetes liveness and readiness checks.

These resources never touch the cluster, so they are registered even when
the runtime starts without cluster access.

Usage
-----
Register health endpoints on the Falcon app::

    from prpreviews.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["SERVICE_NAME", "SERVICE_VERSION", "HealthResource", "ReadyResource"]

SERVICE_NAME = "pr-previews"
SERVICE_VERSION = "0.1.0"


class HealthResource:
    """Liveness probe resource returning the service name and version."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
        }
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource returning ``{"status": "ready"}``.

    Reports whether command handling is wired up so operators can tell a
    health-only deployment apart.
    """

    def __init__(self, *, commands_enabled: bool = False) -> None:
        """Record whether command endpoints are registered."""
        self._commands_enabled = commands_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status.

        """
        resp.media = {"status": "ready", "commands_enabled": self._commands_enabled}
        resp.status = HTTPStatus.OK
