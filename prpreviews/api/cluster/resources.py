"""Cluster information resource.

``GET /cluster`` tests connectivity and reports node, namespace and preview
namespace counts. An unreachable cluster answers 503 so the endpoint can back
an external health check.
"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from prpreviews.previews.dispatch import CommandDispatcher

__all__ = ["ClusterResource"]


class ClusterResource:
    """Resource reporting cluster connectivity."""

    def __init__(self, dispatcher: CommandDispatcher) -> None:
        """Configure the resource with the command dispatcher."""
        self._dispatcher = dispatcher

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /cluster requests."""
        result = await self._dispatcher.cluster_info()
        resp.media = msgspec.to_builtins(result)
        resp.status = falcon.HTTP_200 if result.success else falcon.HTTP_503
