"""Lifespan middleware for Falcon ASGI applications.

Background readiness waits outlive the requests that start them, so they are
cancelled when the ASGI server shuts the application down.

Usage
-----
Register the middleware when creating the Falcon app::

    from prpreviews.api.middleware import ReadinessShutdownManager

    app = falcon.asgi.App(middleware=[ReadinessShutdownManager(tracker)])

"""

from __future__ import annotations

import typing as typ

from prpreviews.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from prpreviews.previews.readiness import ReadinessTracker

__all__ = ["ReadinessShutdownManager"]

logger = get_logger(__name__)


class ReadinessShutdownManager:
    """Falcon middleware cancelling readiness waits on lifespan shutdown.

    Parameters
    ----------
    tracker
        Tracker owning the background tasks.

    """

    def __init__(self, tracker: ReadinessTracker) -> None:
        """Initialize the middleware with the readiness tracker."""
        self._tracker = tracker

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Cancel every running readiness wait."""
        log_info(logger, "Cancelling readiness waits before shutdown")
        await self._tracker.shutdown()
