"""Application factory for the pr-previews Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when a command dispatcher is
available, the cluster information and GitHub webhook endpoints.

Usage
-----
Create a health-only app (no cluster)::

    app = create_app()

Create a full app::

    from prpreviews.api.app import AppDependencies, create_app

    deps = AppDependencies(dispatcher=dispatcher, webhook_secret="s3cret")
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from prpreviews.api.errors import (
    InvalidInputError,
    WebhookSignatureError,
    handle_invalid_input,
    handle_webhook_signature,
)
from prpreviews.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from prpreviews.previews.dispatch import CommandDispatcher

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    dispatcher
        Runs chat commands; when ``None`` only health endpoints exist.
    webhook_secret
        Shared secret for ``X-Hub-Signature-256`` verification.
    command_timeout
        Seconds a webhook command may run before it is cancelled.

    """

    dispatcher: CommandDispatcher | None = None
    webhook_secret: str | None = None
    command_timeout: float | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or without a
        dispatcher, only ``/health`` and ``/ready`` are registered.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    dispatcher = dependencies.dispatcher if dependencies is not None else None
    middleware: list[object] = []

    if dispatcher is not None:
        from prpreviews.api.middleware import ReadinessShutdownManager

        middleware.append(
            ReadinessShutdownManager(dispatcher.orchestrator.readiness)
        )

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    # Health endpoints are always available
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(commands_enabled=dispatcher is not None))

    if dependencies is not None and dispatcher is not None:
        from prpreviews.api.cluster.resources import ClusterResource
        from prpreviews.api.webhook.resources import GitHubWebhookResource

        app.add_route("/cluster", ClusterResource(dispatcher))
        app.add_route(
            "/webhook/github",
            GitHubWebhookResource(
                dispatcher,
                secret=dependencies.webhook_secret,
                command_timeout=dependencies.command_timeout,
            ),
        )

    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(WebhookSignatureError, handle_webhook_signature)

    return app
