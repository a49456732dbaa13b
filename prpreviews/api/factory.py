"""Factory for building a CommandDispatcher from environment configuration.

Usage
-----
Build a dispatcher for the API layer or the CLI::

    from prpreviews.api.factory import build_dispatcher

    dispatcher = build_dispatcher()

"""

from __future__ import annotations

from prpreviews.cluster.client import load_clients
from prpreviews.cluster.config import ClusterConfig
from prpreviews.cluster.gateway import KubernetesGateway
from prpreviews.previews.config import PreviewConfig
from prpreviews.previews.dispatch import CommandDispatcher
from prpreviews.previews.observability import PreviewEventLogger
from prpreviews.previews.permissions import AllowListPolicy
from prpreviews.previews.service import (
    PreviewOrchestrator,
    PreviewOrchestratorDependencies,
)

__all__ = ["build_dispatcher"]


def build_dispatcher(
    preview_config: PreviewConfig | None = None,
    cluster_config: ClusterConfig | None = None,
) -> CommandDispatcher:
    """Build a ``CommandDispatcher`` wired to a live cluster.

    Parameters
    ----------
    preview_config
        Provisioning settings; read from the environment when ``None``.
    cluster_config
        Cluster access settings; read from the environment when ``None``.

    Returns
    -------
    CommandDispatcher
        Dispatcher whose orchestrator talks to the configured cluster.

    Raises
    ------
    ClusterConfigError
        If no Kubernetes credentials can be loaded.

    """
    preview_config = preview_config or PreviewConfig.from_env()
    cluster_config = cluster_config or ClusterConfig.from_env()

    gateway = KubernetesGateway(
        load_clients(cluster_config),
        request_timeout=cluster_config.request_timeout,
    )
    event_logger = PreviewEventLogger()
    orchestrator = PreviewOrchestrator(
        PreviewOrchestratorDependencies(
            gateway=gateway,
            policy=AllowListPolicy(preview_config.allowed_actors),
        ),
        config=preview_config,
        event_logger=event_logger,
    )
    return CommandDispatcher(orchestrator, event_logger=event_logger)
