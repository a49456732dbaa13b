"""Cluster gateway: the only component that touches a live Kubernetes cluster.

:class:`ClusterGateway` is the protocol the orchestrator depends on;
:class:`KubernetesGateway` implements it on the official ``kubernetes``
client. API failures are translated into the :class:`ClusterError`
hierarchy.

Examples
--------
>>> from prpreviews.cluster import ClusterConfig, KubernetesGateway, load_clients
>>> config = ClusterConfig.from_env()
>>> gateway = KubernetesGateway(
...     load_clients(config), request_timeout=config.request_timeout
... )

"""

from __future__ import annotations

from prpreviews.cluster.client import KubernetesClientSet, load_clients
from prpreviews.cluster.config import ClusterConfig
from prpreviews.cluster.errors import (
    ClusterConfigError,
    ClusterError,
    ClusterQueryError,
    ManifestApplyError,
    NamespaceCreateError,
    NamespaceDeleteError,
    ReadinessTimeoutError,
    ResourceNotFoundError,
    ServiceCreateError,
    WorkloadDeployError,
)
from prpreviews.cluster.gateway import KubernetesGateway
from prpreviews.cluster.models import (
    ClusterInfo,
    NamespaceRecord,
    PodStatus,
    ServicePortStatus,
    ServiceStatus,
    WorkloadStatus,
)
from prpreviews.cluster.protocol import ClusterGateway

__all__ = [
    "ClusterConfig",
    "ClusterConfigError",
    "ClusterError",
    "ClusterGateway",
    "ClusterInfo",
    "ClusterQueryError",
    "KubernetesClientSet",
    "KubernetesGateway",
    "ManifestApplyError",
    "NamespaceCreateError",
    "NamespaceDeleteError",
    "NamespaceRecord",
    "PodStatus",
    "ReadinessTimeoutError",
    "ResourceNotFoundError",
    "ServiceCreateError",
    "ServicePortStatus",
    "ServiceStatus",
    "WorkloadDeployError",
    "WorkloadStatus",
    "load_clients",
]
