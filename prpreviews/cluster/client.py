"""Kubernetes API client construction.

This is the only place credentials are loaded, so gateway methods stay free
of configuration concerns.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from prpreviews.cluster.errors import ClusterConfigError
from prpreviews.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from prpreviews.cluster.config import ClusterConfig

logger = get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class KubernetesClientSet:
    """The API groups the gateway talks to."""

    core: client.CoreV1Api
    apps: client.AppsV1Api
    version: client.VersionApi


def load_clients(cluster_config: ClusterConfig) -> KubernetesClientSet:
    """Load credentials and return API clients.

    In-cluster service account credentials are tried first; outside a pod the
    kubeconfig file (optionally with an explicit context) is used instead.

    Raises
    ------
    ClusterConfigError
        If neither source yields usable credentials.

    """
    try:
        config.load_incluster_config()
    except ConfigException:
        _load_kubeconfig(cluster_config)
    else:
        log_info(logger, "Loaded in-cluster Kubernetes configuration")

    return KubernetesClientSet(
        core=client.CoreV1Api(),
        apps=client.AppsV1Api(),
        version=client.VersionApi(),
    )


def _load_kubeconfig(cluster_config: ClusterConfig) -> None:
    kubeconfig = cluster_config.kubeconfig
    config_file = str(kubeconfig) if kubeconfig is not None else None
    try:
        config.load_kube_config(
            config_file=config_file,
            context=cluster_config.context,
        )
    except (ConfigException, OSError) as exc:
        msg = f"failed to load Kubernetes configuration: {exc}"
        raise ClusterConfigError(msg) from exc
    log_info(
        logger,
        "Loaded kubeconfig %s (context %s)",
        config_file or "default",
        cluster_config.context or "current",
    )
