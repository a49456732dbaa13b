"""ClusterGateway protocol used by the preview orchestrator."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from prpreviews.cluster.models import (
        ClusterInfo,
        NamespaceRecord,
        ServiceStatus,
        WorkloadStatus,
    )
    from prpreviews.manifests.models import ParsedManifestSet


@typ.runtime_checkable
class ClusterGateway(typ.Protocol):
    """Every operation the orchestrator performs against a cluster.

    Implementations raise subclasses of
    :class:`~prpreviews.cluster.errors.ClusterError` and nothing else for
    cluster-side failures. The protocol is runtime_checkable so fakes used in
    tests can be validated with ``isinstance``.

    Examples
    --------
    >>> from prpreviews.cluster import ClusterGateway, KubernetesGateway
    >>> isinstance(KubernetesGateway(clients), ClusterGateway)
    True

    """

    async def test_connection(self) -> str:
        """Return the API server version, raising when unreachable."""
        ...

    async def cluster_info(self) -> ClusterInfo:
        """Return node, namespace and preview namespace counts."""
        ...

    async def create_namespace(
        self, name: str, pr_number: int, service: str
    ) -> NamespaceRecord:
        """Create a labelled preview namespace."""
        ...

    async def delete_namespace(self, name: str) -> None:
        """Delete a namespace and, by cascade, everything in it."""
        ...

    async def list_preview_namespaces(self) -> list[NamespaceRecord]:
        """Return every preview namespace in the cluster."""
        ...

    async def list_namespaces_for_pr(self, pr_number: int) -> list[NamespaceRecord]:
        """Return the preview namespaces belonging to one pull request."""
        ...

    async def deploy_default_workload(self, namespace: str, name: str) -> str:
        """Create the default Deployment and return its ``Kind/name``."""
        ...

    async def create_default_service(self, namespace: str, name: str) -> str:
        """Create the default Service and return its ``Kind/name``."""
        ...

    async def apply_manifest_set(
        self, namespace: str, manifests: ParsedManifestSet
    ) -> list[str]:
        """Create every decoded document and return their ``Kind/name``."""
        ...

    async def wait_for_workload_ready(
        self,
        namespace: str,
        name: str,
        *,
        timeout: float,
        poll_interval: float,
    ) -> WorkloadStatus:
        """Poll a Deployment until all replicas are ready or time runs out."""
        ...

    async def get_workload_status(self, namespace: str, name: str) -> WorkloadStatus:
        """Return replica and pod readiness for a Deployment."""
        ...

    async def get_service_status(self, namespace: str, name: str) -> ServiceStatus:
        """Return address and ports of a Service."""
        ...

    async def list_workload_names(self, namespace: str) -> list[str]:
        """Return the Deployment names in a namespace."""
        ...

    async def list_service_names(self, namespace: str) -> list[str]:
        """Return the Service names in a namespace."""
        ...
