"""ClusterGateway implementation on the official Kubernetes client.

The client is synchronous, so every call runs in a worker thread via
``asyncio.to_thread`` with a per-request timeout. Cancelling the awaiting
task abandons the thread's result; the request itself is bounded by the
timeout.
"""

from __future__ import annotations

import asyncio
import typing as typ

from kubernetes.client import ApiException
from urllib3.exceptions import HTTPError

from prpreviews.cluster.errors import (
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
from prpreviews.cluster.models import (
    ClusterInfo,
    NamespaceRecord,
    PodStatus,
    ServicePortStatus,
    ServiceStatus,
    WorkloadStatus,
)
from prpreviews.cluster.resources import (
    ANNOTATION_PREFIX,
    LABEL_PR_NUMBER,
    LABEL_SERVICE,
    build_default_deployment,
    build_default_service,
    build_namespace,
    scoped_manifest_body,
)
from prpreviews.common.naming import preview_selector, resource_id
from prpreviews.logging import get_logger, log_debug, log_info
from prpreviews.manifests.models import (
    ConfigMapManifest,
    ServiceManifest,
    WorkloadManifest,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from prpreviews.cluster.client import KubernetesClientSet
    from prpreviews.manifests.models import ManifestResource, ParsedManifestSet

logger = get_logger(__name__)

_NOT_FOUND = 404


def _timestamp(value: object) -> str | None:
    isoformat = getattr(value, "isoformat", None)
    return isoformat() if callable(isoformat) else None


def _parse_pr_number(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def namespace_record(namespace: typ.Any) -> NamespaceRecord:  # noqa: ANN401
    """Convert a ``V1Namespace`` into a :class:`NamespaceRecord`."""
    metadata = namespace.metadata
    labels = metadata.labels or {}
    annotations = metadata.annotations or {}
    slug = labels.get(LABEL_SERVICE, "")
    status = getattr(namespace, "status", None)
    return NamespaceRecord(
        name=metadata.name,
        service=annotations.get(f"{ANNOTATION_PREFIX}/service", slug),
        service_slug=slug,
        pr_number=_parse_pr_number(labels.get(LABEL_PR_NUMBER)),
        created_at=_timestamp(metadata.creation_timestamp),
        phase=getattr(status, "phase", None),
    )


def _pod_status(pod: typ.Any) -> PodStatus:  # noqa: ANN401
    statuses = getattr(pod.status, "container_statuses", None) or []
    return PodStatus(
        name=pod.metadata.name,
        phase=getattr(pod.status, "phase", None),
        ready=bool(statuses) and all(bool(cs.ready) for cs in statuses),
    )


def _label_selector(labels: dict[str, str] | None) -> str:
    return ",".join(f"{key}={value}" for key, value in sorted((labels or {}).items()))


class KubernetesGateway:
    """Talk to a cluster through ``CoreV1Api``, ``AppsV1Api`` and ``VersionApi``.

    Parameters
    ----------
    clients
        API clients returned by :func:`~prpreviews.cluster.client.load_clients`.
    request_timeout
        Seconds allowed for each individual API request.

    """

    def __init__(
        self, clients: KubernetesClientSet, *, request_timeout: int = 30
    ) -> None:
        """Store the API clients and request timeout."""
        self._clients = clients
        self._request_timeout = request_timeout

    async def _call(
        self,
        error_type: type[ClusterError],
        action: str,
        func: cabc.Callable[..., typ.Any],
        /,
        **kwargs: typ.Any,  # noqa: ANN401
    ) -> typ.Any:  # noqa: ANN401
        try:
            return await asyncio.to_thread(
                func, _request_timeout=self._request_timeout, **kwargs
            )
        except ApiException as exc:
            raise error_type.from_api_exception(action, exc) from exc
        except HTTPError as exc:
            msg = f"failed to {action}: {exc}"
            raise error_type(msg) from exc

    async def test_connection(self) -> str:
        """Return the API server ``gitVersion``.

        Raises
        ------
        ClusterQueryError
            If the API server cannot be reached.

        """
        version = await self._call(
            ClusterQueryError,
            "query server version",
            self._clients.version.get_code,
        )
        return getattr(version, "git_version", None) or "unknown"

    async def cluster_info(self) -> ClusterInfo:
        """Return aggregate counts for health reporting."""
        server_version = await self.test_connection()
        nodes = await self._call(
            ClusterQueryError, "list nodes", self._clients.core.list_node
        )
        namespaces = await self._call(
            ClusterQueryError, "list namespaces", self._clients.core.list_namespace
        )
        previews = await self.list_preview_namespaces()
        return ClusterInfo(
            nodes_count=len(nodes.items),
            namespaces_count=len(namespaces.items),
            preview_namespaces=len(previews),
            server_version=server_version,
        )

    async def create_namespace(
        self, name: str, pr_number: int, service: str
    ) -> NamespaceRecord:
        """Create ``name`` with preview labels and annotations.

        Raises
        ------
        NamespaceCreateError
            If the cluster rejects the request; an existing namespace of the
            same name yields status code 409.

        """
        created = await self._call(
            NamespaceCreateError,
            f"create namespace {name}",
            self._clients.core.create_namespace,
            body=build_namespace(name, pr_number, service),
        )
        log_info(logger, "Created namespace %s for PR #%d", name, pr_number)
        return namespace_record(created)

    async def delete_namespace(self, name: str) -> None:
        """Delete ``name``; a namespace that is already gone counts as deleted.

        Raises
        ------
        NamespaceDeleteError
            If the cluster rejects the deletion.

        """
        try:
            await self._call(
                NamespaceDeleteError,
                f"delete namespace {name}",
                self._clients.core.delete_namespace,
                name=name,
            )
        except NamespaceDeleteError as exc:
            if exc.status_code != _NOT_FOUND:
                raise
            log_debug(logger, "Namespace %s already deleted", name)
            return
        log_info(logger, "Deleted namespace %s", name)

    async def _list_namespaces(self, selector: str) -> list[NamespaceRecord]:
        response = await self._call(
            ClusterQueryError,
            f"list namespaces matching {selector}",
            self._clients.core.list_namespace,
            label_selector=selector,
        )
        return [namespace_record(item) for item in response.items]

    async def list_preview_namespaces(self) -> list[NamespaceRecord]:
        """Return every namespace labelled ``preview=true``."""
        return await self._list_namespaces(preview_selector())

    async def list_namespaces_for_pr(self, pr_number: int) -> list[NamespaceRecord]:
        """Return preview namespaces labelled with ``pr_number``."""
        return await self._list_namespaces(preview_selector(pr_number))

    async def deploy_default_workload(self, namespace: str, name: str) -> str:
        """Create the default nginx Deployment.

        Raises
        ------
        WorkloadDeployError
            If the cluster rejects the Deployment.

        """
        await self._call(
            WorkloadDeployError,
            f"create deployment {namespace}/{name}",
            self._clients.apps.create_namespaced_deployment,
            namespace=namespace,
            body=build_default_deployment(name, namespace),
        )
        log_info(logger, "Created deployment %s in %s", name, namespace)
        return resource_id("Deployment", name)

    async def create_default_service(self, namespace: str, name: str) -> str:
        """Create the default ClusterIP Service.

        Raises
        ------
        ServiceCreateError
            If the cluster rejects the Service.

        """
        await self._call(
            ServiceCreateError,
            f"create service {namespace}/{name}",
            self._clients.core.create_namespaced_service,
            namespace=namespace,
            body=build_default_service(name, namespace),
        )
        log_info(logger, "Created service %s in %s", name, namespace)
        return resource_id("Service", name)

    def _creator(self, resource: ManifestResource) -> cabc.Callable[..., typ.Any]:
        match resource:
            case WorkloadManifest():
                return self._clients.apps.create_namespaced_deployment
            case ServiceManifest():
                return self._clients.core.create_namespaced_service
            case ConfigMapManifest():
                return self._clients.core.create_namespaced_config_map
        msg = f"unsupported manifest resource: {type(resource).__name__}"
        raise TypeError(msg)

    async def apply_manifest_set(
        self, namespace: str, manifests: ParsedManifestSet
    ) -> list[str]:
        """Create every decoded document in ``namespace``.

        Documents are applied workloads first, then services, then config
        objects, each in file order. The first failure stops the run; nothing
        already applied is rolled back.

        Raises
        ------
        ManifestApplyError
            Naming the failing document and the ones applied before it.

        """
        applied: list[str] = []
        for resource in manifests.resources:
            rid = resource.resource_id
            try:
                await self._call(
                    ClusterError,
                    f"apply {rid} in {namespace}",
                    self._creator(resource),
                    namespace=namespace,
                    body=scoped_manifest_body(resource.raw, namespace),
                )
            except ClusterError as exc:
                raise ManifestApplyError(
                    str(exc),
                    resource=rid,
                    applied=tuple(applied),
                    status_code=exc.status_code,
                ) from exc
            log_info(logger, "Applied %s in %s", rid, namespace)
            applied.append(rid)
        return applied

    async def wait_for_workload_ready(
        self,
        namespace: str,
        name: str,
        *,
        timeout: float,
        poll_interval: float,
    ) -> WorkloadStatus:
        """Poll until ``ready == total > 0``.

        The first check happens immediately. A Deployment that is not visible
        yet is treated as not ready.

        Raises
        ------
        ReadinessTimeoutError
            If the workload is still not ready after ``timeout`` seconds.
        ClusterQueryError
            If a poll fails for any reason other than the Deployment missing.

        """
        try:
            async with asyncio.timeout(timeout):
                while True:
                    try:
                        status = await self.get_workload_status(namespace, name)
                    except ResourceNotFoundError:
                        log_debug(
                            logger, "Deployment %s/%s not found yet", namespace, name
                        )
                    else:
                        if status.is_ready:
                            log_info(
                                logger,
                                "Deployment %s/%s ready (%d/%d)",
                                namespace,
                                name,
                                status.ready,
                                status.total,
                            )
                            return status
                    await asyncio.sleep(poll_interval)
        except TimeoutError as exc:
            raise ReadinessTimeoutError.after(namespace, name, timeout) from exc

    async def get_workload_status(self, namespace: str, name: str) -> WorkloadStatus:
        """Return replica counters and pod readiness for a Deployment.

        Raises
        ------
        ResourceNotFoundError
            If the Deployment does not exist.
        ClusterQueryError
            If the read fails otherwise.

        """
        try:
            deployment = await self._call(
                ClusterQueryError,
                f"read deployment {namespace}/{name}",
                self._clients.apps.read_namespaced_deployment,
                name=name,
                namespace=namespace,
            )
        except ClusterQueryError as exc:
            if exc.status_code == _NOT_FOUND:
                raise ResourceNotFoundError.missing(
                    "Deployment", namespace, name
                ) from exc
            raise

        match_labels = getattr(deployment.spec.selector, "match_labels", None)
        pods = await self._call(
            ClusterQueryError,
            f"list pods of {namespace}/{name}",
            self._clients.core.list_namespaced_pod,
            namespace=namespace,
            label_selector=_label_selector(match_labels),
        )
        status = deployment.status
        total = getattr(status, "replicas", None)
        if total is None:
            total = deployment.spec.replicas or 0
        return WorkloadStatus(
            name=name,
            namespace=namespace,
            ready=getattr(status, "ready_replicas", None) or 0,
            total=total,
            available=getattr(status, "available_replicas", None) or 0,
            pods=[_pod_status(pod) for pod in pods.items],
            created_at=_timestamp(deployment.metadata.creation_timestamp),
        )

    async def get_service_status(self, namespace: str, name: str) -> ServiceStatus:
        """Return cluster IP, type and ports of a Service.

        Raises
        ------
        ResourceNotFoundError
            If the Service does not exist.
        ClusterQueryError
            If the read fails otherwise.

        """
        try:
            service = await self._call(
                ClusterQueryError,
                f"read service {namespace}/{name}",
                self._clients.core.read_namespaced_service,
                name=name,
                namespace=namespace,
            )
        except ClusterQueryError as exc:
            if exc.status_code == _NOT_FOUND:
                raise ResourceNotFoundError.missing("Service", namespace, name) from exc
            raise

        spec = service.spec
        return ServiceStatus(
            name=name,
            namespace=namespace,
            cluster_ip=getattr(spec, "cluster_ip", None),
            type=getattr(spec, "type", None),
            ports=[
                ServicePortStatus(
                    port=port.port,
                    name=port.name,
                    target_port=port.target_port,
                    protocol=port.protocol,
                )
                for port in (getattr(spec, "ports", None) or [])
            ],
            created_at=_timestamp(service.metadata.creation_timestamp),
        )

    async def list_workload_names(self, namespace: str) -> list[str]:
        """Return the names of every Deployment in ``namespace``, sorted."""
        deployments = await self._call(
            ClusterQueryError,
            f"list deployments in {namespace}",
            self._clients.apps.list_namespaced_deployment,
            namespace=namespace,
        )
        return sorted(item.metadata.name for item in deployments.items)

    async def list_service_names(self, namespace: str) -> list[str]:
        """Return the names of every Service in ``namespace``, sorted."""
        services = await self._call(
            ClusterQueryError,
            f"list services in {namespace}",
            self._clients.core.list_namespaced_service,
            namespace=namespace,
        )
        return sorted(item.metadata.name for item in services.items)
