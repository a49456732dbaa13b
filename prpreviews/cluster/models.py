"""Read models returned by the cluster gateway."""

from __future__ import annotations

import msgspec


class NamespaceRecord(msgspec.Struct, kw_only=True, frozen=True):
    """A preview namespace as seen on the cluster.

    Attributes
    ----------
    name
        Namespace name, ``preview-pr-<pr>-<service slug>``.
    service
        Service name as originally requested (from the annotation), falling
        back to the label.
    service_slug
        Sanitised service name stored in the ``service`` label; also the name
        of the default workload and service.
    pr_number
        Pull request number from the ``pr-number`` label.
    created_at
        Creation timestamp in RFC 3339, if reported.
    phase
        Namespace phase (``Active`` or ``Terminating``).

    """

    name: str
    service: str
    service_slug: str
    pr_number: int | None = None
    created_at: str | None = None
    phase: str | None = None


class PodStatus(msgspec.Struct, kw_only=True, frozen=True):
    """One pod owned by a workload."""

    name: str
    phase: str | None
    ready: bool


class WorkloadStatus(msgspec.Struct, kw_only=True, frozen=True):
    """Readiness counters of a Deployment and its pods."""

    name: str
    namespace: str
    ready: int
    total: int
    available: int = 0
    pods: list[PodStatus] = msgspec.field(default_factory=list)
    created_at: str | None = None

    @property
    def is_ready(self) -> bool:
        """Return True when every desired replica is ready."""
        return self.total > 0 and self.ready >= self.total


class ServicePortStatus(msgspec.Struct, kw_only=True, frozen=True):
    """A port exposed by a Service."""

    port: int
    name: str | None = None
    target_port: int | str | None = None
    protocol: str | None = None


class ServiceStatus(msgspec.Struct, kw_only=True, frozen=True):
    """Address and ports of a Service."""

    name: str
    namespace: str
    cluster_ip: str | None
    type: str | None
    ports: list[ServicePortStatus] = msgspec.field(default_factory=list)
    created_at: str | None = None


class ClusterInfo(msgspec.Struct, kw_only=True, frozen=True):
    """Aggregate counts used by health checks."""

    nodes_count: int
    namespaces_count: int
    preview_namespaces: int
    server_version: str = "unknown"
    connection_status: str = "connected"
