"""Errors raised by the cluster gateway.

Every failure of a Kubernetes API call is translated into one of these
types so the orchestrator can attribute it to a workflow step without
importing the Kubernetes client.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from kubernetes.client import ApiException


class ClusterError(Exception):
    """Base class for cluster gateway errors.

    Attributes
    ----------
    status_code
        HTTP status returned by the API server, when there was one.

    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def from_api_exception(cls, action: str, exc: ApiException) -> typ.Self:
        """Build an error describing ``action`` from an ``ApiException``."""
        reason = exc.reason or "unknown error"
        return cls(f"failed to {action}: {exc.status} {reason}", status_code=exc.status)

    @property
    def is_conflict(self) -> bool:
        """Return True when the API server answered 409 Conflict."""
        return self.status_code == 409


class ClusterConfigError(ClusterError):
    """Raised when neither in-cluster nor kubeconfig credentials load."""


class ClusterQueryError(ClusterError):
    """Raised when a read against the cluster fails."""


class ResourceNotFoundError(ClusterQueryError):
    """Raised when a status read targets a resource that does not exist."""

    @classmethod
    def missing(cls, kind: str, namespace: str, name: str) -> ResourceNotFoundError:
        """Return an error for a missing ``kind`` named ``name``."""
        return cls(f"{kind} {namespace}/{name} not found", status_code=404)


class NamespaceCreateError(ClusterError):
    """Raised when the cluster rejects a namespace creation."""


class NamespaceDeleteError(ClusterError):
    """Raised when the cluster rejects a namespace deletion."""


class WorkloadDeployError(ClusterError):
    """Raised when the default workload cannot be created."""


class ServiceCreateError(ClusterError):
    """Raised when the default service cannot be created."""


class ManifestApplyError(ClusterError):
    """Raised when a decoded manifest document fails to apply.

    Attributes
    ----------
    resource
        ``Kind/name`` of the document that failed.
    applied
        ``Kind/name`` of the documents applied before the failure.

    """

    def __init__(
        self,
        message: str,
        *,
        resource: str,
        applied: tuple[str, ...] = (),
        status_code: int | None = None,
    ) -> None:
        """Initialise with the failing resource and what was applied first."""
        self.resource = resource
        self.applied = applied
        super().__init__(message, status_code=status_code)


class ReadinessTimeoutError(ClusterError):
    """Raised when a workload does not become ready within the timeout."""

    @classmethod
    def after(cls, namespace: str, name: str, timeout: float) -> ReadinessTimeoutError:
        """Return an error for a readiness wait that ran out of time."""
        return cls(
            f"Deployment {namespace}/{name} not ready after {timeout:g} seconds"
        )
