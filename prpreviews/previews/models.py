"""Result types returned by the preview orchestrator.

Every command produces a :class:`CommandResult`. Its ``data`` field is a
tagged union keyed by ``kind`` so consumers can branch on the shape of the
payload instead of probing map keys. ``content`` is empty when the
orchestrator returns and is filled in by :mod:`prpreviews.rendering`.
"""

from __future__ import annotations

import enum

import msgspec

from prpreviews.cluster.models import (
    ClusterInfo,
    NamespaceRecord,
    ServiceStatus,
    WorkloadStatus,
)
from prpreviews.manifests.discovery import ManifestService
from prpreviews.manifests.models import SkippedDocument


class ResultCode(enum.StrEnum):
    """Outcome category of a command."""

    OK = "ok"
    UNKNOWN_COMMAND = "unknown_command"
    PERMISSION_DENIED = "permission_denied"
    NAMESPACE_CREATE_FAILED = "namespace_create_failed"
    WORKLOAD_DEPLOY_FAILED = "workload_deploy_failed"
    SERVICE_CREATE_FAILED = "service_create_failed"
    MANIFEST_PARSE_FAILED = "manifest_parse_failed"
    MANIFEST_APPLY_FAILED = "manifest_apply_failed"
    SERVICE_NOT_FOUND = "service_not_found"
    CLEANUP_FAILED = "cleanup_failed"
    STATUS_QUERY_FAILED = "status_query_failed"
    CLUSTER_UNAVAILABLE = "cluster_unavailable"


class DeploymentMethod(enum.StrEnum):
    """How a preview target is (or would be) deployed."""

    DEFAULT = "default"
    MANIFEST = "manifest"
    UNKNOWN = "unknown"


class ReadinessState(enum.StrEnum):
    """Last observed state of a background readiness wait."""

    PENDING = "pending"
    READY = "ready"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ActorPermissions(msgspec.Struct, kw_only=True, frozen=True):
    """What the requesting actor may do."""

    can_read: bool = True
    can_deploy: bool = False


class HelpData(msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="help"):
    """Command reference for ``/help``."""

    available_commands: list[str]
    user_permissions: ActorPermissions
    default_service: str
    services: list[ManifestService] = msgspec.field(default_factory=list)


class NamespaceStatus(msgspec.Struct, kw_only=True, frozen=True):
    """Live state of one preview namespace.

    ``workload`` and ``service`` are ``None`` when the resource does not
    exist. ``issues`` records reads that failed for other reasons.
    """

    namespace: NamespaceRecord
    workload: WorkloadStatus | None = None
    service: ServiceStatus | None = None
    readiness: ReadinessState | None = None
    issues: list[str] = msgspec.field(default_factory=list)


class StatusData(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="status"
):
    """Status report for every preview of one pull request."""

    pr_number: int
    active_previews: list[NamespaceStatus] = msgspec.field(default_factory=list)
    total_previews: int = 0


class PlanData(msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="plan"):
    """What ``/preview`` would do for a target. Advisory only."""

    pr_number: int
    service: str
    method: DeploymentMethod
    clean_service_name: str | None = None
    namespace: str | None = None
    manifest_path: str | None = None
    resources: list[str] = msgspec.field(default_factory=list)
    skipped: list[SkippedDocument] = msgspec.field(default_factory=list)
    known_services: list[str] = msgspec.field(default_factory=list)
    can_deploy: bool = False


class PreviewData(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="preview"
):
    """Outcome of a successful provisioning run."""

    pr_number: int
    service: str
    clean_service_name: str
    namespace: str
    deployment_method: DeploymentMethod
    manifest_detected: bool
    manifest_path: str | None = None
    deployed_resources: list[str] = msgspec.field(default_factory=list)
    skipped: list[SkippedDocument] = msgspec.field(default_factory=list)
    status: str = "deploying"


class CleanupData(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="cleanup"
):
    """Namespaces removed by ``/cleanup``."""

    pr_number: int
    cleaned_namespaces: list[str] = msgspec.field(default_factory=list)
    total_cleaned: int = 0


class FailureData(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="failure"
):
    """Diagnostics attached to a failed command.

    Attributes
    ----------
    command
        Command word that failed, when one was recognised.
    cause
        Underlying error message.
    hints
        Concrete remediation steps for the actor.
    namespace
        Namespace the failure happened in, if any.
    failed_resource
        ``Kind/name`` of the manifest document that failed to apply.
    applied_resources
        Resources the cluster accepted before the failure.
    cleaned_namespaces
        Namespaces already deleted when a cleanup failed part way.
    known_services
        Valid ``/preview`` targets, listed when a target is unknown.
    cleanup_needed
        True when the failure left resources behind.

    """

    cause: str
    command: str | None = None
    hints: list[str] = msgspec.field(default_factory=list)
    namespace: str | None = None
    failed_resource: str | None = None
    applied_resources: list[str] = msgspec.field(default_factory=list)
    cleaned_namespaces: list[str] = msgspec.field(default_factory=list)
    known_services: list[str] = msgspec.field(default_factory=list)
    cleanup_needed: bool = False


class ClusterData(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="cluster"
):
    """Connectivity and aggregate counts for health checks."""

    info: ClusterInfo


ResultData = (
    HelpData
    | StatusData
    | PlanData
    | PreviewData
    | CleanupData
    | ClusterData
    | FailureData
)


class CommandResult(msgspec.Struct, kw_only=True, frozen=True):
    """Structured outcome of one command.

    Attributes
    ----------
    success
        Whether the command achieved its goal.
    code
        Outcome category; ``ok`` for every successful result.
    summary
        One-line human-readable outcome.
    data
        Typed payload for the command kind, or failure diagnostics.
    content
        Rendered Markdown; empty until rendered.

    """

    success: bool
    code: ResultCode
    summary: str
    data: ResultData
    content: str = ""

    @classmethod
    def ok(cls, summary: str, data: ResultData) -> CommandResult:
        """Return a successful result."""
        return cls(success=True, code=ResultCode.OK, summary=summary, data=data)

    @classmethod
    def failure(
        cls, code: ResultCode, summary: str, data: FailureData
    ) -> CommandResult:
        """Return a failed result with diagnostics."""
        return cls(success=False, code=code, summary=summary, data=data)
