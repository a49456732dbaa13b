"""Preview orchestrator: turns command intents into cluster workflows.

:class:`PreviewOrchestrator` runs one coroutine per command kind. Every
coroutine returns a :class:`~prpreviews.previews.models.CommandResult`;
cluster and manifest failures become failed results with the underlying
cause and remediation hints, never exceptions.

Usage
-----
>>> from prpreviews.commands import parse_command
>>> from prpreviews.previews import (
...     AllowListPolicy,
...     PreviewOrchestrator,
...     PreviewOrchestratorDependencies,
... )
>>> orchestrator = PreviewOrchestrator(
...     PreviewOrchestratorDependencies(
...         gateway=gateway, policy=AllowListPolicy(frozenset({"octocat"}))
...     )
... )
>>> result = await orchestrator.dispatch(parse_command("/preview", "octocat", 7))
>>> result.data.namespace
'preview-pr-7-nginx'

"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses as dc
import typing as typ

import msgspec

from prpreviews.cluster.errors import (
    ClusterError,
    ManifestApplyError,
    ResourceNotFoundError,
)
from prpreviews.commands.grammar import available_commands
from prpreviews.commands.models import CommandKind
from prpreviews.common.naming import (
    preview_namespace_name,
    resource_id,
    sanitize_service_name,
)
from prpreviews.logging import get_logger, log_warning
from prpreviews.manifests.discovery import (
    resolve_manifest_path,
    scan_manifest_services,
)
from prpreviews.manifests.errors import ManifestParseError
from prpreviews.manifests.parser import parse_manifest_file
from prpreviews.previews.config import PreviewConfig
from prpreviews.previews.models import (
    ActorPermissions,
    CleanupData,
    ClusterData,
    CommandResult,
    DeploymentMethod,
    FailureData,
    HelpData,
    NamespaceStatus,
    PlanData,
    PreviewData,
    ResultCode,
    StatusData,
)
from prpreviews.previews.observability import PreviewEventLogger
from prpreviews.previews.readiness import ReadinessTracker

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from prpreviews.cluster.models import NamespaceRecord
    from prpreviews.cluster.protocol import ClusterGateway
    from prpreviews.commands.models import Intent
    from prpreviews.manifests.models import ParsedManifestSet, SkippedDocument
    from prpreviews.previews.permissions import DeploymentPolicy

logger = get_logger(__name__)

S = typ.TypeVar("S")


async def _read_resource(
    read: cabc.Callable[[str, str], cabc.Awaitable[S]],
    list_names: cabc.Callable[[str], cabc.Awaitable[list[str]]],
    record: NamespaceRecord,
    issues: list[str],
) -> S | None:
    """Read the resource named after the service label, else the first listed.

    Manifests may name their resources differently from the preview target,
    so a missing label-named resource falls back to whatever the namespace
    holds. Errors other than not-found are appended to ``issues``.
    """
    try:
        if record.service_slug:
            with contextlib.suppress(ResourceNotFoundError):
                return await read(record.name, record.service_slug)
        names = await list_names(record.name)
        if not names:
            return None
        return await read(record.name, names[0])
    except ResourceNotFoundError:
        return None
    except ClusterError as exc:
        issues.append(str(exc))
        return None


@dc.dataclass(frozen=True, slots=True)
class PreviewOrchestratorDependencies:
    """Collaborators required by :class:`PreviewOrchestrator`.

    Attributes
    ----------
    gateway
        Cluster access.
    policy
        Decides who may run ``/preview`` and ``/cleanup``.

    """

    gateway: ClusterGateway
    policy: DeploymentPolicy


@dc.dataclass(frozen=True, slots=True)
class ResolvedTarget:
    """A preview target and how it would be deployed.

    ``clean_name`` is ``None`` when the target has no DNS-compatible
    characters, in which case ``method`` is ``unknown``.
    """

    service: str
    clean_name: str | None
    method: DeploymentMethod
    manifest_path: Path | None = None


class PreviewOrchestrator:
    """Drive help, status, plan, preview and cleanup against a cluster."""

    def __init__(
        self,
        dependencies: PreviewOrchestratorDependencies,
        config: PreviewConfig | None = None,
        readiness: ReadinessTracker | None = None,
        event_logger: PreviewEventLogger | None = None,
    ) -> None:
        """Configure the orchestrator.

        Parameters
        ----------
        dependencies
            Gateway and deployment policy.
        config
            Provisioning settings; defaults to :class:`PreviewConfig`.
        readiness
            Tracker for background readiness waits; one is built from the
            gateway and config when omitted.
        event_logger
            Receives workflow events; a default logger is used when omitted.

        """
        self._gateway = dependencies.gateway
        self._policy = dependencies.policy
        self._config = config or PreviewConfig()
        self._events = event_logger or PreviewEventLogger()
        self._readiness = readiness or ReadinessTracker(
            self._gateway,
            timeout=self._config.readiness_timeout,
            poll_interval=self._config.poll_interval,
            event_logger=self._events,
        )

    @property
    def readiness(self) -> ReadinessTracker:
        """Return the tracker owning background readiness waits."""
        return self._readiness

    @property
    def config(self) -> PreviewConfig:
        """Return the provisioning settings."""
        return self._config

    async def dispatch(self, intent: Intent) -> CommandResult:
        """Run the workflow for ``intent.kind``."""
        self._events.log_command_received(
            kind=intent.kind, actor=intent.actor, pr_number=intent.pr
        )
        match intent.kind:
            case CommandKind.HELP:
                return await self.help(intent)
            case CommandKind.STATUS:
                return await self.status(intent)
            case CommandKind.PLAN:
                return await self.plan(intent)
            case CommandKind.PREVIEW:
                return await self.preview(intent)
            case CommandKind.CLEANUP:
                return await self.cleanup(intent)
        msg = f"unhandled command kind: {intent.kind!r}"
        raise ValueError(msg)

    # ------------------------------------------------------------------
    # Read-only commands
    # ------------------------------------------------------------------

    async def help(self, intent: Intent) -> CommandResult:
        """Return the command reference; makes no cluster calls."""
        services = await asyncio.to_thread(
            scan_manifest_services, self._config.repo_path
        )
        return CommandResult.ok(
            "Available pr-previews commands",
            HelpData(
                available_commands=available_commands(),
                user_permissions=self._permissions(intent.actor),
                default_service=self._config.default_service,
                services=services,
            ),
        )

    async def status(self, intent: Intent) -> CommandResult:
        """Report live state of every preview belonging to the PR.

        Missing workloads or services are recorded as ``None``; only a
        failure to list the namespaces fails the command.
        """
        try:
            namespaces = await self._gateway.list_namespaces_for_pr(intent.pr)
        except ClusterError as exc:
            self._events.log_status_failed(pr_number=intent.pr, cause=str(exc))
            return CommandResult.failure(
                ResultCode.STATUS_QUERY_FAILED,
                f"Failed to query preview environments for PR #{intent.pr}",
                FailureData(
                    command=intent.kind,
                    cause=str(exc),
                    hints=["Check cluster connectivity and try /status again."],
                ),
            )

        previews = [await self._namespace_status(namespace) for namespace in namespaces]
        if previews:
            summary = (
                f"Found {len(previews)} preview environment(s) for PR #{intent.pr}"
            )
        else:
            summary = f"No preview environments for PR #{intent.pr}"
        return CommandResult.ok(
            summary,
            StatusData(
                pr_number=intent.pr,
                active_previews=previews,
                total_previews=len(previews),
            ),
        )

    async def plan(self, intent: Intent) -> CommandResult:
        """Describe what ``/preview`` would deploy without touching the cluster."""
        target = await self.resolve_target(intent.target)
        namespace = (
            preview_namespace_name(intent.pr, target.service)
            if target.clean_name is not None
            else None
        )
        plan = PlanData(
            pr_number=intent.pr,
            service=target.service,
            method=target.method,
            clean_service_name=target.clean_name,
            namespace=namespace,
            can_deploy=self._policy.can_deploy(intent.actor),
        )

        match target.method:
            case DeploymentMethod.MANIFEST:
                manifest_path = self._relative(target.manifest_path)
                try:
                    parsed = await self._parse(target.manifest_path)
                except ManifestParseError as exc:
                    return CommandResult.failure(
                        ResultCode.MANIFEST_PARSE_FAILED,
                        f"Could not read manifest for {target.service}",
                        FailureData(
                            command=intent.kind,
                            cause=str(exc),
                            hints=[f"Check that {manifest_path} is readable YAML."],
                        ),
                    )
                return CommandResult.ok(
                    f"Plan for {target.service}: deploy from {manifest_path}",
                    msgspec.structs.replace(
                        plan,
                        manifest_path=manifest_path,
                        resources=parsed.resource_ids(),
                        skipped=list(parsed.skipped),
                    ),
                )
            case DeploymentMethod.DEFAULT:
                clean = typ.cast("str", target.clean_name)
                return CommandResult.ok(
                    f"Plan for {target.service}: deploy the default workload",
                    msgspec.structs.replace(
                        plan,
                        resources=[
                            resource_id("Deployment", clean),
                            resource_id("Service", clean),
                        ],
                    ),
                )
            case _:
                known = await self.known_services()
                return CommandResult.ok(
                    f"No manifest found for {target.service}",
                    msgspec.structs.replace(plan, known_services=known),
                )

    async def cluster_info(self) -> CommandResult:
        """Test connectivity and return aggregate cluster counts."""
        try:
            info = await self._gateway.cluster_info()
        except ClusterError as exc:
            log_warning(logger, "Cluster unavailable: %s", exc)
            return CommandResult.failure(
                ResultCode.CLUSTER_UNAVAILABLE,
                "Cluster is unreachable",
                FailureData(
                    cause=str(exc),
                    hints=["Check the kubeconfig or in-cluster service account."],
                ),
            )
        return CommandResult.ok(
            f"Connected to {info.server_version}", ClusterData(info=info)
        )

    # ------------------------------------------------------------------
    # Mutating commands
    # ------------------------------------------------------------------

    async def preview(self, intent: Intent) -> CommandResult:
        """Provision a preview environment for the target.

        Steps run strictly in order: resolve target, create namespace, apply
        workloads and services, start the readiness wait. The first failing
        step ends the run with a result naming that step; resources created
        before it are left in place.
        """
        if not self._policy.can_deploy(intent.actor):
            return self._denied(intent)

        target = await self.resolve_target(intent.target)
        if target.method is DeploymentMethod.UNKNOWN or target.clean_name is None:
            known = await self.known_services()
            self._events.log_preview_failed(
                pr_number=intent.pr,
                service=target.service,
                code=ResultCode.SERVICE_NOT_FOUND,
                cause="no manifest",
            )
            return CommandResult.failure(
                ResultCode.SERVICE_NOT_FOUND,
                f"Service {target.service!r} not found",
                FailureData(
                    command=intent.kind,
                    cause=f"no manifest found for {target.service}",
                    hints=[
                        "Add a manifest under k8s/, kubernetes/, manifests/ "
                        "or deploy/, or pick one of the known services.",
                    ],
                    known_services=known,
                ),
            )

        namespace = preview_namespace_name(intent.pr, target.service)
        self._events.log_preview_started(
            pr_number=intent.pr,
            actor=intent.actor,
            service=target.service,
            namespace=namespace,
        )

        try:
            await self._gateway.create_namespace(namespace, intent.pr, target.service)
        except ClusterError as exc:
            hints = (
                [f"A preview already exists in {namespace}; run /cleanup first."]
                if exc.is_conflict
                else ["Check cluster permissions for namespace creation."]
            )
            return self._preview_failed(
                intent,
                target,
                ResultCode.NAMESPACE_CREATE_FAILED,
                f"Failed to create namespace {namespace}",
                FailureData(command=intent.kind, cause=str(exc), hints=hints),
            )

        if target.method is DeploymentMethod.MANIFEST:
            outcome = await self._apply_manifest(intent, target, namespace)
        else:
            outcome = await self._apply_default(intent, target, namespace)
        if isinstance(outcome, CommandResult):
            return outcome
        deployed, workloads, skipped = outcome

        self._readiness.start(namespace, workloads)
        self._events.log_preview_completed(
            pr_number=intent.pr,
            namespace=namespace,
            method=target.method,
            resources=deployed,
        )
        return CommandResult.ok(
            f"Deploying {target.service} to {namespace}",
            PreviewData(
                pr_number=intent.pr,
                service=target.service,
                clean_service_name=typ.cast("str", target.clean_name),
                namespace=namespace,
                deployment_method=target.method,
                manifest_detected=target.method is DeploymentMethod.MANIFEST,
                manifest_path=self._relative(target.manifest_path),
                deployed_resources=deployed,
                skipped=skipped,
            ),
        )

    async def cleanup(self, intent: Intent) -> CommandResult:
        """Delete every preview namespace belonging to the PR.

        Deletion stops at the first failure; namespaces already deleted stay
        deleted and are listed in the failure data.
        """
        if not self._policy.can_deploy(intent.actor):
            return self._denied(intent)

        try:
            namespaces = await self._gateway.list_namespaces_for_pr(intent.pr)
        except ClusterError as exc:
            self._events.log_cleanup_failed(
                pr_number=intent.pr, cleaned=[], cause=str(exc)
            )
            return CommandResult.failure(
                ResultCode.CLEANUP_FAILED,
                f"Failed to list preview environments for PR #{intent.pr}",
                FailureData(
                    command=intent.kind,
                    cause=str(exc),
                    hints=["Check cluster connectivity and try /cleanup again."],
                ),
            )

        if not namespaces:
            return CommandResult.ok(
                f"Nothing to clean up for PR #{intent.pr}",
                CleanupData(pr_number=intent.pr),
            )

        cleaned: list[str] = []
        for record in namespaces:
            try:
                await self._gateway.delete_namespace(record.name)
            except ClusterError as exc:
                self._events.log_cleanup_failed(
                    pr_number=intent.pr, cleaned=cleaned, cause=str(exc)
                )
                return CommandResult.failure(
                    ResultCode.CLEANUP_FAILED,
                    f"Failed to delete namespace {record.name}",
                    FailureData(
                        command=intent.kind,
                        cause=str(exc),
                        namespace=record.name,
                        cleaned_namespaces=list(cleaned),
                        hints=["Run /cleanup again to remove the remaining previews."],
                        cleanup_needed=True,
                    ),
                )
            self._readiness.forget(record.name)
            cleaned.append(record.name)

        self._events.log_cleanup_completed(pr_number=intent.pr, namespaces=cleaned)
        return CommandResult.ok(
            f"Cleaned up {len(cleaned)} preview environment(s) for PR #{intent.pr}",
            CleanupData(
                pr_number=intent.pr,
                cleaned_namespaces=cleaned,
                total_cleaned=len(cleaned),
            ),
        )

    # ------------------------------------------------------------------
    # Target resolution
    # ------------------------------------------------------------------

    async def resolve_target(self, requested: str | None) -> ResolvedTarget:
        """Resolve ``requested`` (or the default service) to a deployment method.

        A manifest always wins; otherwise the default service uses the
        built-in workload and anything else is unknown.
        """
        service = requested or self._config.default_service
        try:
            clean_name = sanitize_service_name(service)
        except ValueError:
            return ResolvedTarget(
                service=service, clean_name=None, method=DeploymentMethod.UNKNOWN
            )

        manifest_path = await asyncio.to_thread(
            resolve_manifest_path, service, self._config.repo_path
        )
        if manifest_path is not None:
            method = DeploymentMethod.MANIFEST
        elif service == self._config.default_service:
            method = DeploymentMethod.DEFAULT
        else:
            method = DeploymentMethod.UNKNOWN
        return ResolvedTarget(
            service=service,
            clean_name=clean_name,
            method=method,
            manifest_path=manifest_path,
        )

    async def known_services(self) -> list[str]:
        """Return the default service followed by manifest-backed services."""
        services = await asyncio.to_thread(
            scan_manifest_services, self._config.repo_path
        )
        names = [self._config.default_service, *(service.name for service in services)]
        return list(dict.fromkeys(names))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _permissions(self, actor: str) -> ActorPermissions:
        can_deploy = self._policy.can_deploy(actor)
        return ActorPermissions(can_read=True, can_deploy=can_deploy)

    def _denied(self, intent: Intent) -> CommandResult:
        self._events.log_permission_denied(
            kind=intent.kind, actor=intent.actor, pr_number=intent.pr
        )
        return CommandResult.failure(
            ResultCode.PERMISSION_DENIED,
            f"@{intent.actor} is not allowed to run /{intent.kind}",
            FailureData(
                command=intent.kind,
                cause=f"{intent.actor} is not on the deployment allow-list",
                hints=["Ask a maintainer to run the command or to grant access."],
            ),
        )

    def _preview_failed(
        self,
        intent: Intent,
        target: ResolvedTarget,
        code: ResultCode,
        summary: str,
        data: FailureData,
    ) -> CommandResult:
        self._events.log_preview_failed(
            pr_number=intent.pr, service=target.service, code=code, cause=data.cause
        )
        return CommandResult.failure(code, summary, data)

    async def _apply_default(
        self, intent: Intent, target: ResolvedTarget, namespace: str
    ) -> CommandResult | tuple[list[str], list[str], list[SkippedDocument]]:
        name = typ.cast("str", target.clean_name)
        deployed: list[str] = []
        try:
            deployed.append(
                await self._gateway.deploy_default_workload(namespace, name)
            )
        except ClusterError as exc:
            return self._preview_failed(
                intent,
                target,
                ResultCode.WORKLOAD_DEPLOY_FAILED,
                f"Failed to deploy {name} in {namespace}",
                self._leftover(intent, exc, namespace, deployed),
            )
        try:
            deployed.append(
                await self._gateway.create_default_service(namespace, name)
            )
        except ClusterError as exc:
            return self._preview_failed(
                intent,
                target,
                ResultCode.SERVICE_CREATE_FAILED,
                f"Failed to create service {name} in {namespace}",
                self._leftover(intent, exc, namespace, deployed),
            )
        return deployed, [name], []

    async def _apply_manifest(
        self, intent: Intent, target: ResolvedTarget, namespace: str
    ) -> CommandResult | tuple[list[str], list[str], list[SkippedDocument]]:
        try:
            parsed = await self._parse(target.manifest_path)
        except ManifestParseError as exc:
            return self._preview_failed(
                intent,
                target,
                ResultCode.MANIFEST_PARSE_FAILED,
                f"Could not read manifest for {target.service}",
                self._leftover(intent, exc, namespace, []),
            )
        try:
            deployed = await self._gateway.apply_manifest_set(namespace, parsed)
        except ManifestApplyError as exc:
            data = self._leftover(intent, exc, namespace, list(exc.applied))
            return self._preview_failed(
                intent,
                target,
                ResultCode.MANIFEST_APPLY_FAILED,
                f"Failed to apply {exc.resource} in {namespace}",
                msgspec.structs.replace(data, failed_resource=exc.resource),
            )
        workloads = [workload.metadata.name for workload in parsed.workloads]
        return deployed, list(dict.fromkeys(workloads)), list(parsed.skipped)

    @staticmethod
    def _leftover(
        intent: Intent, exc: Exception, namespace: str, applied: list[str]
    ) -> FailureData:
        return FailureData(
            command=intent.kind,
            cause=str(exc),
            namespace=namespace,
            applied_resources=applied,
            hints=[
                f"Namespace {namespace} was left in place; "
                "run /cleanup before retrying /preview.",
            ],
            cleanup_needed=True,
        )

    async def _namespace_status(self, record: NamespaceRecord) -> NamespaceStatus:
        issues: list[str] = []
        if not record.service_slug:
            issues.append(f"namespace {record.name} has no service label")
        workload = await _read_resource(
            self._gateway.get_workload_status,
            self._gateway.list_workload_names,
            record,
            issues,
        )
        service = await _read_resource(
            self._gateway.get_service_status,
            self._gateway.list_service_names,
            record,
            issues,
        )
        return NamespaceStatus(
            namespace=record,
            workload=workload,
            service=service,
            readiness=self._readiness.state(record.name),
            issues=issues,
        )

    async def _parse(self, path: Path | None) -> ParsedManifestSet:
        if path is None:
            msg = "manifest path is required"
            raise ValueError(msg)
        return await asyncio.to_thread(parse_manifest_file, path)

    def _relative(self, path: Path | None) -> str | None:
        if path is None:
            return None
        try:
            return path.relative_to(self._config.repo_path).as_posix()
        except ValueError:
            return path.as_posix()
