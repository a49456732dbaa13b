"""Unit tests for the preview orchestrator workflows.

The orchestrator runs against :class:`RecordingGateway`, so every test can
assert which cluster operations a command performed and in what order.

Usage
-----
Run with pytest::

    pytest tests/unit/test_previews_service.py

"""

from __future__ import annotations

import asyncio
import typing as typ

import pytest

from prpreviews.cluster import (
    ClusterQueryError,
    NamespaceDeleteError,
    ServiceCreateError,
    WorkloadDeployError,
)
from prpreviews.commands import CommandKind, Intent
from prpreviews.previews import (
    CleanupData,
    ClusterData,
    DeploymentMethod,
    FailureData,
    HelpData,
    PlanData,
    PreviewData,
    ReadinessState,
    ResultCode,
    StatusData,
)
from tests.helpers.fake_cluster import (
    CONFIG_MAP,
    DEPLOYER,
    DEPLOYMENT_AND_SERVICE,
    READER,
    write_manifest,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from prpreviews.previews import CommandResult, PreviewOrchestrator
    from tests.helpers.fake_cluster import RecordingGateway

PR = 42


def _intent(
    kind: CommandKind, target: str | None = None, *, actor: str = DEPLOYER
) -> Intent:
    return Intent(kind=kind, actor=actor, pr=PR, target=target)


T = typ.TypeVar("T")


def _data(result: CommandResult, data_type: type[T]) -> T:
    assert isinstance(result.data, data_type), (
        f"expected {data_type.__name__}, got {type(result.data).__name__}"
    )
    return result.data


class TestHelp:
    """Tests for ``/help``."""

    @pytest.mark.asyncio
    async def test_lists_every_command_without_cluster_calls(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Help succeeds for any actor and never touches the cluster."""
        result = await orchestrator.dispatch(_intent(CommandKind.HELP, actor=READER))

        data = _data(result, HelpData)
        assert result.success
        assert set(data.available_commands) == {
            "help",
            "status",
            "plan",
            "preview",
            "cleanup",
        }
        assert data.user_permissions.can_deploy is False
        assert gateway.calls == [], "help must not call the cluster"

    @pytest.mark.asyncio
    async def test_includes_manifest_services(
        self, orchestrator: PreviewOrchestrator, repo_path: Path
    ) -> None:
        """Manifest-backed services found in the checkout are listed."""
        write_manifest(repo_path, "k8s/web.yaml", CONFIG_MAP.format(name="web"))

        result = await orchestrator.dispatch(_intent(CommandKind.HELP))

        data = _data(result, HelpData)
        assert [service.name for service in data.services] == ["web"]
        assert data.user_permissions.can_deploy is True
        assert data.default_service == "nginx"


class TestPermissionGate:
    """Tests for the deployment allow-list."""

    @pytest.mark.parametrize("kind", [CommandKind.PREVIEW, CommandKind.CLEANUP])
    @pytest.mark.asyncio
    async def test_denied_actor_makes_zero_cluster_calls(
        self,
        orchestrator: PreviewOrchestrator,
        gateway: RecordingGateway,
        kind: CommandKind,
    ) -> None:
        """Actors outside the allow-list are rejected before any cluster call."""
        result = await orchestrator.dispatch(_intent(kind, actor=READER))

        assert not result.success
        assert result.code is ResultCode.PERMISSION_DENIED
        assert gateway.calls == [], "denied commands must not reach the cluster"


class TestPreviewDefault:
    """Tests for ``/preview`` with the built-in workload."""

    @pytest.mark.asyncio
    async def test_deploys_default_workload(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Without a target the default service is deployed step by step."""
        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW))

        data = _data(result, PreviewData)
        assert result.success
        assert data.namespace == "preview-pr-42-nginx"
        assert data.deployment_method is DeploymentMethod.DEFAULT
        assert data.manifest_detected is False
        assert data.deployed_resources == ["Deployment/nginx", "Service/nginx"]
        assert data.status == "deploying"
        assert [call[0] for call in gateway.mutating_calls] == [
            "create_namespace",
            "deploy_default_workload",
            "create_default_service",
        ]
        assert orchestrator.readiness.state(data.namespace) is ReadinessState.PENDING
        await orchestrator.readiness.shutdown()

    @pytest.mark.asyncio
    async def test_existing_namespace_fails_with_cleanup_hint(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """A namespace conflict stops the run before any workload is created."""
        gateway.add_preview(PR, "nginx")

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW))

        data = _data(result, FailureData)
        assert result.code is ResultCode.NAMESPACE_CREATE_FAILED
        assert "409" in data.cause
        assert any("/cleanup" in hint for hint in data.hints)
        assert [call[0] for call in gateway.mutating_calls] == ["create_namespace"]

    @pytest.mark.asyncio
    async def test_workload_failure_stops_before_service(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """A rejected Deployment is reported and the Service is not created."""
        gateway.failures["deploy_default_workload"] = WorkloadDeployError(
            "failed to create deployment: 403 Forbidden", status_code=403
        )

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW))

        data = _data(result, FailureData)
        assert result.code is ResultCode.WORKLOAD_DEPLOY_FAILED
        assert data.cleanup_needed is True
        assert data.namespace == "preview-pr-42-nginx"
        assert "create_default_service" not in gateway.call_names

    @pytest.mark.asyncio
    async def test_service_failure_lists_applied_workload(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """A rejected Service reports the Deployment already created."""
        gateway.failures["create_default_service"] = ServiceCreateError("denied")

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW))

        data = _data(result, FailureData)
        assert result.code is ResultCode.SERVICE_CREATE_FAILED
        assert data.applied_resources == ["Deployment/nginx"]


class TestPreviewManifest:
    """Tests for ``/preview`` backed by a manifest."""

    @pytest.mark.asyncio
    async def test_applies_manifest_resources(
        self,
        orchestrator: PreviewOrchestrator,
        gateway: RecordingGateway,
        repo_path: Path,
    ) -> None:
        """A manifest with one workload and one service is applied in full."""
        write_manifest(
            repo_path, "k8s/myapp.yaml", DEPLOYMENT_AND_SERVICE.format(name="myapp")
        )

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW, "myapp"))

        data = _data(result, PreviewData)
        assert result.success
        assert data.manifest_detected is True
        assert data.manifest_path == "k8s/myapp.yaml"
        assert data.deployed_resources == ["Deployment/myapp", "Service/myapp"]
        assert [call[0] for call in gateway.mutating_calls] == [
            "create_namespace",
            "apply_manifest_set",
        ]
        assert await orchestrator.readiness.wait(data.namespace) is (
            ReadinessState.READY
        )

    @pytest.mark.asyncio
    async def test_slashed_target_is_sanitised(
        self,
        orchestrator: PreviewOrchestrator,
        repo_path: Path,
    ) -> None:
        """``ai/open-webui`` deploys into a DNS-safe namespace."""
        write_manifest(
            repo_path,
            "k8s/ai/open-webui.yaml",
            DEPLOYMENT_AND_SERVICE.format(name="open-webui"),
        )

        result = await orchestrator.dispatch(
            _intent(CommandKind.PREVIEW, "ai/open-webui")
        )

        data = _data(result, PreviewData)
        assert data.service == "ai/open-webui"
        assert data.clean_service_name == "ai-open-webui"
        assert data.namespace == "preview-pr-42-ai-open-webui"
        await orchestrator.readiness.shutdown()

    @pytest.mark.asyncio
    async def test_manifest_wins_for_default_service(
        self, orchestrator: PreviewOrchestrator, repo_path: Path
    ) -> None:
        """A manifest named after the default service replaces the built-in one."""
        write_manifest(
            repo_path, "deploy/nginx.yml", DEPLOYMENT_AND_SERVICE.format(name="nginx")
        )

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW))

        data = _data(result, PreviewData)
        assert data.deployment_method is DeploymentMethod.MANIFEST
        assert data.manifest_path == "deploy/nginx.yml"
        await orchestrator.readiness.shutdown()

    @pytest.mark.asyncio
    async def test_skipped_documents_are_reported(
        self, orchestrator: PreviewOrchestrator, repo_path: Path
    ) -> None:
        """Unsupported documents are skipped and carried into the result."""
        write_manifest(
            repo_path,
            "k8s/web.yaml",
            CONFIG_MAP.format(name="web")
            + "---\nkind: Ingress\nmetadata:\n  name: web\n",
        )

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW, "web"))

        data = _data(result, PreviewData)
        assert data.deployed_resources == ["ConfigMap/web"]
        assert [doc.kind for doc in data.skipped] == ["Ingress"]
        assert orchestrator.readiness.state(data.namespace) is ReadinessState.READY

    @pytest.mark.asyncio
    async def test_apply_failure_leaves_namespace_for_cleanup(
        self,
        orchestrator: PreviewOrchestrator,
        gateway: RecordingGateway,
        repo_path: Path,
    ) -> None:
        """A rejected document is named and the namespace is left in place."""
        write_manifest(
            repo_path, "k8s/web.yaml", DEPLOYMENT_AND_SERVICE.format(name="web")
        )
        gateway.apply_failures["Service/web"] = 422

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW, "web"))

        data = _data(result, FailureData)
        assert result.code is ResultCode.MANIFEST_APPLY_FAILED
        assert data.failed_resource == "Service/web"
        assert data.applied_resources == ["Deployment/web"]
        assert data.cleanup_needed is True
        assert "preview-pr-42-web" in gateway.namespaces
        assert not orchestrator.readiness.is_running("preview-pr-42-web")

    @pytest.mark.asyncio
    async def test_unreadable_manifest_fails_after_namespace(
        self,
        orchestrator: PreviewOrchestrator,
        gateway: RecordingGateway,
        repo_path: Path,
    ) -> None:
        """A manifest that cannot be decoded as UTF-8 fails the parse step."""
        path = repo_path / "k8s" / "web.yaml"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"\xff\xfe\x00")

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW, "web"))

        assert result.code is ResultCode.MANIFEST_PARSE_FAILED
        assert [call[0] for call in gateway.mutating_calls] == ["create_namespace"]


class TestPreviewUnknownService:
    """Tests for ``/preview`` of a service with no manifest."""

    @pytest.mark.asyncio
    async def test_unknown_service_makes_no_mutations(
        self,
        orchestrator: PreviewOrchestrator,
        gateway: RecordingGateway,
        repo_path: Path,
    ) -> None:
        """An unknown target fails fast and lists the known services."""
        write_manifest(repo_path, "k8s/web.yaml", CONFIG_MAP.format(name="web"))

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW, "ghost"))

        data = _data(result, FailureData)
        assert not result.success
        assert result.code is ResultCode.SERVICE_NOT_FOUND
        assert data.known_services == ["nginx", "web"]
        assert gateway.mutating_calls == [], "no cluster mutation expected"

    @pytest.mark.asyncio
    async def test_suggested_services_can_be_previewed(
        self,
        orchestrator: PreviewOrchestrator,
        repo_path: Path,
    ) -> None:
        """A name offered for a generic ``app.yaml`` deploys that file."""
        write_manifest(
            repo_path, "k8s/app.yaml", DEPLOYMENT_AND_SERVICE.format(name="shop")
        )

        failed = await orchestrator.dispatch(_intent(CommandKind.PREVIEW, "ghost"))
        known = _data(failed, FailureData).known_services
        assert known == ["nginx", "k8s"]

        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW, "k8s"))

        data = _data(result, PreviewData)
        assert result.success
        assert data.manifest_path == "k8s/app.yaml"
        assert data.deployed_resources == ["Deployment/shop", "Service/shop"]
        await orchestrator.readiness.shutdown()

    @pytest.mark.asyncio
    async def test_target_without_usable_characters(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """A target that sanitises to nothing is reported as not found."""
        result = await orchestrator.dispatch(_intent(CommandKind.PREVIEW, "/"))

        assert result.code is ResultCode.SERVICE_NOT_FOUND
        assert gateway.calls == []


class TestPlan:
    """Tests for ``/plan``."""

    @pytest.mark.asyncio
    async def test_plan_for_default_service(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """The default plan lists the built-in Deployment and Service."""
        result = await orchestrator.dispatch(_intent(CommandKind.PLAN))

        data = _data(result, PlanData)
        assert data.method is DeploymentMethod.DEFAULT
        assert data.resources == ["Deployment/nginx", "Service/nginx"]
        assert data.namespace == "preview-pr-42-nginx"
        assert gateway.calls == [], "plan must not call the cluster"

    @pytest.mark.asyncio
    async def test_plan_for_manifest(
        self,
        orchestrator: PreviewOrchestrator,
        gateway: RecordingGateway,
        repo_path: Path,
    ) -> None:
        """Manifest plans list decoded documents and skipped ones."""
        write_manifest(
            repo_path,
            "kubernetes/web.yaml",
            DEPLOYMENT_AND_SERVICE.format(name="web") + "---\nkind: Secret\n",
        )

        result = await orchestrator.dispatch(
            _intent(CommandKind.PLAN, "web", actor=READER)
        )

        data = _data(result, PlanData)
        assert data.method is DeploymentMethod.MANIFEST
        assert data.manifest_path == "kubernetes/web.yaml"
        assert data.resources == ["Deployment/web", "Service/web"]
        assert len(data.skipped) == 1
        assert data.can_deploy is False
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_plan_for_unknown_service_is_advisory(
        self, orchestrator: PreviewOrchestrator
    ) -> None:
        """Unknown targets still succeed and suggest known services."""
        result = await orchestrator.dispatch(_intent(CommandKind.PLAN, "ghost"))

        data = _data(result, PlanData)
        assert result.success
        assert data.method is DeploymentMethod.UNKNOWN
        assert data.known_services == ["nginx"]


class TestStatus:
    """Tests for ``/status``."""

    @pytest.mark.asyncio
    async def test_no_previews_is_not_an_error(
        self, orchestrator: PreviewOrchestrator
    ) -> None:
        """A PR without namespaces yields an empty, successful report."""
        result = await orchestrator.dispatch(_intent(CommandKind.STATUS))

        data = _data(result, StatusData)
        assert result.success
        assert data.active_previews == []
        assert data.total_previews == 0

    @pytest.mark.asyncio
    async def test_unready_workload_is_reported(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """A 0/1 workload shows up with its counters and no failure."""
        gateway.add_preview(PR, "web", ready=0, total=1)

        result = await orchestrator.dispatch(_intent(CommandKind.STATUS, actor=READER))

        data = _data(result, StatusData)
        assert result.success
        assert data.total_previews == 1
        preview = data.active_previews[0]
        assert preview.namespace.name == "preview-pr-42-web"
        assert preview.workload is not None
        assert (preview.workload.ready, preview.workload.total) == (0, 1)
        assert preview.issues == []

    @pytest.mark.asyncio
    async def test_missing_service_is_none(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """A namespace without a Service is partial status, not a failure."""
        gateway.add_preview(PR, "web", with_service=False)

        result = await orchestrator.dispatch(_intent(CommandKind.STATUS))

        preview = _data(result, StatusData).active_previews[0]
        assert result.success
        assert preview.service is None
        assert preview.workload is not None

    @pytest.mark.asyncio
    async def test_manifest_resource_names_are_found(
        self,
        orchestrator: PreviewOrchestrator,
        gateway: RecordingGateway,
        repo_path: Path,
    ) -> None:
        """Resources not named after the target are found by listing."""
        write_manifest(
            repo_path,
            "k8s/ai/open-webui.yaml",
            DEPLOYMENT_AND_SERVICE.format(name="open-webui"),
        )
        await orchestrator.dispatch(_intent(CommandKind.PREVIEW, "ai/open-webui"))
        await orchestrator.readiness.wait("preview-pr-42-ai-open-webui")

        result = await orchestrator.dispatch(_intent(CommandKind.STATUS))

        preview = _data(result, StatusData).active_previews[0]
        assert preview.workload is not None
        assert preview.workload.name == "open-webui"
        assert preview.workload.is_ready
        assert preview.service is not None
        assert preview.service.name == "open-webui"
        assert preview.issues == []
        assert ("list_workload_names", "preview-pr-42-ai-open-webui") in (
            gateway.calls
        )

    @pytest.mark.asyncio
    async def test_listing_errors_become_issues(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """A failed fallback listing is reported, not raised."""
        gateway.add_preview(PR, "web", with_service=False)
        gateway.failures["list_service_names"] = ClusterQueryError("503 busy")

        result = await orchestrator.dispatch(_intent(CommandKind.STATUS))

        preview = _data(result, StatusData).active_previews[0]
        assert result.success
        assert preview.workload is not None
        assert preview.service is None
        assert preview.issues == ["503 busy"]

    @pytest.mark.asyncio
    async def test_status_is_idempotent(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Two status calls without mutation return identical data."""
        gateway.add_preview(PR, "web")
        gateway.add_preview(PR, "api", ready=0)

        first = await orchestrator.dispatch(_intent(CommandKind.STATUS))
        second = await orchestrator.dispatch(_intent(CommandKind.STATUS))

        assert first.data == second.data

    @pytest.mark.asyncio
    async def test_other_prs_are_ignored(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Only namespaces labelled with the PR are reported."""
        gateway.add_preview(PR + 1, "web")

        result = await orchestrator.dispatch(_intent(CommandKind.STATUS))

        assert _data(result, StatusData).total_previews == 0

    @pytest.mark.asyncio
    async def test_listing_failure(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Failing to list namespaces fails the command."""
        gateway.failures["list_namespaces_for_pr"] = ClusterQueryError("timeout")

        result = await orchestrator.dispatch(_intent(CommandKind.STATUS))

        assert result.code is ResultCode.STATUS_QUERY_FAILED
        assert _data(result, FailureData).cause == "timeout"

    @pytest.mark.asyncio
    async def test_read_errors_become_issues(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Read errors other than not-found are recorded per namespace."""
        gateway.add_preview(PR, "web")
        gateway.failures["get_workload_status"] = ClusterQueryError("500 boom")

        result = await orchestrator.dispatch(_intent(CommandKind.STATUS))

        preview = _data(result, StatusData).active_previews[0]
        assert result.success
        assert preview.workload is None
        assert preview.issues == ["500 boom"]


class TestCleanup:
    """Tests for ``/cleanup``."""

    @pytest.mark.asyncio
    async def test_nothing_to_clean_up(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """No namespaces means success with an empty list."""
        result = await orchestrator.dispatch(_intent(CommandKind.CLEANUP))

        data = _data(result, CleanupData)
        assert result.success
        assert data.cleaned_namespaces == []
        assert "Nothing to clean up" in result.summary
        assert gateway.mutating_calls == []

    @pytest.mark.asyncio
    async def test_deletes_every_namespace_of_the_pr(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Every preview of the PR is removed; other PRs are untouched."""
        gateway.add_preview(PR, "web")
        gateway.add_preview(PR, "api")
        gateway.add_preview(PR + 1, "web")

        result = await orchestrator.dispatch(_intent(CommandKind.CLEANUP))

        data = _data(result, CleanupData)
        assert data.cleaned_namespaces == ["preview-pr-42-api", "preview-pr-42-web"]
        assert data.total_cleaned == 2
        assert list(gateway.namespaces) == ["preview-pr-43-web"]

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_deleted_namespaces(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """The first failing deletion stops cleanup and is reported."""
        gateway.add_preview(PR, "api")
        gateway.add_preview(PR, "web")
        gateway.add_preview(PR, "zeta")
        gateway.delete_failures["preview-pr-42-web"] = NamespaceDeleteError(
            "failed to delete namespace preview-pr-42-web: 403 Forbidden",
            status_code=403,
        )

        result = await orchestrator.dispatch(_intent(CommandKind.CLEANUP))

        data = _data(result, FailureData)
        assert result.code is ResultCode.CLEANUP_FAILED
        assert data.cleaned_namespaces == ["preview-pr-42-api"]
        assert data.namespace == "preview-pr-42-web"
        assert "preview-pr-42-api" not in gateway.namespaces
        assert "preview-pr-42-zeta" in gateway.namespaces

    @pytest.mark.asyncio
    async def test_cleanup_cancels_readiness_wait(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Deleting a namespace cancels and forgets its readiness wait."""
        gateway.readiness_gate = asyncio.Event()
        await orchestrator.dispatch(_intent(CommandKind.PREVIEW))
        assert orchestrator.readiness.is_running("preview-pr-42-nginx")

        result = await orchestrator.dispatch(_intent(CommandKind.CLEANUP))

        assert result.success
        assert not orchestrator.readiness.is_running("preview-pr-42-nginx")
        assert orchestrator.readiness.state("preview-pr-42-nginx") is None

    @pytest.mark.asyncio
    async def test_failed_deletion_keeps_readiness_wait(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """A namespace that survives cleanup keeps its readiness wait."""
        namespace = "preview-pr-42-nginx"
        gateway.readiness_gate = asyncio.Event()
        await orchestrator.dispatch(_intent(CommandKind.PREVIEW))
        gateway.delete_failures[namespace] = NamespaceDeleteError(
            f"failed to delete namespace {namespace}: 403 Forbidden",
            status_code=403,
        )

        result = await orchestrator.dispatch(_intent(CommandKind.CLEANUP))

        assert result.code is ResultCode.CLEANUP_FAILED
        assert orchestrator.readiness.is_running(namespace)
        assert orchestrator.readiness.state(namespace) is ReadinessState.PENDING

        gateway.readiness_gate.set()
        assert await orchestrator.readiness.wait(namespace) is ReadinessState.READY


class TestClusterInfo:
    """Tests for the cluster information query."""

    @pytest.mark.asyncio
    async def test_reports_counts(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Connected clusters report node and namespace counts."""
        gateway.add_preview(PR, "web")

        result = await orchestrator.cluster_info()

        info = _data(result, ClusterData).info
        assert result.success
        assert info.preview_namespaces == 1

    @pytest.mark.asyncio
    async def test_unreachable_cluster(
        self, orchestrator: PreviewOrchestrator, gateway: RecordingGateway
    ) -> None:
        """Connection failures become a cluster_unavailable result."""
        gateway.failures["cluster_info"] = ClusterQueryError("connection refused")

        result = await orchestrator.cluster_info()

        assert result.code is ResultCode.CLUSTER_UNAVAILABLE
        assert not result.success
