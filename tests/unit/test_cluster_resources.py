"""Unit tests for request bodies built by the cluster layer."""

from __future__ import annotations

import datetime as dt

from prpreviews.cluster.resources import (
    ANNOTATION_PREFIX,
    DEFAULT_IMAGE,
    build_default_deployment,
    build_default_service,
    build_namespace,
    scoped_manifest_body,
)


class TestBuildNamespace:
    """Tests for ``build_namespace``."""

    def test_labels_identify_the_preview(self) -> None:
        """Namespaces carry preview, PR and sanitised service labels."""
        namespace = build_namespace("preview-pr-7-ai-open-webui", 7, "ai/open-webui")

        labels = namespace.metadata.labels
        assert labels["preview"] == "true"
        assert labels["pr-number"] == "7"
        assert labels["service"] == "ai-open-webui"
        assert labels["created-by"] == "pr-previews"

    def test_annotations_record_creation(self) -> None:
        """Annotations keep the raw service name and a UTC timestamp."""
        now = dt.datetime(2024, 7, 1, 9, 30, tzinfo=dt.UTC)

        namespace = build_namespace("ns", 7, "ai/open-webui", now=now)

        annotations = namespace.metadata.annotations
        assert annotations[f"{ANNOTATION_PREFIX}/service"] == "ai/open-webui"
        assert annotations[f"{ANNOTATION_PREFIX}/created-at"] == "2024-07-01T09:30:00Z"


class TestDefaultWorkload:
    """Tests for the default Deployment and Service bodies."""

    def test_deployment_runs_one_nginx_replica(self) -> None:
        """The default workload is one nginx container with probes."""
        deployment = build_default_deployment("nginx", "preview-pr-7-nginx")

        assert deployment.metadata.namespace == "preview-pr-7-nginx"
        assert deployment.spec.replicas == 1
        assert deployment.spec.selector.match_labels == {"app": "nginx"}
        container = deployment.spec.template.spec.containers[0]
        assert container.image == DEFAULT_IMAGE
        assert container.ports[0].container_port == 80
        assert container.resources.limits == {"cpu": "200m", "memory": "256Mi"}
        assert container.readiness_probe.http_get.path == "/"

    def test_service_fronts_the_workload(self) -> None:
        """The default service selects the workload pods on port 80."""
        service = build_default_service("nginx", "preview-pr-7-nginx")

        assert service.spec.type == "ClusterIP"
        assert service.spec.selector == {"app": "nginx"}
        assert [port.port for port in service.spec.ports] == [80]


class TestScopedManifestBody:
    """Tests for ``scoped_manifest_body``."""

    def test_forces_namespace_and_adds_managed_by(self) -> None:
        """The document is bound to the preview namespace."""
        raw = {
            "kind": "ConfigMap",
            "metadata": {"name": "settings", "namespace": "prod"},
        }

        body = scoped_manifest_body(raw, "preview-pr-7-web")

        assert body["metadata"]["namespace"] == "preview-pr-7-web"
        assert body["metadata"]["labels"] == {"managed-by": "pr-previews"}

    def test_does_not_mutate_the_source_document(self) -> None:
        """The parsed document stays untouched."""
        raw = {"kind": "ConfigMap", "metadata": {"name": "s", "labels": {"a": "b"}}}

        scoped_manifest_body(raw, "ns")

        assert raw == {
            "kind": "ConfigMap",
            "metadata": {"name": "s", "labels": {"a": "b"}},
        }

    def test_keeps_existing_managed_by_label(self) -> None:
        """A user-supplied managed-by label is preserved."""
        raw = {"metadata": {"name": "s", "labels": {"managed-by": "helm"}}}

        body = scoped_manifest_body(raw, "ns")

        assert body["metadata"]["labels"]["managed-by"] == "helm"
