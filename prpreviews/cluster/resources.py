"""Request bodies for the resources pr-previews creates itself.

The default workload is a single ``nginx:alpine`` replica behind a ClusterIP
service on port 80. Namespaces carry the labels used to find them again and
annotations recording when and for whom they were made.
"""

from __future__ import annotations

import datetime as dt
import typing as typ

from kubernetes import client

from prpreviews.common.naming import MANAGED_BY, sanitize_service_name

DEFAULT_IMAGE: typ.Final[str] = "nginx:alpine"
DEFAULT_PORT: typ.Final[int] = 80
ANNOTATION_PREFIX: typ.Final[str] = "pr-previews.io"

LABEL_PREVIEW: typ.Final[str] = "preview"
LABEL_PR_NUMBER: typ.Final[str] = "pr-number"
LABEL_SERVICE: typ.Final[str] = "service"


def namespace_labels(pr_number: int, service: str) -> dict[str, str]:
    """Return the labels identifying a preview namespace."""
    return {
        LABEL_PREVIEW: "true",
        LABEL_PR_NUMBER: str(pr_number),
        LABEL_SERVICE: sanitize_service_name(service),
        "created-by": MANAGED_BY,
        "environment": "preview",
    }


def namespace_annotations(
    pr_number: int, service: str, *, now: dt.datetime | None = None
) -> dict[str, str]:
    """Return annotations recording creation time and the raw service name."""
    created_at = now or dt.datetime.now(dt.UTC)
    return {
        f"{ANNOTATION_PREFIX}/created-at": created_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
        f"{ANNOTATION_PREFIX}/pr-number": str(pr_number),
        f"{ANNOTATION_PREFIX}/service": service,
    }


def build_namespace(
    name: str, pr_number: int, service: str, *, now: dt.datetime | None = None
) -> client.V1Namespace:
    """Return the namespace body for one preview."""
    return client.V1Namespace(
        metadata=client.V1ObjectMeta(
            name=name,
            labels=namespace_labels(pr_number, service),
            annotations=namespace_annotations(pr_number, service, now=now),
        )
    )


def workload_labels(name: str) -> dict[str, str]:
    """Return labels applied to the default workload and its pods."""
    return {
        "app": name,
        "managed-by": MANAGED_BY,
        "preview-deployment": "true",
    }


def _http_probe(initial_delay: int, period: int) -> client.V1Probe:
    return client.V1Probe(
        http_get=client.V1HTTPGetAction(path="/", port=DEFAULT_PORT),
        initial_delay_seconds=initial_delay,
        period_seconds=period,
    )


def build_default_deployment(name: str, namespace: str) -> client.V1Deployment:
    """Return the single-replica nginx Deployment used without a manifest."""
    labels = workload_labels(name)
    container = client.V1Container(
        name=name,
        image=DEFAULT_IMAGE,
        ports=[
            client.V1ContainerPort(
                container_port=DEFAULT_PORT, name="http", protocol="TCP"
            )
        ],
        resources=client.V1ResourceRequirements(
            requests={"cpu": "100m", "memory": "128Mi"},
            limits={"cpu": "200m", "memory": "256Mi"},
        ),
        liveness_probe=_http_probe(initial_delay=10, period=10),
        readiness_probe=_http_probe(initial_delay=5, period=5),
    )
    return client.V1Deployment(
        api_version="apps/v1",
        kind="Deployment",
        metadata=client.V1ObjectMeta(name=name, namespace=namespace, labels=labels),
        spec=client.V1DeploymentSpec(
            replicas=1,
            selector=client.V1LabelSelector(match_labels={"app": name}),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(labels=labels),
                spec=client.V1PodSpec(containers=[container]),
            ),
        ),
    )


def build_default_service(name: str, namespace: str) -> client.V1Service:
    """Return the ClusterIP Service fronting the default workload."""
    return client.V1Service(
        api_version="v1",
        kind="Service",
        metadata=client.V1ObjectMeta(
            name=name,
            namespace=namespace,
            labels={"app": name, "managed-by": MANAGED_BY},
        ),
        spec=client.V1ServiceSpec(
            type="ClusterIP",
            selector={"app": name},
            ports=[
                client.V1ServicePort(
                    name="http",
                    port=DEFAULT_PORT,
                    target_port=DEFAULT_PORT,
                    protocol="TCP",
                )
            ],
        ),
    )


def scoped_manifest_body(raw: dict[str, typ.Any], namespace: str) -> dict[str, typ.Any]:
    """Return a copy of a manifest document bound to ``namespace``.

    The namespace in the document, if any, is overridden and the
    ``managed-by`` label is added so the object is attributable.
    """
    body = dict(raw)
    metadata = dict(body.get("metadata") or {})
    labels = dict(metadata.get("labels") or {})
    labels.setdefault("managed-by", MANAGED_BY)
    metadata["labels"] = labels
    metadata["namespace"] = namespace
    body["metadata"] = metadata
    return body
