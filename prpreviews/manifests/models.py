"""Typed Kubernetes manifest documents.

Only the three kinds pr-previews knows how to apply are modelled, as a
msgspec tagged union keyed on ``kind``. The structs cover the fields the
controller reads (names, labels, selectors, ports, container images); the
complete source mapping travels with each document in ``raw`` so the cluster
receives exactly what the user wrote.
"""

from __future__ import annotations

import enum
import typing as typ

import msgspec

from prpreviews.common.naming import resource_id

# Field name that can never collide with a real manifest key.
_RAW_FIELD = "x-prpreviews-raw"


class ObjectMeta(msgspec.Struct, kw_only=True, frozen=True):
    """Subset of Kubernetes ``metadata`` used by the controller."""

    name: str
    namespace: str | None = None
    labels: dict[str, str] = msgspec.field(default_factory=dict)
    annotations: dict[str, str] = msgspec.field(default_factory=dict)


class LabelSelector(msgspec.Struct, kw_only=True, frozen=True):
    """Deployment ``spec.selector``."""

    match_labels: dict[str, str] = msgspec.field(
        default_factory=dict, name="matchLabels"
    )


class ContainerPort(msgspec.Struct, kw_only=True, frozen=True):
    """A port exposed by a container."""

    container_port: int = msgspec.field(name="containerPort")
    name: str | None = None
    protocol: str = "TCP"


class Container(msgspec.Struct, kw_only=True, frozen=True):
    """A container in a pod template."""

    name: str
    image: str
    ports: list[ContainerPort] = msgspec.field(default_factory=list)


class PodTemplateMeta(msgspec.Struct, kw_only=True, frozen=True):
    """Pod template ``metadata``; templates carry no name."""

    labels: dict[str, str] = msgspec.field(default_factory=dict)


class PodSpec(msgspec.Struct, kw_only=True, frozen=True):
    """Pod template ``spec``."""

    containers: list[Container]


class PodTemplate(msgspec.Struct, kw_only=True, frozen=True):
    """Deployment ``spec.template``."""

    spec: PodSpec
    metadata: PodTemplateMeta = msgspec.field(default_factory=PodTemplateMeta)


class DeploymentSpec(msgspec.Struct, kw_only=True, frozen=True):
    """Deployment ``spec``."""

    selector: LabelSelector
    template: PodTemplate
    replicas: int = 1


class ServicePortSpec(msgspec.Struct, kw_only=True, frozen=True):
    """A port exposed by a Service."""

    port: int
    name: str | None = None
    target_port: int | str | None = msgspec.field(default=None, name="targetPort")
    protocol: str = "TCP"


class ServiceSpec(msgspec.Struct, kw_only=True, frozen=True):
    """Service ``spec``."""

    ports: list[ServicePortSpec] = msgspec.field(default_factory=list)
    selector: dict[str, str] = msgspec.field(default_factory=dict)
    type: str = "ClusterIP"


class WorkloadManifest(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="Deployment"
):
    """A ``Deployment`` document."""

    metadata: ObjectMeta
    spec: DeploymentSpec
    api_version: str = msgspec.field(default="apps/v1", name="apiVersion")
    raw: dict[str, typ.Any] = msgspec.field(default_factory=dict, name=_RAW_FIELD)

    @property
    def resource_id(self) -> str:
        """Return ``Deployment/<name>``."""
        return resource_id("Deployment", self.metadata.name)


class ServiceManifest(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="Service"
):
    """A ``Service`` document."""

    metadata: ObjectMeta
    spec: ServiceSpec
    api_version: str = msgspec.field(default="v1", name="apiVersion")
    raw: dict[str, typ.Any] = msgspec.field(default_factory=dict, name=_RAW_FIELD)

    @property
    def resource_id(self) -> str:
        """Return ``Service/<name>``."""
        return resource_id("Service", self.metadata.name)


class ConfigMapManifest(
    msgspec.Struct, kw_only=True, frozen=True, tag_field="kind", tag="ConfigMap"
):
    """A ``ConfigMap`` document."""

    metadata: ObjectMeta
    data: dict[str, str] = msgspec.field(default_factory=dict)
    api_version: str = msgspec.field(default="v1", name="apiVersion")
    raw: dict[str, typ.Any] = msgspec.field(default_factory=dict, name=_RAW_FIELD)

    @property
    def resource_id(self) -> str:
        """Return ``ConfigMap/<name>``."""
        return resource_id("ConfigMap", self.metadata.name)


ManifestResource = WorkloadManifest | ServiceManifest | ConfigMapManifest

SUPPORTED_KINDS: typ.Final[frozenset[str]] = frozenset(
    {"Deployment", "Service", "ConfigMap"}
)


class SkipReason(enum.StrEnum):
    """Why a manifest document was left out of a ParsedManifestSet."""

    INVALID_YAML = "invalid_yaml"
    NOT_A_MAPPING = "not_a_mapping"
    MISSING_KIND = "missing_kind"
    UNSUPPORTED_KIND = "unsupported_kind"
    DECODE_FAILED = "decode_failed"


class SkippedDocument(msgspec.Struct, kw_only=True, frozen=True):
    """A document that ingestion could not, or would not, use.

    Attributes
    ----------
    index
        Zero-based position among the non-empty documents of the file.
    reason
        Category of the problem.
    detail
        Human-readable explanation.
    kind
        Declared kind when one could be read.

    """

    index: int
    reason: SkipReason
    detail: str
    kind: str | None = None


class ParsedManifestSet(msgspec.Struct, kw_only=True):
    """Kind-partitioned result of ingesting one manifest file.

    Documents keep their file order within each collection. Two documents
    with the same kind and name are both kept; nothing is de-duplicated.
    """

    path: str
    workloads: list[WorkloadManifest] = msgspec.field(default_factory=list)
    services: list[ServiceManifest] = msgspec.field(default_factory=list)
    config_objects: list[ConfigMapManifest] = msgspec.field(default_factory=list)
    skipped: list[SkippedDocument] = msgspec.field(default_factory=list)

    def add(self, resource: ManifestResource) -> None:
        """Append ``resource`` to the collection for its kind."""
        match resource:
            case WorkloadManifest():
                self.workloads.append(resource)
            case ServiceManifest():
                self.services.append(resource)
            case ConfigMapManifest():
                self.config_objects.append(resource)

    @property
    def resources(self) -> list[ManifestResource]:
        """Return every decoded document in apply order.

        Workloads come first, then services, then config objects.
        """
        return [*self.workloads, *self.services, *self.config_objects]

    @property
    def total_entries(self) -> int:
        """Return the number of decoded documents across all kinds."""
        return len(self.workloads) + len(self.services) + len(self.config_objects)

    def resource_ids(self) -> list[str]:
        """Return ``Kind/name`` identifiers in apply order."""
        return [resource.resource_id for resource in self.resources]
