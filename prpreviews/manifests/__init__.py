"""Manifest discovery and ingestion.

This package turns user-authored Kubernetes YAML into typed documents the
cluster gateway can apply.

* **Discovery** - find manifest-backed services under ``k8s/``,
  ``kubernetes/``, ``manifests/`` and ``deploy/`` and resolve a service name
  to its manifest file.
* **Ingestion** - split a multi-document file, decode ``Deployment``,
  ``Service`` and ``ConfigMap`` documents into a tagged msgspec union and
  record everything else as skipped.

Examples
--------
>>> from prpreviews.manifests import parse_manifest_file, resolve_manifest_path
>>> path = resolve_manifest_path("myapp", ".")
>>> parse_manifest_file(path).total_entries
2

"""

from __future__ import annotations

from prpreviews.manifests.discovery import (
    MANIFEST_DIRECTORIES,
    ManifestService,
    resolve_manifest_path,
    scan_manifest_services,
)
from prpreviews.manifests.errors import ManifestError, ManifestParseError
from prpreviews.manifests.models import (
    ConfigMapManifest,
    ManifestResource,
    ParsedManifestSet,
    ServiceManifest,
    SkippedDocument,
    SkipReason,
    WorkloadManifest,
)
from prpreviews.manifests.parser import (
    parse_manifest_file,
    parse_manifest_text,
    split_documents,
)

__all__ = [
    "MANIFEST_DIRECTORIES",
    "ConfigMapManifest",
    "ManifestError",
    "ManifestParseError",
    "ManifestResource",
    "ManifestService",
    "ParsedManifestSet",
    "ServiceManifest",
    "SkipReason",
    "SkippedDocument",
    "WorkloadManifest",
    "parse_manifest_file",
    "parse_manifest_text",
    "resolve_manifest_path",
    "scan_manifest_services",
    "split_documents",
]
