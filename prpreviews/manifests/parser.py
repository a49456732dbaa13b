"""Best-effort ingestion of multi-document Kubernetes manifests.

A manifest file holds any number of YAML documents separated by ``---``
lines. Each document is loaded on its own so that one broken document cannot
hide the rest: YAML errors, documents without a ``kind``, unsupported kinds
and documents that fail typed decoding are all recorded in
``ParsedManifestSet.skipped`` and logged, while everything else is decoded
into the typed structs from :mod:`prpreviews.manifests.models`.

Usage
-----
>>> from prpreviews.manifests.parser import parse_manifest_file
>>> parsed = parse_manifest_file("k8s/myapp.yaml")
>>> parsed.resource_ids()
['Deployment/myapp', 'Service/myapp']

"""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from prpreviews.logging import get_logger, log_warning
from prpreviews.manifests.errors import ManifestParseError
from prpreviews.manifests.models import (
    SUPPORTED_KINDS,
    ManifestResource,
    ParsedManifestSet,
    SkippedDocument,
    SkipReason,
)

YAML_VERSION = (1, 2)

_DOCUMENT_SEPARATOR = re.compile(r"^---[ \t]*$", re.MULTILINE)

logger = get_logger(__name__)


def split_documents(content: str) -> list[str]:
    """Split manifest text on ``---`` lines, dropping empty documents."""
    documents = (part.strip() for part in _DOCUMENT_SEPARATOR.split(content))
    return [document for document in documents if document]


def parse_manifest_file(path: Path | str) -> ParsedManifestSet:
    """Read and ingest the manifest at ``path``.

    Parameters
    ----------
    path
        Manifest file to read.

    Returns
    -------
    ParsedManifestSet
        Decoded documents partitioned by kind plus the skipped documents.

    Raises
    ------
    ManifestParseError
        If the file cannot be read or is not valid UTF-8.

    """
    path_obj = Path(path)
    try:
        content = path_obj.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestParseError(str(path_obj), str(exc)) from exc
    return parse_manifest_text(content, source=str(path_obj))


def parse_manifest_text(content: str, *, source: str = "<string>") -> ParsedManifestSet:
    """Ingest manifest text. Never raises for per-document problems."""
    parsed = ParsedManifestSet(path=source)
    yaml = _yaml()

    for index, document in enumerate(split_documents(content)):
        outcome = _parse_document(yaml, index, document)
        if isinstance(outcome, SkippedDocument):
            log_warning(
                logger,
                "Skipping manifest document %d in %s (%s): %s",
                index,
                source,
                outcome.reason,
                outcome.detail,
            )
            parsed.skipped.append(outcome)
        else:
            parsed.add(outcome)

    return parsed


def _parse_document(
    yaml: YAML, index: int, document: str
) -> ManifestResource | SkippedDocument:
    try:
        loaded = yaml.load(document)
    except YAMLError as exc:
        return SkippedDocument(
            index=index,
            reason=SkipReason.INVALID_YAML,
            detail=f"failed to parse YAML: {exc}",
        )

    if not isinstance(loaded, dict):
        return SkippedDocument(
            index=index,
            reason=SkipReason.NOT_A_MAPPING,
            detail=f"expected a mapping, got {type(loaded).__name__}",
        )

    kind = loaded.get("kind")
    if not isinstance(kind, str) or not kind:
        return SkippedDocument(
            index=index,
            reason=SkipReason.MISSING_KIND,
            detail="no kind specified",
        )

    if kind not in SUPPORTED_KINDS:
        return SkippedDocument(
            index=index,
            reason=SkipReason.UNSUPPORTED_KIND,
            detail=f"unsupported resource type: {kind}",
            kind=kind,
        )

    return _decode(index, kind, typ.cast("dict[str, typ.Any]", loaded))


def _decode(
    index: int, kind: str, document: dict[str, typ.Any]
) -> ManifestResource | SkippedDocument:
    try:
        resource = msgspec.convert(document, type=ManifestResource)
    except msgspec.ValidationError as exc:
        return SkippedDocument(
            index=index,
            reason=SkipReason.DECODE_FAILED,
            detail=f"failed to decode {kind}: {exc}",
            kind=kind,
        )
    return msgspec.structs.replace(resource, raw=document)


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
