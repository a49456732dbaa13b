"""Locate manifest-backed services in a repository checkout.

Services are discovered from YAML files in a fixed set of conventional
directories. A service name resolves to a manifest path by trying, for each
directory in order, ``<service>.yaml``, ``<service>.yml`` and
``<service>-deployment.yaml``. Files with a generic stem such as
``app.yaml`` are listed under their directory name, and that name resolves
back to the generic file.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import msgspec

MANIFEST_DIRECTORIES: typ.Final[tuple[str, ...]] = (
    "k8s",
    "kubernetes",
    "manifests",
    "deploy",
)

_CANDIDATE_SUFFIXES: typ.Final[tuple[str, ...]] = (".yaml", ".yml", "-deployment.yaml")

# File stems too generic to name a service; the directory name is used instead.
_GENERIC_STEMS: typ.Final[frozenset[str]] = frozenset({"deployment", "service", "app"})


class ManifestService(msgspec.Struct, kw_only=True, frozen=True):
    """A service that can be deployed from a manifest file.

    Attributes
    ----------
    name
        Service name usable as a ``/preview`` target.
    path
        Manifest path relative to the repository root.
    directory
        Conventional directory the manifest was found in.

    """

    name: str
    path: str
    directory: str


def _service_name(manifest: Path) -> str:
    stem = manifest.stem
    if stem in _GENERIC_STEMS:
        return manifest.parent.name
    return stem


def scan_manifest_services(repo_path: Path | str) -> list[ManifestService]:
    """Return every manifest-backed service under ``repo_path``.

    Directories are visited in :data:`MANIFEST_DIRECTORIES` order; within a
    directory files are sorted by name. Missing directories are skipped.
    """
    root = Path(repo_path)
    services: list[ManifestService] = []
    for directory in MANIFEST_DIRECTORIES:
        scan_dir = root / directory
        if not scan_dir.is_dir():
            continue
        files = sorted([*scan_dir.glob("*.yaml"), *scan_dir.glob("*.yml")])
        services.extend(
            ManifestService(
                name=_service_name(manifest),
                path=manifest.relative_to(root).as_posix(),
                directory=directory,
            )
            for manifest in files
            if manifest.is_file()
        )
    return services


def resolve_manifest_path(service: str, repo_path: Path | str) -> Path | None:
    """Return the manifest file for ``service``, or ``None`` when absent.

    Parameters
    ----------
    service
        Service name as typed in the command; may contain ``/``.
    repo_path
        Repository root to search.

    """
    relative = service.strip("/")
    if not relative:
        return None

    root = Path(repo_path)
    for directory in MANIFEST_DIRECTORIES:
        for suffix in _CANDIDATE_SUFFIXES:
            candidate = root / directory / f"{relative}{suffix}"
            if candidate.is_file():
                return candidate
    if relative in MANIFEST_DIRECTORIES:
        return _generic_manifest(root / relative)
    return None


def _generic_manifest(directory: Path) -> Path | None:
    # Matches the first generic file scan_manifest_services reports.
    for stem in sorted(_GENERIC_STEMS):
        for extension in (".yaml", ".yml"):
            candidate = directory / f"{stem}{extension}"
            if candidate.is_file():
                return candidate
    return None
