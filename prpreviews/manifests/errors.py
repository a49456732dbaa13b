"""Errors raised by manifest ingestion."""

from __future__ import annotations


class ManifestError(Exception):
    """Base class for manifest ingestion errors."""


class ManifestParseError(ManifestError):
    """Raised when a manifest file cannot be read at all.

    Individual malformed documents never raise; they are recorded in
    ``ParsedManifestSet.skipped`` instead.

    Attributes
    ----------
    path
        Path of the manifest file.

    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialise with the manifest path and the read failure."""
        self.path = path
        super().__init__(f"failed to read manifest file {path}: {reason}")
