"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os
import typing as typ

import pytest

from prpreviews.previews import (
    AllowListPolicy,
    PreviewConfig,
    PreviewOrchestrator,
    PreviewOrchestratorDependencies,
)
from tests.helpers.fake_cluster import DEPLOYER, RecordingGateway

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clear_prpreviews_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment settings out of every test."""
    for name in list(os.environ):
        if name.startswith("PRPREVIEWS_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def repo_path(tmp_path: Path) -> Path:
    """Return an empty repository checkout."""
    repo = tmp_path / "repo"
    repo.mkdir()
    return repo


@pytest.fixture
def gateway() -> RecordingGateway:
    """Return a fresh recording gateway with no namespaces."""
    return RecordingGateway()


@pytest.fixture
def preview_config(repo_path: Path) -> PreviewConfig:
    """Return settings allowing only the deployer, with short readiness waits."""
    return PreviewConfig(
        allowed_actors=frozenset({DEPLOYER}),
        repo_path=repo_path,
        readiness_timeout=5,
        poll_interval=1,
    )


@pytest.fixture
def orchestrator(
    gateway: RecordingGateway, preview_config: PreviewConfig
) -> PreviewOrchestrator:
    """Return an orchestrator wired to the recording gateway."""
    return PreviewOrchestrator(
        PreviewOrchestratorDependencies(
            gateway=gateway,
            policy=AllowListPolicy(preview_config.allowed_actors),
        ),
        config=preview_config,
    )
