"""Unit tests for the comment-to-result dispatcher."""

from __future__ import annotations

import typing as typ

import pytest

from prpreviews.previews import FailureData, ResultCode
from prpreviews.previews.dispatch import CommandDispatcher
from tests.helpers.fake_cluster import DEPLOYER, READER

if typ.TYPE_CHECKING:
    from prpreviews.previews import PreviewOrchestrator
    from tests.helpers.fake_cluster import RecordingGateway


@pytest.fixture
def dispatcher(orchestrator: PreviewOrchestrator) -> CommandDispatcher:
    """Return a dispatcher over the recording orchestrator."""
    return CommandDispatcher(orchestrator)


class TestCommandDispatcher:
    """Tests for ``CommandDispatcher.handle``."""

    @pytest.mark.asyncio
    async def test_unknown_text_is_guided_to_help(
        self, dispatcher: CommandDispatcher, gateway: RecordingGateway
    ) -> None:
        """Text outside the grammar yields guidance and no cluster calls."""
        result = await dispatcher.handle("/deploy web", actor=DEPLOYER, pr_number=3)

        assert result.code is ResultCode.UNKNOWN_COMMAND
        assert isinstance(result.data, FailureData)
        assert "'/deploy web'" in result.data.cause
        assert "Use /help for details." in result.content
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_known_command_is_rendered(
        self, dispatcher: CommandDispatcher
    ) -> None:
        """Recognised commands come back with Markdown content."""
        result = await dispatcher.handle("  /status  ", actor=READER, pr_number=3)

        assert result.success
        assert result.content.startswith("**No preview environments for PR #3**")

    @pytest.mark.asyncio
    async def test_denied_preview_is_rendered(
        self, dispatcher: CommandDispatcher, gateway: RecordingGateway
    ) -> None:
        """Permission failures are rendered like any other failure."""
        result = await dispatcher.handle("/preview", actor=READER, pr_number=3)

        assert result.code is ResultCode.PERMISSION_DENIED
        assert "## Permission denied" in result.content
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_cluster_info_is_rendered(
        self, dispatcher: CommandDispatcher
    ) -> None:
        """Cluster information is returned with rendered content."""
        result = await dispatcher.cluster_info()

        assert result.success
        assert "## Cluster" in result.content
        assert dispatcher.orchestrator.config.default_service == "nginx"
