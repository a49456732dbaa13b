"""Entry point from raw comment text to a rendered command result.

This module sits above both the orchestrator and the renderer, so it is
imported directly rather than re-exported from :mod:`prpreviews.previews`.
"""

from __future__ import annotations

import typing as typ

from prpreviews.commands.errors import UnknownCommandError
from prpreviews.commands.grammar import available_commands, parse_command
from prpreviews.previews.models import CommandResult, FailureData, ResultCode
from prpreviews.previews.observability import PreviewEventLogger
from prpreviews.rendering.markdown import with_content

if typ.TYPE_CHECKING:
    from prpreviews.previews.service import PreviewOrchestrator


def unknown_command_result(text: str) -> CommandResult:
    """Return the guidance result for text that is not a command."""
    commands = ", ".join(f"/{command}" for command in available_commands())
    return CommandResult.failure(
        ResultCode.UNKNOWN_COMMAND,
        "Not a pr-previews command",
        FailureData(
            cause=f"unrecognised command: {text.strip()!r}",
            hints=[f"Supported commands: {commands}.", "Use /help for details."],
        ),
    )


class CommandDispatcher:
    """Parse comment text, run the command and render the result.

    Text that does not match the grammar is answered with an
    ``unknown_command`` result instead of an exception.
    """

    def __init__(
        self,
        orchestrator: PreviewOrchestrator,
        event_logger: PreviewEventLogger | None = None,
    ) -> None:
        """Wrap ``orchestrator``."""
        self._orchestrator = orchestrator
        self._events = event_logger or PreviewEventLogger()

    @property
    def orchestrator(self) -> PreviewOrchestrator:
        """Return the wrapped orchestrator."""
        return self._orchestrator

    async def handle(self, text: str, *, actor: str, pr_number: int) -> CommandResult:
        """Run the command in ``text`` for ``actor`` on ``pr_number``.

        Returns
        -------
        CommandResult
            The outcome with ``content`` rendered as Markdown.

        """
        try:
            intent = parse_command(text, actor, pr_number)
        except UnknownCommandError as exc:
            self._events.log_command_rejected(
                actor=actor, pr_number=pr_number, text=exc.text
            )
            return with_content(unknown_command_result(exc.text))
        result = await self._orchestrator.dispatch(intent)
        return with_content(result)

    async def cluster_info(self) -> CommandResult:
        """Return rendered cluster connectivity information."""
        return with_content(await self._orchestrator.cluster_info())
