"""Chat command grammar.

Public API
----------
parse_command
    Parse comment text into an :class:`Intent`.
Intent
    Immutable parsed command (kind, target, actor, PR number).
CommandKind
    The five supported command words.
UnknownCommandError
    Raised for comments that are not commands.
"""

from __future__ import annotations

from prpreviews.commands.errors import CommandError, UnknownCommandError
from prpreviews.commands.grammar import available_commands, parse_command
from prpreviews.commands.models import CommandKind, Intent

__all__ = [
    "CommandError",
    "CommandKind",
    "Intent",
    "UnknownCommandError",
    "available_commands",
    "parse_command",
]
