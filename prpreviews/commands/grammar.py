"""Slash-command grammar for pull request comments.

Five commands are recognised. ``/plan`` and ``/preview`` take an optional
target token drawn from ``[A-Za-z0-9/-]``; the other three take nothing. The
whole stripped comment must match, so prose that merely mentions a command
is ignored.

Usage
-----
>>> from prpreviews.commands.grammar import parse_command
>>> parse_command("/preview ai/open-webui", "octocat", 12).target
'ai/open-webui'

"""

from __future__ import annotations

import re
import typing as typ

from prpreviews.commands.errors import UnknownCommandError
from prpreviews.commands.models import CommandKind, Intent

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_TARGET = r"(?:\s+(?P<target>[A-Za-z0-9/-]+))?"

COMMAND_PATTERNS: typ.Final[cabc.Mapping[CommandKind, re.Pattern[str]]] = {
    CommandKind.HELP: re.compile(r"/help\s*"),
    CommandKind.STATUS: re.compile(r"/status\s*"),
    CommandKind.PLAN: re.compile(rf"/plan{_TARGET}\s*"),
    CommandKind.PREVIEW: re.compile(rf"/preview{_TARGET}\s*"),
    CommandKind.CLEANUP: re.compile(r"/cleanup\s*"),
}


def parse_command(text: str, actor: str, pr: int) -> Intent:
    """Parse comment text into an :class:`Intent`.

    Parameters
    ----------
    text
        Raw comment body.
    actor
        Identity of the commenter.
    pr
        Pull request number.

    Returns
    -------
    Intent
        The recognised command with its optional target.

    Raises
    ------
    UnknownCommandError
        If the stripped text does not fully match exactly one command.

    """
    comment = text.strip()
    # Keywords are distinct, so a second match would mean an ambiguous grammar.
    matches = [
        (kind, match)
        for kind, pattern in COMMAND_PATTERNS.items()
        if (match := pattern.fullmatch(comment)) is not None
    ]
    if len(matches) != 1:
        raise UnknownCommandError(text)

    kind, match = matches[0]
    target = match.groupdict().get("target")
    return Intent(kind=kind, target=target or None, actor=actor, pr=pr)


def available_commands() -> list[str]:
    """Return the supported command words in declaration order."""
    return [kind.value for kind in COMMAND_PATTERNS]
