"""Typed command intents produced by the grammar."""

from __future__ import annotations

import enum

import msgspec


class CommandKind(enum.StrEnum):
    """Slash commands understood in pull request comments."""

    HELP = "help"
    STATUS = "status"
    PLAN = "plan"
    PREVIEW = "preview"
    CLEANUP = "cleanup"


class Intent(msgspec.Struct, kw_only=True, frozen=True):
    """A parsed command together with who issued it and where.

    Attributes
    ----------
    kind
        Which command was issued.
    target
        Service name supplied after ``/plan`` or ``/preview``, exactly as
        typed. ``None`` means the default service (or "all").
    actor
        Identity of the commenter, e.g. a GitHub login.
    pr
        Pull request number the comment was posted on.

    """

    kind: CommandKind
    actor: str
    pr: int
    target: str | None = None
