"""Errors raised while parsing chat commands."""

from __future__ import annotations


class CommandError(Exception):
    """Base class for command grammar errors."""


class UnknownCommandError(CommandError):
    """Raised when comment text matches none of the supported commands.

    Attributes
    ----------
    text
        The raw comment text, kept for diagnostic display.

    """

    def __init__(self, text: str) -> None:
        """Initialise with the raw, unmatched comment text."""
        self.text = text
        super().__init__(f"unknown command: {text.strip()}")
