"""Deployment permission policies."""

from __future__ import annotations

import dataclasses as dc
import typing as typ


@typ.runtime_checkable
class DeploymentPolicy(typ.Protocol):
    """Decide whether an actor may create or delete previews."""

    def can_deploy(self, actor: str) -> bool:
        """Return True when ``actor`` may run ``/preview`` and ``/cleanup``."""
        ...


@dc.dataclass(frozen=True, slots=True)
class AllowListPolicy:
    """Permit exactly the actors in a fixed set.

    Examples
    --------
    >>> policy = AllowListPolicy(frozenset({"octocat"}))
    >>> policy.can_deploy("octocat"), policy.can_deploy("mallory")
    (True, False)

    """

    allowed: frozenset[str] = frozenset()

    def can_deploy(self, actor: str) -> bool:
        """Return True when ``actor`` is on the allow-list."""
        return actor in self.allowed
