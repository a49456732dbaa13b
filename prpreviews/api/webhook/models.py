"""Subset of the GitHub ``issue_comment`` webhook payload."""

from __future__ import annotations

import typing as typ

import msgspec


class GitHubUser(msgspec.Struct, frozen=True):
    """Comment author."""

    login: str


class IssueComment(msgspec.Struct, frozen=True):
    """The comment that triggered the delivery."""

    body: str
    user: GitHubUser


class Issue(msgspec.Struct, frozen=True):
    """The issue or pull request the comment was posted on.

    GitHub models pull requests as issues; ``pull_request`` is present only
    for comments on pull requests.
    """

    number: int
    pull_request: dict[str, typ.Any] | None = None

    @property
    def is_pull_request(self) -> bool:
        """Return True when the comment belongs to a pull request."""
        return self.pull_request is not None


class IssueCommentEvent(msgspec.Struct, frozen=True):
    """An ``issue_comment`` delivery."""

    action: str
    comment: IssueComment
    issue: Issue
