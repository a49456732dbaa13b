"""GitHub webhook resource.

``POST /webhook/github`` accepts ``issue_comment`` deliveries, runs the
command found in the comment body and answers with the command result as
JSON, including the rendered Markdown in ``content``.

When a webhook secret is configured, deliveries must carry a valid
``X-Hub-Signature-256`` header (HMAC-SHA256 of the raw body).
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import typing as typ

import falcon
import msgspec

from prpreviews.api.errors import InvalidInputError, WebhookSignatureError
from prpreviews.api.webhook.models import IssueCommentEvent
from prpreviews.logging import get_logger, log_info, log_warning

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from prpreviews.previews.dispatch import CommandDispatcher

__all__ = ["GitHubWebhookResource", "compute_signature", "verify_signature"]

logger = get_logger(__name__)

_SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    """Return the ``X-Hub-Signature-256`` value for ``body``."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{_SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str, body: bytes, header: str | None) -> None:
    """Check ``header`` against the HMAC of ``body``.

    Raises
    ------
    WebhookSignatureError
        If the header is missing or does not match.

    """
    if not header:
        raise WebhookSignatureError.missing()
    if not hmac.compare_digest(compute_signature(secret, body), header):
        raise WebhookSignatureError.mismatch()


class GitHubWebhookResource:
    """Resource handling GitHub ``issue_comment`` deliveries.

    Parameters
    ----------
    dispatcher
        Runs the command found in the comment.
    secret
        Shared webhook secret; signature checks are skipped when ``None``.
    command_timeout
        Seconds a command may run before the request is abandoned with 504.
        Cancellation propagates into every in-flight cluster call.

    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        *,
        secret: str | None = None,
        command_timeout: float | None = None,
    ) -> None:
        """Configure the resource."""
        self._dispatcher = dispatcher
        self._secret = secret
        self._command_timeout = command_timeout

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /webhook/github requests."""
        body = await req.stream.read()
        if self._secret is not None:
            verify_signature(
                self._secret, body, req.get_header("X-Hub-Signature-256")
            )

        event_type = req.get_header("X-GitHub-Event") or ""
        if event_type == "ping":
            resp.media = {"status": "pong"}
            resp.status = falcon.HTTP_200
            return
        if event_type != "issue_comment":
            self._ignore(resp, f"unsupported event {event_type or 'none'}")
            return

        try:
            event = msgspec.json.decode(body, type=IssueCommentEvent)
        except msgspec.DecodeError as exc:
            raise InvalidInputError(str(exc), field="body") from exc

        if event.action != "created":
            self._ignore(resp, f"comment {event.action}")
            return
        if not event.issue.is_pull_request:
            self._ignore(resp, "not a pull request")
            return

        log_info(
            logger,
            "Comment from %s on PR #%d",
            event.comment.user.login,
            event.issue.number,
        )
        try:
            async with asyncio.timeout(self._command_timeout):
                result = await self._dispatcher.handle(
                    event.comment.body,
                    actor=event.comment.user.login,
                    pr_number=event.issue.number,
                )
        except TimeoutError as exc:
            log_warning(
                logger,
                "Command on PR #%d exceeded %s seconds",
                event.issue.number,
                self._command_timeout,
            )
            raise falcon.HTTPGatewayTimeout(
                description="command did not finish in time"
            ) from exc

        resp.media = msgspec.to_builtins(result)
        resp.status = falcon.HTTP_200

    @staticmethod
    def _ignore(resp: Response, reason: str) -> None:
        resp.media = {"status": "ignored", "reason": reason}
        resp.status = falcon.HTTP_202
