"""Emit structured observability events for preview command execution.

Events are single log lines of the form ``[event.type] key=value ...`` so
they can be grepped and parsed without a structured log backend.

Usage
-----
>>> event_logger = PreviewEventLogger()
>>> event_logger.log_preview_started(
...     pr_number=7, actor="octocat", service="myapp", namespace="preview-pr-7-myapp"
... )

"""

from __future__ import annotations

import enum

from prpreviews.logging import get_logger, log_info, log_warning

logger = get_logger(__name__)


class PreviewEventType(enum.StrEnum):
    """Structured log event types for preview commands."""

    COMMAND_RECEIVED = "previews.command.received"
    COMMAND_REJECTED = "previews.command.rejected"
    PERMISSION_DENIED = "previews.permission.denied"
    PREVIEW_STARTED = "previews.preview.started"
    PREVIEW_COMPLETED = "previews.preview.completed"
    PREVIEW_FAILED = "previews.preview.failed"
    CLEANUP_COMPLETED = "previews.cleanup.completed"
    CLEANUP_FAILED = "previews.cleanup.failed"
    STATUS_FAILED = "previews.status.failed"
    READINESS_FINISHED = "previews.readiness.finished"


class PreviewEventLogger:
    """Emit structured preview events via femtologging."""

    def log_command_received(self, *, kind: str, actor: str, pr_number: int) -> None:
        """Log a parsed command before it is dispatched."""
        log_info(
            logger,
            "[%s] kind=%s actor=%s pr=%d",
            PreviewEventType.COMMAND_RECEIVED,
            kind,
            actor,
            pr_number,
        )

    def log_command_rejected(self, *, actor: str, pr_number: int, text: str) -> None:
        """Log comment text that did not match any command."""
        log_info(
            logger,
            "[%s] actor=%s pr=%d text=%r",
            PreviewEventType.COMMAND_REJECTED,
            actor,
            pr_number,
            text,
        )

    def log_permission_denied(self, *, kind: str, actor: str, pr_number: int) -> None:
        """Log an actor outside the deployment policy."""
        log_warning(
            logger,
            "[%s] kind=%s actor=%s pr=%d",
            PreviewEventType.PERMISSION_DENIED,
            kind,
            actor,
            pr_number,
        )

    def log_preview_started(
        self, *, pr_number: int, actor: str, service: str, namespace: str
    ) -> None:
        """Log the start of a provisioning run."""
        log_info(
            logger,
            "[%s] pr=%d actor=%s service=%s namespace=%s",
            PreviewEventType.PREVIEW_STARTED,
            pr_number,
            actor,
            service,
            namespace,
        )

    def log_preview_completed(
        self,
        *,
        pr_number: int,
        namespace: str,
        method: str,
        resources: list[str],
    ) -> None:
        """Log a provisioning run whose resources the cluster accepted.

        Parameters
        ----------
        pr_number
            Pull request the preview belongs to.
        namespace
            Preview namespace.
        method
            ``default`` or ``manifest``.
        resources
            ``Kind/name`` of every created resource.

        """
        log_info(
            logger,
            "[%s] pr=%d namespace=%s method=%s resources=%s",
            PreviewEventType.PREVIEW_COMPLETED,
            pr_number,
            namespace,
            method,
            ",".join(resources) or "-",
        )

    def log_preview_failed(
        self, *, pr_number: int, service: str, code: str, cause: str
    ) -> None:
        """Log a provisioning run that stopped at a failing step."""
        log_warning(
            logger,
            "[%s] pr=%d service=%s code=%s cause=%s",
            PreviewEventType.PREVIEW_FAILED,
            pr_number,
            service,
            code,
            cause,
        )

    def log_cleanup_completed(self, *, pr_number: int, namespaces: list[str]) -> None:
        """Log a finished teardown."""
        log_info(
            logger,
            "[%s] pr=%d total=%d namespaces=%s",
            PreviewEventType.CLEANUP_COMPLETED,
            pr_number,
            len(namespaces),
            ",".join(namespaces) or "-",
        )

    def log_cleanup_failed(
        self, *, pr_number: int, cleaned: list[str], cause: str
    ) -> None:
        """Log a teardown that stopped part way."""
        log_warning(
            logger,
            "[%s] pr=%d cleaned=%s cause=%s",
            PreviewEventType.CLEANUP_FAILED,
            pr_number,
            ",".join(cleaned) or "-",
            cause,
        )

    def log_status_failed(self, *, pr_number: int, cause: str) -> None:
        """Log a status query whose namespace listing failed."""
        log_warning(
            logger,
            "[%s] pr=%d cause=%s",
            PreviewEventType.STATUS_FAILED,
            pr_number,
            cause,
        )

    def log_readiness_finished(
        self, *, namespace: str, state: str, detail: str | None = None
    ) -> None:
        """Log the outcome of a background readiness wait."""
        log_info(
            logger,
            "[%s] namespace=%s state=%s detail=%s",
            PreviewEventType.READINESS_FINISHED,
            namespace,
            state,
            detail or "-",
        )
