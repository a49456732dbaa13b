"""Domain exceptions and Falcon error handlers for the API layer.

Usage
-----
Register error handlers on the Falcon app::

    from prpreviews.api.errors import (
        InvalidInputError,
        WebhookSignatureError,
        handle_invalid_input,
        handle_webhook_signature,
    )

    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(WebhookSignatureError, handle_webhook_signature)

"""

from __future__ import annotations

import typing as typ

import falcon

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = [
    "InvalidInputError",
    "WebhookSignatureError",
    "handle_invalid_input",
    "handle_webhook_signature",
]


class InvalidInputError(Exception):
    """Raised for client validation errors that should map to HTTP 400.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.
    field
        Optional name of the input field that failed validation.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a validation reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


class WebhookSignatureError(Exception):
    """Raised when a webhook delivery fails HMAC verification."""

    @classmethod
    def missing(cls) -> WebhookSignatureError:
        """Return an error for a delivery without a signature header."""
        return cls("missing X-Hub-Signature-256 header")

    @classmethod
    def mismatch(cls) -> WebhookSignatureError:
        """Return an error for a signature that does not match the body."""
        return cls("signature does not match payload")


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid input",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_webhook_signature(
    _req: Request,
    resp: Response,
    ex: WebhookSignatureError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``WebhookSignatureError`` to an HTTP 401 JSON response."""
    resp.status = falcon.HTTP_401
    resp.media = {
        "title": "Invalid signature",
        "description": str(ex),
    }
