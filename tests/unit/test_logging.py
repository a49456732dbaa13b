"""Unit tests for the femtologging helpers."""

from __future__ import annotations

import pytest

from prpreviews.logging import (
    configure_logging,
    log_debug,
    log_exception,
    log_info,
    log_warning,
    normalize_log_level,
)


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("warning", ("WARNING", False)),
        (" trace ", ("TRACE", False)),
        (None, ("INFO", True)),
        ("", ("INFO", True)),
        ("verbose", ("INFO", True)),
    ],
)
def test_normalize_log_level(raw: str | None, expected: tuple[str, bool]) -> None:
    """Known levels are upper-cased; anything else falls back to INFO."""
    assert normalize_log_level(raw) == expected, f"unexpected result for {raw!r}"


def test_helpers_format_before_emitting() -> None:
    """Templates are interpolated and tagged with the right level."""
    logger = _FakeLogger()
    exc = ValueError("boom")

    log_debug(logger, "polling %s", "web")
    log_info(logger, "created %s for PR #%d", "preview-pr-7-web", 7)
    log_warning(logger, "skipped %d documents", 2, exc_info=exc)

    assert logger.calls == [
        ("DEBUG", "polling web", None, False),
        ("INFO", "created preview-pr-7-web for PR #7", None, False),
        ("WARNING", "skipped 2 documents", exc, False),
    ]


def test_log_exception_does_not_interpolate() -> None:
    """Messages passed to log_exception are emitted verbatim."""
    logger = _FakeLogger()
    exc = RuntimeError("bug")

    log_exception(logger, "wait for 100% of pods crashed", exc)

    assert logger.calls == [("ERROR", "wait for 100% of pods crashed", exc, False)]


@pytest.mark.parametrize(
    ("raw", "expected_level", "expected_invalid"),
    [("DEBUG", "DEBUG", False), ("nope", "INFO", True)],
)
def test_configure_logging(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    expected_level: str,
    expected_invalid: bool,  # noqa: FBT001
) -> None:
    """configure_logging passes the normalized level to basicConfig."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("prpreviews.logging.basicConfig", fake_basic_config)

    assert configure_logging(raw) == (expected_level, expected_invalid)
    assert captured == {"level": expected_level, "force": False}
