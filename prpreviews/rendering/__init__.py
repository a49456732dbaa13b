"""Markdown rendering of command results."""

from __future__ import annotations

from prpreviews.rendering.markdown import render_result_markdown, with_content

__all__ = ["render_result_markdown", "with_content"]
