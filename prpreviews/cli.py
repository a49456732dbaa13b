"""Command-line interface for running preview commands locally.

Usage:
    prpreviews run "/preview myapp" --actor octocat --pr 42
    prpreviews cluster-info
    prpreviews services --repo-path .

Cluster access is configured with the same environment variables as the
runtime (``PRPREVIEWS_KUBECONFIG``, ``PRPREVIEWS_ALLOWED_ACTORS``, ...).
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import os
import sys
import typing as typ
from pathlib import Path

import msgspec
from cyclopts import App, Parameter

from prpreviews.api.health.resources import SERVICE_VERSION
from prpreviews.cluster.errors import ClusterConfigError
from prpreviews.logging import configure_logging, get_logger, log_warning
from prpreviews.manifests.discovery import scan_manifest_services
from prpreviews.previews.config import PreviewConfig
from prpreviews.previews.models import PreviewData

if typ.TYPE_CHECKING:
    from prpreviews.previews.dispatch import CommandDispatcher
    from prpreviews.previews.models import CommandResult

logger = get_logger(__name__)

OutputFormat = typ.Literal["markdown", "json"]

app = App(
    name="prpreviews",
    help="Chat-command driven pull request preview environments",
    version=SERVICE_VERSION,
)


def _configure_logging() -> None:
    raw = os.environ.get("PRPREVIEWS_LOG_LEVEL", "WARNING")
    normalized, invalid = configure_logging(raw)
    if invalid:
        log_warning(
            logger,
            "Invalid PRPREVIEWS_LOG_LEVEL %r, falling back to %s",
            raw,
            normalized,
        )


def _preview_config(repo_path: Path | None) -> PreviewConfig:
    config = PreviewConfig.from_env()
    if repo_path is None:
        return config
    return dc.replace(config, repo_path=repo_path)


def _build(repo_path: Path | None) -> CommandDispatcher | None:
    from prpreviews.api.factory import build_dispatcher

    try:
        return build_dispatcher(preview_config=_preview_config(repo_path))
    except ClusterConfigError as exc:
        print(f"Cannot reach the cluster: {exc}", file=sys.stderr)
        return None


def _emit(result: CommandResult, output: OutputFormat) -> None:
    if output == "json":
        print(msgspec.json.format(msgspec.json.encode(result), indent=2).decode())
    else:
        print(result.content, end="")


async def _run_command(
    dispatcher: CommandDispatcher,
    text: str,
    *,
    actor: str,
    pr: int,
    wait_ready: bool,
) -> CommandResult:
    tracker = dispatcher.orchestrator.readiness
    try:
        result = await dispatcher.handle(text, actor=actor, pr_number=pr)
        if wait_ready and isinstance(result.data, PreviewData):
            state = await tracker.wait(result.data.namespace)
            print(f"Readiness of {result.data.namespace}: {state}", file=sys.stderr)
        return result
    finally:
        await tracker.shutdown()


@app.command
def run(
    text: str,
    *,
    actor: typ.Annotated[str, Parameter(env_var="PRPREVIEWS_ACTOR")],
    pr: int,
    repo_path: typ.Annotated[
        Path | None, Parameter(env_var="PRPREVIEWS_REPO_PATH")
    ] = None,
    output: OutputFormat = "markdown",
    wait_ready: bool = False,
) -> int:
    """Run one chat command against the configured cluster.

    Parameters
    ----------
    text
        Comment text, for example ``"/preview myapp"``.
    actor
        Identity the command runs as.
    pr
        Pull request number.
    repo_path
        Repository checkout scanned for manifests.
    output
        Print the rendered Markdown or the full result as JSON.
    wait_ready
        After ``/preview``, wait for the readiness check before exiting.

    """
    _configure_logging()
    dispatcher = _build(repo_path)
    if dispatcher is None:
        return 1
    result = asyncio.run(
        _run_command(dispatcher, text, actor=actor, pr=pr, wait_ready=wait_ready)
    )
    _emit(result, output)
    return 0 if result.success else 1


@app.command(name="cluster-info")
def cluster_info(*, output: OutputFormat = "markdown") -> int:
    """Test connectivity and print cluster counts.

    Parameters
    ----------
    output
        Print the rendered Markdown or the full result as JSON.

    """
    _configure_logging()
    dispatcher = _build(None)
    if dispatcher is None:
        return 1
    result = asyncio.run(dispatcher.cluster_info())
    _emit(result, output)
    return 0 if result.success else 1


@app.command
def services(
    *,
    repo_path: typ.Annotated[Path, Parameter(env_var="PRPREVIEWS_REPO_PATH")] = Path(),
    output: OutputFormat = "markdown",
) -> int:
    """List manifest-backed services found in a repository checkout.

    Parameters
    ----------
    repo_path
        Repository root to scan.
    output
        Print a bullet list or JSON.

    """
    found = scan_manifest_services(repo_path)
    if output == "json":
        print(msgspec.json.format(msgspec.json.encode(found), indent=2).decode())
        return 0
    if not found:
        print(f"No manifest-backed services under {repo_path}")
        return 0
    for service in found:
        print(f"- {service.name} ({service.path})")
    return 0


def main() -> int:
    """Entry point for the CLI."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
