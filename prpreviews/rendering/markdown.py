"""Markdown renderer for command results.

Turns a :class:`~prpreviews.previews.models.CommandResult` into the comment
body posted back to the pull request. The renderer reads only the structured
result; it never touches the cluster or the filesystem.

Usage
-----
>>> from prpreviews.rendering import render_result_markdown
>>> md = render_result_markdown(result)
>>> rendered = with_content(result)
>>> rendered.content == md
True

"""

from __future__ import annotations

import typing as typ

import msgspec

from prpreviews.previews.models import (
    CleanupData,
    ClusterData,
    FailureData,
    HelpData,
    PlanData,
    PreviewData,
    ReadinessState,
    ResultCode,
    StatusData,
)

if typ.TYPE_CHECKING:
    from prpreviews.previews.models import CommandResult, NamespaceStatus

_COMMAND_USAGE: dict[str, str] = {
    "help": "`/help` - show this message",
    "status": "`/status` - show preview environments for this PR",
    "plan": "`/plan [service]` - show what `/preview` would deploy",
    "preview": "`/preview [service]` - deploy a preview environment",
    "cleanup": "`/cleanup` - delete every preview environment for this PR",
}

_FAILURE_TITLES: dict[ResultCode, str] = {
    ResultCode.UNKNOWN_COMMAND: "Unknown command",
    ResultCode.PERMISSION_DENIED: "Permission denied",
    ResultCode.NAMESPACE_CREATE_FAILED: "Namespace creation failed",
    ResultCode.WORKLOAD_DEPLOY_FAILED: "Workload deployment failed",
    ResultCode.SERVICE_CREATE_FAILED: "Service creation failed",
    ResultCode.MANIFEST_PARSE_FAILED: "Manifest could not be read",
    ResultCode.MANIFEST_APPLY_FAILED: "Manifest apply failed",
    ResultCode.SERVICE_NOT_FOUND: "Service not found",
    ResultCode.CLEANUP_FAILED: "Cleanup failed",
    ResultCode.STATUS_QUERY_FAILED: "Status query failed",
    ResultCode.CLUSTER_UNAVAILABLE: "Cluster unavailable",
}

_READINESS_LABELS: dict[ReadinessState, str] = {
    ReadinessState.PENDING: "waiting for pods",
    ReadinessState.READY: "ready",
    ReadinessState.TIMED_OUT: "not ready before timeout",
    ReadinessState.FAILED: "readiness check failed",
    ReadinessState.CANCELLED: "readiness check cancelled",
}


def _render_bullet_section(lines: list[str], heading: str, items: list[str]) -> None:
    """Append a bulleted section if items are non-empty."""
    if items:
        lines.append(f"### {heading}")
        lines.append("")
        lines.extend(f"- {item}" for item in items)
        lines.append("")


def _code_list(items: list[str]) -> list[str]:
    return [f"`{item}`" for item in items]


def _render_help(lines: list[str], data: HelpData) -> None:
    lines.append("## pr-previews commands")
    lines.append("")
    lines.extend(
        f"- {_COMMAND_USAGE.get(command, f'`/{command}`')}"
        for command in data.available_commands
    )
    lines.append("")
    deploy = "yes" if data.user_permissions.can_deploy else "no"
    lines.append(f"**Can deploy:** {deploy}")
    lines.append("")
    services = [f"`{data.default_service}` (default)"]
    services.extend(f"`{service.name}` ({service.path})" for service in data.services)
    _render_bullet_section(lines, "Available services", services)


def _workload_line(status: NamespaceStatus) -> str:
    workload = status.workload
    if workload is None:
        return "none"
    pods = ", ".join(
        f"{pod.name} ({pod.phase or 'Unknown'}{', ready' if pod.ready else ''})"
        for pod in workload.pods
    )
    line = f"{workload.ready}/{workload.total} ready"
    return f"{line}; pods: {pods}" if pods else line


def _service_line(status: NamespaceStatus) -> str:
    service = status.service
    if service is None:
        return "none"
    ports = ", ".join(
        f"{port.port}/{port.protocol or 'TCP'}" for port in service.ports
    )
    kind = service.type or "ClusterIP"
    return f"{kind} {service.cluster_ip or '-'} ({ports or 'no ports'})"


def _render_status(lines: list[str], data: StatusData) -> None:
    lines.append(f"## Preview environments for PR #{data.pr_number}")
    lines.append("")
    if not data.active_previews:
        lines.append("No preview environments are running.")
        lines.append("Use `/preview` to create one.")
        lines.append("")
        return
    for status in data.active_previews:
        record = status.namespace
        lines.append(f"### {record.service}")
        lines.append("")
        lines.append(f"- **Namespace:** `{record.name}`")
        if record.created_at:
            lines.append(f"- **Created:** {record.created_at}")
        lines.append(f"- **Workload:** {_workload_line(status)}")
        lines.append(f"- **Service:** {_service_line(status)}")
        if status.readiness is not None:
            lines.append(f"- **Readiness:** {_READINESS_LABELS[status.readiness]}")
        lines.extend(f"- **Issue:** {issue}" for issue in status.issues)
        lines.append("")


def _render_plan(lines: list[str], data: PlanData) -> None:
    lines.append(f"## Deployment plan for `{data.service}`")
    lines.append("")
    lines.append(f"- **Method:** {data.method}")
    if data.namespace:
        lines.append(f"- **Namespace:** `{data.namespace}`")
    if data.manifest_path:
        lines.append(f"- **Manifest:** `{data.manifest_path}`")
    lines.append("")
    _render_bullet_section(lines, "Resources", _code_list(data.resources))
    _render_bullet_section(
        lines,
        "Skipped documents",
        [f"#{doc.index}: {doc.detail}" for doc in data.skipped],
    )
    _render_bullet_section(lines, "Known services", _code_list(data.known_services))
    if not data.can_deploy:
        lines.append("*You are not allowed to run `/preview`.*")
        lines.append("")


def _render_preview(lines: list[str], data: PreviewData) -> None:
    lines.append(f"## Deploying `{data.service}`")
    lines.append("")
    lines.append(f"- **Namespace:** `{data.namespace}`")
    lines.append(f"- **Method:** {data.deployment_method}")
    if data.manifest_path:
        lines.append(f"- **Manifest:** `{data.manifest_path}`")
    lines.append(f"- **Status:** {data.status}")
    lines.append("")
    _render_bullet_section(
        lines, "Deployed resources", _code_list(data.deployed_resources)
    )
    _render_bullet_section(
        lines,
        "Skipped documents",
        [f"#{doc.index}: {doc.detail}" for doc in data.skipped],
    )
    lines.append("Use `/status` to follow progress.")
    lines.append("")


def _render_cleanup(lines: list[str], data: CleanupData) -> None:
    lines.append(f"## Cleanup for PR #{data.pr_number}")
    lines.append("")
    if not data.cleaned_namespaces:
        lines.append("Nothing to clean up.")
        lines.append("")
        return
    _render_bullet_section(
        lines, "Deleted namespaces", _code_list(data.cleaned_namespaces)
    )


def _render_cluster(lines: list[str], data: ClusterData) -> None:
    info = data.info
    lines.append("## Cluster")
    lines.append("")
    lines.append(f"- **Server version:** {info.server_version}")
    lines.append(f"- **Nodes:** {info.nodes_count}")
    lines.append(f"- **Namespaces:** {info.namespaces_count}")
    lines.append(f"- **Preview namespaces:** {info.preview_namespaces}")
    lines.append("")


def _render_failure(lines: list[str], code: ResultCode, data: FailureData) -> None:
    lines.append(f"## {_FAILURE_TITLES.get(code, 'Command failed')}")
    lines.append("")
    lines.append(data.cause)
    lines.append("")
    if data.namespace:
        lines.append(f"- **Namespace:** `{data.namespace}`")
    if data.failed_resource:
        lines.append(f"- **Failed resource:** `{data.failed_resource}`")
    if data.namespace or data.failed_resource:
        lines.append("")
    _render_bullet_section(
        lines, "Applied before failure", _code_list(data.applied_resources)
    )
    _render_bullet_section(
        lines, "Already deleted", _code_list(data.cleaned_namespaces)
    )
    _render_bullet_section(lines, "Known services", _code_list(data.known_services))
    _render_bullet_section(lines, "Next steps", data.hints)


def render_result_markdown(result: CommandResult) -> str:
    """Render a command result as a Markdown comment body.

    Parameters
    ----------
    result
        Structured result returned by the orchestrator or dispatcher.

    Returns
    -------
    str
        Markdown text ending with a single newline.

    """
    lines: list[str] = [f"**{result.summary}**", ""]
    match result.data:
        case HelpData() as data:
            _render_help(lines, data)
        case StatusData() as data:
            _render_status(lines, data)
        case PlanData() as data:
            _render_plan(lines, data)
        case PreviewData() as data:
            _render_preview(lines, data)
        case CleanupData() as data:
            _render_cleanup(lines, data)
        case ClusterData() as data:
            _render_cluster(lines, data)
        case FailureData() as data:
            _render_failure(lines, result.code, data)

    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines) + "\n"


def with_content(result: CommandResult) -> CommandResult:
    """Return ``result`` with ``content`` set to its rendered Markdown."""
    return msgspec.structs.replace(result, content=render_result_markdown(result))
