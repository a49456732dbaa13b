"""Naming helpers for preview namespaces and their labels.

Service names arrive from chat comments and may contain ``/`` (for example
``ai/open-webui``) and upper-case letters, neither of which Kubernetes
accepts in namespace names or label values. Everything that turns a service
name into a cluster identifier goes through this module so the namespace
name, the ``service`` label and the default workload name always agree.
"""

from __future__ import annotations

import re

NAMESPACE_PREFIX = "preview-pr"
MANAGED_BY = "pr-previews"

# RFC 1123 label: at most 63 characters
_MAX_DNS_LABEL = 63
_INVALID_CHARS = re.compile(r"[^a-z0-9-]+")


def sanitize_service_name(service: str) -> str:
    """Return a DNS-1123 compatible form of ``service``.

    Parameters
    ----------
    service:
        Raw service name as typed in the command.

    Returns
    -------
    str
        Lower-cased name with ``/`` and any other unsupported characters
        replaced by ``-``, trimmed of leading and trailing dashes.

    Raises
    ------
    ValueError
        If nothing usable remains after sanitising.

    Examples
    --------
    >>> sanitize_service_name("ai/Open-WebUI")
    'ai-open-webui'

    """
    cleaned = _INVALID_CHARS.sub("-", service.lower()).strip("-")
    cleaned = cleaned[:_MAX_DNS_LABEL].rstrip("-")
    if not cleaned:
        msg = f"Service name {service!r} has no DNS-compatible characters"
        raise ValueError(msg)
    return cleaned


def preview_namespace_name(pr_number: int, service: str) -> str:
    """Build the deterministic namespace name for a (PR, service) pair.

    Examples
    --------
    >>> preview_namespace_name(42, "ai/open-webui")
    'preview-pr-42-ai-open-webui'

    """
    name = f"{NAMESPACE_PREFIX}-{pr_number}-{sanitize_service_name(service)}"
    return name[:_MAX_DNS_LABEL].rstrip("-")


def preview_selector(pr_number: int | None = None) -> str:
    """Return the label selector matching preview namespaces.

    Examples
    --------
    >>> preview_selector()
    'preview=true'
    >>> preview_selector(7)
    'preview=true,pr-number=7'

    """
    if pr_number is None:
        return "preview=true"
    return f"preview=true,pr-number={pr_number}"


def resource_id(kind: str, name: str) -> str:
    """Return the ``Kind/name`` identifier used in deployment summaries."""
    return f"{kind}/{name}"
