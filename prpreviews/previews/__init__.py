"""Preview environment orchestration.

Public API
----------
PreviewOrchestrator
    Runs help, status, plan, preview and cleanup against a cluster gateway.
ReadinessTracker
    Owns the background readiness waits started by ``/preview``.
AllowListPolicy
    Deployment policy backed by a fixed set of actors.
CommandResult
    Structured outcome returned by every command.
"""

from __future__ import annotations

from prpreviews.previews.config import PreviewConfig
from prpreviews.previews.models import (
    ActorPermissions,
    CleanupData,
    ClusterData,
    CommandResult,
    DeploymentMethod,
    FailureData,
    HelpData,
    NamespaceStatus,
    PlanData,
    PreviewData,
    ReadinessState,
    ResultCode,
    ResultData,
    StatusData,
)
from prpreviews.previews.observability import PreviewEventLogger, PreviewEventType
from prpreviews.previews.permissions import AllowListPolicy, DeploymentPolicy
from prpreviews.previews.readiness import ReadinessTracker
from prpreviews.previews.service import (
    PreviewOrchestrator,
    PreviewOrchestratorDependencies,
    ResolvedTarget,
)

__all__ = [
    "ActorPermissions",
    "AllowListPolicy",
    "CleanupData",
    "ClusterData",
    "CommandResult",
    "DeploymentMethod",
    "DeploymentPolicy",
    "FailureData",
    "HelpData",
    "NamespaceStatus",
    "PlanData",
    "PreviewConfig",
    "PreviewData",
    "PreviewEventLogger",
    "PreviewEventType",
    "PreviewOrchestrator",
    "PreviewOrchestratorDependencies",
    "ReadinessState",
    "ReadinessTracker",
    "ResolvedTarget",
    "ResultCode",
    "ResultData",
    "StatusData",
]
