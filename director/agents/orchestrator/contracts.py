"""Pydantic contracts for the Director.

Re-exports contracts from the specific node submodules.
"""

from __future__ import annotations

from director.agents.orchestrator.approval.contracts import DEFAULT_APPROVAL_REASON, ApprovalNotice
from director.agents.orchestrator.planner.contracts import (
    DraftStep,
    Plan,
    PlanApproach,
    PlanDraft,
    Step,
    StepStatus,
)
from director.agents.orchestrator.router.contracts import RouteDecision

__all__ = [
    "DEFAULT_APPROVAL_REASON",
    "ApprovalNotice",
    "DraftStep",
    "Plan",
    "PlanApproach",
    "PlanDraft",
    "RouteDecision",
    "Step",
    "StepStatus",
]
