"""State definitions for the Director and Plan Executor graphs."""

from __future__ import annotations

from typing import Annotated, TypedDict

from director.agents.orchestrator.approval.contracts import ApprovalNotice
from director.agents.orchestrator.executor.control import ExecutionControl
from director.agents.orchestrator.planner.contracts import Plan, Step
from director.agents.orchestrator.router.contracts import RouteDecision
from director.agents.types import CallerContext, DirectorRequest, InvocationResult


def merge_outcomes(left: dict[int, Step] | None, right: dict[int, Step] | None) -> dict[int, Step]:
    """Reducer for step outcomes. Each writer owns its own step-number slot."""
    merged = dict(left or {})
    merged.update(right or {})
    return merged


class ExecutorState(TypedDict):
    """State for plan execution.

    Attributes:
        plan: The approved plan being executed.
        caller: Caller context forwarded to every worker.
        include_activity: Whether step 1 receives the caller's activity snapshot.
        control: Plan deadline and cancellation token.
        cursor: Index of the next step in sequential mode.
        outcomes: Latest Step record per step number (merged across parallel branches).
    """

    plan: Plan
    caller: CallerContext | None
    include_activity: bool
    control: ExecutionControl | None
    cursor: int
    outcomes: Annotated[dict[int, Step], merge_outcomes]


class ParallelStepState(TypedDict):
    """State passed to one parallel step branch."""

    step: Step
    caller: CallerContext | None
    include_activity: bool
    control: ExecutionControl | None


class DirectorState(TypedDict):
    """State for the full Director graph (routing through aggregation)."""

    request: DirectorRequest
    route: RouteDecision | None
    plan: Plan | None
    notice: ApprovalNotice | None
    direct_result: InvocationResult | None
    caller: CallerContext | None
    include_activity: bool
    control: ExecutionControl | None
    cursor: int
    outcomes: Annotated[dict[int, Step], merge_outcomes]
    text: str
