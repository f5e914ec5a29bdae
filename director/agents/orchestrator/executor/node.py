"""Plan Executor nodes.

Sequential and single plans run one `run_step` node per step in ascending step
order; parallel plans fan out one `run_parallel_step` branch per step with `Send`.
Every node returns new Step records keyed by step number; nothing is mutated.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from langgraph.types import Send

from director.agents.orchestrator.planner.contracts import Plan, PlanApproach, Step, StepStatus
from director.agents.types import CallerContext
from director.agents.workers.base import WorkerInvoker
from director.errors import InvocationTimeoutError, WorkerInvocationError

from .control import PLAN_DEADLINE_REASON, ExecutionControl

if TYPE_CHECKING:
    from director.agents.orchestrator.state import ExecutorState, ParallelStepState

logger = logging.getLogger(__name__)

DEPENDENCY_CONTEXT_HEADER = "\n\n**Context from previous analysis:**\n"
PREVIOUS_FINDINGS_HEADER = "\n\n**Previous agent findings:**\n"
DEPENDENCY_SEPARATOR = "\n\n---\n\n"


def splice_context(step: Step, outcomes: dict[int, Step]) -> str:
    """Build the action text a sequential step is invoked with.

    Declared dependencies splice in their results; otherwise the immediately
    preceding step's result is appended as ambient context.
    """
    if step.depends_on:
        results = [outcomes[n].result for n in step.depends_on if n in outcomes and outcomes[n].result]
        return f"{step.action}{DEPENDENCY_CONTEXT_HEADER}{DEPENDENCY_SEPARATOR.join(results)}"

    previous = outcomes.get(step.step_number - 1)
    if previous is not None and previous.result:
        return f"{step.action}{PREVIOUS_FINDINGS_HEADER}{previous.result}"
    return step.action


def execute_step(
    step: Step,
    action: str,
    invoker: WorkerInvoker,
    caller: CallerContext | None,
    control: ExecutionControl | None,
    include_activity: bool = False,
) -> Step:
    """Invoke the worker for one step and return its terminal record.

    Invocation failures become a failed step; they are never raised. An invocation
    that times out because the plan budget ran out cancels the whole plan.
    """
    if control is not None and control.check():
        logger.warning("Step %d (%s) cancelled before start", step.step_number, step.worker.value)
        return step.fail(f"Cancelled before start: {control.token.reason}")

    running = step.start()
    logger.info("Step %d (%s) started", step.step_number, step.worker.value)
    try:
        result = invoker.invoke(
            step.worker,
            action,
            caller,
            include_activity=include_activity,
            timeout_s=control.remaining() if control is not None else None,
            cancel_token=control.token if control is not None else None,
        )
    except WorkerInvocationError as e:
        e.for_step(step.step_number)
        if control is not None and isinstance(e, InvocationTimeoutError) and control.expired:
            control.cancel(PLAN_DEADLINE_REASON)
        logger.warning("Step %d (%s) failed: %s", step.step_number, step.worker.value, e)
        return running.fail(str(e))

    logger.info("Step %d (%s) completed in %dms", step.step_number, step.worker.value, result.execution_time_ms)
    return running.complete(result.text, tokens_used=result.tokens_used)


def prepare_execution(state: ExecutorState, plan_timeout_s: float | None = None) -> dict[str, Any]:
    """Seed one pending outcome per step and start the plan clock."""
    plan = state["plan"]
    return {
        "outcomes": {step.step_number: step for step in plan.steps},
        "cursor": 0,
        "control": state.get("control") or ExecutionControl(plan_timeout_s),
    }


def dispatch_steps(state: ExecutorState) -> str | list[Send]:
    """Route to the sequential loop, or fan out one branch per step for parallel plans."""
    plan = state["plan"]
    if plan.approach is not PlanApproach.PARALLEL:
        return "run_step"

    return [
        Send(
            "run_parallel_step",
            {
                "step": step,
                "caller": state.get("caller"),
                "include_activity": state.get("include_activity", False),
                "control": state.get("control"),
            },
        )
        for step in plan.steps
    ]


def run_step(state: ExecutorState, invoker: WorkerInvoker) -> dict[str, Any]:
    """Run the next step of a sequential (or single) plan."""
    plan = state["plan"]
    cursor = state.get("cursor", 0)
    outcomes = state.get("outcomes", {})
    step = outcomes.get(plan.steps[cursor].step_number, plan.steps[cursor])

    done = execute_step(
        step,
        splice_context(step, outcomes),
        invoker,
        state.get("caller"),
        state.get("control"),
        include_activity=state.get("include_activity", False) and step.step_number == 1,
    )
    return {"outcomes": {done.step_number: done}, "cursor": cursor + 1}


def route_after_step(state: ExecutorState) -> str:
    """Continue the sequential loop, or stop after the last step or the first failure."""
    plan = state["plan"]
    cursor = state.get("cursor", 0)
    outcomes = state.get("outcomes", {})
    if any(s.status is StepStatus.FAILED for s in outcomes.values()):
        remaining = len(plan.steps) - cursor
        if remaining:
            logger.warning("Aborting plan: %d step(s) not run after a failure", remaining)
        return "done"
    return "run_step" if cursor < len(plan.steps) else "done"


def run_parallel_step(state: ParallelStepState, invoker: WorkerInvoker) -> dict[str, Any]:
    """Run one independent step of a parallel plan (no dependency splicing)."""
    step = state["step"]
    done = execute_step(
        step,
        step.action,
        invoker,
        state.get("caller"),
        state.get("control"),
        include_activity=state.get("include_activity", False) and step.step_number == 1,
    )
    return {"outcomes": {done.step_number: done}}


def summarize_outcomes(plan: Plan, outcomes: dict[int, Step]) -> dict[StepStatus, int]:
    """Count steps per status (every plan step is counted, unrun ones as pending)."""
    counts = {status: 0 for status in StepStatus}
    for step in plan.steps:
        counts[outcomes.get(step.step_number, step).status] += 1
    return counts
