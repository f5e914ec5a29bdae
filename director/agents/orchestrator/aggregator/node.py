"""Result Aggregator: merges per-step outcomes into one markdown response.

Pure: no invocations, and the output depends only on the plan and its outcomes.
Sections always follow step-number order, never completion order.
"""

from __future__ import annotations

from director.agents.orchestrator.planner.contracts import Plan, PlanApproach, Step, StepStatus
from director.agents.roles import WORKER_ROLES

APPROACH_LABELS: dict[PlanApproach, str] = {
    PlanApproach.SINGLE: "Single agent",
    PlanApproach.SEQUENTIAL: "Sequential analysis",
    PlanApproach.PARALLEL: "Parallel analysis",
}

SECTION_SEPARATOR = "\n\n---\n\n"


def _step_body(step: Step) -> str:
    if step.status is StepStatus.COMPLETED:
        return step.result or "_No results_"
    if step.status is StepStatus.FAILED:
        return f"_Step failed: {step.error or 'unknown error'}_"
    return "_Not run: an earlier step failed._"


def aggregate(plan: Plan, outcomes: dict[int, Step]) -> str:
    """Format a plan's outcomes as one combined response.

    Args:
        plan: The executed plan.
        outcomes: Latest Step record per step number. Missing steps count as not run.

    Returns:
        Markdown text: task header, approach, workers, one section per step, and a
        closing summary when more than one step was executed.
    """
    agents = ", ".join(f"{WORKER_ROLES[w].emoji} {WORKER_ROLES[w].display_name}" for w in plan.workers)
    text = f"## 📋 Task: {plan.task}\n"
    text += f"**Approach:** {APPROACH_LABELS[plan.approach]}\n"
    text += f"**Agents used:** {agents}\n\n"
    text += "---\n\n"

    executed = completed = 0
    for planned in plan.steps:
        step = outcomes.get(planned.step_number, planned)
        role = WORKER_ROLES[step.worker]
        if step.status.is_terminal:
            executed += 1
        if step.status is StepStatus.COMPLETED:
            completed += 1
        text += f"### {role.emoji} {role.display_name} Analysis\n\n"
        text += _step_body(step)
        text += SECTION_SEPARATOR

    if executed > 1 and completed:
        text += "### 💡 Director Summary\n\n"
        noun = "agent" if completed == 1 else "agents"
        text += f"This analysis combined insights from {completed} specialized {noun}. "
        text += "Key findings are outlined above. Let me know if you'd like to dive deeper into any area."

    return text
