"""Plan Builder node.

Asks the planner model (low temperature) to decompose a request into a structured
plan, validates the answer and falls back to a keyword-routed single-step plan on
any planning problem. Planning errors never reach the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from director.agents.roles import plan_eligible_roles
from director.agents.types import CallerContext
from director.agents.workers.deadline import call_with_deadline
from director.agents.workers.llm_worker import response_text
from director.errors import PlanValidationError

from .contracts import Plan, PlanDraft
from .utils import extract_json_object, fallback_plan, normalize_plan

logger = logging.getLogger(__name__)


_PLANNING_SYSTEM_PROMPT = """You are the Director, analyzing a user request to decide how specialized workers should handle it.

Available workers:
{roles}

Respond ONLY with JSON in the following schema, no markdown or explanation:
{{
  "task": "Brief restatement of the request",
  "approach": "single" | "sequential" | "parallel",
  "steps": [
    {{
      "step_number": 1,
      "worker": "{example_worker}",
      "action": "What this worker should do",
      "depends_on": []
    }}
  ],
  "requires_approval": false,
  "approval_reason": null
}}

Rules:
- Use "single" if one worker can answer the request (exactly one step, no dependencies).
- Use "sequential" if workers must pass results to each other; list steps in execution order and
  set depends_on to the step numbers whose results a step needs.
- Use "parallel" if the steps are independent of each other (no depends_on).
- Set requires_approval=true, with a short approval_reason, for any plan that would persist data
  changes, modify user-facing configuration, or call external integrations with side effects
  (database changes, UI modifications, external integrations, data deletion).
- Valid worker values: {worker_values}
- Use at most {max_steps} steps. Keep steps minimal; do not over-engineer.
"""


def build_planning_prompt(max_steps: int = 6, agents_dir: str | Path | None = None) -> str:
    """Build the planner system prompt (pure helper for tests)."""
    roles = plan_eligible_roles(agents_dir)
    lines = []
    for index, role in enumerate(roles, start=1):
        line = f"{index}. **{role.display_name}** {role.emoji} (`{role.worker_type.value}`) - {role.description}"
        if role.capabilities:
            line += f". Capabilities: {', '.join(role.capabilities)}"
        lines.append(line)
    return _PLANNING_SYSTEM_PROMPT.format(
        roles="\n".join(lines),
        example_worker=roles[0].worker_type.value,
        worker_values=", ".join(f'"{r.worker_type.value}"' for r in roles),
        max_steps=max_steps,
    )


def _build_planning_human_prompt(message: str, caller: CallerContext | None) -> str:
    """Build the human prompt (pure helper for tests)."""
    role = caller.role if caller is not None else "unknown"
    return f'User request: "{message}"\n\nUser role: {role}'


def parse_plan(text: str, message: str, max_steps: int = 6) -> Plan:
    """Parse planner text into a normalized Plan.

    Raises:
        PlanValidationError: If extraction or validation fails.
    """
    raw = extract_json_object(text)
    try:
        draft = PlanDraft.model_validate(raw)
    except ValidationError as e:
        raise PlanValidationError(f"Planner output failed validation: {e.error_count()} error(s)") from e
    return normalize_plan(draft, message, max_steps=max_steps)


def build_plan(
    message: str,
    caller: CallerContext | None,
    llm: BaseChatModel,
    max_steps: int = 6,
    timeout_s: float | None = None,
    agents_dir: str | Path | None = None,
) -> Plan:
    """Build an execution plan for a request.

    Makes exactly one planner call. Any failure (completion error, timeout,
    unparsable or invalid plan) yields the deterministic fallback plan.

    Args:
        message: The request text (mentions already stripped).
        caller: Caller context; its role is shared with the planner.
        llm: Planner chat model.
        max_steps: Maximum number of steps kept.
        timeout_s: Deadline for the planner call.
        agents_dir: Optional instruction override directory.

    Returns:
        The normalized Plan (or fallback plan).
    """
    messages = [
        SystemMessage(content=build_planning_prompt(max_steps, agents_dir)),
        HumanMessage(content=_build_planning_human_prompt(message, caller)),
    ]

    try:
        response = call_with_deadline(
            lambda: llm.invoke(messages, config={"run_name": "build_plan"}),
            timeout_s,
            worker_type="planner",
        )
    except Exception as e:
        # Timeouts surface as WorkerInvocationError; provider errors arrive unwrapped.
        logger.warning("Planner call failed, using fallback plan: %s", e)
        return fallback_plan(message)

    text = response_text(response)
    logger.debug("Planner response: %s", text[:500])

    try:
        plan = parse_plan(text, message, max_steps=max_steps)
    except PlanValidationError as e:
        logger.warning("Invalid plan, using fallback plan: %s", e)
        return fallback_plan(message)

    logger.info(
        "Built %s plan with %d step(s): %s",
        plan.approach.value,
        len(plan.steps),
        ", ".join(w.value for w in plan.workers),
    )
    return plan
