"""Pure helpers for the Plan Builder: extraction, normalization and fallback."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from director.agents.orchestrator.router.node import route_by_keyword
from director.errors import PlanValidationError

from .contracts import DraftStep, Plan, PlanApproach, PlanDraft, Step

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


def extract_json_object(text: str) -> dict[str, Any]:
    """Extract the first well-formed JSON object from free text.

    Code fences are tried first, then every `{` position in order, decoding with
    `raw_decode` so trailing prose is ignored.

    Raises:
        PlanValidationError: If no JSON object can be decoded.
    """
    if not text or not text.strip():
        raise PlanValidationError("Planner returned no text")

    candidates = [m.group(1) for m in _FENCE_RE.finditer(text)] + [text]
    decoder = json.JSONDecoder()
    for candidate in candidates:
        start = candidate.find("{")
        while start != -1:
            try:
                obj, _ = decoder.raw_decode(candidate, start)
            except json.JSONDecodeError:
                start = candidate.find("{", start + 1)
                continue
            if isinstance(obj, dict):
                return obj
            start = candidate.find("{", start + 1)
    raise PlanValidationError("No JSON object found in planner response")


def _renumber(steps: list[DraftStep]) -> list[Step]:
    """Renumber steps to their array position and remap dependencies.

    A dependency must resolve to an earlier step; anything else invalidates the plan.
    """
    old_to_new: dict[int, int] = {}
    for index, draft in enumerate(steps, start=1):
        old_to_new[draft.step_number if draft.step_number is not None else index] = index

    normalized: list[Step] = []
    for index, draft in enumerate(steps, start=1):
        depends_on: list[int] = []
        for ref in draft.depends_on or []:
            new_ref = old_to_new.get(ref)
            if new_ref is None or new_ref >= index:
                raise PlanValidationError(f"Step {index} depends on unknown or later step {ref}")
            if new_ref not in depends_on:
                depends_on.append(new_ref)
        normalized.append(Step(step_number=index, worker=draft.worker, action=draft.action, depends_on=tuple(depends_on)))
    return normalized


def normalize_plan(draft: PlanDraft, message: str, max_steps: int = 6) -> Plan:
    """Turn a validated draft into an executable Plan.

    Args:
        draft: Validated planner output.
        message: The original request (used when the planner omitted `task`).
        max_steps: Steps beyond this count are dropped.

    Returns:
        A Plan whose steps are numbered 1..N with status pending.

    Raises:
        PlanValidationError: If dependencies do not form a backward-only graph.
    """
    drafts = draft.steps
    if len(drafts) > max_steps:
        logger.warning("Planner returned %d steps; keeping the first %d", len(drafts), max_steps)
        drafts = drafts[:max_steps]

    steps = _renumber(drafts)
    approach = draft.approach

    if len(steps) == 1:
        approach = PlanApproach.SINGLE
        steps = [steps[0].model_copy(update={"depends_on": ()})]
    elif approach is PlanApproach.SINGLE:
        approach = PlanApproach.SEQUENTIAL
    elif approach is PlanApproach.PARALLEL and any(s.depends_on for s in steps):
        logger.warning("Parallel plan declares step dependencies; running it sequentially")
        approach = PlanApproach.SEQUENTIAL

    workers = tuple(dict.fromkeys(s.worker for s in steps))
    reason = (draft.approval_reason or "").strip() or None

    return Plan(
        task=(draft.task or "").strip() or message,
        approach=approach,
        workers=workers,
        steps=tuple(steps),
        requires_approval=draft.requires_approval,
        approval_reason=reason if draft.requires_approval else None,
    )


def fallback_plan(message: str) -> Plan:
    """Deterministic single-step plan built from the keyword router."""
    worker = route_by_keyword(message)
    return Plan(
        task=message,
        approach=PlanApproach.SINGLE,
        workers=(worker,),
        steps=(Step(step_number=1, worker=worker, action=message),),
        is_fallback=True,
    )
