from .contracts import DraftStep, Plan, PlanApproach, PlanDraft, Step, StepStatus
from .node import build_plan, build_planning_prompt, parse_plan
from .utils import extract_json_object, fallback_plan, normalize_plan

__all__ = [
    "DraftStep",
    "Plan",
    "PlanApproach",
    "PlanDraft",
    "Step",
    "StepStatus",
    "build_plan",
    "build_planning_prompt",
    "extract_json_object",
    "fallback_plan",
    "normalize_plan",
    "parse_plan",
]
