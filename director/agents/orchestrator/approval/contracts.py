"""Contracts for the Approval Gate."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from director.agents.orchestrator.planner.contracts import PlanApproach, Step
from director.agents.roles import WORKER_ROLES
from director.agents.types import WorkerType

DEFAULT_APPROVAL_REASON = "This action may make significant changes"


class ApprovalNotice(BaseModel):
    """Returned instead of executing a plan that requires approval."""

    model_config = ConfigDict(frozen=True)

    task: str
    reason: str
    approach: PlanApproach
    workers: tuple[WorkerType, ...]
    steps: tuple[Step, ...]

    def render(self) -> str:
        """Render the notice as markdown for the caller."""
        text = "## ⚠️ Approval Required\n\n"
        text += "I've analyzed your request and created a plan, but it requires your approval before proceeding.\n\n"
        text += f"**Task:** {self.task}\n"
        text += f"**Reason:** {self.reason}\n\n"

        text += "### Proposed Plan\n\n"
        for step in self.steps:
            emoji = WORKER_ROLES[step.worker].emoji
            text += f"{step.step_number}. {emoji} **{step.worker.value}**: {step.action}\n"

        text += "\n### Potential Impact\n"
        text += f"- Workers involved: {', '.join(w.value for w in self.workers)}\n"
        text += f"- Approach: {self.approach.value}\n\n"

        text += "**Reply \"approve\" to proceed, or tell me how you'd like to adjust the plan.**"
        return text
