"""Suggested prompts per user role, shown as one-click actions in the chat UI."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from director.agents.types import WorkerType


class QuickAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    message: str
    worker: WorkerType


QUICK_ACTIONS: dict[str, tuple[QuickAction, ...]] = {
    "sdr": (
        QuickAction(
            label="🔍 Research my top lead",
            message="@researcher Research my highest priority lead and give me talk tracks",
            worker=WorkerType.RESEARCH,
        ),
        QuickAction(
            label="📊 How am I doing?",
            message="@analyst Analyze my performance this week and suggest improvements",
            worker=WorkerType.ANALYSIS,
        ),
        QuickAction(
            label="📞 Prep for next call",
            message="@researcher Give me a pre-call brief for my next scheduled lead",
            worker=WorkerType.RESEARCH,
        ),
        QuickAction(
            label="💡 Coaching tips",
            message="What should I focus on to improve my qualification rate?",
            worker=WorkerType.GENERAL_ASSISTANT,
        ),
    ),
    "manager": (
        QuickAction(
            label="📊 Team performance",
            message="@analyst Give me a team performance overview for this week",
            worker=WorkerType.ANALYSIS,
        ),
        QuickAction(
            label="🔍 Who needs coaching?",
            message="@analyst Which SDRs need coaching and on what skills?",
            worker=WorkerType.ANALYSIS,
        ),
        QuickAction(
            label="📈 Pipeline health",
            message="@analyst Analyze our pipeline health and forecast next month",
            worker=WorkerType.ANALYSIS,
        ),
        QuickAction(
            label="🎬 Full analysis",
            message="@director Why is our qualification rate declining? Diagnose and suggest fixes.",
            worker=WorkerType.ORCHESTRATOR,
        ),
    ),
    "admin": (
        QuickAction(
            label="🎬 System analysis",
            message="@director Give me a comprehensive system health check",
            worker=WorkerType.ORCHESTRATOR,
        ),
        QuickAction(
            label="📊 Company metrics",
            message="@analyst Analyze company-wide sales performance",
            worker=WorkerType.ANALYSIS,
        ),
        QuickAction(
            label="🎨 UX audit",
            message="@ux Audit our main workflows for usability issues",
            worker=WorkerType.EXPERIENCE_REVIEW,
        ),
    ),
    "account_executive": (
        QuickAction(
            label="🔍 Research handoff",
            message="@researcher Research my latest handoff lead in depth",
            worker=WorkerType.RESEARCH,
        ),
        QuickAction(
            label="📊 Pipeline review",
            message="@analyst Review my pipeline and prioritize opportunities",
            worker=WorkerType.ANALYSIS,
        ),
    ),
}


def quick_actions_for(role: str) -> list[QuickAction]:
    """Quick actions for a user role; unknown roles get the SDR set."""
    return list(QUICK_ACTIONS.get(role, QUICK_ACTIONS["sdr"]))
