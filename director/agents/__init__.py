"""Agent implementations: worker roles, the Worker Invoker and the Director orchestrator."""

from director.agents.orchestrator import Director, PlanExecutor
from director.agents.quick_actions import QuickAction, quick_actions_for
from director.agents.roles import WORKER_ROLES, WorkerRole, build_instructions, get_role
from director.agents.types import WorkerType
from director.agents.workers import CancellationToken, LLMWorkerInvoker, WorkerInvoker

__all__ = [
    # Orchestrator
    "Director",
    "PlanExecutor",
    # Roles
    "WORKER_ROLES",
    "WorkerRole",
    "WorkerType",
    "build_instructions",
    "get_role",
    "QuickAction",
    "quick_actions_for",
    # Workers
    "CancellationToken",
    "LLMWorkerInvoker",
    "WorkerInvoker",
]
