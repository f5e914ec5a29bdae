"""Lead Intel Director - task orchestration over specialized sales-intelligence workers."""

from director.agents.orchestrator import Director, PlanExecutor
from director.agents.types import CallerContext, DirectorRequest, DirectorResponse, WorkerType
from director.config import DirectorConfig

__all__ = [
    "CallerContext",
    "Director",
    "DirectorConfig",
    "DirectorRequest",
    "DirectorResponse",
    "PlanExecutor",
    "WorkerType",
]
