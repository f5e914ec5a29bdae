"""Worker Invoker implementations."""

from director.agents.workers.base import WorkerInvoker
from director.agents.workers.deadline import CancellationToken, call_with_deadline
from director.agents.workers.llm_worker import LLMWorkerInvoker

__all__ = [
    "CancellationToken",
    "LLMWorkerInvoker",
    "WorkerInvoker",
    "call_with_deadline",
]
