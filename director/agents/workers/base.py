"""Base interface for Worker Invoker implementations."""

from __future__ import annotations

from typing import Protocol, Sequence

from director.agents.types import CallerContext, ConversationTurn, InvocationResult, WorkerType
from director.agents.workers.deadline import CancellationToken


class WorkerInvoker(Protocol):
    """Invokes one specialized worker once.

    Implementations build role-specific instructions, optionally inject caller
    activity data, and call the completion service exactly once.
    """

    def invoke(
        self,
        worker_type: WorkerType,
        task: str,
        caller: CallerContext | None = None,
        *,
        include_activity: bool = False,
        history: Sequence[ConversationTurn] = (),
        timeout_s: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> InvocationResult:
        """Run a worker for a task.

        Args:
            worker_type: Role to delegate to.
            task: Task description handed to the worker.
            caller: Caller identity/role (and optional activity snapshot).
            include_activity: Whether to splice the caller's activity snapshot into the task.
            history: Prior conversation turns to forward.
            timeout_s: Upper bound for this call, on top of the invoker's own deadline.
            cancel_token: Token that aborts the call when cancelled.

        Returns:
            The InvocationResult.

        Raises:
            WorkerInvocationError: If the call fails, times out or is cancelled.
        """
        ...
