"""Exception hierarchy for the Director orchestration engine.

Classification:
- InvalidRequestError: caller-input problems, rejected before any planning.
- PlanValidationError: the planner's output is not a usable plan. Always absorbed
  by the plan builder (fallback plan), never surfaced to callers.
- WorkerInvocationError: a worker call failed. Surfaced as a failed step (plan path)
  or raised to the caller (direct path).
"""

from __future__ import annotations


class DirectorError(Exception):
    """Base class for all Director errors."""


class InvalidRequestError(DirectorError, ValueError):
    """Raised when a request cannot be processed (e.g. empty message)."""


class PlanValidationError(DirectorError, ValueError):
    """Raised when planner output fails extraction or structural validation."""


class UnknownWorkerError(PlanValidationError):
    """Raised when a worker identifier is outside the closed set of worker types."""

    def __init__(self, identifier: str):
        super().__init__(f"Unknown worker identifier: {identifier!r}")
        self.identifier = identifier


class StepTransitionError(DirectorError, ValueError):
    """Raised on a backward (non-monotonic) step status transition."""


class WorkerInvocationError(DirectorError):
    """Raised when a single worker invocation fails.

    Carries enough detail (worker, step) for callers to retry or report.
    """

    def __init__(self, message: str, worker_type: str | None = None, step_number: int | None = None):
        super().__init__(message)
        self.worker_type = worker_type
        self.step_number = step_number

    def for_step(self, step_number: int) -> "WorkerInvocationError":
        """Attach the plan step number to this error and return it."""
        self.step_number = step_number
        return self

    def __str__(self) -> str:
        where = []
        if self.step_number is not None:
            where.append(f"step {self.step_number}")
        if self.worker_type:
            where.append(str(self.worker_type))
        prefix = f"[{' / '.join(where)}] " if where else ""
        return f"{prefix}{super().__str__()}"


class CompletionServiceError(WorkerInvocationError):
    """The completion service raised (transport, rate limit, quota, ...)."""


class EmptyCompletionError(WorkerInvocationError):
    """The completion service returned no text."""


class InvocationTimeoutError(WorkerInvocationError):
    """The invocation exceeded its deadline."""


class InvocationCancelledError(WorkerInvocationError):
    """The invocation was abandoned because its plan was cancelled."""
