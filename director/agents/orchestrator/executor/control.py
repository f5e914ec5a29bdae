"""Plan-wide deadline and cancellation shared by the steps of one execution."""

from __future__ import annotations

import logging
import time

from director.agents.workers.deadline import CancellationToken

logger = logging.getLogger(__name__)

PLAN_DEADLINE_REASON = "plan deadline exceeded"


class ExecutionControl:
    """Remaining time budget plus the cancellation token of one plan execution.

    Args:
        plan_timeout_s: Total budget for the plan. None means unbounded.
        token: Token to share; a fresh one is created when omitted.
    """

    def __init__(self, plan_timeout_s: float | None = None, token: CancellationToken | None = None):
        self.plan_timeout_s = plan_timeout_s
        self.token = token or CancellationToken()
        self.started = time.monotonic()
        self._deadline = None if plan_timeout_s is None else self.started + plan_timeout_s

    def remaining(self) -> float | None:
        """Seconds left in the plan budget (None when unbounded, never negative)."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def cancel(self, reason: str) -> None:
        if self.token.cancel(reason):
            logger.warning("Cancelling plan execution: %s", reason)

    def check(self) -> bool:
        """Cancel on an exhausted budget. Returns True when execution must stop."""
        if self.expired:
            self.cancel(PLAN_DEADLINE_REASON)
        return self.token.cancelled

    def __repr__(self) -> str:
        return f"ExecutionControl(plan_timeout_s={self.plan_timeout_s!r}, cancelled={self.token.cancelled})"
