"""Contracts for the Router node."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from director.agents.types import WorkerType


class RouteDecision(BaseModel):
    """Outcome of routing one request.

    `fast_path` requests are answered by a single direct invocation of `worker_type`
    with `message` (mentions stripped). Everything else goes to the Plan Builder.
    """

    model_config = ConfigDict(frozen=True)

    fast_path: bool
    worker_type: WorkerType | None = None
    message: str
    reason: str
