"""Shared data types used across the router, planner, executor and workers.

This module exists to avoid circular imports between `director.agents.orchestrator`
and the worker invoker.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from director.errors import UnknownWorkerError


class WorkerType(str, Enum):
    """Closed set of specialized roles a request (or plan step) can be delegated to."""

    RESEARCH = "research"
    ANALYSIS = "analysis"
    EXPERIENCE_REVIEW = "experience-review"
    GENERAL_ASSISTANT = "general-assistant"
    ORCHESTRATOR = "orchestrator"

    @classmethod
    def parse(cls, identifier: str) -> "WorkerType":
        """Resolve a worker identifier (canonical value or known alias), case-insensitively.

        Raises:
            UnknownWorkerError: If the identifier is not in the closed set.
        """
        key = str(identifier).strip().lower().lstrip("@").replace("_", "-")
        try:
            return _WORKER_ALIASES[key]
        except KeyError:
            raise UnknownWorkerError(str(identifier)) from None

    @property
    def plan_eligible(self) -> bool:
        """Whether planned steps may be delegated to this worker."""
        return self is not WorkerType.ORCHESTRATOR


_WORKER_ALIASES: dict[str, WorkerType] = {
    "research": WorkerType.RESEARCH,
    "researcher": WorkerType.RESEARCH,
    "analysis": WorkerType.ANALYSIS,
    "analyst": WorkerType.ANALYSIS,
    "business": WorkerType.ANALYSIS,
    "business-analyst": WorkerType.ANALYSIS,
    "experience-review": WorkerType.EXPERIENCE_REVIEW,
    "experience": WorkerType.EXPERIENCE_REVIEW,
    "ux": WorkerType.EXPERIENCE_REVIEW,
    "ux-agent": WorkerType.EXPERIENCE_REVIEW,
    "design": WorkerType.EXPERIENCE_REVIEW,
    "general-assistant": WorkerType.GENERAL_ASSISTANT,
    "assistant": WorkerType.GENERAL_ASSISTANT,
    "sage": WorkerType.GENERAL_ASSISTANT,
    "orchestrator": WorkerType.ORCHESTRATOR,
    "director": WorkerType.ORCHESTRATOR,
    "direct": WorkerType.ORCHESTRATOR,
}


UserRole = Literal["admin", "manager", "sdr", "account_executive", "account_specialist"]


class LeadSummary(BaseModel):
    id: int
    company_name: str
    contact_name: str = ""
    status: str
    fit_score: int | None = None
    last_contacted_at: str | None = None


class CallSummary(BaseModel):
    id: int
    lead_id: int | None = None
    company_name: str | None = None
    duration: int | None = None  # seconds
    disposition: str | None = None
    created_at: str


class ActivityStats(BaseModel):
    calls_this_week: int = 0
    leads_contacted: int = 0
    qualified_leads: int = 0
    connection_rate: float = 0.0  # percent


class TeamOverview(BaseModel):
    total_sdrs: int = 0
    total_leads: int = 0
    total_calls_today: int = 0
    top_performer: str | None = None


class ActivitySnapshot(BaseModel):
    """Caller-specific data (recent activity, aggregated counters) a worker may receive."""

    model_config = ConfigDict(frozen=True)

    leads: list[LeadSummary] = Field(default_factory=list)
    calls: list[CallSummary] = Field(default_factory=list)
    stats: ActivityStats | None = None
    team: TeamOverview | None = None

    def is_empty(self) -> bool:
        return not (self.leads or self.calls or self.stats or self.team)


class CallerContext(BaseModel):
    """Caller identity and role, optionally carrying an activity snapshot."""

    model_config = ConfigDict(frozen=True)

    id: int
    role: UserRole = "sdr"
    name: str | None = None
    activity_snapshot: ActivitySnapshot | None = None


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class InvocationResult(BaseModel):
    """Output of exactly one Worker Invoker call. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    text: str
    worker_type: WorkerType
    timestamp_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    execution_time_ms: int
    tokens_used: int | None = None


class DirectorRequest(BaseModel):
    """Inbound request to the Director."""

    message: str
    caller: CallerContext
    explicit_worker: WorkerType | None = None
    conversation_history: list[ConversationTurn] = Field(default_factory=list)
    include_activity: bool = True


class ResponseStatus(str, Enum):
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"
    APPROVAL_REQUIRED = "approval_required"


class StepFailure(BaseModel):
    step_number: int
    worker: WorkerType
    error: str


class ResponseMetadata(BaseModel):
    execution_time_ms: int
    tokens_used: int | None = None
    status: ResponseStatus = ResponseStatus.COMPLETED
    failed_steps: list[StepFailure] = Field(default_factory=list)


class DirectorResponse(BaseModel):
    """Outbound response returned to the caller."""

    text: str
    worker_type: WorkerType
    timestamp_utc: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    workers_used: list[WorkerType] = Field(default_factory=list)
    metadata: ResponseMetadata
