"""Contracts for the Plan Builder node.

`PlanDraft`/`DraftStep` validate the untrusted planner output (camelCase or
snake_case keys). `Plan`/`Step` are the normalized, immutable records the rest of
the engine works with.
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from director.agents.types import WorkerType
from director.errors import StepTransitionError


class PlanApproach(str, Enum):
    SINGLE = "single"
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


class StepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (StepStatus.COMPLETED, StepStatus.FAILED)


_ALLOWED_TRANSITIONS: dict[StepStatus, frozenset[StepStatus]] = {
    StepStatus.PENDING: frozenset({StepStatus.IN_PROGRESS, StepStatus.FAILED}),
    StepStatus.IN_PROGRESS: frozenset({StepStatus.COMPLETED, StepStatus.FAILED}),
    StepStatus.COMPLETED: frozenset(),
    StepStatus.FAILED: frozenset(),
}


class Step(BaseModel):
    """One unit of delegated work within a plan.

    Steps are immutable: every lifecycle transition returns a new record.
    """

    model_config = ConfigDict(frozen=True)

    step_number: int = Field(ge=1)
    worker: WorkerType
    action: str
    depends_on: tuple[int, ...] = ()
    status: StepStatus = StepStatus.PENDING
    result: str | None = None
    error: str | None = None
    tokens_used: int | None = None

    def with_status(self, status: StepStatus, **changes: object) -> "Step":
        """Return a copy in `status`.

        Raises:
            StepTransitionError: If the transition is not forward-only.
        """
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise StepTransitionError(
                f"Step {self.step_number}: cannot move from {self.status.value} to {status.value}"
            )
        return self.model_copy(update={"status": status, **changes})

    def start(self) -> "Step":
        return self.with_status(StepStatus.IN_PROGRESS)

    def complete(self, result: str, tokens_used: int | None = None) -> "Step":
        return self.with_status(StepStatus.COMPLETED, result=result, tokens_used=tokens_used)

    def fail(self, error: str) -> "Step":
        return self.with_status(StepStatus.FAILED, error=error)


class Plan(BaseModel):
    """The decomposition of one user request. Built once, executed once, discarded."""

    model_config = ConfigDict(frozen=True)

    task: str
    approach: PlanApproach
    workers: tuple[WorkerType, ...]
    steps: tuple[Step, ...] = Field(min_length=1)
    requires_approval: bool = False
    approval_reason: str | None = None
    is_fallback: bool = False

    def step(self, step_number: int) -> Step:
        return self.steps[step_number - 1]


class DraftStep(BaseModel):
    """A step as returned by the planner, before normalization."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    step_number: int | None = Field(default=None, validation_alias=AliasChoices("step_number", "stepNumber"))
    worker: WorkerType = Field(validation_alias=AliasChoices("worker", "agent", "worker_type", "workerType"))
    action: str = Field(min_length=1)
    depends_on: list[int] | None = Field(default=None, validation_alias=AliasChoices("depends_on", "dependsOn"))

    @field_validator("worker", mode="before")
    @classmethod
    def _parse_worker(cls, value: object) -> WorkerType:
        worker = value if isinstance(value, WorkerType) else WorkerType.parse(str(value))
        if not worker.plan_eligible:
            raise ValueError(f"Worker {worker.value!r} cannot be assigned to a plan step")
        return worker

    @field_validator("action")
    @classmethod
    def _strip_action(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Step action must not be empty")
        return value


class PlanDraft(BaseModel):
    """Raw plan structure as returned by the planner."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    task: str | None = None
    approach: PlanApproach = PlanApproach.SEQUENTIAL
    steps: list[DraftStep] = Field(min_length=1)
    requires_approval: bool = Field(
        default=False, validation_alias=AliasChoices("requires_approval", "requiresApproval")
    )
    approval_reason: str | None = Field(
        default=None, validation_alias=AliasChoices("approval_reason", "approvalReason")
    )

    @field_validator("approach", mode="before")
    @classmethod
    def _lower_approach(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("steps")
    @classmethod
    def _check_step_numbers(cls, steps: list[DraftStep]) -> list[DraftStep]:
        numbers = [s.step_number for s in steps if s.step_number is not None]
        if numbers and len(numbers) != len(steps):
            raise ValueError("Step numbers must be given for every step or for none")
        if any(n < 1 for n in numbers):
            raise ValueError("Step numbers must be positive")
        if len(numbers) != len(set(numbers)):
            raise ValueError("Step numbers must be unique")
        return steps
