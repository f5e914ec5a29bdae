"""Shared fixtures for Director tests."""

from __future__ import annotations

import json
import threading
import time
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from director.agents.orchestrator.planner.contracts import Plan, PlanApproach, Step
from director.agents.types import (
    ActivitySnapshot,
    ActivityStats,
    CallerContext,
    InvocationResult,
    LeadSummary,
    WorkerType,
)


class FakeInvoker:
    """Worker Invoker stub that records every call.

    Args:
        responses: Text per worker type (or a callable `(worker_type, task) -> str`).
        failures: Exception to raise per worker type.
        delays: Seconds to sleep per worker type before answering.
    """

    def __init__(
        self,
        responses: dict[WorkerType, str] | Callable[[WorkerType, str], str] | None = None,
        failures: dict[WorkerType, Exception] | None = None,
        delays: dict[WorkerType, float] | None = None,
    ):
        self.responses = responses or {}
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: list[dict[str, Any]] = []
        self.completed: list[WorkerType] = []
        self._lock = threading.Lock()

    def invoke(
        self,
        worker_type,
        task,
        caller=None,
        *,
        include_activity=False,
        history=(),
        timeout_s=None,
        cancel_token=None,
    ):
        with self._lock:
            self.calls.append(
                {
                    "worker_type": worker_type,
                    "task": task,
                    "caller": caller,
                    "include_activity": include_activity,
                    "history": list(history),
                    "timeout_s": timeout_s,
                    "cancel_token": cancel_token,
                }
            )
        delay = self.delays.get(worker_type)
        if delay:
            time.sleep(delay)
        if worker_type in self.failures:
            raise self.failures[worker_type]
        if callable(self.responses):
            text = self.responses(worker_type, task)
        else:
            text = self.responses.get(worker_type, f"{worker_type.value} result")
        with self._lock:
            self.completed.append(worker_type)
        return InvocationResult(text=text, worker_type=worker_type, execution_time_ms=1, tokens_used=10)

    @property
    def workers_called(self) -> list[WorkerType]:
        return [c["worker_type"] for c in self.calls]


def make_plan(
    *steps: tuple[WorkerType, str] | tuple[WorkerType, str, tuple[int, ...]],
    approach: PlanApproach = PlanApproach.SEQUENTIAL,
    task: str = "Test task",
    requires_approval: bool = False,
    approval_reason: str | None = None,
) -> Plan:
    """Build a normalized plan from (worker, action[, depends_on]) tuples."""
    built = []
    for index, entry in enumerate(steps, start=1):
        worker, action = entry[0], entry[1]
        depends_on = entry[2] if len(entry) > 2 else ()
        built.append(Step(step_number=index, worker=worker, action=action, depends_on=depends_on))
    return Plan(
        task=task,
        approach=approach,
        workers=tuple(dict.fromkeys(s.worker for s in built)),
        steps=tuple(built),
        requires_approval=requires_approval,
        approval_reason=approval_reason,
    )


def planner_llm(payload: dict[str, Any] | str) -> MagicMock:
    """Mock planner model returning `payload` (JSON-encoded when a dict)."""
    llm = MagicMock()
    content = payload if isinstance(payload, str) else json.dumps(payload)
    llm.invoke.return_value = MagicMock(content=content)
    llm.with_structured_output = None
    return llm


@pytest.fixture
def fake_invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture
def caller() -> CallerContext:
    return CallerContext(id=7, role="sdr", name="Dana")


@pytest.fixture
def caller_with_activity() -> CallerContext:
    return CallerContext(
        id=7,
        role="sdr",
        name="Dana",
        activity_snapshot=ActivitySnapshot(
            leads=[LeadSummary(id=1, company_name="Acme Corp", contact_name="Pat Lee", status="qualified", fit_score=82)],
            stats=ActivityStats(calls_this_week=41, leads_contacted=18, qualified_leads=4, connection_rate=12.5),
        ),
    )


@pytest.fixture
def mock_llm() -> MagicMock:
    """Create a mock LLM that returns predictable responses."""
    llm = MagicMock()
    llm.invoke.return_value = MagicMock(content="Mock LLM response")
    llm.with_structured_output = None
    return llm
