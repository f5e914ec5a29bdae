"""Director facade and standalone Plan Executor.

`Director` wraps the LangGraph workflow: it validates requests, builds the initial
state, runs the graph and turns the final state into a `DirectorResponse`.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterator, cast

from langchain_core.language_models import BaseChatModel

from director.agents.quick_actions import QuickAction, quick_actions_for
from director.agents.roles import WORKER_ROLES, get_role
from director.agents.types import (
    CallerContext,
    DirectorRequest,
    DirectorResponse,
    ResponseMetadata,
    ResponseStatus,
    StepFailure,
    WorkerType,
)
from director.agents.workers.base import WorkerInvoker
from director.agents.workers.llm_worker import LLMWorkerInvoker
from director.config import DirectorConfig
from director.factory import DefaultLLMFactory

from .executor import ExecutionControl, summarize_outcomes
from .graph import create_director_graph, create_executor_graph
from .planner import Plan, Step, StepStatus
from .router import validate_request
from .state import DirectorState, ExecutorState

logger = logging.getLogger(__name__)


class PlanExecutor:
    """Runs an approved plan according to its approach.

    Example:
        ```python
        executor = PlanExecutor(invoker, plan_timeout_s=120)
        outcomes = executor.execute(plan, caller)
        print(outcomes[1].result)
        ```
    """

    def __init__(
        self,
        invoker: WorkerInvoker,
        plan_timeout_s: float | None = None,
        max_parallel_steps: int = 4,
        recursion_limit: int = 100,
    ):
        self.invoker = invoker
        self.plan_timeout_s = plan_timeout_s
        self.max_parallel_steps = max_parallel_steps
        self.recursion_limit = recursion_limit
        self.graph = create_executor_graph(invoker, plan_timeout_s=plan_timeout_s)

    def execute(
        self,
        plan: Plan,
        caller: CallerContext | None = None,
        include_activity: bool = True,
        control: ExecutionControl | None = None,
    ) -> dict[int, Step]:
        """Execute every step of a plan.

        Args:
            plan: The plan to run (must not require approval, see `gate`).
            caller: Caller context forwarded to workers.
            include_activity: Whether step 1 receives the caller's activity snapshot.
            control: Optional shared deadline/cancellation (one is created otherwise).

        Returns:
            Step records keyed by step number, covering every plan step. Steps left
            unrun after a sequential failure keep status pending.
        """
        initial_state = ExecutorState(
            plan=plan,
            caller=caller,
            include_activity=include_activity,
            control=control,
            cursor=0,
            outcomes={},
        )
        config = {"recursion_limit": self.recursion_limit, "max_concurrency": self.max_parallel_steps}
        final = cast(ExecutorState, self.graph.invoke(initial_state, config=config))
        outcomes = final.get("outcomes", {})
        return {step.step_number: outcomes.get(step.step_number, step) for step in plan.steps}


class Director:
    """Task orchestration engine.

    Routes a request to one worker (explicit mention) or plans it across several,
    holds back plans that need approval, executes the rest and aggregates the
    results.

    Example:
        ```python
        from director import Director, DirectorConfig
        from director.factory import DefaultLLMFactory

        director = Director(llm_factory=DefaultLLMFactory(), config=DirectorConfig.from_env())
        response = director.ask("@research tell me about Acme Corp")
        print(response.text)
        ```
    """

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        llm_factory: DefaultLLMFactory | None = None,
        invoker: WorkerInvoker | None = None,
        planner_llm: BaseChatModel | None = None,
        config: DirectorConfig | None = None,
    ):
        """Initialize the Director.

        Args:
            llm: Chat model shared by the planner and all workers (if no factory is used).
            llm_factory: Factory building the planner model and one model per worker role.
            invoker: Custom Worker Invoker (defaults to an LLMWorkerInvoker).
            planner_llm: Dedicated planner model. Defaults to `llm` or the factory's planner.
            config: Engine configuration (defaults to DirectorConfig()).
        """
        self.config = config or DirectorConfig()
        self.llm_factory = llm_factory

        if planner_llm is None:
            if llm_factory is not None:
                planner_llm = llm_factory.get_planner_llm(temperature=self.config.planning_temperature)
            else:
                planner_llm = llm
        if planner_llm is None:
            raise ValueError("Either llm, planner_llm or llm_factory must be provided")
        self.planner_llm = planner_llm

        self.invoker = invoker or LLMWorkerInvoker(
            llm=llm,
            llm_factory=llm_factory,
            invocation_timeout_s=self.config.invocation_timeout_s,
            temperature=self.config.worker_temperature,
            agents_dir=self.config.agents_dir,
        )
        self.graph = create_director_graph(self.invoker, self.planner_llm, self.config)

    def _graph_config(self) -> dict[str, Any]:
        return {"recursion_limit": self.config.recursion_limit, "max_concurrency": self.config.max_parallel_steps}

    def _build_initial_state(self, request: DirectorRequest) -> DirectorState:
        """Validate the request and build the initial graph state.

        Raises:
            InvalidRequestError: If the message is empty.
        """
        validate_request(request)
        return DirectorState(
            request=request,
            route=None,
            plan=None,
            notice=None,
            direct_result=None,
            caller=request.caller,
            include_activity=request.include_activity,
            control=None,
            cursor=0,
            outcomes={},
            text="",
        )

    def _build_response(self, state: DirectorState, started: float) -> DirectorResponse:
        elapsed_ms = int((time.monotonic() - started) * 1000)

        direct = state.get("direct_result")
        if direct is not None:
            return DirectorResponse(
                text=direct.text,
                worker_type=direct.worker_type,
                workers_used=[direct.worker_type],
                metadata=ResponseMetadata(execution_time_ms=elapsed_ms, tokens_used=direct.tokens_used),
            )

        if state.get("notice") is not None:
            return DirectorResponse(
                text=state["text"],
                worker_type=WorkerType.ORCHESTRATOR,
                workers_used=[],
                metadata=ResponseMetadata(execution_time_ms=elapsed_ms, status=ResponseStatus.APPROVAL_REQUIRED),
            )

        plan = state["plan"]
        assert plan is not None
        outcomes = state.get("outcomes", {})
        steps = [outcomes.get(s.step_number, s) for s in plan.steps]
        counts = summarize_outcomes(plan, outcomes)

        if counts[StepStatus.COMPLETED] == len(steps):
            status = ResponseStatus.COMPLETED
        elif counts[StepStatus.COMPLETED] == 0:
            status = ResponseStatus.FAILED
        else:
            status = ResponseStatus.PARTIAL

        tokens = [s.tokens_used for s in steps if s.tokens_used is not None]
        failures = [
            StepFailure(step_number=s.step_number, worker=s.worker, error=s.error or "unknown error")
            for s in steps
            if s.status is StepStatus.FAILED
        ]
        if failures:
            logger.warning("Plan finished with status %s (%d failed step(s))", status.value, len(failures))

        return DirectorResponse(
            text=state["text"],
            worker_type=WorkerType.ORCHESTRATOR,
            workers_used=list(plan.workers),
            metadata=ResponseMetadata(
                execution_time_ms=elapsed_ms,
                tokens_used=sum(tokens) if tokens else None,
                status=status,
                failed_steps=failures,
            ),
        )

    def run(self, request: DirectorRequest) -> DirectorResponse:
        """Handle one request.

        Args:
            request: The inbound request.

        Returns:
            The DirectorResponse.

        Raises:
            InvalidRequestError: If the message is empty.
            WorkerInvocationError: If the fast-path worker invocation fails.
        """
        started = time.monotonic()
        initial_state = self._build_initial_state(request)
        final = cast(DirectorState, self.graph.invoke(initial_state, config=self._graph_config()))
        return self._build_response(final, started)

    async def arun(self, request: DirectorRequest) -> DirectorResponse:
        """Handle one request asynchronously (same semantics as `run`)."""
        started = time.monotonic()
        initial_state = self._build_initial_state(request)
        final = cast(DirectorState, await self.graph.ainvoke(initial_state, config=self._graph_config()))
        return self._build_response(final, started)

    def stream(self, request: DirectorRequest) -> Iterator[dict[str, Any]]:
        """Stream node updates as the graph progresses (route, plan, steps, aggregate)."""
        initial_state = self._build_initial_state(request)
        yield from self.graph.stream(initial_state, config=self._graph_config())

    def ask(self, message: str, caller: CallerContext | None = None, **kwargs: Any) -> DirectorResponse:
        """Convenience wrapper around `run` for a plain message."""
        request = DirectorRequest(message=message, caller=caller or CallerContext(id=0), **kwargs)
        return self.run(request)

    def list_workers(self) -> list[dict[str, Any]]:
        """Describe every worker role (type, display name, emoji, description, capabilities)."""
        workers = []
        for worker_type in WORKER_ROLES:
            role = get_role(worker_type, self.config.agents_dir)
            workers.append(
                {
                    "type": worker_type.value,
                    "name": role.display_name,
                    "emoji": role.emoji,
                    "description": role.description,
                    "capabilities": list(role.capabilities),
                }
            )
        return workers

    @staticmethod
    def quick_actions(role: str) -> list[QuickAction]:
        """Suggested prompts for a user role (SDR set for unknown roles)."""
        return quick_actions_for(role)
