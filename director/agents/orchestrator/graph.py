"""LangGraph wiring for the Director and the Plan Executor.

This module contains only graph construction: nodes, edges and conditional
routing. Node implementations live in the per-component subpackages.
"""

from __future__ import annotations

from typing import Any, cast

from langchain_core.language_models import BaseChatModel
from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from director.agents.workers.base import WorkerInvoker
from director.config import DirectorConfig

from .aggregator import aggregate
from .approval import ApprovalNotice, gate
from .executor import dispatch_steps, prepare_execution, route_after_step, run_parallel_step, run_step
from .planner import build_plan
from .router import route_request
from .state import DirectorState, ExecutorState, ParallelStepState


def _add_executor_nodes(
    graph: StateGraph,
    invoker: WorkerInvoker,
    plan_timeout_s: float | None,
    done: str,
) -> None:
    """Add the execution nodes (prepare, sequential loop, parallel fan-out) to a graph.

    Both execution modes converge on `done`.
    """

    def _prepare(state: Any) -> dict[str, Any]:
        return prepare_execution(cast(ExecutorState, state), plan_timeout_s=plan_timeout_s)

    def _run_step(state: Any) -> dict[str, Any]:
        return run_step(cast(ExecutorState, state), invoker)

    def _run_parallel_step(state: Any) -> dict[str, Any]:
        return run_parallel_step(cast(ParallelStepState, state), invoker)

    def _dispatch(state: Any) -> Any:
        return dispatch_steps(cast(ExecutorState, state))

    def _after_step(state: Any) -> str:
        return route_after_step(cast(ExecutorState, state))

    graph.add_node("prepare_execution", _prepare)
    graph.add_node("run_step", _run_step)
    graph.add_node("run_parallel_step", _run_parallel_step)

    # Sequential plans enter the run_step loop; parallel plans fan out with Send.
    graph.add_conditional_edges(
        "prepare_execution",
        _dispatch,
        ["run_step", "run_parallel_step"],
    )
    graph.add_conditional_edges(
        "run_step",
        _after_step,
        {"run_step": "run_step", "done": done},
    )
    graph.add_edge("run_parallel_step", done)


def create_executor_graph(invoker: WorkerInvoker, plan_timeout_s: float | None = None) -> CompiledStateGraph:
    """Create the standalone Plan Executor graph.

    Flow: prepare_execution -> (run_step loop | run_parallel_step fan-out) -> END.

    Args:
        invoker: Worker Invoker used for every step.
        plan_timeout_s: Budget for the whole plan (None = unbounded).

    Returns:
        Compiled StateGraph over ExecutorState.
    """
    graph = StateGraph(ExecutorState)
    graph.set_entry_point("prepare_execution")
    _add_executor_nodes(graph, invoker, plan_timeout_s, done=END)
    return graph.compile()


def route_after_routing(state: Any) -> str:
    state = cast(DirectorState, state)
    route = state.get("route")
    return "invoke_worker" if route is not None and route.fast_path else "build_plan"


def route_after_gate(state: Any) -> str:
    state = cast(DirectorState, state)
    return END if state.get("notice") is not None else "prepare_execution"


def create_director_graph(
    invoker: WorkerInvoker,
    planner_llm: BaseChatModel,
    config: DirectorConfig | None = None,
) -> CompiledStateGraph:
    """Create the Director graph.

    The graph implements the following flow:
    1. route: explicit worker -> invoke_worker -> END (fast path)
    2. build_plan: planner call, validation, fallback
    3. gate: plans requiring approval end here with a notice
    4. prepare_execution -> run_step loop (sequential/single) or run_parallel_step fan-out
    5. aggregate -> END

    Args:
        invoker: Worker Invoker for the fast path and every plan step.
        planner_llm: Chat model used by the Plan Builder.
        config: Engine configuration (defaults to DirectorConfig()).

    Returns:
        Compiled StateGraph over DirectorState.
    """
    config = config or DirectorConfig()

    def _route(state: Any) -> dict[str, Any]:
        state = cast(DirectorState, state)
        return {"route": route_request(state["request"], keyword_routing=config.keyword_routing)}

    def _invoke_worker(state: Any) -> dict[str, Any]:
        state = cast(DirectorState, state)
        request, route = state["request"], state["route"]
        assert route is not None and route.worker_type is not None
        result = invoker.invoke(
            route.worker_type,
            route.message,
            request.caller,
            include_activity=request.include_activity,
            history=request.conversation_history,
        )
        return {"direct_result": result, "text": result.text}

    def _build_plan(state: Any) -> dict[str, Any]:
        state = cast(DirectorState, state)
        route = state["route"]
        request = state["request"]
        plan = build_plan(
            route.message if route is not None else request.message,
            request.caller,
            planner_llm,
            max_steps=config.max_plan_steps,
            timeout_s=config.invocation_timeout_s,
            agents_dir=config.agents_dir,
        )
        return {"plan": plan}

    def _gate(state: Any) -> dict[str, Any]:
        state = cast(DirectorState, state)
        assert state["plan"] is not None
        outcome = gate(state["plan"])
        if isinstance(outcome, ApprovalNotice):
            return {"notice": outcome, "text": outcome.render()}
        return {"notice": None}

    def _aggregate(state: Any) -> dict[str, Any]:
        state = cast(DirectorState, state)
        assert state["plan"] is not None
        return {"text": aggregate(state["plan"], state.get("outcomes", {}))}

    graph = StateGraph(DirectorState)
    graph.add_node("route", _route)
    graph.add_node("invoke_worker", _invoke_worker)
    graph.add_node("build_plan", _build_plan)
    graph.add_node("gate", _gate)
    graph.add_node("aggregate", _aggregate)
    _add_executor_nodes(graph, invoker, config.plan_timeout_s, done="aggregate")

    graph.set_entry_point("route")
    graph.add_conditional_edges(
        "route",
        route_after_routing,
        {"invoke_worker": "invoke_worker", "build_plan": "build_plan"},
    )
    graph.add_edge("invoke_worker", END)
    graph.add_edge("build_plan", "gate")
    graph.add_conditional_edges(
        "gate",
        route_after_gate,
        {"prepare_execution": "prepare_execution", END: END},
    )
    graph.add_edge("aggregate", END)

    return graph.compile()
