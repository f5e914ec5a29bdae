"""Director - a LangGraph task orchestration engine over specialized workers.

This agent implements the following workflow:
1. Route: an explicit worker mention is answered by that worker directly
2. Plan: the planner decomposes the request into steps (fallback: one keyword-routed step)
3. Gate: plans with side effects stop with an approval notice
4. Execute: steps run sequentially (with result splicing) or in parallel (Send fan-out)
5. Aggregate: per-step results are merged into one response

Public API
----------
- Director: Main agent class with run/arun/stream/ask methods
- PlanExecutor: Standalone plan execution
- DirectorState, ExecutorState: State TypedDicts
- create_director_graph, create_executor_graph: Low-level graph factories
"""

from .agent import Director, PlanExecutor
from .aggregator import aggregate
from .approval import ApprovalNotice, gate
from .contracts import Plan, PlanApproach, RouteDecision, Step, StepStatus
from .executor import ExecutionControl, splice_context
from .graph import create_director_graph, create_executor_graph
from .planner import build_plan, fallback_plan, parse_plan
from .router import detect_explicit_worker, route_by_keyword, route_request, strip_mentions, validate_request
from .state import DirectorState, ExecutorState, ParallelStepState

__all__ = [
    # Agent
    "Director",
    "PlanExecutor",
    # State
    "DirectorState",
    "ExecutorState",
    "ParallelStepState",
    # Graph factories
    "create_director_graph",
    "create_executor_graph",
    # Components
    "aggregate",
    "build_plan",
    "detect_explicit_worker",
    "fallback_plan",
    "gate",
    "parse_plan",
    "route_by_keyword",
    "route_request",
    "splice_context",
    "strip_mentions",
    "validate_request",
    # Contracts
    "ApprovalNotice",
    "ExecutionControl",
    "Plan",
    "PlanApproach",
    "RouteDecision",
    "Step",
    "StepStatus",
]
