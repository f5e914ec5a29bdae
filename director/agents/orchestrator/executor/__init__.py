from .control import ExecutionControl
from .node import (
    dispatch_steps,
    execute_step,
    prepare_execution,
    route_after_step,
    run_parallel_step,
    run_step,
    splice_context,
    summarize_outcomes,
)

__all__ = [
    "ExecutionControl",
    "dispatch_steps",
    "execute_step",
    "prepare_execution",
    "route_after_step",
    "run_parallel_step",
    "run_step",
    "splice_context",
    "summarize_outcomes",
]
