"""Runtime configuration for the Director.

All values can be set through environment variables (a `.env` file is loaded by
the CLI via python-dotenv):

    DIRECTOR_INVOCATION_TIMEOUT   Seconds allowed per worker/planner call ("none" = unbounded)
    DIRECTOR_PLAN_TIMEOUT         Seconds allowed for a whole plan ("none" = unbounded)
    DIRECTOR_PLANNING_TEMPERATURE Sampling temperature for the planner model
    DIRECTOR_WORKER_TEMPERATURE   Sampling temperature for worker models
    DIRECTOR_MAX_PLAN_STEPS       Steps kept from a planner response
    DIRECTOR_MAX_PARALLEL_STEPS   Concurrent steps in parallel mode
    DIRECTOR_KEYWORD_ROUTING      "true" to route keyword matches straight to a worker
    DIRECTOR_AGENTS_DIR           Directory with per-role instruction markdown files
    DIRECTOR_RECURSION_LIMIT      LangGraph recursion limit
    DIRECTOR_LOG_LEVEL            Logging level used by the CLI
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    if raw.strip().lower() in {"none", "off"}:
        return None
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw and raw.strip() else default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class DirectorConfig:
    """Configuration for the Director engine."""

    invocation_timeout_s: float | None = 120.0
    plan_timeout_s: float | None = 300.0
    planning_temperature: float = 0.3  # low randomness for consistent routing
    worker_temperature: float = 0.7
    max_plan_steps: int = 6
    max_parallel_steps: int = 4
    keyword_routing: bool = False
    agents_dir: str | None = None
    recursion_limit: int = 100
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, **overrides: Any) -> "DirectorConfig":
        """Build a config from DIRECTOR_* environment variables.

        Args:
            **overrides: Explicit values that win over the environment.

        Returns:
            A DirectorConfig instance.
        """
        defaults = cls()
        config = cls(
            invocation_timeout_s=_env_float("DIRECTOR_INVOCATION_TIMEOUT", defaults.invocation_timeout_s),
            plan_timeout_s=_env_float("DIRECTOR_PLAN_TIMEOUT", defaults.plan_timeout_s),
            planning_temperature=_env_float("DIRECTOR_PLANNING_TEMPERATURE", defaults.planning_temperature)
            or 0.0,
            worker_temperature=_env_float("DIRECTOR_WORKER_TEMPERATURE", defaults.worker_temperature) or 0.0,
            max_plan_steps=max(1, _env_int("DIRECTOR_MAX_PLAN_STEPS", defaults.max_plan_steps)),
            max_parallel_steps=max(1, _env_int("DIRECTOR_MAX_PARALLEL_STEPS", defaults.max_parallel_steps)),
            keyword_routing=_env_bool("DIRECTOR_KEYWORD_ROUTING", defaults.keyword_routing),
            agents_dir=os.getenv("DIRECTOR_AGENTS_DIR") or defaults.agents_dir,
            recursion_limit=_env_int("DIRECTOR_RECURSION_LIMIT", defaults.recursion_limit),
            log_level=os.getenv("DIRECTOR_LOG_LEVEL", defaults.log_level).upper(),
        )
        return replace(config, **overrides) if overrides else config
