"""Worker-role registry.

Static mapping `WorkerType -> WorkerRole` (display name, token budget, model choice,
instruction text). Loaded once per process and treated as read-only configuration.

Instruction text can be overridden per role with a markdown file in an agents
directory (`research.md`, or the legacy `researcher.md`, ...). Loaded files are cached.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from pathlib import Path

from director.agents.types import CallerContext, WorkerType

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


@dataclass(frozen=True)
class WorkerRole:
    """Per-role configuration."""

    worker_type: WorkerType
    display_name: str
    emoji: str
    description: str
    token_budget: int
    instruction_text: str
    model_choice: str = DEFAULT_MODEL
    capabilities: tuple[str, ...] = field(default_factory=tuple)
    # Legacy instruction file names, checked after `<worker_type>.md`.
    legacy_files: tuple[str, ...] = field(default_factory=tuple)


WORKER_ROLES: dict[WorkerType, WorkerRole] = {
    WorkerType.RESEARCH: WorkerRole(
        worker_type=WorkerType.RESEARCH,
        display_name="Researcher",
        emoji="🔍",
        description="Deep intelligence gathering for leads and companies",
        token_budget=6000,
        instruction_text=(
            "You are the Researcher Agent, specialized in deep intelligence gathering for lead "
            "qualification. Gather actionable intelligence from public data sources to help SDRs "
            "have informed conversations with leads."
        ),
        capabilities=("Lead research", "Company analysis", "Pain point identification"),
        legacy_files=("researcher.md",),
    ),
    WorkerType.ANALYSIS: WorkerRole(
        worker_type=WorkerType.ANALYSIS,
        display_name="Business Analyst",
        emoji="📊",
        description="Strategic insights, analytics, and performance diagnosis",
        token_budget=4000,
        instruction_text=(
            "You are the Business Analyst Agent, specialized in transforming sales data into "
            "strategic insights. Analyze performance, identify patterns, and provide actionable "
            "recommendations for leadership."
        ),
        capabilities=("Metrics analysis", "Performance diagnosis", "Forecasting"),
        legacy_files=("business-analyst.md",),
    ),
    WorkerType.EXPERIENCE_REVIEW: WorkerRole(
        worker_type=WorkerType.EXPERIENCE_REVIEW,
        display_name="UX Agent",
        emoji="🎨",
        description="User experience optimization and design recommendations",
        token_budget=4000,
        instruction_text=(
            "You are the UX Agent, specialized in user experience optimization. Identify friction "
            "points, streamline workflows, and recommend improvements to make the platform faster "
            "and more intuitive."
        ),
        capabilities=("Design audit", "Workflow optimization", "Usability review"),
        legacy_files=("ux-agent.md",),
    ),
    WorkerType.GENERAL_ASSISTANT: WorkerRole(
        worker_type=WorkerType.GENERAL_ASSISTANT,
        display_name="Sage",
        emoji="🧙",
        description="Your AI sales coach - answers questions about leads, calls, and performance",
        token_budget=2000,
        instruction_text=(
            "You are Sage, an AI sales coach for Lead Intel. Help users with their sales activities, "
            "answer questions about leads, calls, and performance. Be supportive, data-driven, and "
            "actionable."
        ),
        legacy_files=("sage.md", "director.md"),
    ),
    WorkerType.ORCHESTRATOR: WorkerRole(
        worker_type=WorkerType.ORCHESTRATOR,
        display_name="Director",
        emoji="🎬",
        description="Orchestrates complex tasks using multiple specialized agents",
        token_budget=4000,
        instruction_text=(
            "You are the Director Agent, responsible for orchestrating complex tasks across multiple "
            "specialized agents. Analyze requests, break them into sub-tasks, and combine the results "
            "into one coherent answer."
        ),
        legacy_files=("director.md",),
    ),
}

_missing = set(WorkerType) - set(WORKER_ROLES)
if _missing:
    raise RuntimeError(f"Worker role registry is missing entries for: {sorted(m.value for m in _missing)}")


PLATFORM_CONTEXT = """## Platform Context
You are operating within Lead Intel, an AI-powered Sales Intelligence & Coaching Platform.

Key features you can reference:
- Lead Research: Multi-source intelligence gathering
- Real-Time Call Coaching: Live tips during calls
- Performance Analytics: 7-dimensional call scoring
- Pipeline Management: Lead qualification and handoff tracking

When providing recommendations, be specific to this platform's capabilities."""


_CAPABILITIES_RE = re.compile(r"\*\*Capabilities:\*\*[\s\S]*?(?=\*\*|##|$)", re.IGNORECASE)
_BULLET_RE = re.compile(r"^\s*[-•]\s*(.+)")

_role_cache: dict[tuple[WorkerType, str | None], WorkerRole] = {}


def _extract_capabilities(content: str) -> tuple[str, ...]:
    """Pull the bullet list that follows a `**Capabilities:**` marker."""
    match = _CAPABILITIES_RE.search(content)
    if not match:
        return ()
    caps: list[str] = []
    for line in match.group(0).splitlines():
        bullet = _BULLET_RE.match(line)
        if bullet:
            caps.append(bullet.group(1).strip())
    return tuple(caps)


def get_role(worker_type: WorkerType, agents_dir: str | Path | None = None) -> WorkerRole:
    """Return the role for a worker type, applying an instruction-file override if present.

    Args:
        worker_type: The worker type to look up.
        agents_dir: Optional directory holding per-role markdown instruction files.

    Returns:
        The (possibly overridden) WorkerRole. Results are cached per (type, dir).
    """
    key = (worker_type, str(agents_dir) if agents_dir else None)
    cached = _role_cache.get(key)
    if cached is not None:
        return cached

    role = WORKER_ROLES[worker_type]
    if agents_dir:
        base = Path(agents_dir)
        for filename in (f"{worker_type.value}.md", *role.legacy_files):
            path = base / filename
            if not path.is_file():
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except OSError as e:
                logger.warning("Failed to load instructions for %s from %s: %s", worker_type.value, path, e)
                break
            role = replace(
                role,
                instruction_text=content,
                capabilities=_extract_capabilities(content) or role.capabilities,
            )
            logger.debug("Loaded instructions for %s from %s", worker_type.value, path)
            break

    _role_cache[key] = role
    return role


def clear_instruction_cache() -> None:
    """Drop cached instruction overrides (useful while editing agent files)."""
    _role_cache.clear()


def plan_eligible_roles(agents_dir: str | Path | None = None) -> list[WorkerRole]:
    """Roles that planned steps may be delegated to, in registry order."""
    return [get_role(t, agents_dir) for t in WORKER_ROLES if t.plan_eligible]


def build_instructions(
    worker_type: WorkerType,
    caller: CallerContext | None = None,
    agents_dir: str | Path | None = None,
) -> str:
    """Build the full system instructions for a worker, with caller and platform context."""
    instructions = get_role(worker_type, agents_dir).instruction_text

    if caller is not None:
        instructions += "\n\n## Current User Context\n"
        instructions += f"- User Role: {caller.role}\n"
        if caller.name:
            instructions += f"- User Name: {caller.name}\n"

    return f"{instructions}\n\n{PLATFORM_CONTEXT}"
