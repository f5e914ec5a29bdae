"""Request routing: explicit mentions, keyword groups and the fast-path decision.

Everything here is pure and side-effect free.
"""

from __future__ import annotations

import logging
import re

from director.agents.types import DirectorRequest, WorkerType
from director.errors import InvalidRequestError, UnknownWorkerError

from .contracts import RouteDecision

logger = logging.getLogger(__name__)

_MENTION_RE = re.compile(r"(?<![\w.])@([\w-]+)\b(?!\.\w)")
_STRIP_MENTION_RE = re.compile(r"(?<![\w.])@[\w-]+\b(?!\.\w)\s*")

# Checked in order; the first group with a match wins. Keywords match at the start
# of a word, so "improve" also matches "improvements".
KEYWORD_GROUPS: tuple[tuple[WorkerType, tuple[str, ...]], ...] = (
    (
        WorkerType.RESEARCH,
        ("research", "find", "look up", "investigate", "company info", "lead intel", "pain points", "news about"),
    ),
    (
        WorkerType.ANALYSIS,
        (
            "analytics", "metrics", "performance", "why is", "declining", "increasing", "forecast",
            "trend", "compare", "benchmark", "rate", "connect rate", "conversion", "pipeline",
        ),
    ),
    (
        WorkerType.EXPERIENCE_REVIEW,
        ("design", "ux", "workflow", "simplify", "improve", "friction", "usability", "ui", "interface"),
    ),
    (
        WorkerType.ORCHESTRATOR,
        ("and then", "after that", "multiple", "comprehensive", "full analysis", "end to end"),
    ),
)


def _keyword_pattern(keywords: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(k).replace(r"\ ", r"\s+") for k in keywords)
    return re.compile(rf"\b(?:{alternatives})", re.IGNORECASE)


_KEYWORD_PATTERNS = tuple((worker, _keyword_pattern(words)) for worker, words in KEYWORD_GROUPS)


def detect_explicit_worker(message: str) -> WorkerType | None:
    """Return the worker named by the first recognised `@mention`, if any."""
    for match in _MENTION_RE.finditer(message or ""):
        try:
            return WorkerType.parse(match.group(1))
        except UnknownWorkerError:
            continue
    return None


def strip_mentions(message: str) -> str:
    """Remove every `@mention` from a message."""
    return _STRIP_MENTION_RE.sub("", message or "").strip()


def route_by_keyword(message: str) -> WorkerType:
    """Pick a worker from ordered keyword groups; general assistant when nothing matches."""
    for worker, pattern in _KEYWORD_PATTERNS:
        if pattern.search(message or ""):
            return worker
    return WorkerType.GENERAL_ASSISTANT


def validate_request(request: DirectorRequest) -> None:
    """Reject requests that cannot be routed or planned.

    Raises:
        InvalidRequestError: If the message is empty, or empty once mentions are stripped.
    """
    if not request.message or not request.message.strip():
        raise InvalidRequestError("Message is required")
    if not strip_mentions(request.message):
        raise InvalidRequestError("Message must contain more than worker mentions")


def route_request(request: DirectorRequest, keyword_routing: bool = False) -> RouteDecision:
    """Decide between the single-worker fast path and planning.

    Args:
        request: The inbound request (assumed validated).
        keyword_routing: Also take the fast path on a keyword match.

    Returns:
        The RouteDecision.
    """
    message = strip_mentions(request.message)

    target = detect_explicit_worker(request.message)
    reason = "mention"
    if target is None and request.explicit_worker is not None:
        target, reason = request.explicit_worker, "explicit_worker"
    if target is None and keyword_routing:
        target, reason = route_by_keyword(message), "keyword"

    if target is not None and target is not WorkerType.ORCHESTRATOR:
        logger.info("Routing to %s (%s)", target.value, reason)
        return RouteDecision(fast_path=True, worker_type=target, message=message, reason=reason)

    logger.info("Routing to planner (%s)", reason if target is not None else "no explicit worker")
    return RouteDecision(fast_path=False, worker_type=target, message=message, reason=reason if target else "plan")
