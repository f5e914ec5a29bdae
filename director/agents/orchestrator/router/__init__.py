from .contracts import RouteDecision
from .node import (
    KEYWORD_GROUPS,
    detect_explicit_worker,
    route_by_keyword,
    route_request,
    strip_mentions,
    validate_request,
)

__all__ = [
    "KEYWORD_GROUPS",
    "RouteDecision",
    "detect_explicit_worker",
    "route_by_keyword",
    "route_request",
    "strip_mentions",
    "validate_request",
]
