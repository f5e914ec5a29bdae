from .node import APPROACH_LABELS, aggregate

__all__ = ["APPROACH_LABELS", "aggregate"]
