from .contracts import DEFAULT_APPROVAL_REASON, ApprovalNotice
from .node import gate

__all__ = ["DEFAULT_APPROVAL_REASON", "ApprovalNotice", "gate"]
