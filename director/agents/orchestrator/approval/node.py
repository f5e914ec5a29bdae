"""Approval Gate: holds back plans flagged as having side effects."""

from __future__ import annotations

import logging

from director.agents.orchestrator.planner.contracts import Plan

from .contracts import DEFAULT_APPROVAL_REASON, ApprovalNotice

logger = logging.getLogger(__name__)


def gate(plan: Plan) -> Plan | ApprovalNotice:
    """Pass the plan through, or return an ApprovalNotice if it requires approval.

    Never executes anything and never fails.
    """
    if not plan.requires_approval:
        return plan

    logger.info("Plan requires approval: %s", plan.approval_reason or DEFAULT_APPROVAL_REASON)
    return ApprovalNotice(
        task=plan.task,
        reason=plan.approval_reason or DEFAULT_APPROVAL_REASON,
        approach=plan.approach,
        workers=plan.workers,
        steps=plan.steps,
    )
