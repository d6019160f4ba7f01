"""
Approval State

Shared approval vocabulary for students (approved by their advisor) and for
advisors and judges (approved by an administrator).

Writes are unconditional overwrites: a decided record can be decided again
by a repeated admin action, but never returns to pending.
"""

import enum


class ApprovalStatus(str, enum.Enum):
    """Lifecycle of a registration awaiting a decision."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SRCDecision(str, enum.Enum):
    """Special review committee decision, independent of the main status."""

    UNDECIDED = "undecided"
    APPROVED = "approved"
    REJECTED = "rejected"


# Decisions reachable from each status. Nothing leads back to PENDING.
VALID_DECISIONS: dict[ApprovalStatus, set[ApprovalStatus]] = {
    ApprovalStatus.PENDING: {ApprovalStatus.APPROVED, ApprovalStatus.REJECTED},
    ApprovalStatus.APPROVED: {ApprovalStatus.APPROVED, ApprovalStatus.REJECTED},
    ApprovalStatus.REJECTED: {ApprovalStatus.APPROVED, ApprovalStatus.REJECTED},
}


def can_decide(current: ApprovalStatus, decision: ApprovalStatus) -> bool:
    """Whether `decision` may be written over `current`."""
    return decision in VALID_DECISIONS.get(current, set())
