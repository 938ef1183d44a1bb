"""Contribution status state machine.

Provider notifications can arrive late or out of order, so a status only
moves forward: a transition the table does not allow is ignored instead of
raising.
"""

from __future__ import annotations

import enum
from datetime import datetime

from boda_api.models import Contribution, ContributionStatus

_S = ContributionStatus

ALLOWED_TRANSITIONS: dict[ContributionStatus, frozenset[ContributionStatus]] = {
    _S.PENDING: frozenset(ContributionStatus),
    _S.IN_PROCESS: frozenset({_S.IN_PROCESS, _S.APPROVED, _S.REJECTED, _S.CANCELLED}),
    # A payer may retry on the same checkout after a rejection.
    _S.REJECTED: frozenset({_S.PENDING, _S.IN_PROCESS, _S.APPROVED, _S.REJECTED, _S.CANCELLED}),
    _S.APPROVED: frozenset({_S.REFUNDED, _S.CHARGED_BACK}),
    _S.CANCELLED: frozenset(),
    _S.REFUNDED: frozenset(),
    _S.CHARGED_BACK: frozenset(),
}


class TransitionOutcome(str, enum.Enum):
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    IGNORED = "ignored_transition"


def can_transition(current: ContributionStatus, target: ContributionStatus) -> bool:
    return ContributionStatus(target) in ALLOWED_TRANSITIONS[ContributionStatus(current)]


def apply_status(
    contribution: Contribution,
    target: ContributionStatus,
    *,
    now: datetime,
    status_detail: str | None = None,
    payment_id: str | None = None,
    paid_at: datetime | None = None,
) -> TransitionOutcome:
    """Move ``contribution`` to ``target`` when the state machine allows it.

    ``paid_at`` is stamped the first time the contribution is approved.
    """

    current = ContributionStatus(contribution.status)
    target = ContributionStatus(target)

    if current is target:
        if payment_id and not contribution.provider_payment_id:
            contribution.provider_payment_id = payment_id
        return TransitionOutcome.UNCHANGED
    if not can_transition(current, target):
        return TransitionOutcome.IGNORED

    contribution.status = target
    contribution.status_detail = status_detail
    if payment_id:
        contribution.provider_payment_id = payment_id
    if target is ContributionStatus.APPROVED and contribution.paid_at is None:
        contribution.paid_at = paid_at or now
    return TransitionOutcome.APPLIED


__all__ = ["ALLOWED_TRANSITIONS", "TransitionOutcome", "apply_status", "can_transition"]
