"""Claim state machine.

Pending is the only non-terminal state. Fraud screening can move a claim to
flagged; the verdict oracle can move it to approved or rejected, or leave it
pending when its verdict is not recognized. Administrative updates bypass this
table entirely.
"""

from claim_lifecycle.exceptions import InvalidClaimStateError
from claim_lifecycle.models.claim import ClaimStatus

VERDICT_APPROVED = "approved"
VERDICT_REJECTED = "rejected"

# Valid transitions (from_state -> set of valid to_states)
TRANSITIONS: dict[ClaimStatus, frozenset[ClaimStatus]] = {
    ClaimStatus.PENDING: frozenset(
        {
            ClaimStatus.PENDING,
            ClaimStatus.FLAGGED,
            ClaimStatus.APPROVED,
            ClaimStatus.REJECTED,
        }
    ),
    ClaimStatus.FLAGGED: frozenset(),
    ClaimStatus.APPROVED: frozenset(),
    ClaimStatus.REJECTED: frozenset(),
}

_VERDICT_STATUS = {
    VERDICT_APPROVED: ClaimStatus.APPROVED,
    VERDICT_REJECTED: ClaimStatus.REJECTED,
}


def is_terminal(status: ClaimStatus) -> bool:
    return not TRANSITIONS[status]


def can_transition(current: ClaimStatus, target: ClaimStatus) -> bool:
    return target in TRANSITIONS[current]


def transition(current: ClaimStatus, target: ClaimStatus) -> ClaimStatus:
    """Return ``target`` if the protocol allows moving there from ``current``."""
    if not can_transition(current, target):
        raise InvalidClaimStateError(
            f"Invalid claim transition: {current.value} -> {target.value}"
        )
    return target


def status_for_verdict(verdict: str) -> ClaimStatus:
    """Map a raw oracle verdict to a claim status.

    Only the exact strings ``"approved"`` and ``"rejected"`` are recognized;
    anything else keeps the claim pending so it can be retried.
    """
    return _VERDICT_STATUS.get(verdict, ClaimStatus.PENDING)


def status_for_screening(is_fraudulent: bool, current: ClaimStatus) -> ClaimStatus:
    """Status after a completed fraud screening.

    A positive determination always flags, even when an administrator moved
    the claim out of pending before screening finished: flagged must track the
    fraud outcome.
    """
    if is_fraudulent:
        return ClaimStatus.FLAGGED
    return current
