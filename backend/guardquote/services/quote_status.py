"""Quote status lifecycle.

pending -> in_review -> quoted -> accepted
Any non-terminal status may be rejected or expired. accepted, rejected and
expired are terminal. Re-expiring an expired quote is a no-op.
"""
from guardquote.core.errors import InvalidTransition

PENDING = "pending"
IN_REVIEW = "in_review"
QUOTED = "quoted"
ACCEPTED = "accepted"
REJECTED = "rejected"
EXPIRED = "expired"

STATUSES = (PENDING, IN_REVIEW, QUOTED, ACCEPTED, REJECTED, EXPIRED)
TERMINAL = frozenset({ACCEPTED, REJECTED, EXPIRED})
# owner field edits are only accepted while the quote is still being worked on
EDITABLE = frozenset({PENDING, IN_REVIEW})
# estimated_amount is null outside these
PRICED = frozenset({QUOTED, ACCEPTED})

TRANSITIONS: dict[str, frozenset[str]] = {
    PENDING: frozenset({IN_REVIEW, REJECTED, EXPIRED}),
    IN_REVIEW: frozenset({QUOTED, REJECTED, EXPIRED}),
    QUOTED: frozenset({ACCEPTED, REJECTED, EXPIRED}),
    ACCEPTED: frozenset(),
    REJECTED: frozenset(),
    EXPIRED: frozenset(),
}


def is_noop(current: str, target: str) -> bool:
    return current == EXPIRED and target == EXPIRED


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def check_transition(current: str, target: str) -> bool:
    """Return True if the move must be written, False for the idempotent expiry.

    Raises InvalidTransition for anything outside the adjacency table.
    """
    if is_noop(current, target):
        return False
    if not can_transition(current, target):
        raise InvalidTransition(current, target)
    return True
