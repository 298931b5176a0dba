"""Policy version status state machine.

State Flow:
    (new) → DRAFT → PENDING_REVIEW → ACTIVE|REJECTED
    ACTIVE → ARCHIVED (demoted by a newer approval or a rollback)
    ARCHIVED → ACTIVE (rollback)

Any status except ACTIVE may be soft-deleted. DELETED is terminal.
"""

from enum import Enum
from typing import Dict, List, Optional

from ...errors import InvalidStateError


class PolicyVersionStatus(str, Enum):
    """Lifecycle status of one policy document version"""
    DRAFT = "DRAFT"
    PENDING_REVIEW = "PENDING_REVIEW"
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    REJECTED = "REJECTED"
    DELETED = "DELETED"


class PreprocessStatus(str, Enum):
    """Content preprocessing pipeline status"""
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    READY = "READY"
    FAILED = "FAILED"


class IndexingStatus(str, Enum):
    """Search indexing pipeline status"""
    IDLE = "IDLE"
    INDEXING = "INDEXING"
    DONE = "DONE"
    FAILED = "FAILED"


ALLOWED_TRANSITIONS: Dict[Optional[PolicyVersionStatus], List[PolicyVersionStatus]] = {
    None: [PolicyVersionStatus.DRAFT],
    PolicyVersionStatus.DRAFT: [
        PolicyVersionStatus.PENDING_REVIEW,
        PolicyVersionStatus.DELETED,
    ],
    PolicyVersionStatus.PENDING_REVIEW: [
        PolicyVersionStatus.ACTIVE,
        PolicyVersionStatus.REJECTED,
        PolicyVersionStatus.DELETED,
    ],
    PolicyVersionStatus.ACTIVE: [PolicyVersionStatus.ARCHIVED],
    PolicyVersionStatus.ARCHIVED: [
        PolicyVersionStatus.ACTIVE,
        PolicyVersionStatus.DELETED,
    ],
    PolicyVersionStatus.REJECTED: [PolicyVersionStatus.DELETED],
    PolicyVersionStatus.DELETED: [],  # Terminal state
}


def can_transition(
    current_status: Optional[PolicyVersionStatus],
    new_status: PolicyVersionStatus
) -> bool:
    """Check if a state transition is allowed without raising.

    Args:
        current_status: Current status (None for a version not yet created)
        new_status: Target status

    Returns:
        True if transition is allowed, False otherwise

    Example:
        >>> can_transition(PolicyVersionStatus.DRAFT, PolicyVersionStatus.PENDING_REVIEW)
        True
        >>> can_transition(PolicyVersionStatus.ACTIVE, PolicyVersionStatus.DELETED)
        False
    """
    return new_status in ALLOWED_TRANSITIONS.get(current_status, [])


def validate_transition(
    current_status: Optional[PolicyVersionStatus],
    new_status: PolicyVersionStatus
) -> None:
    """Validate that a state transition is allowed.

    Raises:
        InvalidStateError: If transition is not allowed
    """
    if not can_transition(current_status, new_status):
        allowed = ALLOWED_TRANSITIONS.get(current_status, [])
        current_label = current_status.value if current_status else "(none)"
        raise InvalidStateError(
            f"Invalid transition: {current_label} -> {new_status.value}. "
            f"Allowed transitions from {current_label}: {[s.value for s in allowed]}"
        )


def get_allowed_transitions(status: Optional[PolicyVersionStatus]) -> List[PolicyVersionStatus]:
    """Get list of allowed transitions from a given status."""
    return ALLOWED_TRANSITIONS.get(status, [])
