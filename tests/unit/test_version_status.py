"""Unit tests for the PolicyVersionStatus state machine"""

import pytest

from policyflow.domain.policies import (
    ALLOWED_TRANSITIONS,
    PolicyVersionStatus,
    can_transition,
    get_allowed_transitions,
    validate_transition,
)
from policyflow.errors import InvalidStateError, PolicyStoreErrorCode

S = PolicyVersionStatus


class TestPolicyVersionStateMachine:
    """Test PolicyVersionStatus enum and transition validation"""

    def test_status_enum_values(self):
        """Test all lifecycle statuses exist with stable string values"""
        assert [s.value for s in S] == [
            "DRAFT", "PENDING_REVIEW", "ACTIVE", "ARCHIVED", "REJECTED", "DELETED",
        ]

    def test_draft_is_only_creation_state(self):
        """Test new versions can only start as DRAFT"""
        assert can_transition(None, S.DRAFT) is True
        for status in S:
            if status != S.DRAFT:
                assert can_transition(None, status) is False

    def test_draft_transitions(self):
        """Test DRAFT → PENDING_REVIEW / DELETED"""
        assert can_transition(S.DRAFT, S.PENDING_REVIEW) is True
        assert can_transition(S.DRAFT, S.DELETED) is True
        assert can_transition(S.DRAFT, S.ACTIVE) is False

    def test_pending_review_transitions(self):
        """Test reviewer decisions from PENDING_REVIEW"""
        assert can_transition(S.PENDING_REVIEW, S.ACTIVE) is True
        assert can_transition(S.PENDING_REVIEW, S.REJECTED) is True
        assert can_transition(S.PENDING_REVIEW, S.DRAFT) is False

    def test_active_cannot_be_deleted(self):
        """Test ACTIVE may only be archived"""
        assert get_allowed_transitions(S.ACTIVE) == [S.ARCHIVED]
        assert can_transition(S.ACTIVE, S.DELETED) is False

    def test_archived_can_be_restored(self):
        """Test ARCHIVED → ACTIVE (rollback)"""
        assert can_transition(S.ARCHIVED, S.ACTIVE) is True

    def test_deleted_is_terminal(self):
        """Test DELETED has no outgoing transitions"""
        assert ALLOWED_TRANSITIONS[S.DELETED] == []
        for status in S:
            assert can_transition(S.DELETED, status) is False

    def test_validate_transition_raises_invalid_state(self):
        """Test invalid transitions raise InvalidStateError with allowed list"""
        with pytest.raises(InvalidStateError) as exc_info:
            validate_transition(S.ACTIVE, S.DELETED)

        assert exc_info.value.code == PolicyStoreErrorCode.INVALID_STATE
        assert "ARCHIVED" in exc_info.value.message

    def test_validate_transition_accepts_valid(self):
        """Test valid transitions pass silently"""
        validate_transition(S.PENDING_REVIEW, S.ACTIVE)
