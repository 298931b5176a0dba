"""Audit trail service for policy versions.

Audit entries are immutable and only ever appended to a version's trail;
nothing in the store edits or removes an existing entry.

Audit Actions:
- CREATE_DRAFT, UPDATE_DRAFT, UPLOAD_FILE, REMOVE_FILE
- PREPROCESS_START, PREPROCESS_DONE, PREPROCESS_FAIL
- SUBMIT_REVIEW, REVIEW_APPROVE, REVIEW_REJECT
- INDEX_START, INDEX_DONE, INDEX_FAIL
- ARCHIVE, ROLLBACK, SOFT_DELETE
"""

import logging
from typing import Optional

from ..clock import Clock, IdGenerator, random_id, utc_now
from ..domain.policies.models import AuditAction, AuditEvent, PolicyVersion

logger = logging.getLogger(__name__)


class AuditRecorder:
    """Creates audit events stamped with the injected clock and id source.

    Args:
        clock: Time source for event timestamps
        new_id: Id generator (called with the "pa" prefix)
        system_actor: Actor name used for pipeline-driven events
    """

    def __init__(
        self,
        clock: Clock = utc_now,
        new_id: IdGenerator = random_id,
        system_actor: str = "SYSTEM",
    ) -> None:
        self._clock = clock
        self._new_id = new_id
        self.system_actor = system_actor

    def event(self, action: AuditAction, actor: str, message: Optional[str] = None) -> AuditEvent:
        """Create a single audit event.

        Example:
            recorder.event(AuditAction.SUBMIT_REVIEW, "SYSTEM_ADMIN", "review requested")
        """
        return AuditEvent(
            id=self._new_id("pa"),
            at=self._clock(),
            actor=actor,
            action=action,
            message=message,
        )

    def system_event(self, action: AuditAction, message: Optional[str] = None) -> AuditEvent:
        """Create an audit event attributed to the background pipeline"""
        return self.event(action, self.system_actor, message)


def append_audit(target: PolicyVersion, *events: AuditEvent, **changes) -> PolicyVersion:
    """Return a copy of `target` with `changes` applied and `events` appended.

    Args:
        target: Version to copy
        *events: Audit events in the order they happened
        **changes: Field updates applied in the same copy

    Returns:
        PolicyVersion: Updated copy; `target` itself is unchanged
    """
    for audit_event in events:
        logger.debug(
            f"Audit {audit_event.action.value} on {target.id} by {audit_event.actor}",
            extra={"version_id": target.id, "actor": audit_event.actor},
        )
    return target.with_audit(*events, **changes)
