"""Inbound entry points invoked by the review queue.

The review desk identifies versions by its own review item id, or by policy
version id. Decisions are applied to the policy store first; only when the
store transition succeeded is the decision mirrored onto the desk's work item.
"""

import logging
from typing import TYPE_CHECKING, Optional

from ..domain.policies.models import PolicyVersion
from .in_memory_desk import InMemoryReviewDesk

if TYPE_CHECKING:
    from ..lifecycle.service import PolicyVersionService

logger = logging.getLogger(__name__)


class ReviewerCallbacks:
    """Adapter the review desk calls into.

    Args:
        service: Lifecycle service that owns the transitions
        desk: Desk whose work items receive the decision (optional)
    """

    def __init__(
        self,
        service: "PolicyVersionService",
        desk: Optional[InMemoryReviewDesk] = None,
    ) -> None:
        self._service = service
        self._desk = desk

    def approve(self, version_or_item_id: str, actor: str) -> PolicyVersion:
        version = self._service.reviewer_approve(version_or_item_id, actor)
        self._record(version, "APPROVED", actor, "approved")
        return version

    def reject(self, version_or_item_id: str, actor: str, reason: str) -> PolicyVersion:
        version = self._service.reviewer_reject(version_or_item_id, actor, reason)
        self._record(version, "REJECTED", actor, reason)
        return version

    def retry_indexing(self, version_or_item_id: str, actor: str) -> PolicyVersion:
        return self._service.retry_indexing(version_or_item_id, actor)

    def rollback(
        self,
        document_id: str,
        target_version_id: str,
        actor: str,
        reason: Optional[str] = None,
    ) -> PolicyVersion:
        return self._service.rollback(document_id, target_version_id, actor, reason)

    def _record(self, version: PolicyVersion, status: str, actor: str, detail: str) -> None:
        if self._desk is None or not version.review_item_id:
            return
        if self._desk.get_item(version.review_item_id) is None:
            logger.warning(
                f"Review item {version.review_item_id} not on desk; decision {status} not mirrored",
                extra={"version_id": version.id, "actor": actor},
            )
            return
        self._desk.record_decision(version.review_item_id, status, actor, detail)
