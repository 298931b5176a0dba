"""
In-memory review desk - review queue adapter for tests and development

Keeps work items in a dict. Simulates the external reviewer desk closely
enough to drive the approve / reject round trip without another service.
"""

import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional

from ..clock import Clock, IdGenerator, random_id, utc_now
from .ports import ReviewIntakeError, ReviewIntakePort
from .schemas import ReviewAuditEntry, ReviewWorkItem

logger = logging.getLogger(__name__)


class InMemoryReviewDesk(ReviewIntakePort):
    """
    Review queue held in memory.

    Configuration:
        - fail_intake: reject every upsert with ReviewIntakeError (simulates
          the queue being down)

    Usage:
        desk = InMemoryReviewDesk()
        service = PolicyVersionService(..., review_intake=desk)
        version = service.submit_review_request(draft_id, "admin")
        desk.get_item(version.review_item_id).status  # "REVIEW_PENDING"
    """

    def __init__(
        self,
        clock: Clock = utc_now,
        new_id: IdGenerator = random_id,
        fail_intake: bool = False,
    ) -> None:
        self._items: Dict[str, ReviewWorkItem] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._new_id = new_id
        self.fail_intake = fail_intake

    def upsert_review_item(self, item: ReviewWorkItem) -> str:
        if self.fail_intake:
            raise ReviewIntakeError("Review desk unavailable")

        with self._lock:
            existing = self._items.get(item.id)
            self._items[item.id] = item

        action = "Updated" if existing else "Created"
        logger.info(
            f"InMemoryReviewDesk: {action} review item {item.id} "
            f"for {item.content_id} {item.content_version_label}",
            extra={"version_id": item.policy_version_id, "document_id": item.policy_doc_id},
        )
        return item.id

    def get_item(self, item_id: str) -> Optional[ReviewWorkItem]:
        with self._lock:
            return self._items.get(item_id)

    def list_items(self, status: Optional[str] = None) -> List[ReviewWorkItem]:
        """Work items ordered by submission time, optionally filtered by status"""
        with self._lock:
            items = list(self._items.values())
        if status is not None:
            items = [item for item in items if item.status == status]
        return sorted(items, key=lambda item: item.submitted_at)

    def record_decision(
        self,
        item_id: str,
        status: str,
        actor: str,
        detail: Optional[str] = None,
    ) -> ReviewWorkItem:
        """Mark a work item as decided (APPROVED / REJECTED) and log it on the item.

        Raises:
            KeyError: If the desk has no such item
        """
        now: datetime = self._clock()
        with self._lock:
            item = self._items[item_id]
            entry = ReviewAuditEntry(
                id=self._new_id("aud"), action=status, actor=actor, at=now, detail=detail
            )
            decided = item.model_copy(
                update={
                    "status": status,
                    "last_updated_at": now,
                    "audit": [*item.audit, entry],
                }
            )
            self._items[item_id] = decided
        return decided
