"""Linkage to the external review queue: outbound intake, inbound callbacks"""

from .callbacks import ReviewerCallbacks
from .in_memory_desk import InMemoryReviewDesk
from .ports import ReviewIntakeError, ReviewIntakePort
from .schemas import AutoCheckResult, ReviewAuditEntry, ReviewWorkItem
from .work_items import build_review_work_item, build_seed_review_item

__all__ = [
    "ReviewerCallbacks",
    "InMemoryReviewDesk",
    "ReviewIntakeError",
    "ReviewIntakePort",
    "AutoCheckResult",
    "ReviewAuditEntry",
    "ReviewWorkItem",
    "build_review_work_item",
    "build_seed_review_item",
]
