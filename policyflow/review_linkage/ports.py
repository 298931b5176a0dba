"""
ReviewIntakePort - Port interface for the external review queue

The lifecycle service depends only on this port when a draft is submitted
for review. Concrete queues (the in-memory desk, an HTTP client, ...) are
adapters.
"""

from abc import ABC, abstractmethod

from .schemas import ReviewWorkItem


class ReviewIntakeError(Exception):
    """
    Raised by intake adapters when the review queue rejects or cannot accept
    a work item. The lifecycle service converts it into InternalError and
    leaves the version unchanged.
    """
    pass


class ReviewIntakePort(ABC):
    """
    Abstract interface for review queue intake.

    Implementations must be idempotent per item id: submitting the same id
    twice updates the existing work item.
    """

    @abstractmethod
    def upsert_review_item(self, item: ReviewWorkItem) -> str:
        """
        Create or update a review work item.

        Args:
            item: Work item descriptor (item.id is the proposed id)

        Returns:
            The review item id assigned by the queue (usually item.id)

        Raises:
            ReviewIntakeError: If the queue cannot accept the item
        """
        pass
