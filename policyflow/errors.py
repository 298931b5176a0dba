"""Error taxonomy for the policy version store.

Every failure raised by a lifecycle operation is a PolicyStoreError carrying a
stable code and an HTTP-like status, so calling layers can map each kind to a
distinct remediation message. A raised error always means no state change
occurred.
"""

from enum import Enum
from typing import Any, Dict, Optional


class PolicyStoreErrorCode(str, Enum):
    """Stable error codes exposed to callers."""
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    DRAFT_ALREADY_EXISTS = "DRAFT_ALREADY_EXISTS"
    VERSION_REVERSE = "VERSION_REVERSE"
    FILE_DUPLICATE = "FILE_DUPLICATE"
    INVALID_STATE = "INVALID_STATE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


DEFAULT_STATUS: Dict[PolicyStoreErrorCode, int] = {
    PolicyStoreErrorCode.NOT_FOUND: 404,
    PolicyStoreErrorCode.FORBIDDEN: 403,
    PolicyStoreErrorCode.DRAFT_ALREADY_EXISTS: 409,
    PolicyStoreErrorCode.VERSION_REVERSE: 409,
    PolicyStoreErrorCode.FILE_DUPLICATE: 409,
    PolicyStoreErrorCode.INVALID_STATE: 409,
    PolicyStoreErrorCode.INTERNAL_ERROR: 500,
}


class PolicyStoreError(Exception):
    """Base exception for policy store failures.

    Args:
        code: Error kind
        message: Human-readable message
        status: Optional status override (defaults per code)
    """

    code: PolicyStoreErrorCode = PolicyStoreErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[PolicyStoreErrorCode] = None,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message
        self.status = status if status is not None else DEFAULT_STATUS[self.code]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary suitable for an error response body"""
        return {"code": self.code.value, "message": self.message, "status": self.status}


class NotFoundError(PolicyStoreError):
    """Referenced version or document does not exist."""
    code = PolicyStoreErrorCode.NOT_FOUND


class ForbiddenError(PolicyStoreError):
    """Actor lacks permission for the operation."""
    code = PolicyStoreErrorCode.FORBIDDEN


class DraftAlreadyExistsError(PolicyStoreError):
    """A second DRAFT was requested for a document that already has one."""
    code = PolicyStoreErrorCode.DRAFT_ALREADY_EXISTS


class VersionReverseError(PolicyStoreError):
    """Requested version is not above the current ACTIVE version."""
    code = PolicyStoreErrorCode.VERSION_REVERSE


class FileDuplicateError(PolicyStoreError):
    """Attachment name collides with an existing attachment of the document."""
    code = PolicyStoreErrorCode.FILE_DUPLICATE


class InvalidStateError(PolicyStoreError):
    """Operation attempted from a status that does not permit it."""
    code = PolicyStoreErrorCode.INVALID_STATE


class InternalError(PolicyStoreError):
    """Unexpected failure, including failures of external collaborators."""
    code = PolicyStoreErrorCode.INTERNAL_ERROR
