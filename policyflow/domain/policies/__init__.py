"""Policies domain module - version model, lifecycle statuses, identifiers"""

from .status import (
    PolicyVersionStatus,
    PreprocessStatus,
    IndexingStatus,
    ALLOWED_TRANSITIONS,
    can_transition,
    validate_transition,
    get_allowed_transitions,
)
from .models import (
    AuditAction,
    AuditEvent,
    Attachment,
    PreprocessPreview,
    PolicyVersion,
    DocumentGroup,
)
from .identifiers import (
    version_id_for,
    normalize_file_key,
    sanitize_file_name,
    suggest_document_id,
)

__all__ = [
    "PolicyVersionStatus",
    "PreprocessStatus",
    "IndexingStatus",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "validate_transition",
    "get_allowed_transitions",
    "AuditAction",
    "AuditEvent",
    "Attachment",
    "PreprocessPreview",
    "PolicyVersion",
    "DocumentGroup",
    "version_id_for",
    "normalize_file_key",
    "sanitize_file_name",
    "suggest_document_id",
]
