"""Policy document version models.

These are domain models (not persistence models). Instances are immutable;
every mutation produces a new instance through dataclasses.replace, so
snapshots handed to readers never change underneath them.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .status import IndexingStatus, PolicyVersionStatus, PreprocessStatus


class AuditAction(str, Enum):
    """Audit trail actions recorded on a policy version"""
    CREATE_DRAFT = "CREATE_DRAFT"
    UPDATE_DRAFT = "UPDATE_DRAFT"
    UPLOAD_FILE = "UPLOAD_FILE"
    REMOVE_FILE = "REMOVE_FILE"
    PREPROCESS_START = "PREPROCESS_START"
    PREPROCESS_DONE = "PREPROCESS_DONE"
    PREPROCESS_FAIL = "PREPROCESS_FAIL"
    SUBMIT_REVIEW = "SUBMIT_REVIEW"
    REVIEW_APPROVE = "REVIEW_APPROVE"
    REVIEW_REJECT = "REVIEW_REJECT"
    INDEX_START = "INDEX_START"
    INDEX_DONE = "INDEX_DONE"
    INDEX_FAIL = "INDEX_FAIL"
    ARCHIVE = "ARCHIVE"
    SOFT_DELETE = "SOFT_DELETE"
    ROLLBACK = "ROLLBACK"


@dataclass(frozen=True)
class AuditEvent:
    """One append-only audit trail entry"""
    id: str
    at: datetime
    actor: str
    action: AuditAction
    message: Optional[str] = None


@dataclass(frozen=True)
class Attachment:
    """Uploaded file attached to a draft. The first attachment is the primary file."""
    id: str
    name: str
    uploaded_at: datetime
    size_bytes: Optional[int] = None
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class PreprocessPreview:
    """Text preview extracted by the preprocessing job"""
    page_count: int
    char_count: int
    excerpt: str


@dataclass(frozen=True)
class PolicyVersion:
    """One revision of one policy document.

    `id` is always derivable from (document_id, version); see
    identifiers.version_id_for. `file_name` / `file_size_bytes` are legacy
    single-file fields kept in sync with attachments[0].

    The *_generation counters identify the latest scheduled background job
    of each pipeline; a job completion whose generation no longer matches is
    stale and gets discarded.
    """
    id: str
    document_id: str
    version: int
    title: str
    change_summary: str
    status: PolicyVersionStatus
    created_at: datetime
    updated_at: datetime

    attachments: Tuple[Attachment, ...] = ()
    file_name: Optional[str] = None
    file_size_bytes: Optional[int] = None

    preprocess_status: PreprocessStatus = PreprocessStatus.IDLE
    preprocess_error: Optional[str] = None
    preprocess_preview: Optional[PreprocessPreview] = None
    preprocess_generation: int = 0

    indexing_status: IndexingStatus = IndexingStatus.IDLE
    indexing_error: Optional[str] = None
    indexing_generation: int = 0

    review_requested_at: Optional[datetime] = None
    review_item_id: Optional[str] = None

    activated_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    reject_reason: Optional[str] = None

    audit: Tuple[AuditEvent, ...] = field(default_factory=tuple)

    @property
    def primary_attachment(self) -> Optional[Attachment]:
        return self.attachments[0] if self.attachments else None

    @property
    def version_label(self) -> str:
        return f"v{self.version}"

    def with_audit(self, *events: AuditEvent, **changes) -> "PolicyVersion":
        """Return a copy with `changes` applied and `events` appended to the audit trail"""
        return replace(self, audit=self.audit + tuple(events), **changes)


@dataclass(frozen=True)
class DocumentGroup:
    """All versions sharing a document_id (derived, never stored).

    Pointers reference the version currently in each status; when several
    versions share a status (e.g. two REJECTED), the highest version wins.
    """
    document_id: str
    title: str
    versions: Tuple[PolicyVersion, ...]
    archived: Tuple[PolicyVersion, ...] = ()
    active: Optional[PolicyVersion] = None
    draft: Optional[PolicyVersion] = None
    pending: Optional[PolicyVersion] = None
    rejected: Optional[PolicyVersion] = None
    deleted: Optional[PolicyVersion] = None
