"""Demo policy documents loaded on first hydration when SEED_DEMO_DATA is set.

The set covers every status so a fresh store can be explored end to end:
an archived/active/draft chain, pending reviews (one flagged for PII risk),
a failed indexing run, a rejection and a tombstone. Some records only carry
the legacy file_name field; the store promotes them to attachments on load.
"""

from dataclasses import replace
from datetime import datetime, timedelta
from typing import List, Optional

from .domain.policies.identifiers import version_id_for
from .domain.policies.models import (
    Attachment,
    AuditAction,
    AuditEvent,
    PolicyVersion,
)
from .domain.policies.status import IndexingStatus, PolicyVersionStatus, PreprocessStatus
from .workers.indexing_worker import INDEXING_ERROR_MESSAGE
from .workers.preprocess_worker import build_preview

ADMIN = "SYSTEM_ADMIN"
REVIEWER = "CONTENTS_REVIEWER"


def _event(version_id: str, n: int, at: datetime, actor: str, action: AuditAction,
           message: Optional[str] = None) -> AuditEvent:
    return AuditEvent(id=f"pa-seed-{version_id}-{n}", at=at, actor=actor, action=action, message=message)


def _history(version_id: str, start: datetime, *steps) -> tuple:
    """Audit trail from (hours_after_start, actor, action, message) steps"""
    return tuple(
        _event(version_id, i, start + timedelta(hours=hours), actor, action, message)
        for i, (hours, actor, action, message) in enumerate(steps, start=1)
    )


def _version(document_id: str, version: int, title: str, change_summary: str,
             status: PolicyVersionStatus, created_at: datetime, **fields) -> PolicyVersion:
    version_id = version_id_for(document_id, version)
    return PolicyVersion(
        id=version_id,
        document_id=document_id,
        version=version,
        title=title,
        change_summary=change_summary,
        status=status,
        created_at=created_at,
        updated_at=fields.pop("updated_at", created_at + timedelta(hours=4)),
        **fields,
    )


def _with_preview(version: PolicyVersion) -> PolicyVersion:
    return replace(version, preprocess_status=PreprocessStatus.READY, preprocess_preview=build_preview(version))


def build_demo_versions(now: datetime) -> List[PolicyVersion]:
    """Build the demo versions relative to `now`"""
    day = timedelta(days=1)
    versions: List[PolicyVersion] = []

    # POL-0001: archived v1, active v2, draft v3
    t1 = now - 120 * day
    versions.append(_version(
        "POL-0001", 1, "Code of conduct", "Initial publication", PolicyVersionStatus.ARCHIVED, t1,
        attachments=(Attachment("att-seed-0001-1", "code_of_conduct_v1.pdf", t1, 482_113, "application/pdf"),),
        preprocess_status=PreprocessStatus.READY,
        indexing_status=IndexingStatus.DONE,
        activated_at=t1 + 2 * day,
        archived_at=now - 40 * day,
        audit=_history(
            "pol-POL-0001-v1", t1,
            (0, ADMIN, AuditAction.CREATE_DRAFT, "draft v1 created"),
            (1, ADMIN, AuditAction.UPLOAD_FILE, "uploaded: code_of_conduct_v1.pdf"),
            (2, ADMIN, AuditAction.SUBMIT_REVIEW, "review requested"),
            (48, REVIEWER, AuditAction.REVIEW_APPROVE, "approved"),
            (80 * 24, REVIEWER, AuditAction.ARCHIVE, "archived: v2 activated"),
        ),
    ))
    t2 = now - 42 * day
    versions.append(_version(
        "POL-0001", 2, "Code of conduct", "Gift and hospitality limits updated",
        PolicyVersionStatus.ACTIVE, t2,
        attachments=(Attachment("att-seed-0001-2", "code_of_conduct_v2.pdf", t2, 501_877, "application/pdf"),),
        preprocess_status=PreprocessStatus.READY,
        indexing_status=IndexingStatus.DONE,
        activated_at=now - 40 * day,
        audit=_history(
            "pol-POL-0001-v2", t2,
            (0, ADMIN, AuditAction.CREATE_DRAFT, "draft v2 created"),
            (1, ADMIN, AuditAction.UPLOAD_FILE, "uploaded: code_of_conduct_v2.pdf"),
            (3, ADMIN, AuditAction.SUBMIT_REVIEW, "review requested"),
            (48, REVIEWER, AuditAction.REVIEW_APPROVE, "approved"),
            (49, "SYSTEM", AuditAction.INDEX_DONE, "indexing completed"),
        ),
    ))
    t3 = now - 2 * day
    versions.append(_with_preview(_version(
        "POL-0001", 3, "Code of conduct", "Whistleblowing channel added", PolicyVersionStatus.DRAFT, t3,
        attachments=(Attachment("att-seed-0001-3", "code_of_conduct_v3.docx", t3, 96_400),),
        audit=_history(
            "pol-POL-0001-v3", t3,
            (0, ADMIN, AuditAction.CREATE_DRAFT, "draft v3 created"),
            (1, ADMIN, AuditAction.UPLOAD_FILE, "uploaded: code_of_conduct_v3.docx"),
            (2, "SYSTEM", AuditAction.PREPROCESS_DONE, "preprocessing completed"),
        ),
    )))

    # POL-0002: active v1, pending v2 (title mentions privacy → medium PII risk)
    t4 = now - 200 * day
    versions.append(_version(
        "POL-0002", 1, "Privacy handling guideline", "Initial publication", PolicyVersionStatus.ACTIVE, t4,
        file_name="privacy_guideline_v1.pdf",
        file_size_bytes=230_004,
        preprocess_status=PreprocessStatus.READY,
        indexing_status=IndexingStatus.DONE,
        activated_at=t4 + day,
        audit=_history(
            "pol-POL-0002-v1", t4,
            (0, ADMIN, AuditAction.CREATE_DRAFT, "draft v1 created"),
            (24, REVIEWER, AuditAction.REVIEW_APPROVE, "approved"),
        ),
    ))
    t5 = now - day
    versions.append(_with_preview(_version(
        "POL-0002", 2, "Privacy handling guideline", "Retention periods for customer records",
        PolicyVersionStatus.PENDING_REVIEW, t5,
        attachments=(Attachment("att-seed-0002-2", "privacy_guideline_v2.pdf", t5, 244_390, "application/pdf"),),
        review_requested_at=t5 + timedelta(hours=3),
        review_item_id="rvw-pol-POL-0002-v2-seed",
        audit=_history(
            "pol-POL-0002-v2", t5,
            (0, ADMIN, AuditAction.CREATE_DRAFT, "draft v2 created"),
            (1, ADMIN, AuditAction.UPLOAD_FILE, "uploaded: privacy_guideline_v2.pdf"),
            (2, "SYSTEM", AuditAction.PREPROCESS_DONE, "preprocessing completed"),
            (3, ADMIN, AuditAction.SUBMIT_REVIEW, "review requested (rvw-pol-POL-0002-v2-seed)"),
        ),
    )))

    # POL-0003: active v1 with failed indexing, rejected v2
    t6 = now - 30 * day
    versions.append(_version(
        "POL-0003", 1, "Expense reimbursement rules", "Per diem table for 2025",
        PolicyVersionStatus.ACTIVE, t6,
        attachments=(Attachment("att-seed-0003-1", "expenses_v1.xlsx", t6, 58_120),),
        preprocess_status=PreprocessStatus.READY,
        indexing_status=IndexingStatus.FAILED,
        indexing_error=INDEXING_ERROR_MESSAGE,
        activated_at=t6 + day,
        audit=_history(
            "pol-POL-0003-v1", t6,
            (0, ADMIN, AuditAction.CREATE_DRAFT, "draft v1 created"),
            (24, REVIEWER, AuditAction.REVIEW_APPROVE, "approved"),
            (25, "SYSTEM", AuditAction.INDEX_FAIL, "indexing failed"),
        ),
    ))
    t7 = now - 10 * day
    versions.append(_version(
        "POL-0003", 2, "Expense reimbursement rules", "tbd", PolicyVersionStatus.REJECTED, t7,
        attachments=(Attachment("att-seed-0003-2", "expenses_v2.xlsx", t7, 61_002),),
        preprocess_status=PreprocessStatus.READY,
        review_requested_at=t7 + timedelta(hours=1),
        review_item_id="rvw-pol-POL-0003-v2-seed",
        rejected_at=t7 + day,
        reject_reason="Change summary does not describe the changes",
        audit=_history(
            "pol-POL-0003-v2", t7,
            (0, ADMIN, AuditAction.CREATE_DRAFT, "draft v2 created"),
            (1, ADMIN, AuditAction.SUBMIT_REVIEW, "review requested"),
            (24, REVIEWER, AuditAction.REVIEW_REJECT, "Change summary does not describe the changes"),
        ),
    ))

    # POL-0004: deleted draft (legacy file field only)
    t8 = now - 5 * day
    versions.append(_version(
        "POL-0004", 1, "Remote work policy", "First draft", PolicyVersionStatus.DELETED, t8,
        file_name="remote_work_draft.docx",
        file_size_bytes=40_960,
        deleted_at=t8 + day,
        audit=_history(
            "pol-POL-0004-v1", t8,
            (0, ADMIN, AuditAction.CREATE_DRAFT, "draft v1 created"),
            (24, ADMIN, AuditAction.SOFT_DELETE, "Superseded by the hybrid work policy"),
        ),
    ))

    # POL-0005: pending first version (security → medium PII risk)
    t9 = now - timedelta(hours=6)
    versions.append(_with_preview(_version(
        "POL-0005", 1, "Security incident response", "Initial publication",
        PolicyVersionStatus.PENDING_REVIEW, t9,
        file_name="incident_response.pdf",
        file_size_bytes=310_552,
        review_requested_at=t9 + timedelta(hours=2),
        review_item_id="rvw-pol-POL-0005-v1-seed",
        updated_at=t9 + timedelta(hours=2),
        audit=_history(
            "pol-POL-0005-v1", t9,
            (0, ADMIN, AuditAction.CREATE_DRAFT, "draft v1 created"),
            (2, ADMIN, AuditAction.SUBMIT_REVIEW, "review requested (rvw-pol-POL-0005-v1-seed)"),
        ),
    )))

    return versions
