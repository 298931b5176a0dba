"""Builders for review work items.

Turns a policy version into the descriptor the review queue expects: version
label, excerpt, default auto-check payload and the back-links the inbound
callbacks use to find the version again.
"""

from datetime import datetime
from typing import List

from ..clock import IdGenerator
from ..config import Settings
from ..domain.policies.models import PolicyVersion
from .schemas import AutoCheckResult, PiiRiskLevel, ReviewAuditEntry, ReviewWorkItem

# Document id / title fragments that raise the sample PII risk level
ELEVATED_RISK_MARKERS = ("PRIV", "SEC")

RISK_SCORES = {"low": 10, "medium": 45, "high": 80}


def review_item_id_prefix(version: PolicyVersion) -> str:
    return f"rvw-pol-{version.document_id}-v{version.version}"


def build_policy_excerpt(version: PolicyVersion) -> str:
    """Change summary followed by the preprocessing preview excerpt"""
    summary = version.change_summary or "(none)"
    preview = version.preprocess_preview.excerpt if version.preprocess_preview else ""
    return f"Change summary: {summary}\n\n{preview}"


def assess_pii_risk(version: PolicyVersion) -> PiiRiskLevel:
    """Sample PII risk heuristic based on document id and title"""
    haystack = f"{version.document_id} {version.title}".upper()
    if any(marker in haystack for marker in ELEVATED_RISK_MARKERS):
        return "medium"
    return "low"


def quality_warnings(version: PolicyVersion, short_summary_threshold: int) -> List[str]:
    if len((version.change_summary or "").strip()) < short_summary_threshold:
        return ["Change summary is too short; the reviewer may reject it."]
    return []


def build_review_work_item(
    version: PolicyVersion,
    actor: str,
    item_id: str,
    now: datetime,
    new_id: IdGenerator,
    settings: Settings,
) -> ReviewWorkItem:
    """Build the work item sent to the review queue on submission.

    Submitted items always carry a low-risk default auto-check; the review
    queue runs its own checks afterwards.

    Args:
        version: Draft being submitted (preprocessing READY)
        actor: Submitting actor (becomes the creator on the work item)
        item_id: Proposed review item id
        now: Submission time
        new_id: Id generator for review audit entries
        settings: Source system, department and warning threshold

    Returns:
        ReviewWorkItem: Validated descriptor
    """
    return ReviewWorkItem(
        id=item_id,
        source_system=settings.REVIEW_SOURCE_SYSTEM,
        content_id=version.document_id,
        content_version_label=version.version_label,
        title=version.title,
        department=settings.REVIEW_DEPARTMENT,
        creator_name=actor,
        created_at=now,
        submitted_at=now,
        last_updated_at=now,
        policy_excerpt=build_policy_excerpt(version),
        auto_check=AutoCheckResult(
            pii_risk_level="low",
            quality_warnings=quality_warnings(version, settings.SHORT_SUMMARY_THRESHOLD),
        ),
        audit=[
            ReviewAuditEntry(id=new_id("aud"), action="CREATED", actor=actor, at=now,
                             detail="policy review item created"),
            ReviewAuditEntry(id=new_id("aud"), action="SUBMITTED", actor=actor, at=now,
                             detail="review requested"),
        ],
        risk_score=RISK_SCORES["low"],
        policy_version_id=version.id,
        policy_doc_id=version.document_id,
    )


def build_seed_review_item(
    version: PolicyVersion,
    now: datetime,
    new_id: IdGenerator,
    settings: Settings,
    creator: str = "SYSTEM_ADMIN",
) -> ReviewWorkItem:
    """Rebuild the work item of a seeded PENDING_REVIEW version.

    Unlike fresh submissions, seeded items get a PII risk estimate so the
    review queue has a mix of risk levels to show.
    """
    risk = assess_pii_risk(version)
    created_at = version.created_at or now
    submitted_at = version.review_requested_at or now
    return ReviewWorkItem(
        id=version.review_item_id,
        source_system=settings.REVIEW_SOURCE_SYSTEM,
        content_id=version.document_id,
        content_version_label=version.version_label,
        title=version.title,
        department=settings.REVIEW_DEPARTMENT,
        creator_name=creator,
        created_at=created_at,
        submitted_at=submitted_at,
        last_updated_at=version.updated_at or now,
        policy_excerpt=build_policy_excerpt(version),
        auto_check=AutoCheckResult(
            pii_risk_level=risk,
            pii_findings=(
                ["Sample: check detection rules for national id / account number / address patterns"]
                if risk == "medium" else []
            ),
            quality_warnings=quality_warnings(version, settings.SHORT_SUMMARY_THRESHOLD),
        ),
        audit=[
            ReviewAuditEntry(id=new_id("aud"), action="CREATED", actor=creator, at=created_at,
                             detail="policy review item created (seed)"),
            ReviewAuditEntry(id=new_id("aud"), action="SUBMITTED", actor=creator, at=submitted_at,
                             detail="review requested (seed)"),
        ],
        risk_score=RISK_SCORES[risk],
        policy_version_id=version.id,
        policy_doc_id=version.document_id,
    )
