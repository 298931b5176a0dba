"""Pydantic schemas for review work items handed to the review queue

The review queue is a separate system; these models are the payload that
crosses the boundary, so they are validated on construction.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


PiiRiskLevel = Literal["low", "medium", "high"]


class AutoCheckResult(BaseModel):
    """Automatic pre-review checks attached to a work item"""
    pii_risk_level: PiiRiskLevel = "low"
    pii_findings: List[str] = Field(default_factory=list)
    banned_words: List[str] = Field(default_factory=list)
    quality_warnings: List[str] = Field(default_factory=list)


class ReviewAuditEntry(BaseModel):
    """Audit entry kept by the review queue (not the policy audit trail)"""
    id: str
    action: str  # CREATED, SUBMITTED, APPROVED, REJECTED
    actor: str
    at: datetime
    detail: Optional[str] = None


class ReviewWorkItem(BaseModel):
    """Review work item descriptor for a submitted policy version"""
    id: str
    source_system: str
    content_id: str
    content_version_label: str
    title: str
    department: str
    creator_name: str
    content_type: str = "POLICY_DOC"
    content_category: str = "POLICY"

    created_at: datetime
    submitted_at: datetime
    last_updated_at: datetime
    status: str = "REVIEW_PENDING"  # REVIEW_PENDING, APPROVED, REJECTED

    policy_excerpt: str = ""
    auto_check: AutoCheckResult = Field(default_factory=AutoCheckResult)
    audit: List[ReviewAuditEntry] = Field(default_factory=list)

    version: int = Field(1, ge=1)
    risk_score: int = Field(10, ge=0, le=100)

    # Back-links resolved by the inbound callbacks
    policy_version_id: str
    policy_doc_id: str

    model_config = ConfigDict(extra="forbid")
