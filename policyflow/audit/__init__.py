"""Audit trail construction for policy versions"""

from .service import AuditRecorder, append_audit

__all__ = ["AuditRecorder", "append_audit"]
