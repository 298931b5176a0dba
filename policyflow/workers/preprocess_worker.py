"""Preprocessing job - simulated text extraction after upload.

Completion is deterministic from the version content:
1. Re-read the version by id (no-op if it vanished or changed identity)
2. Discard the result unless the version is still a DRAFT in PROCESSING
   with the generation the job was scheduled for
3. Primary file name contains the failure marker → FAILED + PREPROCESS_FAIL
4. Otherwise compute a synthetic preview → READY + PREPROCESS_DONE
"""

import logging
from typing import Optional

from ..audit.service import AuditRecorder, append_audit
from ..clock import Clock
from ..domain.policies.models import AuditAction, PolicyVersion, PreprocessPreview
from ..domain.policies.status import PolicyVersionStatus, PreprocessStatus
from ..store.version_store import VersionStore
from .jobs import PipelineJob

logger = logging.getLogger(__name__)

PREPROCESS_ERROR_MESSAGE = "Preprocessing failed: text extraction did not succeed."


def preprocess_should_fail(version: PolicyVersion, failure_marker: str) -> bool:
    """Check whether the primary file name carries the failure marker"""
    if not failure_marker:
        return False
    return failure_marker.lower() in (version.file_name or "").lower()


def build_preview(version: PolicyVersion) -> PreprocessPreview:
    """Synthetic preview derived from the version's metadata.

    Example:
        >>> build_preview(v).page_count   # v.version == 2
        12
    """
    excerpt = (
        "[Preprocessing preview]\n"
        f"Document: {version.title} (document_id={version.document_id})\n"
        f"Version: {version.version_label}\n\n"
        "... (omitted) ...\n"
        "This document is simulated internal policy text.\n"
    )
    return PreprocessPreview(
        page_count=10 + (version.version % 4),
        char_count=18000 + version.version * 700,
        excerpt=excerpt,
    )


def is_current_preprocess_job(version: PolicyVersion, job: PipelineJob) -> bool:
    return (
        version.status == PolicyVersionStatus.DRAFT
        and version.preprocess_status == PreprocessStatus.PROCESSING
        and version.preprocess_generation == job.generation
    )


def complete_preprocess_job(
    store: VersionStore,
    job: PipelineJob,
    recorder: AuditRecorder,
    clock: Clock,
    failure_marker: str,
) -> Optional[PolicyVersion]:
    """Apply the outcome of a preprocessing job through the store commit path.

    Args:
        store: Version store
        job: Completed job description
        recorder: Audit event factory
        clock: Time source for updated_at
        failure_marker: Primary file names containing this marker fail

    Returns:
        The updated version, or None if the job result was stale
    """
    with store.mutation() as tx:
        current = tx.find(job.version_id)
        if current is None:
            logger.info(
                f"Preprocess job {job.job_id}: version {job.version_id} no longer exists, skipping",
                extra={"version_id": job.version_id, "job_kind": job.kind.value},
            )
            return None

        if not is_current_preprocess_job(current, job):
            logger.info(
                f"Preprocess job {job.job_id} is stale "
                f"(status={current.status.value}, preprocess={current.preprocess_status.value}, "
                f"generation={current.preprocess_generation}, job_generation={job.generation})",
                extra={"version_id": current.id, "job_kind": job.kind.value},
            )
            return None

        if preprocess_should_fail(current, failure_marker):
            updated = append_audit(
                current,
                recorder.system_event(AuditAction.PREPROCESS_FAIL, "preprocessing failed"),
                preprocess_status=PreprocessStatus.FAILED,
                preprocess_error=PREPROCESS_ERROR_MESSAGE,
                preprocess_preview=None,
                updated_at=clock(),
            )
            logger.warning(
                f"Preprocessing failed for {current.id} (file={current.file_name})",
                extra={"version_id": current.id, "document_id": current.document_id},
            )
        else:
            preview = build_preview(current)
            updated = append_audit(
                current,
                recorder.system_event(AuditAction.PREPROCESS_DONE, "preprocessing completed"),
                preprocess_status=PreprocessStatus.READY,
                preprocess_error=None,
                preprocess_preview=preview,
                updated_at=clock(),
            )
            logger.info(
                f"Preprocessing completed for {current.id}: "
                f"pages={preview.page_count}, chars={preview.char_count}",
                extra={"version_id": current.id, "document_id": current.document_id},
            )

        tx.put(updated)
    return updated
