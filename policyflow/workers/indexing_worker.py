"""Search indexing job - runs after approval or an indexing retry.

The outcome is keyed off the failure marker in the change summary. Results
are applied while the version is INDEXING for the job's generation, even if
a newer approval archived it in the meantime; a rollback or a retry bumps
the generation and so discards the older job.
"""

import logging
from typing import Optional

from ..audit.service import AuditRecorder, append_audit
from ..clock import Clock
from ..domain.policies.models import AuditAction, PolicyVersion
from ..domain.policies.status import IndexingStatus
from ..store.version_store import VersionStore
from .jobs import PipelineJob

logger = logging.getLogger(__name__)

INDEXING_ERROR_MESSAGE = "Indexing failed (500): an error occurred while processing."


def indexing_should_fail(version: PolicyVersion, failure_marker: str) -> bool:
    """Check whether the change summary carries the failure marker"""
    if not failure_marker:
        return False
    return failure_marker.upper() in (version.change_summary or "").upper()


def is_current_indexing_job(version: PolicyVersion, job: PipelineJob) -> bool:
    return (
        version.indexing_status == IndexingStatus.INDEXING
        and version.indexing_generation == job.generation
    )


def complete_indexing_job(
    store: VersionStore,
    job: PipelineJob,
    recorder: AuditRecorder,
    clock: Clock,
    failure_marker: str,
) -> Optional[PolicyVersion]:
    """Apply the outcome of an indexing job through the store commit path.

    Returns:
        The updated version, or None if the job result was stale
    """
    with store.mutation() as tx:
        current = tx.find(job.version_id)
        if current is None or not is_current_indexing_job(current, job):
            logger.info(
                f"Indexing job {job.job_id} for {job.version_id} is stale, skipping",
                extra={"version_id": job.version_id, "job_kind": job.kind.value},
            )
            return None

        if indexing_should_fail(current, failure_marker):
            updated = append_audit(
                current,
                recorder.system_event(AuditAction.INDEX_FAIL, "indexing failed"),
                indexing_status=IndexingStatus.FAILED,
                indexing_error=INDEXING_ERROR_MESSAGE,
                updated_at=clock(),
            )
            logger.warning(
                f"Indexing failed for {current.id}",
                extra={"version_id": current.id, "document_id": current.document_id},
            )
        else:
            updated = append_audit(
                current,
                recorder.system_event(AuditAction.INDEX_DONE, "indexing completed"),
                indexing_status=IndexingStatus.DONE,
                indexing_error=None,
                updated_at=clock(),
            )
            logger.info(
                f"Indexing completed for {current.id}",
                extra={"version_id": current.id, "document_id": current.document_id},
            )

        tx.put(updated)
    return updated
