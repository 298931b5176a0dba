"""Pipeline worker: turns lifecycle transitions into scheduled jobs.

The lifecycle service commits the PROCESSING / INDEXING state (with a bumped
generation counter) and then calls enqueue(); the scheduler later hands the
job back to handle(), which dispatches to the job-specific completion
function under the correlation id of the originating operation.
"""

import logging

from ..audit.service import AuditRecorder
from ..clock import Clock, IdGenerator
from ..config import Settings
from ..domain.policies.models import PolicyVersion
from ..observability.correlation import correlation_scope, current_correlation_id
from ..store.version_store import VersionStore
from .indexing_worker import complete_indexing_job
from .jobs import JobKind, PipelineJob
from .preprocess_worker import complete_preprocess_job
from .scheduler import JobScheduler

logger = logging.getLogger(__name__)


class PipelineWorker:
    """Schedules and completes preprocessing and indexing jobs.

    Args:
        store: Version store written on completion
        scheduler: Delayed execution port
        recorder: Audit event factory
        clock: Time source
        new_id: Id generator for job ids
        settings: Delays and failure markers
    """

    def __init__(
        self,
        store: VersionStore,
        scheduler: JobScheduler,
        recorder: AuditRecorder,
        clock: Clock,
        new_id: IdGenerator,
        settings: Settings,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._recorder = recorder
        self._clock = clock
        self._new_id = new_id
        self._settings = settings

    def enqueue(self, kind: JobKind, version: PolicyVersion) -> PipelineJob:
        """Schedule a job for the generation currently stored on `version`"""
        if kind == JobKind.PREPROCESS:
            generation = version.preprocess_generation
            delay_ms = self._settings.PREPROCESS_DELAY_MS
        else:
            generation = version.indexing_generation
            delay_ms = self._settings.INDEXING_DELAY_MS

        job = PipelineJob(
            job_id=self._new_id("job"),
            kind=kind,
            version_id=version.id,
            generation=generation,
            delay_ms=delay_ms,
            correlation_id=current_correlation_id(),
        )
        self._scheduler.schedule(job, self.handle)
        logger.info(
            f"Enqueued {kind.value} job {job.job_id} for {version.id} (generation={generation})",
            extra={"version_id": version.id, "job_kind": kind.value},
        )
        return job

    def handle(self, job: PipelineJob) -> None:
        """Complete a job through the store commit path"""
        with correlation_scope(job.correlation_id):
            if job.kind == JobKind.PREPROCESS:
                complete_preprocess_job(
                    self._store,
                    job,
                    self._recorder,
                    self._clock,
                    self._settings.PREPROCESS_FAILURE_MARKER,
                )
            else:
                complete_indexing_job(
                    self._store,
                    job,
                    self._recorder,
                    self._clock,
                    self._settings.INDEXING_FAILURE_MARKER,
                )
