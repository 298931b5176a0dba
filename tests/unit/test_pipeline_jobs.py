"""Unit tests for the preprocessing / indexing pipelines and schedulers"""

import logging
import threading

from policyflow.domain.policies import AuditAction, IndexingStatus, PolicyVersionStatus, PreprocessStatus
from policyflow.workers import JobKind, PipelineJob, QueuedJobScheduler, TimerJobScheduler

ADMIN = "admin"
REVIEWER = "reviewer"


class TestPreprocessJob:

    def test_completes_after_nominal_delay(self, service, workflow, scheduler):
        """Test the job does not fire before 450ms and produces a preview"""
        draft = workflow.draft("POL-1", 2)
        service.attach_file(draft.id, {"name": "policy.pdf"}, ADMIN)
        service.run_preprocess(draft.id, ADMIN)

        assert scheduler.advance(449) == 0
        assert service.get_version(draft.id).preprocess_status == PreprocessStatus.PROCESSING

        assert scheduler.advance(1) == 1
        ready = service.get_version(draft.id)
        assert ready.preprocess_status == PreprocessStatus.READY
        assert ready.preprocess_preview.page_count == 12
        assert ready.preprocess_preview.char_count == 19400
        assert "POL-1" in ready.preprocess_preview.excerpt
        assert ready.audit[-1].action == AuditAction.PREPROCESS_DONE
        assert ready.audit[-1].actor == "SYSTEM"

    def test_failure_marker_in_primary_file(self, service, workflow, scheduler):
        """Test a primary file name containing the marker fails preprocessing"""
        draft = workflow.draft("POL-1", 1)
        service.attach_file(draft.id, {"name": "Scan_FAIL.pdf"}, ADMIN)
        service.run_preprocess(draft.id, ADMIN)

        scheduler.run_all()

        failed = service.get_version(draft.id)
        assert failed.preprocess_status == PreprocessStatus.FAILED
        assert failed.preprocess_error
        assert failed.preprocess_preview is None
        assert failed.audit[-1].action == AuditAction.PREPROCESS_FAIL

    def test_marker_only_checked_on_primary_file(self, service, workflow, scheduler):
        draft = workflow.draft("POL-1", 1)
        service.attach_files(draft.id, [{"name": "main.pdf"}, {"name": "fail_annex.pdf"}], ADMIN)
        service.run_preprocess(draft.id, ADMIN)

        scheduler.run_all()

        assert service.get_version(draft.id).preprocess_status == PreprocessStatus.READY

    def test_stale_job_suppressed_after_remove(self, service, workflow, scheduler):
        """Test removing the file before completion keeps preprocessing IDLE"""
        draft = workflow.draft("POL-1", 1)
        draft = service.attach_file(draft.id, {"name": "a.pdf"}, ADMIN)
        service.run_preprocess(draft.id, ADMIN)
        service.remove_file(draft.id, draft.attachments[0].id, ADMIN)
        audit_len = len(service.get_version(draft.id).audit)

        scheduler.run_all()

        current = service.get_version(draft.id)
        assert current.preprocess_status == PreprocessStatus.IDLE
        assert current.preprocess_preview is None
        assert len(current.audit) == audit_len

    def test_superseded_run_is_ignored(self, service, workflow, scheduler):
        """Test only the latest run's job completes when re-run while in flight"""
        draft = workflow.draft("POL-1", 1)
        service.attach_file(draft.id, {"name": "a.pdf"}, ADMIN)
        service.run_preprocess(draft.id, ADMIN)
        scheduler.advance(200)
        service.run_preprocess(draft.id, ADMIN)

        scheduler.advance(250)  # first job due, stale
        assert service.get_version(draft.id).preprocess_status == PreprocessStatus.PROCESSING

        scheduler.run_all()
        current = service.get_version(draft.id)
        assert current.preprocess_status == PreprocessStatus.READY
        assert [e.action for e in current.audit].count(AuditAction.PREPROCESS_DONE) == 1

    def test_job_tolerates_deleted_version(self, service, workflow, scheduler):
        draft = workflow.draft("POL-1", 1)
        service.attach_file(draft.id, {"name": "a.pdf"}, ADMIN)
        service.run_preprocess(draft.id, ADMIN)
        service.soft_delete(draft.id, ADMIN, "abandoned")

        assert scheduler.run_all() == 1
        assert service.get_version(draft.id).status == PolicyVersionStatus.DELETED

    def test_job_carries_correlation_id(self, service, workflow, scheduler):
        draft = workflow.draft("POL-1", 1)
        service.attach_file(draft.id, {"name": "a.pdf"}, ADMIN)
        service.run_preprocess(draft.id, ADMIN)

        (job,) = scheduler.pending()
        assert job.kind == JobKind.PREPROCESS
        assert job.correlation_id
        assert job.generation == service.get_version(draft.id).preprocess_generation


class TestIndexingJob:

    def test_indexing_done_after_delay(self, service, workflow, scheduler):
        pending = workflow.pending("POL-1", 1)
        service.reviewer_approve(pending.id, REVIEWER)

        assert scheduler.advance(649) == 0
        scheduler.advance(1)

        done = service.get_version(pending.id)
        assert done.indexing_status == IndexingStatus.DONE
        assert done.audit[-1].action == AuditAction.INDEX_DONE

    def test_indexing_failure_marker_case_insensitive(self, service, workflow, scheduler):
        pending = workflow.pending("POL-1", 1, summary="table update fail_index")
        service.reviewer_approve(pending.id, REVIEWER)

        scheduler.run_all()

        failed = service.get_version(pending.id)
        assert failed.indexing_status == IndexingStatus.FAILED
        assert failed.audit[-1].action == AuditAction.INDEX_FAIL

    def test_indexing_completes_after_newer_approval(self, service, workflow, scheduler):
        """Test a version archived before its indexing job fires still finishes indexing"""
        v1 = workflow.pending("POL-1", 1)
        v2 = workflow.pending("POL-1", 2)

        service.reviewer_approve(v1.id, REVIEWER)
        service.reviewer_approve(v2.id, REVIEWER)
        scheduler.run_all()

        archived = service.get_version(v1.id)
        assert archived.status == PolicyVersionStatus.ARCHIVED
        assert archived.indexing_status == IndexingStatus.DONE
        assert archived.audit[-1].action == AuditAction.INDEX_DONE
        assert service.get_version(v2.id).indexing_status == IndexingStatus.DONE

    def test_indexing_failure_recorded_on_archived_version(self, service, workflow, scheduler):
        v1 = workflow.pending("POL-1", 1, summary="FAIL_INDEX table")
        v2 = workflow.pending("POL-1", 2)

        service.reviewer_approve(v1.id, REVIEWER)
        service.reviewer_approve(v2.id, REVIEWER)
        scheduler.run_all()

        assert service.get_version(v1.id).indexing_status == IndexingStatus.FAILED

    def test_indexing_completes_on_version_rolled_back_from(self, service, workflow, scheduler):
        """Test rollback restores v1 as DONE and v2's pending job still finishes"""
        v1 = workflow.pending("POL-1", 1)
        service.reviewer_approve(v1.id, REVIEWER)
        v2 = workflow.pending("POL-1", 2)  # runs v1's indexing job via run_all
        assert service.get_version(v1.id).indexing_status == IndexingStatus.DONE

        service.reviewer_approve(v2.id, REVIEWER)
        service.rollback("POL-1", v1.id, REVIEWER)
        scheduler.run_all()

        assert service.get_version(v2.id).status == PolicyVersionStatus.ARCHIVED
        assert service.get_version(v2.id).indexing_status == IndexingStatus.DONE
        restored = service.get_version(v1.id)
        assert restored.status == PolicyVersionStatus.ACTIVE
        assert restored.indexing_status == IndexingStatus.DONE
        assert restored.audit[-1].action == AuditAction.ROLLBACK


class TestQueuedJobScheduler:

    def make_job(self, job_id, delay_ms):
        return PipelineJob(job_id=job_id, kind=JobKind.PREPROCESS, version_id="v", generation=1, delay_ms=delay_ms)

    def test_runs_in_due_order(self):
        scheduler = QueuedJobScheduler()
        ran = []
        scheduler.schedule(self.make_job("slow", 650), lambda job: ran.append(job.job_id))
        scheduler.schedule(self.make_job("fast", 450), lambda job: ran.append(job.job_id))

        assert scheduler.run_all() == 2
        assert ran == ["fast", "slow"]
        assert scheduler.now_ms == 650

    def test_jobs_scheduled_by_handlers_run_within_window(self):
        scheduler = QueuedJobScheduler()
        ran = []

        def chain(job):
            ran.append(job.job_id)
            if job.job_id == "first":
                scheduler.schedule(self.make_job("second", 100), lambda j: ran.append(j.job_id))

        scheduler.schedule(self.make_job("first", 100), chain)

        assert scheduler.advance(200) == 2
        assert ran == ["first", "second"]


class TestTimerJobScheduler:

    def test_wait_idle_after_jobs_fire(self):
        scheduler = TimerJobScheduler()
        done = threading.Event()
        job = PipelineJob(job_id="j1", kind=JobKind.INDEXING, version_id="v", generation=1, delay_ms=10)

        scheduler.schedule(job, lambda j: done.set())

        assert scheduler.wait_idle(timeout=5) is True
        assert done.is_set()
        assert scheduler.pending_count == 0

    def test_handler_errors_are_logged(self, caplog):
        scheduler = TimerJobScheduler()
        job = PipelineJob(job_id="j2", kind=JobKind.PREPROCESS, version_id="v", generation=1, delay_ms=0)

        def broken(_job):
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="policyflow.workers.scheduler"):
            scheduler.schedule(job, broken)
            assert scheduler.wait_idle(timeout=5) is True

        assert any("j2" in record.getMessage() for record in caplog.records)
