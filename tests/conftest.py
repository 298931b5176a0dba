"""Pytest fixtures for the policy lifecycle tests.

Provides reusable test fixtures for:
- A controllable clock and sequential id generator (deterministic audit trails)
- A virtual-time job scheduler (no real timers)
- An in-memory review desk
- A ready-to-use PolicyVersionService and a workflow helper that drives
  versions into a given lifecycle state

Usage:
    def test_submit(service, workflow):
        draft = workflow.ready_draft("POL-1", 1)
        pending = service.submit_review_request(draft.id, "admin")
        assert pending.status == PolicyVersionStatus.PENDING_REVIEW
"""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from policyflow.config import Settings
from policyflow.domain.policies import PolicyVersion
from policyflow.lifecycle import PolicyVersionService
from policyflow.review_linkage import InMemoryReviewDesk
from policyflow.workers import QueuedJobScheduler

ADMIN = "admin"
REVIEWER = "reviewer"

START = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to"""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class SequentialIds:
    """Id generator producing <prefix>-0001, <prefix>-0002, ..."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter):04d}"


class PolicyWorkflow:
    """Drives versions through the lifecycle with the virtual-time scheduler"""

    def __init__(self, service: PolicyVersionService, scheduler: QueuedJobScheduler, clock: FakeClock):
        self.service = service
        self.scheduler = scheduler
        self.clock = clock

    def draft(self, document_id: str, version: int, summary: str = "Quarterly update",
              title: Optional[str] = None) -> PolicyVersion:
        self.clock.advance(seconds=1)
        return self.service.create_draft(document_id, title or f"Policy {document_id}", version, summary, ADMIN)

    def ready_draft(self, document_id: str, version: int, summary: str = "Quarterly update",
                    file_name: Optional[str] = None) -> PolicyVersion:
        draft = self.draft(document_id, version, summary)
        name = file_name or f"{document_id.lower()}_v{version}.pdf"
        self.service.attach_files(draft.id, [{"name": name, "size_bytes": 1024}], ADMIN)
        self.service.run_preprocess(draft.id, ADMIN)
        self.scheduler.run_all()
        return self.service.get_version(draft.id)

    def pending(self, document_id: str, version: int, summary: str = "Quarterly update") -> PolicyVersion:
        draft = self.ready_draft(document_id, version, summary)
        return self.service.submit_review_request(draft.id, ADMIN)

    def active(self, document_id: str, version: int, summary: str = "Quarterly update") -> PolicyVersion:
        pending = self.pending(document_id, version, summary)
        self.service.reviewer_approve(pending.id, REVIEWER)
        self.scheduler.run_all()
        return self.service.get_version(pending.id)


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (ignores a developer's .env)"""
    return Settings(_env_file=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def scheduler() -> QueuedJobScheduler:
    return QueuedJobScheduler()


@pytest.fixture
def desk(clock, ids) -> InMemoryReviewDesk:
    return InMemoryReviewDesk(clock=clock, new_id=ids)


@pytest.fixture
def service(scheduler, desk, settings, clock, ids) -> PolicyVersionService:
    return PolicyVersionService(
        scheduler=scheduler,
        review_intake=desk,
        settings=settings,
        clock=clock,
        new_id=ids,
    )


@pytest.fixture
def workflow(service, scheduler, clock) -> PolicyWorkflow:
    return PolicyWorkflow(service, scheduler, clock)
