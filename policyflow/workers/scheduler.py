"""Job schedulers for the background pipelines.

JobScheduler is the port the lifecycle service depends on. Two adapters:

- TimerJobScheduler: fires each job on a daemon threading.Timer after its
  nominal delay (runtime behaviour).
- QueuedJobScheduler: keeps jobs in a virtual-time queue and runs them only
  when advanced or drained (deterministic tests, synchronous embedding).

Jobs are fire-and-forget: neither adapter supports cancellation. A
superseding mutation invalidates a job through the generation counter
instead.
"""

import heapq
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple

from .jobs import PipelineJob

logger = logging.getLogger(__name__)

JobHandler = Callable[[PipelineJob], None]


class JobScheduler(ABC):
    """Port interface for scheduling delayed job completions."""

    @abstractmethod
    def schedule(self, job: PipelineJob, handler: JobHandler) -> None:
        """Run `handler(job)` once, after `job.delay_ms` milliseconds"""
        pass


class TimerJobScheduler(JobScheduler):
    """Runs each job on its own daemon timer thread.

    Handler exceptions are logged; they never reach the caller that
    scheduled the job.
    """

    def __init__(self) -> None:
        self._timers: Dict[str, threading.Timer] = {}
        self._idle = threading.Condition()

    def schedule(self, job: PipelineJob, handler: JobHandler) -> None:
        timer = threading.Timer(job.delay_ms / 1000.0, self._run, args=(job, handler))
        timer.daemon = True
        with self._idle:
            self._timers[job.job_id] = timer
        timer.start()
        logger.debug(f"Scheduled {job.kind.value} job {job.job_id} in {job.delay_ms}ms")

    def _run(self, job: PipelineJob, handler: JobHandler) -> None:
        try:
            handler(job)
        except Exception:
            logger.exception(
                f"{job.kind.value} job {job.job_id} failed unexpectedly",
                extra={"version_id": job.version_id, "job_kind": job.kind.value},
            )
        finally:
            with self._idle:
                self._timers.pop(job.job_id, None)
                self._idle.notify_all()

    @property
    def pending_count(self) -> int:
        with self._idle:
            return len(self._timers)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every scheduled job has completed.

        Returns:
            True if idle, False if the timeout expired first
        """
        with self._idle:
            return self._idle.wait_for(lambda: not self._timers, timeout=timeout)


class QueuedJobScheduler(JobScheduler):
    """Virtual-time job queue.

    Time only moves when advance() or run_all() is called. Jobs run in
    due-time order, ties in scheduling order. Handler exceptions propagate
    to the caller of advance()/run_all().

    Example:
        scheduler = QueuedJobScheduler()
        service.run_preprocess(version_id, "admin")
        scheduler.advance(450)   # preprocessing completes here
    """

    def __init__(self) -> None:
        self._queue: List[Tuple[int, int, PipelineJob, JobHandler]] = []
        self._seq = itertools.count()
        self._now_ms = 0
        self._lock = threading.RLock()

    def schedule(self, job: PipelineJob, handler: JobHandler) -> None:
        with self._lock:
            heapq.heappush(self._queue, (self._now_ms + job.delay_ms, next(self._seq), job, handler))

    @property
    def now_ms(self) -> int:
        return self._now_ms

    def pending(self) -> List[PipelineJob]:
        """Jobs not yet run, in due order"""
        with self._lock:
            return [entry[2] for entry in sorted(self._queue)]

    def _pop_due(self, until_ms: Optional[int]) -> Optional[Tuple[PipelineJob, JobHandler]]:
        with self._lock:
            if not self._queue:
                return None
            if until_ms is not None and self._queue[0][0] > until_ms:
                return None
            due_ms, _, job, handler = heapq.heappop(self._queue)
            self._now_ms = max(self._now_ms, due_ms)
            return job, handler

    def advance(self, ms: int) -> int:
        """Move virtual time forward and run every job due by then.

        Jobs scheduled by handlers run too if they fall due in the window.

        Returns:
            Number of jobs run
        """
        target = self._now_ms + ms
        ran = 0
        while True:
            entry = self._pop_due(target)
            if entry is None:
                break
            job, handler = entry
            handler(job)
            ran += 1
        self._now_ms = target
        return ran

    def run_all(self) -> int:
        """Run jobs until the queue is empty.

        Returns:
            Number of jobs run
        """
        ran = 0
        while True:
            entry = self._pop_due(None)
            if entry is None:
                return ran
            job, handler = entry
            handler(job)
            ran += 1
