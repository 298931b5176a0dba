"""Background pipelines: preprocessing after upload, indexing after approval"""

from .jobs import JobKind, PipelineJob
from .scheduler import JobScheduler, QueuedJobScheduler, TimerJobScheduler
from .pipeline import PipelineWorker

__all__ = [
    "JobKind",
    "PipelineJob",
    "JobScheduler",
    "QueuedJobScheduler",
    "TimerJobScheduler",
    "PipelineWorker",
]
