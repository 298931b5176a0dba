"""Background job descriptions.

A job is a plain value: which pipeline, which version, and which generation
of that pipeline it was scheduled for. Handlers compare the generation with
the version's current counter to discard stale completions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class JobKind(str, Enum):
    """Background pipelines"""
    PREPROCESS = "PREPROCESS"
    INDEXING = "INDEXING"


@dataclass(frozen=True)
class PipelineJob:
    """One scheduled, non-cancelable job instance"""
    job_id: str
    kind: JobKind
    version_id: str
    generation: int
    delay_ms: int
    correlation_id: Optional[str] = None
