"""Injectable time and id sources.

The store takes both as constructor arguments so tests can substitute
deterministic fakes for wall-clock time and random ids.
"""

from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

Clock = Callable[[], datetime]
IdGenerator = Callable[[str], str]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def random_id(prefix: str) -> str:
    """Random id with a readable prefix, e.g. 'att-3f9c0a1b2d4e'"""
    return f"{prefix}-{uuid4().hex[:12]}"
