"""Correlation ID management for operation tracing.

Every public store operation runs inside a correlation scope; background jobs
inherit the id of the operation that scheduled them so their log lines can be
joined back to the triggering call.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Context variable for correlation_id (thread- and async-safe)
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    """Generate a new unique correlation ID.

    Returns:
        str: UUID v4 correlation ID
    """
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Get current correlation ID from context.

    Returns:
        str: Current correlation ID or "no-correlation-id" if not set
    """
    return correlation_id_var.get() or "no-correlation-id"


def current_correlation_id() -> Optional[str]:
    """Current correlation ID, or None outside of a scope"""
    return correlation_id_var.get()


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Run a block under a correlation ID.

    Nested scopes without an explicit id keep the outer id, so an operation
    that calls another operation logs under a single id.

    Args:
        correlation_id: Explicit id to use (e.g. carried by a background job)

    Yields:
        str: The active correlation ID
    """
    active = correlation_id or correlation_id_var.get() or generate_correlation_id()
    token = correlation_id_var.set(active)
    try:
        yield active
    finally:
        correlation_id_var.reset(token)
