"""Observability: structured logging and correlation ids"""

from .correlation import (
    correlation_scope,
    current_correlation_id,
    generate_correlation_id,
    get_correlation_id,
)
from .logging_config import configure_logging, get_logger, JSONFormatter, CorrelationIdFilter

__all__ = [
    "correlation_scope",
    "current_correlation_id",
    "generate_correlation_id",
    "get_correlation_id",
    "configure_logging",
    "get_logger",
    "JSONFormatter",
    "CorrelationIdFilter",
]
