"""
orgdir Observability Module

Structured logging scoped to directory operations.
"""

from .context import (
    OperationScope,
    current_scope,
    get_correlation_id,
    observability_context,
)
from .formatters import DirectoryFormatter
from .logger import StructuredLogger, TimedOperation, configure_logging, get_logger

__all__ = [
    "OperationScope",
    "current_scope",
    "get_correlation_id",
    "observability_context",
    "DirectoryFormatter",
    "StructuredLogger",
    "TimedOperation",
    "configure_logging",
    "get_logger",
]
