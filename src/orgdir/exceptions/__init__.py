"""
orgdir Exception Hierarchy

This module provides the typed failures raised by the directory core. Every
error carries a machine-readable code, a severity, a retry classification and
structured context so the (out of scope) transport layer can translate it
into a response without inspecting messages.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for categorizing exceptions."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RetryPolicy(Enum):
    """Retry policy classification for exceptions."""

    NEVER = "never"  # Permanent failures (bad input, missing rows, conflicts)
    CALLER = "caller"  # The core never retries; the caller may


class DirectoryError(Exception):
    """
    Base exception class for all directory errors.

    Attributes
    ----------
    message : str
        Human-readable error message
    error_code : str
        Machine-readable error code for categorization
    severity : ErrorSeverity
        Error severity level
    retry_policy : RetryPolicy
        Retry classification for this error type
    context : Dict[str, Any]
        Additional error context and metadata
    timestamp : datetime
        When the error occurred
    cause : Optional[Exception]
        Original exception that caused this error
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        retry_policy: RetryPolicy = RetryPolicy.NEVER,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.retry_policy = retry_policy
        self.context = dict(context or {})  # Create a copy to avoid mutation
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause

        self.context.update(
            {
                "timestamp": self.timestamp.isoformat(),
                "error_code": self.error_code,
                "severity": self.severity.value,
                "retry_policy": self.retry_policy.value,
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging and serialization.

        Returns
        -------
        Dict[str, Any]
            Structured error data with all metadata
        """
        return {
            "message": self.message,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "retry_policy": self.retry_policy.value,
            "http_status": self.http_status,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
            "exception_type": self.__class__.__name__,
        }

    def is_retryable(self) -> bool:
        """
        Check if the caller may retry the failed operation.

        The core itself never retries.
        """
        return self.retry_policy == RetryPolicy.CALLER

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"severity={self.severity.value}, "
            f"retry_policy={self.retry_policy.value}"
            f")"
        )


# Import all exception types for convenient access
from .domain_errors import (  # noqa: E402
    ValidationError,
    InvalidOwnershipError,
    NotFoundError,
)
from .storage_errors import (  # noqa: E402
    ConstraintViolationError,
    TransactionError,
)
from .config_errors import ConfigurationError  # noqa: E402


__all__ = [
    # Base classes
    "DirectoryError",
    "ErrorSeverity",
    "RetryPolicy",
    # Domain errors
    "ValidationError",
    "InvalidOwnershipError",
    "NotFoundError",
    # Storage errors
    "ConstraintViolationError",
    "TransactionError",
    # Configuration errors
    "ConfigurationError",
]
