"""
Storage-related exceptions for orgdir.

These wrap failures reported by the relational store: constraint
violations and any other error inside a transactional block.
"""

from typing import Optional, Dict, Any
from . import DirectoryError, ErrorSeverity, RetryPolicy


class ConstraintViolationError(DirectoryError):
    """
    Storage-level uniqueness or foreign-key violation.

    Examples are a duplicate username, a second principal for the same
    person, or a contact referencing a nonexistent owner. Surfaced as a
    conflict and never retried.
    """

    http_status = 409

    def __init__(
        self,
        message: str,
        constraint: Optional[str] = None,
        entity: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        context = dict(context or {})
        if constraint:
            context["constraint"] = constraint
        if entity:
            context["entity"] = entity

        super().__init__(
            message=message,
            error_code="constraint_violation",
            severity=ErrorSeverity.MEDIUM,
            retry_policy=RetryPolicy.NEVER,
            context=context,
            cause=cause,
        )
        self.constraint = constraint
        self.entity = entity


class TransactionError(DirectoryError):
    """
    Any other failure inside a transactional block.

    Connectivity loss, deadlocks, timeouts and unexpected driver errors end
    up here. The transaction has already been rolled back when this is
    raised; retrying is left to the caller.
    """

    http_status = 500

    def __init__(
        self,
        operation: str,
        cause: Optional[Exception] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        if message is None:
            reason = f"{type(cause).__name__}: {cause}" if cause else "unknown error"
            message = f"Transaction '{operation}' failed and was rolled back ({reason})"

        context = dict(context or {})
        context["operation"] = operation

        super().__init__(
            message=message,
            error_code="transaction_failed",
            severity=ErrorSeverity.HIGH,
            retry_policy=RetryPolicy.CALLER,
            context=context,
            cause=cause,
        )
        self.operation = operation
