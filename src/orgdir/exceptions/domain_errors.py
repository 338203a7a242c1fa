"""
Domain-level exceptions for orgdir.

These are raised before (or instead of) touching the store: caller-supplied
data that breaks an aggregate rule, or an identifier that does not exist.
"""

from typing import Optional, Dict, Any, Sequence
from . import DirectoryError, ErrorSeverity, RetryPolicy


class ValidationError(DirectoryError):
    """
    Caller-supplied data violates an invariant.

    Never retried automatically; surfaced to the caller for correction.
    """

    http_status = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: str = "validation_failed",
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        context = dict(context or {})
        if field:
            context["field"] = field

        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.LOW,
            retry_policy=RetryPolicy.NEVER,
            context=context,
            cause=cause,
        )
        self.field = field


class InvalidOwnershipError(ValidationError):
    """
    A contact address does not have exactly one owner.
    """

    def __init__(
        self,
        owners_set: Sequence[str],
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        owners = list(owners_set)
        if message is None:
            if owners:
                message = (
                    "Contact address must have exactly one owner, "
                    f"got {len(owners)}: {', '.join(owners)}"
                )
            else:
                message = "Contact address must have exactly one owner, got none"

        context = dict(context or {})
        context.update({"owners_set": owners, "owner_count": len(owners)})

        super().__init__(
            message=message,
            field="owner",
            error_code="contact_owner_invalid",
            context=context,
        )
        self.owners_set = owners


class NotFoundError(DirectoryError):
    """
    A referenced identifier does not exist at the time of the operation.

    Not retried; means "nothing happened".
    """

    http_status = 404

    def __init__(
        self,
        entity: str,
        entity_id: Any,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        message = message or f"{entity} not found: {entity_id}"

        context = dict(context or {})
        context.update({"entity": entity, "entity_id": str(entity_id)})

        super().__init__(
            message=message,
            error_code="not_found",
            severity=ErrorSeverity.LOW,
            retry_policy=RetryPolicy.NEVER,
            context=context,
            cause=cause,
        )
        self.entity = entity
        self.entity_id = str(entity_id)
