"""
Operation scope for directory log records.

A scope names the running directory operation, the person it concerns and a
correlation id. It lives in a context variable, so every log line written by
the orchestrator, the session factory and the repositories during one
operation carries the same fields, even across awaits.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Dict, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field


class OperationScope(BaseModel):
    correlation_id: str = Field(default_factory=lambda: uuid.uuid4().hex, min_length=1)
    operation: Optional[str] = Field(None, max_length=100)
    person_id: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    def log_fields(self) -> Dict[str, str]:
        return self.model_dump(exclude_none=True)


_current_scope: ContextVar[Optional[OperationScope]] = ContextVar(
    "orgdir_operation_scope", default=None
)


def current_scope() -> Optional[OperationScope]:
    return _current_scope.get()


def get_correlation_id() -> Optional[str]:
    scope = _current_scope.get()
    return scope.correlation_id if scope else None


@contextmanager
def observability_context(
    operation: Optional[str] = None,
    person_id: Optional[str] = None,
    correlation_id: Optional[str] = None,
) -> Iterator[OperationScope]:
    """
    Scope log records to one directory operation.

    Unset values are inherited from the enclosing scope, so a nested scope
    keeps its parent's correlation id. The enclosing scope is restored on
    exit.
    """
    parent = _current_scope.get()
    values = parent.log_fields() if parent else {}
    if operation is not None:
        values["operation"] = operation
    if person_id is not None:
        values["person_id"] = person_id
    if correlation_id is not None:
        values["correlation_id"] = correlation_id

    scope = OperationScope(**values)
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)
