from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Union

from orgdir.exceptions import ValidationError

# width of every id column
MAX_ID_LENGTH = 64


@dataclass(frozen=True, order=True)
class EntityId:
    """
    Opaque, globally unique identifier.

    Any non-empty string is accepted, so looking up a malformed id finds
    nothing instead of failing validation. Only ids that are about to be
    written must fit the id columns; see ``require_storable``. New ids are
    random UUID4 strings.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError(
                f"Identifier must be a string, got {type(self.value).__name__}",
                field="id",
            )
        if not self.value.strip():
            raise ValidationError("Identifier must not be empty", field="id")

    @classmethod
    def new(cls) -> "EntityId":
        return cls(str(uuid.uuid4()))

    @classmethod
    def of(cls, value: "IdLike") -> "EntityId":
        if isinstance(value, EntityId):
            return value
        if isinstance(value, uuid.UUID):
            return cls(str(value))
        return cls(value)

    @property
    def is_storable(self) -> bool:
        return len(self.value) <= MAX_ID_LENGTH

    def require_storable(self, field: str = "id") -> "EntityId":
        """Return self, or raise ``ValidationError`` if too long to persist."""
        if not self.is_storable:
            raise ValidationError(
                f"Identifier longer than {MAX_ID_LENGTH} characters", field=field
            )
        return self

    def __str__(self) -> str:
        return self.value


IdLike = Union[EntityId, str, uuid.UUID]
