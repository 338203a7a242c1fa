"""
Include specification for selective reads of a person's graph.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from orgdir.exceptions import ValidationError


class PrincipalInclude(BaseModel):
    """Options for the principal subgraph."""

    account: bool = Field(False, description="Nest the account under the principal")

    model_config = ConfigDict(extra="forbid", frozen=True)


class PersonInclude(BaseModel):
    """
    Which optional subgraphs to attach to a person read.

    ``principal`` accepts ``True``, ``{}``, ``{"account": bool}`` or the
    nested ``{"include": {"account": bool}}`` form; ``False``/``None`` leave
    the principal out.
    """

    contacts: bool = False
    principal: Optional[PrincipalInclude] = None
    facilities: bool = False
    organization: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("principal", mode="before")
    @classmethod
    def _coerce_principal(cls, value: Any) -> Any:
        if value is None or value is False:
            return None
        if value is True:
            return PrincipalInclude()
        if isinstance(value, Mapping) and "include" in value:
            siblings = sorted(k for k in value if k != "include")
            if siblings:
                raise ValueError(
                    f"principal options must go inside 'include', got {siblings} beside it"
                )
            return value["include"] or {}
        return value

    @classmethod
    def coerce(
        cls, value: Union["PersonInclude", Mapping[str, Any], None]
    ) -> "PersonInclude":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(dict(value))
        except (PydanticValidationError, TypeError, ValueError) as exc:
            raise ValidationError(
                f"Invalid include specification: {exc}", field="include", cause=exc
            ) from exc

    @property
    def include_account(self) -> bool:
        return self.principal is not None and self.principal.account

    @property
    def is_empty(self) -> bool:
        return not (
            self.contacts or self.principal is not None or self.facilities or self.organization
        )
