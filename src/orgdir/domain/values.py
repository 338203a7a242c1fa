"""
Validated text wrappers.

Upstream collaborators sanitize free text before calling the core. These
wrappers mark a value as having passed the core's own boundary checks, so
entities built from them never need to re-validate.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import ClassVar, Union

from orgdir.exceptions import ValidationError

LOCKED_SECRET_PREFIX = "!"


@dataclass(frozen=True)
class ValidatedText:
    value: str

    field_name: ClassVar[str] = "value"
    max_length: ClassVar[int] = 255

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError(
                f"{self.field_name} must be a string", field=self.field_name
            )
        cleaned = self.value.strip()
        if not cleaned:
            raise ValidationError(
                f"{self.field_name} must not be empty", field=self.field_name
            )
        if len(cleaned) > self.max_length:
            raise ValidationError(
                f"{self.field_name} must be at most {self.max_length} characters",
                field=self.field_name,
            )
        object.__setattr__(self, "value", cleaned)

    @classmethod
    def coerce(cls, value: Union["ValidatedText", str]):
        if isinstance(value, cls):
            return value
        if isinstance(value, ValidatedText):
            return cls(value.value)
        return cls(value)

    def __str__(self) -> str:
        return self.value


class PersonName(ValidatedText):
    field_name = "name"


class ContactValue(ValidatedText):
    field_name = "contact value"
    max_length = 512


class Username(ValidatedText):
    field_name = "username"


class SecretHash(ValidatedText):
    """A secret that was hashed upstream; the core never sees plaintext."""

    field_name = "password hash"
    max_length = 1024

    @classmethod
    def locked(cls, nbytes: int = 24) -> "SecretHash":
        """
        Credential marker that no hash function output can equal, so the
        account cannot log in until a real secret is set.
        """
        return cls(LOCKED_SECRET_PREFIX + secrets.token_urlsafe(nbytes))

    @property
    def is_locked(self) -> bool:
        return self.value.startswith(LOCKED_SECRET_PREFIX)
