"""
Directory entities.

Plain frozen value objects. Children point at their parent through an id
field; parents never hold their children. Related data is attached only in
the read views built by the read composer.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Tuple

from .enums import ContactKind, OwnerKind, PrincipalKind
from .identifiers import EntityId


@dataclass(frozen=True)
class Person:
    id: EntityId
    name: str
    organization_id: Optional[EntityId] = None
    created_at: Optional[datetime] = field(default=None, compare=False)
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @classmethod
    def new(cls, name: str) -> "Person":
        return cls(id=EntityId.new(), name=name)

    def rename(self, name: str) -> "Person":
        return replace(self, name=name)


@dataclass(frozen=True)
class ContactAddress:
    id: EntityId
    kind: ContactKind
    value: str
    person_id: Optional[EntityId] = None
    facility_id: Optional[EntityId] = None
    organization_id: Optional[EntityId] = None
    created_at: Optional[datetime] = field(default=None, compare=False)
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @classmethod
    def for_person(
        cls, person_id: EntityId, value: str, kind: ContactKind = ContactKind.EMAIL
    ) -> "ContactAddress":
        return cls(id=EntityId.new(), kind=kind, value=value, person_id=person_id)

    def owners_set(self) -> List[OwnerKind]:
        owners = []
        if self.person_id is not None:
            owners.append(OwnerKind.PERSON)
        if self.facility_id is not None:
            owners.append(OwnerKind.FACILITY)
        if self.organization_id is not None:
            owners.append(OwnerKind.ORGANIZATION)
        return owners

    @property
    def owner(self) -> Tuple[OwnerKind, EntityId]:
        """The single owner of this contact; see ``validate_contact_ownership``."""
        from .invariants import validate_contact_ownership

        validate_contact_ownership(self)
        if self.person_id is not None:
            return OwnerKind.PERSON, self.person_id
        if self.facility_id is not None:
            return OwnerKind.FACILITY, self.facility_id
        return OwnerKind.ORGANIZATION, self.organization_id  # type: ignore[return-value]


@dataclass(frozen=True)
class Principal:
    id: EntityId
    person_id: EntityId
    kind: PrincipalKind
    created_at: Optional[datetime] = field(default=None, compare=False)
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @classmethod
    def for_person(cls, person_id: EntityId, kind: PrincipalKind) -> "Principal":
        return cls(id=EntityId.new(), person_id=person_id, kind=kind)


@dataclass(frozen=True)
class Account:
    id: EntityId
    principal_id: EntityId
    username: str
    password_hash: str = field(repr=False)
    is_active: bool = True
    provider: str = "auth0"
    provider_sub: Optional[str] = None
    email: Optional[str] = None
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = field(default=None, compare=False)
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @classmethod
    def for_principal(
        cls,
        principal_id: EntityId,
        username: str,
        password_hash: str,
        *,
        email: Optional[str] = None,
        provider: str = "auth0",
    ) -> "Account":
        return cls(
            id=EntityId.new(),
            principal_id=principal_id,
            username=username,
            password_hash=password_hash,
            email=email,
            provider=provider,
        )

    def with_password_hash(self, password_hash: str) -> "Account":
        return replace(self, password_hash=password_hash)

    def deactivate(self) -> "Account":
        return replace(self, is_active=False)

    def activate(self) -> "Account":
        return replace(self, is_active=True)


@dataclass(frozen=True)
class Facility:
    id: EntityId
    name: str
    id_number: str
    organization_id: Optional[EntityId] = None


@dataclass(frozen=True)
class Organization:
    id: EntityId
    name: str
    id_number: str
