# src/orgdir/schemas/person.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from orgdir.domain import (
    Account,
    ContactAddress,
    ContactKind,
    Facility,
    Organization,
    Person,
    Principal,
    PrincipalKind,
)


class _View(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class ContactAddressView(_View):
    id: str
    kind: ContactKind
    value: str

    @classmethod
    def from_entity(cls, contact: ContactAddress) -> "ContactAddressView":
        return cls(id=str(contact.id), kind=contact.kind, value=contact.value)


class AccountView(_View):
    # password_hash is never exposed
    id: str
    username: str
    email: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_entity(cls, account: Account) -> "AccountView":
        return cls(
            id=str(account.id),
            username=account.username,
            email=account.email,
            is_active=account.is_active,
        )


class PrincipalView(_View):
    id: str
    kind: PrincipalKind
    account: Optional[AccountView] = None

    @classmethod
    def from_entity(
        cls, principal: Principal, account: Optional[Account] = None
    ) -> "PrincipalView":
        return cls(
            id=str(principal.id),
            kind=principal.kind,
            account=AccountView.from_entity(account) if account is not None else None,
        )


class FacilityView(_View):
    id: str
    name: str
    id_number: str

    @classmethod
    def from_entity(cls, facility: Facility) -> "FacilityView":
        return cls(id=str(facility.id), name=facility.name, id_number=facility.id_number)


class OrganizationView(_View):
    id: str
    name: str
    id_number: str

    @classmethod
    def from_entity(cls, organization: Organization) -> "OrganizationView":
        return cls(
            id=str(organization.id), name=organization.name, id_number=organization.id_number
        )


class PersonView(_View):
    """
    A person with whichever subgraphs the read asked for.

    ``None`` means "not requested" (or, for ``principal`` and
    ``organization``, requested but absent); an empty list means requested
    and empty.
    """

    id: str
    name: str
    contacts: Optional[List[ContactAddressView]] = None
    principal: Optional[PrincipalView] = None
    facilities: Optional[List[FacilityView]] = None
    organization: Optional[OrganizationView] = None

    @classmethod
    def from_entity(
        cls, person: Person, contacts: Optional[List[ContactAddress]] = None
    ) -> "PersonView":
        return cls(
            id=str(person.id),
            name=person.name,
            contacts=(
                [ContactAddressView.from_entity(c) for c in contacts]
                if contacts is not None
                else None
            ),
        )


__all__ = [
    "AccountView",
    "ContactAddressView",
    "FacilityView",
    "OrganizationView",
    "PersonView",
    "PrincipalView",
]
