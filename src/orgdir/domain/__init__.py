"""
Directory domain: entities, validated values, invariants and the include
specification used by selective reads.
"""

from .entities import Account, ContactAddress, Facility, Organization, Person, Principal
from .enums import ContactKind, OwnerKind, PrincipalKind, PrincipalStatus
from .identifiers import EntityId, IdLike
from .include import PersonInclude, PrincipalInclude
from .invariants import (
    coerce_contact_kind,
    coerce_principal_kind,
    validate_account,
    validate_contact,
    validate_contact_ownership,
    validate_person,
    validate_principal,
)
from .values import ContactValue, PersonName, SecretHash, Username

__all__ = [
    "Account",
    "ContactAddress",
    "Facility",
    "Organization",
    "Person",
    "Principal",
    "ContactKind",
    "OwnerKind",
    "PrincipalKind",
    "PrincipalStatus",
    "EntityId",
    "IdLike",
    "PersonInclude",
    "PrincipalInclude",
    "coerce_contact_kind",
    "coerce_principal_kind",
    "validate_account",
    "validate_contact",
    "validate_contact_ownership",
    "validate_person",
    "validate_principal",
    "ContactValue",
    "PersonName",
    "SecretHash",
    "Username",
]
