"""
Aggregate invariant checks.

Pure functions with no hidden state. The orchestrator and the command
repositories call them before any write is issued.
"""

from __future__ import annotations

from orgdir.exceptions import InvalidOwnershipError, ValidationError

from .entities import Account, ContactAddress, Person, Principal
from .enums import ContactKind, PrincipalKind
from .values import ContactValue, PersonName, SecretHash, Username


def validate_contact_ownership(contact: ContactAddress) -> None:
    """Exactly one of person/facility/organization must own the contact."""
    owners = contact.owners_set()
    if len(owners) != 1:
        raise InvalidOwnershipError([o.value for o in owners])


def validate_person(person: Person) -> None:
    PersonName(person.name)


def validate_contact(contact: ContactAddress) -> None:
    if not isinstance(contact.kind, ContactKind):
        raise ValidationError(
            f"Unknown contact kind: {contact.kind!r}", field="kind"
        )
    ContactValue(contact.value)
    validate_contact_ownership(contact)


def validate_principal(principal: Principal) -> None:
    if not isinstance(principal.kind, PrincipalKind):
        raise ValidationError(
            f"Unknown principal kind: {principal.kind!r}", field="kind"
        )


def validate_account(account: Account) -> None:
    Username(account.username)
    SecretHash(account.password_hash)


def coerce_contact_kind(kind: object) -> ContactKind:
    if isinstance(kind, str) and not isinstance(kind, ContactKind):
        kind = kind.strip().upper()
    try:
        return ContactKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown contact kind: {kind!r}", field="kind") from None


def coerce_principal_kind(kind: object) -> PrincipalKind:
    if isinstance(kind, str) and not isinstance(kind, PrincipalKind):
        kind = kind.strip().upper()
    try:
        return PrincipalKind(kind)
    except ValueError:
        raise ValidationError(
            f"Unknown principal kind: {kind!r}", field="kind"
        ) from None
