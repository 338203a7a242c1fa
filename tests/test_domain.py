# tests/test_domain.py
from __future__ import annotations

import uuid

import pytest

from orgdir.domain import (
    Account,
    ContactAddress,
    ContactKind,
    ContactValue,
    EntityId,
    OwnerKind,
    Person,
    PersonName,
    Principal,
    PrincipalKind,
    SecretHash,
    Username,
    coerce_contact_kind,
    coerce_principal_kind,
    validate_account,
    validate_contact,
    validate_contact_ownership,
    validate_person,
    validate_principal,
)
from orgdir.exceptions import InvalidOwnershipError, ValidationError


# ---------- identifiers ----------

def test_entity_id_new_is_uuid4_text():
    eid = EntityId.new()
    assert uuid.UUID(eid.value).version == 4
    assert str(eid) == eid.value


def test_entity_id_equality_by_value():
    assert EntityId("abc") == EntityId.of("abc")
    assert EntityId.of(EntityId("abc")) == EntityId("abc")
    u = uuid.uuid4()
    assert EntityId.of(u).value == str(u)


def test_entity_id_accepts_any_non_empty_string():
    assert EntityId("nonexistent-id").value == "nonexistent-id"
    long_id = EntityId("x" * 65)
    assert long_id.value == "x" * 65
    assert not long_id.is_storable


@pytest.mark.parametrize("bad", ["", "   "])
def test_entity_id_rejects_empty(bad):
    with pytest.raises(ValidationError) as ei:
        EntityId(bad)
    assert ei.value.field == "id"


def test_require_storable_checks_column_width():
    fits = EntityId("x" * 64)
    assert fits.require_storable() is fits
    with pytest.raises(ValidationError) as ei:
        EntityId("x" * 65).require_storable("person_id")
    assert ei.value.field == "person_id"


def test_entity_id_rejects_non_string():
    with pytest.raises(ValidationError):
        EntityId(42)  # type: ignore[arg-type]


# ---------- validated values ----------

def test_person_name_strips_whitespace():
    assert PersonName("  Ada Lovelace ").value == "Ada Lovelace"


def test_person_name_rejects_blank():
    with pytest.raises(ValidationError) as ei:
        PersonName("   ")
    assert ei.value.http_status == 400


def test_contact_value_length_limit():
    ContactValue("a" * 512)
    with pytest.raises(ValidationError):
        ContactValue("a" * 513)


def test_coerce_keeps_instances_and_converts_strings():
    name = PersonName("Grace")
    assert PersonName.coerce(name) is name
    assert Username.coerce(name).value == "Grace"
    assert ContactValue.coerce(" a@b.c ").value == "a@b.c"


def test_locked_secret_is_marked_and_random():
    a = SecretHash.locked()
    b = SecretHash.locked()
    assert a.is_locked and b.is_locked
    assert a.value.startswith("!")
    assert a != b
    assert not SecretHash("$argon2id$v=19$abc").is_locked


# ---------- entities ----------

def test_person_rename_returns_new_instance():
    p = Person.new("Ada")
    renamed = p.rename("Ada L.")
    assert renamed.id == p.id
    assert renamed.name == "Ada L."
    assert p.name == "Ada"


def test_contact_for_person_has_single_owner():
    pid = EntityId.new()
    c = ContactAddress.for_person(pid, "ada@example.org")
    assert c.kind is ContactKind.EMAIL
    assert c.owners_set() == [OwnerKind.PERSON]
    assert c.owner == (OwnerKind.PERSON, pid)


def test_contact_owner_raises_for_two_owners():
    c = ContactAddress(
        id=EntityId.new(),
        kind=ContactKind.PHONE,
        value="555-0100",
        person_id=EntityId.new(),
        facility_id=EntityId.new(),
    )
    with pytest.raises(InvalidOwnershipError):
        _ = c.owner


def test_account_defaults_and_helpers():
    acct = Account.for_principal(EntityId.new(), "ada@example.org", "hash")
    assert acct.is_active is True
    assert acct.provider == "auth0"
    assert acct.deactivate().is_active is False
    assert acct.deactivate().activate().is_active is True
    assert acct.with_password_hash("other").password_hash == "other"
    assert "hash" not in repr(acct)


# ---------- invariants ----------

def test_validate_contact_ownership_none():
    c = ContactAddress(id=EntityId.new(), kind=ContactKind.EMAIL, value="x@y.z")
    with pytest.raises(InvalidOwnershipError) as ei:
        validate_contact_ownership(c)
    assert ei.value.owners_set == []
    assert ei.value.error_code == "contact_owner_invalid"


def test_validate_contact_ownership_all_three():
    c = ContactAddress(
        id=EntityId.new(),
        kind=ContactKind.EMAIL,
        value="x@y.z",
        person_id=EntityId("p"),
        facility_id=EntityId("f"),
        organization_id=EntityId("o"),
    )
    with pytest.raises(InvalidOwnershipError) as ei:
        validate_contact_ownership(c)
    assert ei.value.owners_set == ["person", "facility", "organization"]
    assert isinstance(ei.value, ValidationError)


def test_validate_contact_facility_owner_ok():
    c = ContactAddress(
        id=EntityId.new(), kind=ContactKind.ADDRESS, value="1 Main St", facility_id=EntityId("f")
    )
    validate_contact(c)


def test_validate_contact_rejects_empty_value_and_bad_kind():
    pid = EntityId.new()
    with pytest.raises(ValidationError):
        validate_contact(ContactAddress.for_person(pid, "  "))
    bad_kind = ContactAddress(id=EntityId.new(), kind="FAX", value="1", person_id=pid)  # type: ignore[arg-type]
    with pytest.raises(ValidationError) as ei:
        validate_contact(bad_kind)
    assert ei.value.field == "kind"


def test_validate_person_principal_account():
    validate_person(Person.new("Ada"))
    with pytest.raises(ValidationError):
        validate_person(Person.new(""))

    validate_principal(Principal.for_person(EntityId.new(), PrincipalKind.TEACHER))
    with pytest.raises(ValidationError):
        validate_principal(Principal(id=EntityId.new(), person_id=EntityId.new(), kind="ROOT"))  # type: ignore[arg-type]

    validate_account(Account.for_principal(EntityId.new(), "ada", "hash"))
    with pytest.raises(ValidationError):
        validate_account(Account.for_principal(EntityId.new(), "", "hash"))
    with pytest.raises(ValidationError):
        validate_account(Account.for_principal(EntityId.new(), "ada", " "))


def test_kind_coercion():
    assert coerce_contact_kind("email") is ContactKind.EMAIL
    assert coerce_contact_kind(ContactKind.PHONE) is ContactKind.PHONE
    assert coerce_principal_kind(" teacher ") is PrincipalKind.TEACHER
    with pytest.raises(ValidationError):
        coerce_contact_kind("pager")
    with pytest.raises(ValidationError):
        coerce_principal_kind("superuser")
