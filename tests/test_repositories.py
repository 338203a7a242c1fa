# tests/test_repositories.py
from __future__ import annotations

import pytest

from orgdir.domain import (
    Account,
    ContactAddress,
    ContactKind,
    EntityId,
    Person,
    Principal,
    PrincipalKind,
)
from orgdir.exceptions import (
    ConstraintViolationError,
    InvalidOwnershipError,
    NotFoundError,
    ValidationError,
)


async def _person(repos, name="Ada Lovelace") -> Person:
    return await repos.persons.create(Person.new(name))


# ---------- persons ----------

@pytest.mark.anyio
async def test_person_create_find_update_delete(session_factory):
    async with session_factory.transaction() as repos:
        created = await _person(repos, "  Ada  ")
        assert created.name == "Ada"
        assert created.created_at is not None

    async with session_factory.read() as repos:
        assert await repos.person_queries.exists(created.id)
        found = await repos.person_queries.find(created.id)
        assert found == created

    async with session_factory.transaction() as repos:
        updated = await repos.persons.update(created.rename("Ada L."))
        assert updated.name == "Ada L."

    async with session_factory.transaction() as repos:
        await repos.persons.delete(created.id)

    async with session_factory.read() as repos:
        assert await repos.person_queries.find(created.id) is None
        assert not await repos.person_queries.exists(created.id)


@pytest.mark.anyio
async def test_person_update_and_delete_unknown_id(session_factory):
    ghost = Person(id=EntityId("nonexistent-id"), name="Nobody")
    with pytest.raises(NotFoundError):
        async with session_factory.transaction() as repos:
            await repos.persons.update(ghost)
    with pytest.raises(NotFoundError):
        async with session_factory.transaction() as repos:
            await repos.persons.delete("nonexistent-id")


@pytest.mark.anyio
async def test_update_row_vanishing_before_reread_is_not_found(session_factory, monkeypatch):
    async with session_factory.transaction() as repos:
        person = await _person(repos)

    async def vanished(id):
        return None

    with pytest.raises(NotFoundError):
        async with session_factory.transaction() as repos:
            monkeypatch.setattr(repos.persons, "_fetch_row", vanished)
            await repos.persons.update(person.rename("Ada King"))


@pytest.mark.anyio
async def test_oversized_ids_find_nothing_but_cannot_be_written(session_factory, count_rows):
    from orgdir.db.models import ContactAddress as ContactRow
    from orgdir.db.models import Person as PersonRow

    long_id = "x" * 65
    async with session_factory.read() as repos:
        assert await repos.person_queries.find(long_id) is None
        assert not await repos.person_queries.exists(long_id)
        assert await repos.contact_queries.find_by_person_id(long_id) == []

    with pytest.raises(ValidationError) as ei:
        async with session_factory.transaction() as repos:
            await repos.persons.create(Person(id=EntityId(long_id), name="Too Long"))
    assert ei.value.field == "id"

    with pytest.raises(ValidationError) as ei:
        async with session_factory.transaction() as repos:
            await _person(repos)
            await repos.contacts.create(
                ContactAddress.for_person(EntityId(long_id), "x@y.z")
            )
    assert ei.value.field == "person_id"
    assert await count_rows(PersonRow) == 0
    assert await count_rows(ContactRow) == 0


@pytest.mark.anyio
async def test_person_list_filters_and_orders_by_id(session_factory):
    async with session_factory.transaction() as repos:
        for name in ("Grace Hopper", "Ada Lovelace", "Alan Turing"):
            await _person(repos, name)

    async with session_factory.read() as repos:
        everyone = await repos.person_queries.list()
        assert [p.id.value for p in everyone] == sorted(p.id.value for p in everyone)
        assert len(everyone) == 3
        a_names = await repos.person_queries.list(name_contains="a")
        assert len(a_names) == 3
        lovelace = await repos.person_queries.list(name_contains="love")
        assert [p.name for p in lovelace] == ["Ada Lovelace"]


# ---------- contact addresses ----------

@pytest.mark.anyio
async def test_contact_crud_and_queries(session_factory):
    async with session_factory.transaction() as repos:
        person = await _person(repos)
        email, phone = await repos.contacts.bulk_create(
            [
                ContactAddress.for_person(person.id, "ada@example.org"),
                ContactAddress.for_person(person.id, "555-0100", ContactKind.PHONE),
            ]
        )

    async with session_factory.read() as repos:
        q = repos.contact_queries
        owned = await q.find_by_person_id(person.id)
        assert [c.id.value for c in owned] == sorted([email.id.value, phone.id.value])
        assert [c.value for c in await q.find_by_kind("phone", person.id)] == ["555-0100"]
        assert await q.exists_by_person_and_kind(person.id, ContactKind.EMAIL)
        assert not await q.exists_by_person_and_kind(person.id, ContactKind.ADDRESS)
        assert [c.id for c in await q.list(value_contains="example")] == [email.id]

    async with session_factory.transaction() as repos:
        changed = await repos.contacts.update(
            ContactAddress(id=email.id, kind=ContactKind.EMAIL, value="ada@new.org", person_id=person.id)
        )
        assert changed.value == "ada@new.org"
        assert await repos.contacts.delete_by_person_id(person.id) == 2
        assert await repos.contacts.delete_many(person.id) == 0


@pytest.mark.anyio
async def test_contact_without_owner_never_reaches_store(session_factory, count_rows):
    from orgdir.db.models import ContactAddress as ContactRow

    orphan = ContactAddress(id=EntityId.new(), kind=ContactKind.EMAIL, value="x@y.z")
    with pytest.raises(InvalidOwnershipError):
        async with session_factory.transaction() as repos:
            await repos.contacts.create(orphan)
    assert await count_rows(ContactRow) == 0


@pytest.mark.anyio
async def test_contact_for_missing_person_is_constraint_violation(session_factory):
    with pytest.raises(ConstraintViolationError):
        async with session_factory.transaction() as repos:
            await repos.contacts.create(ContactAddress.for_person(EntityId("ghost"), "x@y.z"))


@pytest.mark.anyio
async def test_contact_delete_is_not_idempotent(session_factory):
    async with session_factory.transaction() as repos:
        person = await _person(repos)
        contact = await repos.contacts.create(ContactAddress.for_person(person.id, "a@b.c"))
        await repos.contacts.delete(contact.id)
        with pytest.raises(NotFoundError):
            await repos.contacts.delete(contact.id)


# ---------- principals ----------

@pytest.mark.anyio
async def test_principal_one_per_person(session_factory):
    async with session_factory.transaction() as repos:
        person = await _person(repos)
        principal = await repos.principals.create(
            Principal.for_person(person.id, PrincipalKind.TEACHER)
        )

    with pytest.raises(ConstraintViolationError) as ei:
        async with session_factory.transaction() as repos:
            await repos.principals.create(Principal.for_person(person.id, PrincipalKind.ADMIN))
    assert ei.value.constraint == "uq_principals_person_id"

    async with session_factory.transaction() as repos:
        found = await repos.principal_queries.find_by_person_id(person.id)
        assert found == principal
        promoted = await repos.principals.update(
            Principal(id=principal.id, person_id=person.id, kind=PrincipalKind.ADMIN)
        )
        assert promoted.kind is PrincipalKind.ADMIN
        assert [p.id for p in await repos.principal_queries.list(kind="admin")] == [principal.id]
        assert await repos.principal_queries.list(kind=PrincipalKind.STUDENT) == []
        assert await repos.principals.delete_by_person_id(person.id) == 1


# ---------- accounts ----------

async def _principal(repos, name="Ada") -> Principal:
    person = await _person(repos, name)
    return await repos.principals.create(Principal.for_person(person.id, PrincipalKind.ADMIN))


@pytest.mark.anyio
async def test_account_create_and_lookups(session_factory):
    async with session_factory.transaction() as repos:
        principal = await _principal(repos)
        account = await repos.accounts.create(
            Account.for_principal(principal.id, "ada@example.org", "!locked", email="ada@example.org")
        )
        assert account.is_active
        assert account.provider == "auth0"

    async with session_factory.read() as repos:
        q = repos.account_queries
        assert await q.find_by_principal_id(principal.id) == account
        assert await q.find_by_username("ada@example.org") == account
        assert await q.find_by_username("nobody") is None
        assert [a.id for a in await q.list(is_active=True)] == [account.id]
        assert await q.list(is_active=False) == []


@pytest.mark.anyio
async def test_account_uniqueness_prechecks(session_factory):
    async with session_factory.transaction() as repos:
        first = await _principal(repos, "Ada")
        second = await _principal(repos, "Grace")
        await repos.accounts.create(Account.for_principal(first.id, "shared", "h"))

    with pytest.raises(ConstraintViolationError) as ei:
        async with session_factory.transaction() as repos:
            await repos.accounts.create(Account.for_principal(second.id, "shared", "h"))
    assert ei.value.constraint == "uq_accounts_username"

    with pytest.raises(ConstraintViolationError) as ei:
        async with session_factory.transaction() as repos:
            await repos.accounts.create(Account.for_principal(first.id, "other", "h"))
    assert ei.value.constraint == "uq_accounts_principal_id"


@pytest.mark.anyio
async def test_account_update_and_delete_many(session_factory):
    async with session_factory.transaction() as repos:
        principal = await _principal(repos)
        account = await repos.accounts.create(Account.for_principal(principal.id, "ada", "h"))
        updated = await repos.accounts.update(account.deactivate().with_password_hash("h2"))
        assert updated.is_active is False
        assert updated.password_hash == "h2"
        assert await repos.accounts.delete_many(principal.id) == 1
        assert await repos.account_queries.find(account.id) is None


@pytest.mark.anyio
async def test_principal_delete_blocked_while_account_exists(session_factory):
    async with session_factory.transaction() as repos:
        principal = await _principal(repos)
        await repos.accounts.create(Account.for_principal(principal.id, "ada", "h"))

    with pytest.raises(ConstraintViolationError):
        async with session_factory.transaction() as repos:
            await repos.principals.delete(principal.id)


# ---------- affiliations ----------

@pytest.mark.anyio
async def test_facility_and_organization_queries(session_factory, affiliate):
    async with session_factory.transaction() as repos:
        person = await _person(repos)
    await affiliate(person.id.value)

    async with session_factory.read() as repos:
        facilities = await repos.facilities.list()
        assert [f.id.value for f in facilities] == ["fac-a", "fac-b"]
        assert len(await repos.facilities.list(organization_id="org-1")) == 2
        assert await repos.facilities.list(organization_id="org-2") == []
        org = await repos.organizations.find("org-1")
        assert org is not None and org.id_number == "D-100"
        assert await repos.organizations.exists("org-1")
        assert await repos.organizations.count() == 1
        assert (await repos.person_queries.list(organization_id="org-1"))[0].id == person.id
