"""
Person aggregate orchestrator.

Creates, updates and destroys the Person -> ContactAddress / Principal ->
Account graph as one unit. Each public operation runs in exactly one
transaction obtained from the injected session factory; if any step fails
the whole transaction is rolled back before the error reaches the caller.
"""

from typing import Optional, Union

from orgdir.core.config import Settings, get_settings
from orgdir.db.session_factory import DatabaseSessionFactory
from orgdir.domain import (
    Account,
    ContactAddress,
    ContactKind,
    ContactValue,
    EntityId,
    IdLike,
    Person,
    PersonName,
    Principal,
    PrincipalKind,
    SecretHash,
    coerce_contact_kind,
    coerce_principal_kind,
)
from orgdir.exceptions import NotFoundError
from orgdir.observability import get_logger, observability_context
from orgdir.repositories import RepositoryFactory
from orgdir.schemas import PersonView

logger = get_logger(__name__)

NameLike = Union[PersonName, str]
ContactLike = Union[ContactValue, str]


class PersonAggregateOrchestrator:
    """
    Transactional create / update / delete for the person aggregate.

    Holds no mutable state beyond its collaborators, so one instance can
    serve concurrent callers.
    """

    def __init__(
        self,
        session_factory: DatabaseSessionFactory,
        settings: Optional[Settings] = None,
    ) -> None:
        self.session_factory = session_factory
        self.settings = settings or get_settings()

    async def create_person(
        self,
        name: NameLike,
        contact_value: ContactLike,
        contact_kind: Union[ContactKind, str] = ContactKind.EMAIL,
    ) -> PersonView:
        """
        Create a person together with one contact address.

        Returns the created person with its single contact attached.
        """
        person_name = PersonName.coerce(name)
        value = ContactValue.coerce(contact_value)
        kind = coerce_contact_kind(contact_kind)

        with observability_context(operation="create_person"):
            with logger.timed_operation("create_person") as timer:
                async with self.session_factory.transaction("create_person") as repos:
                    person, contact = await self._create_person_with_contact(
                        repos, person_name, value, kind
                    )
                timer.fields["person_id"] = person.id.value

        return PersonView.from_entity(person, [contact])

    async def create_admin_person(
        self,
        name: NameLike,
        contact_value: ContactLike,
        principal_kind: Union[PrincipalKind, str] = PrincipalKind.ADMIN,
        contact_kind: Union[ContactKind, str] = ContactKind.EMAIL,
        password_hash: Optional[str] = None,
        email: Optional[str] = None,
    ) -> PersonView:
        """
        Create a person with a contact, a principal and an active account.

        The account's username is the contact value. ``password_hash`` must
        already be hashed; when omitted the account gets a locked credential
        marker that no password can match until a real hash is set.

        All four rows are written in one transaction: either every one is
        persisted or none is.
        """
        person_name = PersonName.coerce(name)
        value = ContactValue.coerce(contact_value)
        kind = coerce_contact_kind(contact_kind)
        role = coerce_principal_kind(principal_kind)
        if password_hash is None:
            secret = SecretHash.locked(self.settings.LOCKED_SECRET_BYTES)
        else:
            secret = SecretHash(password_hash)

        with observability_context(operation="create_admin_person"):
            with logger.timed_operation(
                "create_admin_person", principal_kind=role.value
            ) as timer:
                async with self.session_factory.transaction("create_admin_person") as repos:
                    person, contact = await self._create_person_with_contact(
                        repos, person_name, value, kind
                    )
                    principal = await repos.principals.create(
                        Principal.for_person(person.id, role)
                    )
                    account = await repos.accounts.create(
                        Account.for_principal(
                            principal.id,
                            username=value.value,
                            password_hash=secret.value,
                            email=email,
                            provider=self.settings.ACCOUNT_PROVIDER,
                        )
                    )
                timer.fields.update(
                    person_id=person.id.value,
                    principal_id=principal.id.value,
                    account_id=account.id.value,
                )

        return PersonView.from_entity(person, [contact])

    async def update_person(self, person: Person) -> PersonView:
        """
        Rename a person.

        No optimistic concurrency control: concurrent updates both succeed
        and the last commit wins.
        """
        PersonName(person.name)

        with observability_context(operation="update_person", person_id=person.id.value):
            with logger.timed_operation("update_person"):
                async with self.session_factory.transaction("update_person") as repos:
                    if not await repos.person_queries.exists(person.id):
                        raise NotFoundError("Person", person.id)
                    updated = await repos.persons.update(person)

        return PersonView.from_entity(updated)

    async def delete_person(self, person_id: IdLike) -> None:
        """
        Delete a person and everything it owns.

        Order: existence check, then the principal's accounts, the
        principal, the person's contact addresses, and finally the person.
        Any failure rolls the whole cascade back.
        """
        key = EntityId.of(person_id)

        with observability_context(operation="delete_person", person_id=key.value):
            with logger.timed_operation("delete_person") as timer:
                async with self.session_factory.transaction("delete_person") as repos:
                    if not await repos.person_queries.exists(key):
                        raise NotFoundError("Person", key)

                    accounts_deleted = 0
                    principal = await repos.principal_queries.find_by_person_id(key)
                    if principal is not None:
                        accounts_deleted = await repos.accounts.delete_many(principal.id)
                        await repos.principals.delete(principal.id)

                    contacts_deleted = await repos.contacts.delete_many(key)
                    await repos.persons.delete(key)

                timer.fields.update(
                    principal_id=principal.id.value if principal is not None else None,
                    accounts_deleted=accounts_deleted,
                    contacts_deleted=contacts_deleted,
                )

    async def _create_person_with_contact(
        self,
        repos: RepositoryFactory,
        name: PersonName,
        value: ContactValue,
        kind: ContactKind,
    ):
        person = await repos.persons.create(Person.new(name.value))
        contact = await repos.contacts.create(
            ContactAddress.for_person(person.id, value.value, kind)
        )
        return person, contact
