"""
Contact address repositories.

A contact belongs to exactly one of a person, a facility or an
organization. Queries here are scoped to person-owned contacts unless a
filter says otherwise.
"""

from typing import Any, Dict, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from orgdir.db.models import ContactAddress as ContactAddressRow
from orgdir.domain import (
    ContactAddress,
    ContactKind,
    ContactValue,
    EntityId,
    IdLike,
    coerce_contact_kind,
    validate_contact,
)
from orgdir.observability import get_logger

from .base import CommandRepository, QueryRepository, id_value, optional_id

logger = get_logger(__name__)


def contact_to_entity(row: ContactAddressRow) -> ContactAddress:
    return ContactAddress(
        id=EntityId(row.id),
        kind=ContactKind(row.kind),
        value=row.value,
        person_id=optional_id(row.person_id),
        facility_id=optional_id(row.facility_id),
        organization_id=optional_id(row.organization_id),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class ContactAddressCommandRepository(CommandRepository[ContactAddress, ContactAddressRow]):
    entity_name = "ContactAddress"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ContactAddressRow)

    def _to_entity(self, row: ContactAddressRow) -> ContactAddress:
        return contact_to_entity(row)

    def _to_row(self, entity: ContactAddress) -> Dict[str, Any]:
        def raw(value: Optional[EntityId]) -> Optional[str]:
            return value.value if value is not None else None

        return {
            "id": entity.id.value,
            "kind": entity.kind,
            "value": ContactValue(entity.value).value,
            "person_id": raw(entity.person_id),
            "facility_id": raw(entity.facility_id),
            "organization_id": raw(entity.organization_id),
        }

    def _validate(self, entity: ContactAddress) -> None:
        validate_contact(entity)

    async def update(self, contact: ContactAddress) -> ContactAddress:
        """Update kind and value. Ownership is fixed at creation."""
        validate_contact(contact)
        return await self._update_values(
            contact.id, kind=contact.kind, value=ContactValue(contact.value).value
        )

    async def delete_many(self, person_id: IdLike) -> int:
        """Delete every contact owned by the person; returns the row count."""
        key = id_value(person_id)
        deleted = await self._delete_where(ContactAddressRow.person_id == key)
        logger.debug(f"Deleted {deleted} contact addresses for person {key}")
        return deleted

    async def delete_by_person_id(self, person_id: IdLike) -> int:
        return await self.delete_many(person_id)


class ContactAddressQueryRepository(QueryRepository[ContactAddress, ContactAddressRow]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ContactAddressRow)

    def _to_entity(self, row: ContactAddressRow) -> ContactAddress:
        return contact_to_entity(row)

    async def list(
        self,
        person_id: Optional[IdLike] = None,
        kind: Optional[Union[ContactKind, str]] = None,
        value_contains: Optional[str] = None,
    ) -> List[ContactAddress]:
        criteria = []
        if person_id is not None:
            criteria.append(ContactAddressRow.person_id == id_value(person_id))
        if kind is not None:
            criteria.append(ContactAddressRow.kind == coerce_contact_kind(kind))
        if value_contains:
            criteria.append(ContactAddressRow.value.ilike(f"%{value_contains}%"))
        return await self._list_where(*criteria)

    async def find_by_person_id(self, person_id: IdLike) -> List[ContactAddress]:
        return await self._list_where(ContactAddressRow.person_id == id_value(person_id))

    async def find_by_kind(
        self, kind: Union[ContactKind, str], person_id: Optional[IdLike] = None
    ) -> List[ContactAddress]:
        return await self.list(person_id=person_id, kind=kind)

    async def exists_by_person_and_kind(
        self, person_id: IdLike, kind: Union[ContactKind, str]
    ) -> bool:
        return await self._exists_where(
            ContactAddressRow.person_id == id_value(person_id),
            ContactAddressRow.kind == coerce_contact_kind(kind),
        )
