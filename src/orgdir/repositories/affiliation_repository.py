"""
Read-only repositories for facilities and organizations.

Both are reference data owned elsewhere; the directory core only reads them.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from orgdir.db.models import Facility as FacilityRow
from orgdir.db.models import Organization as OrganizationRow
from orgdir.domain import EntityId, Facility, IdLike, Organization

from .base import QueryRepository, id_value, optional_id


def facility_to_entity(row: FacilityRow) -> Facility:
    return Facility(
        id=EntityId(row.id),
        name=row.name,
        id_number=row.id_number,
        organization_id=optional_id(row.organization_id),
    )


def organization_to_entity(row: OrganizationRow) -> Organization:
    return Organization(id=EntityId(row.id), name=row.name, id_number=row.id_number)


class FacilityQueryRepository(QueryRepository[Facility, FacilityRow]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FacilityRow)

    def _to_entity(self, row: FacilityRow) -> Facility:
        return facility_to_entity(row)

    async def list(self, organization_id: Optional[IdLike] = None) -> List[Facility]:
        if organization_id is None:
            return await self._list_where()
        return await self._list_where(FacilityRow.organization_id == id_value(organization_id))


class OrganizationQueryRepository(QueryRepository[Organization, OrganizationRow]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, OrganizationRow)

    def _to_entity(self, row: OrganizationRow) -> Organization:
        return organization_to_entity(row)
