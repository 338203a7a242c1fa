"""
Person repositories.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from orgdir.db.models import Person as PersonRow
from orgdir.db.models import Principal as PrincipalRow
from orgdir.domain import EntityId, IdLike, Person, PersonInclude, validate_person
from orgdir.observability import get_logger

from .base import CommandRepository, QueryRepository, id_value, optional_id

logger = get_logger(__name__)


def person_to_entity(row: PersonRow) -> Person:
    return Person(
        id=EntityId(row.id),
        name=row.name,
        organization_id=optional_id(row.organization_id),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class PersonCommandRepository(CommandRepository[Person, PersonRow]):
    entity_name = "Person"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PersonRow)

    def _to_entity(self, row: PersonRow) -> Person:
        return person_to_entity(row)

    def _to_row(self, entity: Person) -> Dict[str, Any]:
        return {
            "id": entity.id.value,
            "name": entity.name.strip(),
            "organization_id": entity.organization_id.value if entity.organization_id else None,
        }

    def _validate(self, entity: Person) -> None:
        validate_person(entity)

    async def update(self, person: Person) -> Person:
        """Update the person's name; raises NotFoundError for unknown ids."""
        validate_person(person)
        return await self._update_values(person.id, name=person.name.strip())


class PersonQueryRepository(QueryRepository[Person, PersonRow]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PersonRow)

    def _to_entity(self, row: PersonRow) -> Person:
        return person_to_entity(row)

    async def list(
        self,
        name_contains: Optional[str] = None,
        organization_id: Optional[IdLike] = None,
    ) -> List[Person]:
        criteria = []
        if name_contains:
            criteria.append(PersonRow.name.ilike(f"%{name_contains}%"))
        if organization_id is not None:
            criteria.append(PersonRow.organization_id == id_value(organization_id))
        return await self._list_where(*criteria)

    async def find_graph(
        self, id: IdLike, include: Optional[PersonInclude] = None
    ) -> Optional[PersonRow]:
        """
        Load a person and the requested subgraph in one SELECT.

        Relationships are lazy="raise", so only the branches named in
        ``include`` are readable on the returned row.
        """
        include = include or PersonInclude()
        options = []
        if include.contacts:
            options.append(joinedload(PersonRow.contacts))
        if include.principal is not None:
            principal_load = joinedload(PersonRow.principal)
            if include.include_account:
                principal_load = principal_load.joinedload(PrincipalRow.account)
            options.append(principal_load)
        if include.facilities:
            options.append(joinedload(PersonRow.facilities))
        if include.organization:
            options.append(joinedload(PersonRow.organization))

        stmt = (
            select(PersonRow)
            .where(PersonRow.id == id_value(id))
            .options(*options)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        row = result.unique().scalar_one_or_none()

        logger.debug(
            "Loaded person graph",
            person_id=str(id),
            found=row is not None,
            include=include.model_dump(),
        )
        return row
