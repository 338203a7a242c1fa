"""
Principal repositories.
"""

from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdir.db.models import Principal as PrincipalRow
from orgdir.domain import (
    EntityId,
    IdLike,
    Principal,
    PrincipalKind,
    coerce_principal_kind,
    validate_principal,
)
from orgdir.exceptions import ConstraintViolationError
from orgdir.observability import get_logger

from .base import CommandRepository, QueryRepository, id_value

logger = get_logger(__name__)


def principal_to_entity(row: PrincipalRow) -> Principal:
    return Principal(
        id=EntityId(row.id),
        person_id=EntityId(row.person_id),
        kind=PrincipalKind(row.kind),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class PrincipalCommandRepository(CommandRepository[Principal, PrincipalRow]):
    entity_name = "Principal"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PrincipalRow)

    def _to_entity(self, row: PrincipalRow) -> Principal:
        return principal_to_entity(row)

    def _to_row(self, entity: Principal) -> Dict[str, Any]:
        return {
            "id": entity.id.value,
            "person_id": entity.person_id.value,
            "kind": entity.kind,
        }

    def _validate(self, entity: Principal) -> None:
        validate_principal(entity)

    async def create(self, principal: Principal) -> Principal:
        """Insert a principal; a person may carry at most one."""
        validate_principal(principal)
        stmt = select(PrincipalRow.id).where(
            PrincipalRow.person_id == principal.person_id.value
        )
        existing = (await self.session.execute(stmt)).scalar_one_or_none()
        if existing is not None:
            raise ConstraintViolationError(
                f"Person {principal.person_id} already has a principal",
                constraint="uq_principals_person_id",
                entity=self.entity_name,
                context={"person_id": principal.person_id.value, "principal_id": existing},
            )
        return await super().create(principal)

    async def update(self, principal: Principal) -> Principal:
        """Change the principal's kind."""
        validate_principal(principal)
        return await self._update_values(principal.id, kind=principal.kind)

    async def delete_by_person_id(self, person_id: IdLike) -> int:
        key = id_value(person_id)
        deleted = await self._delete_where(PrincipalRow.person_id == key)
        logger.debug(f"Deleted {deleted} principals for person {key}")
        return deleted


class PrincipalQueryRepository(QueryRepository[Principal, PrincipalRow]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PrincipalRow)

    def _to_entity(self, row: PrincipalRow) -> Principal:
        return principal_to_entity(row)

    async def find_by_person_id(self, person_id: IdLike) -> Optional[Principal]:
        stmt = select(PrincipalRow).where(PrincipalRow.person_id == id_value(person_id))
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return principal_to_entity(row) if row is not None else None

    async def list(self, kind: Optional[Union[PrincipalKind, str]] = None) -> List[Principal]:
        if kind is None:
            return await self._list_where()
        return await self._list_where(PrincipalRow.kind == coerce_principal_kind(kind))
