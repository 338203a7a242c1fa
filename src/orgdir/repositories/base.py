"""
Base repository classes with the common command and query operations.

Repositories never open, commit or roll back transactions: they flush into
the session they were given, and the session factory owns the transaction
boundary. Rows are mapped to frozen domain entities on the way out, so no
ORM instance leaks past this layer.
"""

import dataclasses
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Generic, List, Optional, Protocol, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from orgdir.domain import EntityId, IdLike
from orgdir.exceptions import ConstraintViolationError, NotFoundError
from orgdir.observability import get_logger

logger = get_logger(__name__)


class HasId(Protocol):
    id: Any


ModelType = TypeVar("ModelType", bound=HasId)
EntityType = TypeVar("EntityType")


def id_value(id: IdLike) -> str:
    """Normalize any accepted identifier form to the stored string."""
    return EntityId.of(id).value


def optional_id(value: Optional[str]) -> Optional[EntityId]:
    return EntityId(value) if value is not None else None


def require_storable_ids(entity: Any) -> None:
    """Reject an entity whose own id or foreign ids would not fit a column."""
    for field in dataclasses.fields(entity):
        value = getattr(entity, field.name)
        if isinstance(value, EntityId):
            value.require_storable(field.name)


def constraint_name(exc: IntegrityError) -> Optional[str]:
    """Best-effort constraint name from a driver error."""
    orig = getattr(exc, "orig", None)
    name = getattr(orig, "constraint_name", None)
    if name:
        return name
    diag = getattr(orig, "diag", None)
    return getattr(diag, "constraint_name", None)


class _RepositoryBase(Generic[EntityType, ModelType], ABC):
    entity_name: ClassVar[str] = "entity"

    def __init__(self, session: AsyncSession, model_class: type[ModelType]) -> None:
        """
        Initialize repository with database session and model class.

        Args:
            session: Async SQLAlchemy session shared with sibling repositories
            model_class: The SQLAlchemy model class for this repository
        """
        self.session = session
        self.model_class = model_class
        self.model_name = model_class.__name__

    @abstractmethod
    def _to_entity(self, row: ModelType) -> EntityType:
        """Map an ORM row to its domain entity."""

    async def _fetch_row(self, id: IdLike) -> Optional[ModelType]:
        stmt = (
            select(self.model_class)
            .where(self.model_class.id == id_value(id))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class CommandRepository(_RepositoryBase[EntityType, ModelType]):
    """
    Write side: create, update, delete and delete_many.

    Every write is flushed immediately so constraint violations surface at
    the call that caused them, as ``ConstraintViolationError``.
    """

    @abstractmethod
    def _to_row(self, entity: EntityType) -> Dict[str, Any]:
        """Column values for inserting ``entity``."""

    def _validate(self, entity: EntityType) -> None:
        """Hook for entity invariants checked before any write."""

    async def create(self, entity: EntityType) -> EntityType:
        """
        Insert a new row and return the persisted entity.

        Server-assigned columns (timestamps) are re-read from the row.
        """
        self._validate(entity)
        require_storable_ids(entity)
        row = self.model_class(**self._to_row(entity))
        try:
            self.session.add(row)
            await self.session.flush()
            await self.session.refresh(row)
        except IntegrityError as e:
            logger.warning(f"Constraint violation creating {self.model_name}: {e.orig}")
            raise ConstraintViolationError(
                f"{self.entity_name} violates a storage constraint",
                constraint=constraint_name(e),
                entity=self.entity_name,
                cause=e,
            ) from e

        logger.debug(f"Created {self.model_name}: {row.id}")
        return self._to_entity(row)

    async def bulk_create(self, entities: List[EntityType]) -> List[EntityType]:
        created = []
        for entity in entities:
            created.append(await self.create(entity))
        return created

    async def _update_values(self, id: IdLike, **values: Any) -> EntityType:
        key = id_value(id)
        stmt = update(self.model_class).where(self.model_class.id == key).values(**values)
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            logger.warning(f"Constraint violation updating {self.model_name} {key}: {e.orig}")
            raise ConstraintViolationError(
                f"{self.entity_name} update violates a storage constraint",
                constraint=constraint_name(e),
                entity=self.entity_name,
                cause=e,
            ) from e

        if result.rowcount == 0:
            logger.debug(f"{self.model_name} not found for update: {key}")
            raise NotFoundError(self.entity_name, key)

        row = await self._fetch_row(key)
        if row is None:
            # deleted between the UPDATE and the re-read
            raise NotFoundError(self.entity_name, key)
        logger.debug(f"Updated {self.model_name}: {key}")
        return self._to_entity(row)

    async def delete(self, id: IdLike) -> None:
        """
        Delete one row by id.

        Raises:
            NotFoundError: the id does not exist (deletes are not idempotent)
        """
        key = id_value(id)
        deleted = await self._delete_where(self.model_class.id == key)
        if deleted == 0:
            logger.debug(f"{self.model_name} not found for deletion: {key}")
            raise NotFoundError(self.entity_name, key)
        logger.debug(f"Deleted {self.model_name}: {key}")

    async def _delete_where(self, *criteria: Any) -> int:
        stmt = delete(self.model_class).where(*criteria)
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            logger.warning(f"Constraint violation deleting {self.model_name}: {e.orig}")
            raise ConstraintViolationError(
                f"{self.entity_name} is still referenced",
                constraint=constraint_name(e),
                entity=self.entity_name,
                cause=e,
            ) from e
        return result.rowcount or 0


class QueryRepository(_RepositoryBase[EntityType, ModelType]):
    """Read side: find, list and exists. Results are ordered by id."""

    async def find(self, id: IdLike) -> Optional[EntityType]:
        row = await self._fetch_row(id)
        if row is None:
            logger.debug(f"{self.model_name} not found: {id}")
            return None
        return self._to_entity(row)

    async def _list_where(self, *criteria: Any) -> List[EntityType]:
        stmt = select(self.model_class).where(*criteria).order_by(self.model_class.id)
        result = await self.session.execute(stmt)
        rows = result.scalars().all()
        logger.debug(f"Retrieved {len(rows)} {self.model_name} instances")
        return [self._to_entity(row) for row in rows]

    async def list(self) -> List[EntityType]:
        return await self._list_where()

    async def exists(self, id: IdLike) -> bool:
        return await self._exists_where(self.model_class.id == id_value(id))

    async def _exists_where(self, *criteria: Any) -> bool:
        stmt = select(self.model_class.id).where(*criteria).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.model_class)
        result = await self.session.execute(stmt)
        return result.scalar() or 0
