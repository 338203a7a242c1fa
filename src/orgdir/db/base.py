# src/orgdir/db/base.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# -----------------------------------------------------------------------------
# Declarative Base with naming conventions (great for Alembic autogenerate)
# -----------------------------------------------------------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Identifiers are opaque strings (UUID4 text for ids minted here)
ID_LENGTH = 64


def IdType() -> sa.String:
    return sa.String(ID_LENGTH)


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Shared declarative base for all models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# -----------------------------------------------------------------------------
# Common mixins: string PK + timestamps
# -----------------------------------------------------------------------------
class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        onupdate=sa.func.now(),
        nullable=False,
    )


class IdMixin:
    """
    Mixin that adds an opaque string primary key, minted client-side when
    not supplied.
    """

    id: Mapped[str] = mapped_column(IdType(), primary_key=True, default=new_id)


def optional_fk(
    target: str, *, ondelete: Optional[str] = None, index: bool = True
) -> Mapped[Optional[str]]:
    """Nullable FK column to ``target``."""
    return mapped_column(
        IdType(),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=True,
        index=index,
    )


ORMBase = Base

__all__ = [
    "Base",
    "ORMBase",
    "IdMixin",
    "IdType",
    "TimestampMixin",
    "NAMING_CONVENTION",
    "new_id",
    "optional_fk",
]
