from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orgdir.db.base import Base, IdMixin, IdType, TimestampMixin
from orgdir.domain.enums import PrincipalKind

if TYPE_CHECKING:
    from .accounts import Account


class Principal(IdMixin, TimestampMixin, Base):
    __tablename__ = "principals"

    NOTE: ClassVar[str] = (
        "description=Authorization identity layered on exactly one person. "
        "At most one principal per person (unique person_id)."
    )

    __table_args__ = {"comment": NOTE}

    person_id: Mapped[str] = mapped_column(
        IdType(),
        sa.ForeignKey("persons.id"),
        nullable=False,
        unique=True,
    )
    kind: Mapped[PrincipalKind] = mapped_column(
        sa.Enum(PrincipalKind, name="principal_kind"),
        nullable=False,
    )

    account: Mapped[Optional["Account"]] = relationship(
        "Account",
        viewonly=True,
        uselist=False,
        lazy="raise",
    )
