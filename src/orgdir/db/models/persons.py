from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orgdir.db.base import Base, IdMixin, TimestampMixin, optional_fk

if TYPE_CHECKING:
    from .contact_addresses import ContactAddress
    from .facilities import Facility
    from .organizations import Organization
    from .principals import Principal


class Person(IdMixin, TimestampMixin, Base):
    __tablename__ = "persons"

    NOTE: ClassVar[str] = (
        "description=Root of the directory aggregate. Contacts, principal and "
        "account rows point here through foreign keys; nothing is cascaded "
        "from this table, the orchestrator deletes children explicitly."
    )

    __table_args__ = {"comment": NOTE}

    name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    organization_id: Mapped[Optional[str]] = optional_fk(
        "organizations.id", ondelete="SET NULL"
    )

    # Read-side navigation only: viewonly, and lazy="raise" so nothing is
    # fetched unless a query asks for it with an explicit loader option.
    contacts: Mapped[List["ContactAddress"]] = relationship(
        "ContactAddress",
        viewonly=True,
        order_by="ContactAddress.id",
        lazy="raise",
    )
    principal: Mapped[Optional["Principal"]] = relationship(
        "Principal",
        viewonly=True,
        uselist=False,
        lazy="raise",
    )
    facilities: Mapped[List["Facility"]] = relationship(
        "Facility",
        secondary="person_facilities",
        viewonly=True,
        order_by="Facility.id",
        lazy="raise",
    )
    organization: Mapped[Optional["Organization"]] = relationship(
        "Organization",
        viewonly=True,
        lazy="raise",
    )
