from __future__ import annotations

from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from orgdir.db.base import Base, IdMixin, TimestampMixin, optional_fk
from orgdir.domain.enums import ContactKind

_OWNER_COUNT = (
    "(CASE WHEN person_id IS NOT NULL THEN 1 ELSE 0 END)"
    " + (CASE WHEN facility_id IS NOT NULL THEN 1 ELSE 0 END)"
    " + (CASE WHEN organization_id IS NOT NULL THEN 1 ELSE 0 END)"
)


class ContactAddress(IdMixin, TimestampMixin, Base):
    __tablename__ = "contact_addresses"

    NOTE: ClassVar[str] = (
        "description=Contact channels (email, phone, postal address). "
        "Exactly one of person_id, facility_id, organization_id is set."
    )

    __table_args__ = (
        sa.CheckConstraint(f"{_OWNER_COUNT} = 1", name="single_owner"),
        {"comment": NOTE},
    )

    kind: Mapped[ContactKind] = mapped_column(
        sa.Enum(ContactKind, name="contact_kind"),
        nullable=False,
    )
    value: Mapped[str] = mapped_column(sa.Text, nullable=False)

    person_id: Mapped[Optional[str]] = optional_fk("persons.id")
    facility_id: Mapped[Optional[str]] = optional_fk("facilities.id")
    organization_id: Mapped[Optional[str]] = optional_fk("organizations.id")
