from __future__ import annotations

from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from orgdir.db.base import Base, IdMixin, IdType, TimestampMixin, optional_fk


class Facility(IdMixin, TimestampMixin, Base):
    __tablename__ = "facilities"

    NOTE: ClassVar[str] = (
        "description=Facilities (schools, offices, sites) a person may be "
        "affiliated with. Read-only from the directory core's point of view."
    )

    __table_args__ = {"comment": NOTE}

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    id_number: Mapped[str] = mapped_column(sa.String(64), unique=True, nullable=False)
    organization_id: Mapped[Optional[str]] = optional_fk(
        "organizations.id", ondelete="SET NULL"
    )


# person <-> facility affiliations; rows go away with either side
person_facilities = sa.Table(
    "person_facilities",
    Base.metadata,
    sa.Column(
        "person_id",
        IdType(),
        sa.ForeignKey("persons.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    sa.Column(
        "facility_id",
        IdType(),
        sa.ForeignKey("facilities.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    comment="Person/facility affiliations (read-only pass-through).",
)
