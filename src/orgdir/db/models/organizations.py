from __future__ import annotations

from typing import ClassVar

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from orgdir.db.base import Base, IdMixin, TimestampMixin


class Organization(IdMixin, TimestampMixin, Base):
    __tablename__ = "organizations"

    NOTE: ClassVar[str] = (
        "description=Organizations a person may be affiliated with. "
        "Read-only from the directory core's point of view."
    )

    __table_args__ = {"comment": NOTE}

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    id_number: Mapped[str] = mapped_column(sa.String(64), unique=True, nullable=False)
