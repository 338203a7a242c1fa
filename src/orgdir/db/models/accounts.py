from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from orgdir.db.base import Base, IdMixin, IdType, TimestampMixin


class Account(IdMixin, TimestampMixin, Base):
    __tablename__ = "accounts"

    NOTE: ClassVar[str] = (
        "description=Login credential layered on exactly one principal. "
        "Unique principal_id and unique username. password_hash is hashed "
        "upstream; a leading '!' marks a locked credential."
    )

    __table_args__ = {"comment": NOTE}

    principal_id: Mapped[str] = mapped_column(
        IdType(),
        sa.ForeignKey("principals.id"),
        nullable=False,
        unique=True,
    )
    username: Mapped[str] = mapped_column(sa.String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(sa.Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(sa.Text)
    is_active: Mapped[bool] = mapped_column(
        sa.Boolean, nullable=False, default=True, server_default=sa.true()
    )
    provider: Mapped[str] = mapped_column(
        sa.String(64), nullable=False, default="auth0", server_default="auth0"
    )
    provider_sub: Mapped[Optional[str]] = mapped_column(sa.Text)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
