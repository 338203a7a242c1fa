# src/orgdir/db/session.py
from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from orgdir.core.config import Settings, get_settings

# ---------------------------------------------------------------------------
# Engine configuration
# ---------------------------------------------------------------------------


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Optional[Settings] = None, url: Optional[str] = None) -> AsyncEngine:
    """
    Build an async engine from settings.

    ``url`` overrides ``settings.DATABASE_URL`` (tests point this at a
    temporary SQLite file).
    """
    settings = settings or get_settings()
    database_url = url or settings.DATABASE_URL

    engine_kwargs: dict = {
        "echo": settings.DB_ECHO,
        "pool_pre_ping": settings.DB_POOL_PRE_PING,
    }

    # Use NullPool in tests (or when explicitly requested) so no connection
    # outlives the task that opened it.
    if settings.use_nullpool:
        engine_kwargs["poolclass"] = NullPool

    engine = create_async_engine(database_url, **engine_kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    return engine


# ---------------------------------------------------------------------------
# Sessionmaker
# ---------------------------------------------------------------------------


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """One session factory per engine; objects stay readable after commit."""
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )


__all__ = ["build_engine", "build_sessionmaker"]
