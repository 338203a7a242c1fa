"""
Database session factory: the storage handle of the directory core.

Owns the transaction boundary. Repositories only flush; this module begins,
commits and rolls back, and translates whatever escapes a transactional
block into the directory's error taxonomy.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from orgdir.core.config import Settings
from orgdir.db import models
from orgdir.db.session import build_engine, build_sessionmaker
from orgdir.exceptions import (
    ConfigurationError,
    ConstraintViolationError,
    DirectoryError,
    TransactionError,
)
from orgdir.observability import get_logger
from orgdir.repositories import RepositoryFactory
from orgdir.repositories.base import constraint_name

logger = get_logger(__name__)

T = TypeVar("T")


class DatabaseSessionFactory:
    """
    Session factory handed explicitly to the orchestrator and read composer.

    Construct it around an existing ``async_sessionmaker`` (and optionally
    the engine behind it), or call ``initialize()`` / ``from_settings()`` to
    build both from configuration. There is no process-wide instance.
    """

    def __init__(
        self,
        session_maker: Optional[async_sessionmaker[AsyncSession]] = None,
        engine: Optional[AsyncEngine] = None,
    ) -> None:
        self._session_factory = session_maker
        self._engine = engine
        if self._engine is None and session_maker is not None:
            self._engine = session_maker.kw.get("bind")
        self._is_initialized = session_maker is not None

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, url: Optional[str] = None
    ) -> "DatabaseSessionFactory":
        """Build engine and sessionmaker from configuration."""
        engine = build_engine(settings, url=url)
        return cls(build_sessionmaker(engine), engine)

    async def initialize(self, settings: Optional[Settings] = None) -> None:
        """
        Build the engine from settings (if not injected) and test the
        connection once.
        """
        if self._is_initialized:
            logger.debug("Session factory already initialized")
            return

        try:
            self._engine = build_engine(settings)
            self._session_factory = build_sessionmaker(self._engine)

            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))

            self._is_initialized = True
            logger.info("Database session factory initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize session factory: {e}")
            raise ConfigurationError(
                f"Could not initialize database session factory: {e}",
                config_section="database",
                cause=e,
            ) from e

    async def shutdown(self) -> None:
        """Dispose the engine. The factory is unusable afterwards."""
        if not self._is_initialized:
            return

        if self._engine is not None:
            await self._engine.dispose()
        self._is_initialized = False
        self._session_factory = None
        logger.info("Database session factory shutdown completed")

    @property
    def is_initialized(self) -> bool:
        """Check if the session factory is initialized."""
        return self._is_initialized

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise ConfigurationError(
                "Session factory has no engine", config_section="database"
            )
        return self._engine

    def _require_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if not self._is_initialized or self._session_factory is None:
            raise ConfigurationError(
                "Session factory not initialized. Call initialize() first.",
                config_section="database",
            )
        return self._session_factory

    @asynccontextmanager
    async def transaction(
        self, operation: str = "transaction"
    ) -> AsyncGenerator[RepositoryFactory, None]:
        """
        Run a block in one transaction and yield repositories bound to it.

        Commits on normal exit. On any exception the transaction is rolled
        back first; directory errors then propagate unchanged, integrity
        errors become ``ConstraintViolationError`` and anything else is
        wrapped in ``TransactionError``.
        """
        session_factory = self._require_session_factory()

        async with session_factory() as session:
            try:
                async with session.begin():
                    yield RepositoryFactory(session)
            except DirectoryError as e:
                logger.warning(
                    f"Transaction '{operation}' rolled back: {e.message}",
                    operation=operation,
                    error_code=e.error_code,
                )
                raise
            except IntegrityError as e:
                logger.warning(
                    f"Transaction '{operation}' rolled back on constraint violation",
                    operation=operation,
                )
                raise ConstraintViolationError(
                    f"Operation '{operation}' violates a storage constraint",
                    constraint=constraint_name(e),
                    context={"operation": operation},
                    cause=e,
                ) from e
            except Exception as e:
                error = TransactionError(operation, cause=e)
                logger.log_error(error, operation=operation)
                raise error from e

    async def with_transaction(
        self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        """
        Execute ``fn(repositories, *args, **kwargs)`` inside ``transaction()``.
        """
        operation = getattr(fn, "__name__", "transaction")
        async with self.transaction(operation) as repositories:
            return await fn(repositories, *args, **kwargs)

    @asynccontextmanager
    async def read(self) -> AsyncGenerator[RepositoryFactory, None]:
        """Repositories for reads. Nothing is committed; errors propagate as-is."""
        session_factory = self._require_session_factory()
        async with session_factory() as session:
            yield RepositoryFactory(session)

    async def create_schema(self) -> None:
        """Create every table known to the models (tests, local setups)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(models.Base.metadata.create_all)
        logger.info("Directory schema created")

    async def drop_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(models.Base.metadata.drop_all)
        logger.info("Directory schema dropped")

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform a health check on the session factory.

        Returns:
            Dictionary with health status information
        """
        if not self._is_initialized or self._session_factory is None:
            return {"status": "unhealthy", "error": "Session factory not initialized"}

        try:
            start_time = asyncio.get_running_loop().time()

            async with self._session_factory() as session:
                result = await session.execute(text("SELECT 1 as test"))
                if result.scalar() != 1:
                    raise RuntimeError("Unexpected health check result")

            response_time = asyncio.get_running_loop().time() - start_time

            return {
                "status": "healthy",
                "response_time_ms": round(response_time * 1000, 2),
                "initialized": True,
            }

        except Exception as e:
            logger.error(f"Session factory health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e),
                "initialized": self._is_initialized,
            }
