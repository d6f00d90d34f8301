"""Database configuration and session management.

Provides the ``Database`` handle that owns the async SQLAlchemy engine and
session factory. The handle is created explicitly by the application (or a
test) and passed to repositories; there is no module-level engine.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

logger = structlog.get_logger()

# Base class for models
Base = declarative_base()


def _enable_sqlite_transactions(engine: Any) -> None:
    """Let SQLAlchemy own BEGIN on SQLite connections.

    The stdlib driver only opens a transaction before DML, so two SELECTs
    in one session would otherwise see different snapshots.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


class Database:
    """Async database handle with an explicit init/dispose lifecycle.

    Example usage:
        database = Database(settings.database_url)
        await database.init()
        async with database.transaction() as session:
            ...
        await database.dispose()
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 10,
    ) -> None:
        """Create engine and session factory.

        Args:
            database_url: SQLAlchemy async database URL.
            echo: Whether to log emitted SQL.
            pool_size: Connection pool size (ignored for SQLite).
            max_overflow: Pool overflow (ignored for SQLite).
        """
        engine_kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )

        self.engine = create_async_engine(database_url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            _enable_sqlite_transactions(self.engine)

        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def dialect_name(self) -> str:
        """Name of the SQL dialect behind the engine."""
        return self.engine.dialect.name

    async def init(self) -> None:
        """Create tables if they don't exist."""
        # Register mapped classes on Base.metadata
        import app.catalog.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database schema ready", dialect=self.dialect_name)

    async def dispose(self) -> None:
        """Release all pooled connections."""
        await self.engine.dispose()
        logger.info("Database connections released", dialect=self.dialect_name)

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session that commits on success and rolls back on error.

        Yields:
            AsyncSession bound to a single transaction.
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.transaction() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False
