"""Database connection management.

Provides async database access using SQLAlchemy. PostgreSQL (asyncpg) is the
production target; SQLite (aiosqlite) is supported for development and tests.

## Configuration

Database connection is configured via environment variables:
- DATABASE_URL: Full connection string
- DATABASE_POOL_SIZE: Connection pool size (default: 5)
- DATABASE_MAX_OVERFLOW: Max overflow connections (default: 10)
- DATABASE_CONNECT_ATTEMPTS: Startup connection attempts (default: 3)

## Usage

```python
from devclimate.database import Database

database = Database.from_settings(settings)
await database.connect()

async with database.session() as session:
    user = await session.get(User, user_id)

await database.close()
```

The `Database` object is created once per process (in the FastAPI lifespan)
and handed to request handlers through dependencies; nothing here is a
module-level global.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from devclimate.config import Settings
from devclimate.database.models import Base
from devclimate.errors import StartupError

logger = logging.getLogger(__name__)


def _engine_options(url: str, pool_size: int, max_overflow: int) -> dict[str, Any]:
    """Pool options appropriate for the database backend."""
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # In-memory databases exist per connection; share a single one
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,  # Verify connections before use
    }


class Database:
    """Owns the async engine and session factory for one process."""

    def __init__(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
        connect_attempts: int = 3,
    ):
        self.url = url
        self.connect_attempts = connect_attempts
        self.engine: AsyncEngine = create_async_engine(
            url,
            echo=echo,
            **_engine_options(url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        return cls(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            echo=settings.database_echo,
            connect_attempts=settings.database_connect_attempts,
        )

    async def connect(self, create_tables: bool = False) -> None:
        """Verify the database is reachable, optionally creating tables.

        Raises:
            StartupError: If the database cannot be reached after
                `connect_attempts` tries
        """
        logger.info("Connecting to database")

        ping = retry(
            stop=stop_after_attempt(self.connect_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type((SQLAlchemyError, OSError)),
        )(self._ping)

        try:
            await ping()
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(f"Database unreachable after {self.connect_attempts} attempts: {cause}")
            raise StartupError(f"Database unreachable: {cause}") from cause

        if create_tables:
            await self.create_tables()

        logger.info("Database connection established")

    async def _ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database tables ready")

    async def close(self) -> None:
        """Dispose of the engine. Should be called on application shutdown."""
        logger.info("Closing database connection")
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session.

        The session is rolled back on error and always closed. Transactions
        are not automatically committed; call commit() explicitly.
        """
        session = self._session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
