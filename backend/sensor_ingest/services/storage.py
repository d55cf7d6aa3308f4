"""
Reading Storage
===============

This is where readings actually get saved and loaded.

WHAT IT DOES:
------------
1. Opens a small pool of database connections at startup
2. Makes sure the readings table exists
3. Inserts one reading at a time (one INSERT, nothing else)
4. Loads the newest readings, newest first

TWO BACKENDS, ONE INTERFACE:
---------------------------
    SqliteReadingStore    - embedded single-file database (sensor_data.db)
    PostgresReadingStore  - networked PostgreSQL server

Both run the exact same SQLAlchemy statements. The only difference is how
the engine (the connection pool) is built. Pick one with create_store(),
which looks at DATABASE_URL.

HOW TO USE:
----------
    store = create_store(settings)
    await store.start()            # connect + create table, raises StartupError

    await store.add_reading(ReadingCreate(eco2=400, temperature=21.5))
    recent = await store.list_recent()   # newest first, at most 100

    await store.close()
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import func, insert, select
from sqlalchemy.engine import URL
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from sensor_ingest.config import Settings
from sensor_ingest.errors import StartupError, StorageReadError, StorageWriteError
from sensor_ingest.models import READING_FIELDS, Reading, ReadingCreate
from sensor_ingest.services.schema import create_schema, readings
from sensor_ingest.utils.database_url import (
    POSTGRESQL,
    SQLITE,
    parse_database_url,
    render_url,
)

logger = logging.getLogger(__name__)


# How many readings GET /api/readings returns
RECENT_READINGS_LIMIT = 100

# Connections kept open per store
DEFAULT_POOL_SIZE = 5


def describe_db_error(error: Exception) -> str:
    """Get the database driver's own error text, without SQLAlchemy's decorations."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


# =============================================================================
# THE INTERFACE
# =============================================================================

class ReadingStore(ABC):
    """
    Base class for reading storage.

    Subclasses only decide how to build the engine. Inserting and querying
    is shared, because SQLAlchemy speaks both dialects for us.
    """

    backend_name = "unknown"

    def __init__(self, url: URL, pool_size: int = DEFAULT_POOL_SIZE):
        """
        Args:
            url: SQLAlchemy URL with an async driver
            pool_size: How many connections to keep in the pool
        """
        self.url = url
        self.pool_size = pool_size
        self._engine: Optional[AsyncEngine] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError(f"{type(self).__name__} has not been started")
        return self._engine

    @abstractmethod
    def _create_engine(self) -> AsyncEngine:
        """Build the async engine for this backend."""

    def _prepare(self) -> None:
        """Anything that has to happen before the first connection."""

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """
        Connect and make sure the readings table exists.

        Raises:
            StartupError: If anything goes wrong. The server must not start.
        """
        logger.info(f"Opening {self.backend_name} storage at {render_url(self.url)}")
        try:
            self._prepare()
            self._engine = self._create_engine()
        except (SQLAlchemyError, OSError) as e:
            raise StartupError(f"Could not open {self.backend_name} storage: {e}") from e

        try:
            await create_schema(self._engine)
        except StartupError:
            await self.close()
            raise

    async def close(self) -> None:
        """Close all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info(f"Closed {self.backend_name} storage")

    # -------------------------------------------------------------------------
    # Readings
    # -------------------------------------------------------------------------

    async def add_reading(self, reading: ReadingCreate) -> None:
        """
        Insert one reading. The database fills in id and timestamp.

        Raises:
            StorageWriteError: If the insert fails (carries the database's error text)
        """
        stmt = insert(readings).values(**reading.model_dump(include=set(READING_FIELDS)))
        try:
            async with self.engine.begin() as conn:
                await conn.execute(stmt)
        except (SQLAlchemyError, OSError) as e:
            logger.exception("Database error while inserting reading")
            raise StorageWriteError(describe_db_error(e)) from e

    async def list_recent(self, limit: int = RECENT_READINGS_LIMIT) -> list[Reading]:
        """
        Load the newest readings.

        Args:
            limit: Maximum number of rows to return

        Returns:
            Readings ordered by id, newest first

        Raises:
            StorageReadError: If the query fails or a stored row isn't a valid reading
        """
        stmt = select(readings).order_by(readings.c.id.desc()).limit(limit)
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                rows = result.mappings().all()
            return [Reading.model_validate(dict(row)) for row in rows]
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database error while loading readings: {describe_db_error(e)}")
            raise StorageReadError(describe_db_error(e)) from e
        except ValidationError as e:
            # e.g. NULLs left behind in a readings table created by an older schema
            logger.error(f"Stored reading failed validation: {e}")
            raise StorageReadError(str(e)) from e

    async def count_readings(self) -> int:
        """How many readings are stored in total."""
        async with self.engine.connect() as conn:
            result = await conn.execute(select(func.count()).select_from(readings))
            return result.scalar_one()


# =============================================================================
# THE BACKENDS
# =============================================================================

class SqliteReadingStore(ReadingStore):
    """
    Readings in a single SQLite file, through aiosqlite.

    The folder holding the file is created if it's missing; SQLite itself
    creates the file on first connect.
    """

    backend_name = SQLITE

    def _prepare(self) -> None:
        database = self.url.database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            self.url,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=self.pool_size,
            max_overflow=0,
        )


class PostgresReadingStore(ReadingStore):
    """Readings in a PostgreSQL database, through asyncpg."""

    backend_name = POSTGRESQL

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            self.url,
            pool_size=self.pool_size,
            max_overflow=0,
            pool_pre_ping=True,
        )


_BACKENDS: dict[str, type[ReadingStore]] = {
    SQLITE: SqliteReadingStore,
    POSTGRESQL: PostgresReadingStore,
}


def create_store(settings: Settings) -> ReadingStore:
    """
    Pick the storage backend named by settings.database_url.

    Raises:
        StartupError: If the URL is invalid or names an unsupported database
    """
    backend, url = parse_database_url(settings.database_url)
    store_class = _BACKENDS[backend]
    return store_class(url, pool_size=settings.db_pool_size)
