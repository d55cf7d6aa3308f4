"""
Readings Table
==============

The one and only table this service writes to, plus the startup step
that creates it.

    readings
    --------
    id           INTEGER  primary key, auto-increment
    timestamp    DATETIME default CURRENT_TIMESTAMP
    eco2         INTEGER
    ech2o        INTEGER
    tvoc         INTEGER
    pm2_5        INTEGER
    pm10         INTEGER
    temperature  REAL
    humidity     REAL

The same definition works on SQLite and PostgreSQL.
"""

import logging

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    Table,
    func,
    text,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from sensor_ingest.errors import StartupError

logger = logging.getLogger(__name__)


metadata = MetaData()

readings = Table(
    "readings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "timestamp",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
    ),
    Column("eco2", Integer, nullable=False, server_default=text("0")),
    Column("ech2o", Integer, nullable=False, server_default=text("0")),
    Column("tvoc", Integer, nullable=False, server_default=text("0")),
    Column("pm2_5", Integer, nullable=False, server_default=text("0")),
    Column("pm10", Integer, nullable=False, server_default=text("0")),
    Column("temperature", Float, nullable=False, server_default=text("0")),
    Column("humidity", Float, nullable=False, server_default=text("0")),
    # ids are never reused on SQLite, even after the newest row is gone
    sqlite_autoincrement=True,
)


async def create_schema(engine: AsyncEngine) -> None:
    """
    Create the readings table if it does not exist yet.

    Safe to call on every startup: an existing table (and its rows) is left
    alone.

    Raises:
        StartupError: If the database can't be reached or the table can't be created
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all, checkfirst=True)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Could not create the readings table: {e}")
        raise StartupError(f"Could not initialize database schema: {e}") from e

    logger.info("Readings table is ready")
