"""
Services Package
================

These are the "workers" that do the actual work.

- ReadingStore: Saves and loads readings (SQLite or PostgreSQL)
- create_store: Picks the right ReadingStore for DATABASE_URL
- check_api_key: The shared-secret check for incoming readings
"""

from .auth import API_KEY_HEADER, check_api_key
from .schema import create_schema, readings
from .storage import (
    RECENT_READINGS_LIMIT,
    PostgresReadingStore,
    ReadingStore,
    SqliteReadingStore,
    create_store,
)

__all__ = [
    "API_KEY_HEADER",
    "check_api_key",
    "create_schema",
    "readings",
    "RECENT_READINGS_LIMIT",
    "ReadingStore",
    "SqliteReadingStore",
    "PostgresReadingStore",
    "create_store",
]
