import sqlite3
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sensor_ingest.config import Settings
from sensor_ingest.main import create_app
from sensor_ingest.services import ReadingStore, create_store

API_KEY = "correct-secret"

SAMPLE_READING = {
    "eco2": 400,
    "ech2o": 0,
    "tvoc": 50,
    "pm2_5": 5,
    "pm10": 10,
    "temperature": 21.5,
    "humidity": 45.0,
}


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    # nested folder: the SQLite backend has to create it
    return tmp_path / "data" / "sensor_data.db"


@pytest.fixture
def settings(tmp_path: Path, db_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:{db_path}",
        sensor_api_key=API_KEY,
        assets_dir=str(tmp_path / "no-assets"),
    )


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
async def store(settings: Settings) -> AsyncIterator[ReadingStore]:
    reading_store = create_store(settings)
    await reading_store.start()
    yield reading_store
    await reading_store.close()


def count_rows(path: Path) -> int:
    """Count stored readings straight from the SQLite file."""
    with sqlite3.connect(path) as conn:
        return conn.execute("SELECT COUNT(*) FROM readings").fetchone()[0]


def drop_readings_table(path: Path) -> None:
    with sqlite3.connect(path) as conn:
        conn.execute("DROP TABLE readings")


# readings table as an older release created it: every reading column nullable
LEGACY_READINGS_TABLE = """
CREATE TABLE readings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
    eco2 INTEGER,
    ech2o INTEGER,
    tvoc INTEGER,
    pm2_5 INTEGER,
    pm10 INTEGER,
    temperature REAL,
    humidity REAL
)
"""


def plant_legacy_null_row(path: Path) -> None:
    """Swap in the legacy table and store a row that is mostly NULLs."""
    with sqlite3.connect(path) as conn:
        conn.execute("DROP TABLE readings")
        conn.execute(LEGACY_READINGS_TABLE)
        conn.execute("INSERT INTO readings (eco2) VALUES (1)")
