"""
Database URL Helpers
====================

People write database URLs in lots of ways. These helpers turn whatever
was configured into a SQLAlchemy URL that uses an async driver, and tell
us which storage backend it points at.

Accepted forms:
    sqlite:sensor_data.db                  -> sqlite+aiosqlite:///sensor_data.db
    sqlite:///data/sensor_data.db          -> sqlite+aiosqlite:///data/sensor_data.db
    sqlite+aiosqlite:///sensor_data.db     -> unchanged
    postgres://user:pw@host/db             -> postgresql+asyncpg://user:pw@host/db
    postgresql://user:pw@host/db           -> postgresql+asyncpg://user:pw@host/db
    postgresql+asyncpg://user:pw@host/db   -> unchanged
"""

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from sensor_ingest.errors import StartupError


SQLITE = "sqlite"
POSTGRESQL = "postgresql"

# driver name as written -> (backend, async driver name)
_DRIVERS = {
    "sqlite": (SQLITE, "sqlite+aiosqlite"),
    "sqlite+aiosqlite": (SQLITE, "sqlite+aiosqlite"),
    "postgres": (POSTGRESQL, "postgresql+asyncpg"),
    "postgresql": (POSTGRESQL, "postgresql+asyncpg"),
    "postgresql+asyncpg": (POSTGRESQL, "postgresql+asyncpg"),
}


def parse_database_url(raw_url: str) -> tuple[str, URL]:
    """
    Normalize a configured database URL.

    Args:
        raw_url: The DATABASE_URL value

    Returns:
        (backend, url) where backend is "sqlite" or "postgresql" and url is
        a SQLAlchemy URL using the async driver for that backend

    Raises:
        StartupError: If the URL is empty, malformed or names an unsupported database
    """
    raw_url = (raw_url or "").strip()
    if not raw_url:
        raise StartupError("DATABASE_URL is empty")

    # Short form "sqlite:path/to/file.db" (no slashes after the colon)
    if "://" not in raw_url and raw_url.startswith("sqlite:"):
        raw_url = f"sqlite:///{raw_url[len('sqlite:'):]}"

    try:
        url = make_url(raw_url)
    except ArgumentError as e:
        raise StartupError(f"Invalid DATABASE_URL: {e}") from e

    driver = _DRIVERS.get(url.drivername)
    if driver is None:
        raise StartupError(f"Unsupported database in DATABASE_URL: {url.drivername}")

    backend, async_driver = driver
    return backend, url.set(drivername=async_driver)


def render_url(url: URL) -> str:
    """Render a URL for logging, with the password masked."""
    return url.render_as_string(hide_password=True)
