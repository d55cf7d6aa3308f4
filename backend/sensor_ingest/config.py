"""
Configuration
=============

Settings for the ingest service, loaded from environment variables
(and from a .env file if there is one).

Settings are read ONCE at startup into a frozen Settings object. The app
keeps it on app.state and hands it to the endpoints through a dependency,
so nothing goes back to os.environ while requests are being served.

Environment Variables:
    DATABASE_URL:    Where readings are stored (default: sqlite:sensor_data.db)
                     sqlite:...      -> embedded single-file database
                     postgresql://.. -> networked PostgreSQL database
    DB_POOL_SIZE:    Number of pooled database connections (default: 5)
    HOST:            Address to listen on (default: 127.0.0.1)
    PORT:            Port to listen on (default: 3000)
    SENSOR_API_KEY:  Shared secret devices send in the x-api-key header
    SSL_CERT_PATH:   TLS certificate (default: cert.pem)
    SSL_KEY_PATH:    TLS private key (default: key.pem)
    ASSETS_DIR:      Folder with the dashboard files (default: assets)
    CORS_ORIGINS:    Comma separated list of allowed origins (default: *)
    LOG_LEVEL:       DEBUG, INFO, WARNING, ... (default: INFO)
"""

import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_DATABASE_URL = "sqlite:sensor_data.db"

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    """
    Immutable application configuration.

    Build it with Settings.from_env() in production. Tests construct it
    directly with keyword arguments.
    """

    model_config = ConfigDict(frozen=True)

    database_url: str = Field(DEFAULT_DATABASE_URL, description="Storage connection target")
    db_pool_size: int = Field(5, ge=1, description="Connection pool size")
    host: str = Field("127.0.0.1", description="Listen host")
    port: int = Field(3000, ge=0, le=65535, description="Listen port")
    sensor_api_key: Optional[str] = Field(None, description="Shared secret for ingestion")
    ssl_cert_path: str = Field("cert.pem", description="TLS certificate path")
    ssl_key_path: str = Field("key.pem", description="TLS private key path")
    assets_dir: str = Field("assets", description="Static dashboard directory")
    cors_origins: tuple[str, ...] = Field(("*",), description="Allowed CORS origins")
    log_level: str = Field("INFO", description="Root log level")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        use_dotenv: bool = True,
    ) -> "Settings":
        """
        Read settings from the process environment.

        Args:
            environ: Mapping to read instead of os.environ (handy in tests)
            use_dotenv: Load a .env file into os.environ first

        Returns:
            A frozen Settings object
        """
        if use_dotenv:
            load_dotenv()
        env = os.environ if environ is None else environ

        values = {}
        for field_name in cls.model_fields:
            raw = env.get(field_name.upper())
            if raw is not None:
                values[field_name] = raw

        if "cors_origins" in values:
            origins = [o.strip() for o in values["cors_origins"].split(",") if o.strip()]
            values["cors_origins"] = tuple(origins) or ("*",)

        return cls(**values)

    @property
    def tls_enabled(self) -> bool:
        """HTTPS only when both the certificate and the key exist on disk."""
        return Path(self.ssl_cert_path).is_file() and Path(self.ssl_key_path).is_file()


def configure_logging(level: str = "INFO") -> None:
    """Set up process-wide logging to stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
