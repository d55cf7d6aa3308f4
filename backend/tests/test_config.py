from pathlib import Path

import pytest
from pydantic import ValidationError

from sensor_ingest.config import DEFAULT_DATABASE_URL, Settings


def test_defaults() -> None:
    settings = Settings.from_env(environ={}, use_dotenv=False)
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.host == "127.0.0.1"
    assert settings.port == 3000
    assert settings.db_pool_size == 5
    assert settings.sensor_api_key is None
    assert settings.cors_origins == ("*",)


def test_reads_environment() -> None:
    settings = Settings.from_env(
        environ={
            "DATABASE_URL": "postgresql://u:p@db/sensors",
            "HOST": "0.0.0.0",
            "PORT": "8443",
            "SENSOR_API_KEY": "abc",
            "DB_POOL_SIZE": "2",
            "CORS_ORIGINS": "https://a.example, https://b.example,",
            "LOG_LEVEL": "debug",
        },
        use_dotenv=False,
    )
    assert settings.database_url == "postgresql://u:p@db/sensors"
    assert settings.host == "0.0.0.0"
    assert settings.port == 8443
    assert settings.sensor_api_key == "abc"
    assert settings.db_pool_size == 2
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.log_level == "debug"


def test_bad_port_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings.from_env(environ={"PORT": "not-a-port"}, use_dotenv=False)


def test_settings_are_frozen() -> None:
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.sensor_api_key = "changed"  # type: ignore[misc]


def test_tls_needs_both_files(tmp_path: Path) -> None:
    cert = tmp_path / "cert.pem"
    key = tmp_path / "key.pem"
    settings = Settings(ssl_cert_path=str(cert), ssl_key_path=str(key))
    assert not settings.tls_enabled

    cert.write_text("cert")
    assert not settings.tls_enabled

    key.write_text("key")
    assert settings.tls_enabled
