"""
Utility modules for the sensor ingest backend.
"""

from sensor_ingest.utils.database_url import (
    POSTGRESQL,
    SQLITE,
    parse_database_url,
    render_url,
)

__all__ = [
    "POSTGRESQL",
    "SQLITE",
    "parse_database_url",
    "render_url",
]
