"""
Models Package
==============

Data models for the readings API.
Import from here instead of the individual files.

Example:
    from sensor_ingest.models import Reading, ReadingCreate
"""

from .reading import (
    MAX_SENSOR_VALUE,
    READING_FIELDS,

    # What devices send us
    ReadingCreate,

    # What we send back
    Reading,
    StatusResponse,
)

__all__ = [
    "MAX_SENSOR_VALUE",
    "READING_FIELDS",
    "ReadingCreate",
    "Reading",
    "StatusResponse",
]
