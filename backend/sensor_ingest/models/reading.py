"""
Reading Models
==============
Pydantic models for sensor readings going in and out of the API.

- ReadingCreate: What a device POSTs to /api/readings
- Reading:       What GET /api/readings returns (one row of the table)
- StatusResponse: The small {"status": ..., "message": ...} acknowledgement

NUMBERS:
    The five gas/particulate values (eco2, ech2o, tvoc, pm2_5, pm10) are
    small non-negative integers. Both storage backends keep them in a plain
    INTEGER column, and the API accepts 0..65535 for all of them.

    Anything the device leaves out is stored as zero. Infinity and NaN are
    refused (422): they are not JSON numbers and could not be sent back out.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Largest value a gas/particulate reading can have
MAX_SENSOR_VALUE = 65535

# Fields written by the device, in insert order
READING_FIELDS = (
    "eco2",
    "ech2o",
    "tvoc",
    "pm2_5",
    "pm10",
    "temperature",
    "humidity",
)


class ReadingCreate(BaseModel):
    """
    Request body for POST /api/readings.

    Unknown keys are ignored. That includes "id" and "timestamp": the
    server always assigns those itself.

    Example Request:
        POST /api/readings
        x-api-key: <secret>
        {
            "eco2": 400,
            "ech2o": 0,
            "tvoc": 50,
            "pm2_5": 5,
            "pm10": 10,
            "temperature": 21.5,
            "humidity": 45.0
        }
    """
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    eco2: int = Field(0, ge=0, le=MAX_SENSOR_VALUE, description="Equivalent CO2 (ppm)")
    ech2o: int = Field(0, ge=0, le=MAX_SENSOR_VALUE, description="Formaldehyde (ppb)")
    tvoc: int = Field(0, ge=0, le=MAX_SENSOR_VALUE, description="Total volatile organic compounds (ppb)")
    pm2_5: int = Field(0, ge=0, le=MAX_SENSOR_VALUE, description="PM2.5 concentration (µg/m³)")
    pm10: int = Field(0, ge=0, le=MAX_SENSOR_VALUE, description="PM10 concentration (µg/m³)")
    temperature: float = Field(0.0, description="Temperature (°C)")
    humidity: float = Field(0.0, description="Relative humidity (%)")


class Reading(BaseModel):
    """
    A stored reading, as returned by GET /api/readings.

    id and timestamp are always filled in by the database.
    """
    model_config = ConfigDict(from_attributes=True, allow_inf_nan=False)

    id: int = Field(..., description="Server-assigned identifier, increases with every insert")
    timestamp: datetime = Field(..., description="When the server stored the reading (UTC)")
    eco2: int
    ech2o: int
    tvoc: int
    pm2_5: int
    pm10: int
    temperature: float
    humidity: float

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite's CURRENT_TIMESTAMP is UTC but comes back without an offset
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class StatusResponse(BaseModel):
    """Acknowledgement returned by POST /api/readings."""
    status: str = Field(..., description="'success' or 'error'")
    message: Optional[str] = Field(None, description="Error details if failed")
