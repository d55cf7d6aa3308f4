"""
Readings API Router
===================

The two doors into the service.

ALL ENDPOINTS:
-------------
POST /api/readings  - A device reports one reading (needs x-api-key)
GET  /api/readings  - The newest 100 readings, newest first (open to anyone)

The GET endpoint is deliberately public: the dashboard reads from it
without a key.

Error responses all look like:
    {"status": "error", "message": "..."}
(the exception handler in main.py builds them from sensor_ingest.errors)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from sensor_ingest.config import Settings
from sensor_ingest.errors import ServiceNotReadyError, StorageReadError
from sensor_ingest.models import Reading, ReadingCreate, StatusResponse
from sensor_ingest.services import (
    API_KEY_HEADER,
    RECENT_READINGS_LIMIT,
    ReadingStore,
    check_api_key,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/readings", tags=["readings"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================
# Settings and the store are built once in the app lifespan and kept on
# app.state. These hand them to the endpoints.

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ReadingStore:
    """Get the reading store, or fail if the app hasn't finished starting."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise ServiceNotReadyError()
    return store


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post(
    "",
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Report a reading",
    responses={
        401: {"model": StatusResponse, "description": "Missing or wrong x-api-key"},
        500: {"model": StatusResponse, "description": "Server misconfigured or database error"},
    },
)
async def add_reading(
    payload: ReadingCreate,
    api_key: Optional[str] = Header(None, alias=API_KEY_HEADER),
    settings: Settings = Depends(get_settings),
    store: ReadingStore = Depends(get_store),
):
    """
    Store one reading from a device.

    **Headers**
    - `x-api-key`: The shared SENSOR_API_KEY.

    **Body (JSON)**
    - eco2, ech2o, tvoc, pm2_5, pm10: whole numbers (missing = 0)
    - temperature, humidity: decimals (missing = 0.0)
    - id / timestamp are ignored, the server sets them.
    """
    check_api_key(settings.sensor_api_key, api_key)

    await store.add_reading(payload)

    logger.debug(
        f"Stored reading eco2={payload.eco2} pm2_5={payload.pm2_5} "
        f"temp={payload.temperature} hum={payload.humidity}"
    )
    return StatusResponse(status="success")


@router.get(
    "",
    response_model=list[Reading],
    summary="Recent readings",
)
async def list_readings(store: ReadingStore = Depends(get_store)):
    """
    The newest readings, newest first (at most 100).

    If the database can't be read we return an empty list instead of an
    error, so the dashboard keeps working. The failure is logged by the store.
    """
    try:
        return await store.list_recent(RECENT_READINGS_LIMIT)
    except StorageReadError:
        return []
