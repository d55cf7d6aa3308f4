"""
Sensor Ingest - Backend API
===========================
FastAPI application that collects readings from air-quality sensors and
serves them back to a dashboard.

ARCHITECTURE:
    [Sensor device] --POST /api/readings (x-api-key)--> [This Backend] ---> [readings table]
                                                              |
    [Dashboard]     <--GET /api/readings (newest 100)---------+
                    <--everything else: files from ASSETS_DIR

    The readings table lives either in a local SQLite file or in a
    PostgreSQL server, depending on DATABASE_URL.

HOW TO RUN:
    # Install
    pip install -e .

    # Copy environment config
    cp env.example.txt .env
    # Edit .env with your settings (at least SENSOR_API_KEY)

    # Run the server (HTTPS if cert.pem and key.pem exist)
    sensor-ingest
    # or, while developing
    uvicorn sensor_ingest.main:create_app --factory --reload --port 3000

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:3000/docs
    - ReDoc: http://localhost:3000/redoc
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from sensor_ingest.config import Settings, configure_logging
from sensor_ingest.errors import IngestError
from sensor_ingest.routers import readings_router
from sensor_ingest.services import ReadingStore, create_store

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(settings: Optional[Settings] = None, store: Optional[ReadingStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration (default: read from the environment)
        store: Reading store to use (default: picked from settings.database_url)

    Returns:
        The app, ready to hand to uvicorn
    """
    if settings is None:
        settings = Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        STARTUP:
            1. Pick the storage backend from DATABASE_URL
            2. Connect and create the readings table (failure stops the server)

        SHUTDOWN:
            1. Close the connection pool
        """
        configure_logging(settings.log_level)

        reading_store = store if store is not None else create_store(settings)
        await reading_store.start()
        app.state.store = reading_store

        if not settings.sensor_api_key:
            logger.warning("SENSOR_API_KEY is not set; every POST /api/readings will be rejected")
        logger.info(f"Sensor ingest ready ({reading_store.backend_name} backend)")

        yield  # Application runs here

        app.state.store = None
        await reading_store.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Sensor Ingest API",
        description=(
            "Collects air-quality readings (eCO2, formaldehyde, TVOC, PM2.5, PM10, "
            "temperature, humidity) from devices and serves the latest ones back."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.store = None

    # =========================================================================
    # CORS MIDDLEWARE
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # ERRORS
    # =========================================================================

    @app.exception_handler(IngestError)
    async def ingest_error_handler(request: Request, exc: IngestError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": "error", "message": exc.message},
        )

    # =========================================================================
    # ROUTES
    # =========================================================================

    app.include_router(readings_router)

    @app.get("/health", summary="Health Check")
    async def health(request: Request):
        """Health check endpoint."""
        reading_store = request.app.state.store
        return {
            "status": "healthy" if reading_store is not None else "starting",
            "backend": reading_store.backend_name if reading_store is not None else None,
        }

    # Everything else is the dashboard. Mounted last so it never shadows the API.
    assets_dir = Path(settings.assets_dir)
    if assets_dir.is_dir():
        app.mount("/", StaticFiles(directory=assets_dir, html=True), name="assets")
    else:
        logger.warning(f"Assets directory {assets_dir} not found; dashboard will not be served")

    return app


# =============================================================================
# SERVER BOOTSTRAP
# =============================================================================

def run() -> None:
    """Start the server on HOST:PORT, over HTTPS when certificates are present."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    ssl_options = {}
    if settings.tls_enabled:
        logger.info(
            f"SSL certificates found at {settings.ssl_cert_path} and "
            f"{settings.ssl_key_path}. Starting in HTTPS mode."
        )
        ssl_options = {
            "ssl_certfile": settings.ssl_cert_path,
            "ssl_keyfile": settings.ssl_key_path,
        }
    else:
        logger.info("SSL certificates not found. Starting in HTTP mode.")

    logger.info(f"Listening on {settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, **ssl_options)
