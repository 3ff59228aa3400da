"""
FastAPI application for the Matchday API.

Run with:
    uvicorn matchday.api.app:create_app --factory
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from matchday.api.errors import internal_error_response, register_error_handlers
from matchday.api.routes import admin, auth, bets, health
from matchday.clients.football_api import FootballApiClient
from matchday.config import Settings, configure_logging, get_settings
from matchday.db.connection import DatabaseConnection
from matchday.db.indexes import ensure_indexes
from matchday.telemetry import Telemetry

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Opens the database connection and the football API client on startup
    and closes both on shutdown.
    """
    settings: Settings = app.state.settings
    logger.info("Starting Matchday API", environment=settings.app.environment)

    app.state.telemetry.start()

    connection = DatabaseConnection(settings.mongo)
    await connection.connect()
    await ensure_indexes(connection.database)
    app.state.db_connection = connection
    app.state.football_api = FootballApiClient(settings.football_api)

    logger.info("Matchday API started")

    yield

    logger.info("Shutting down Matchday API")
    await app.state.football_api.aclose()
    await connection.disconnect()
    app.state.telemetry.shutdown()
    logger.info("Matchday API shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. Nothing connects until the lifespan runs."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        debug=settings.app.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.telemetry = Telemetry(settings.telemetry, settings.app)

    # Registered first so CORS wraps it and 500s still carry CORS headers
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        fields = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
        }
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled error",
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                **fields,
            )
            return internal_error_response()
        logger.info(
            "Request handled",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            **fields,
        )
        return response

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.app.session_secret.get_secret_value(),
        session_cookie=settings.app.session_cookie,
        max_age=settings.app.session_ttl_hours * 3600,
        same_site="lax",
        https_only=settings.app.is_production,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(admin.router, tags=["Admin"])
    app.include_router(auth.router, tags=["Auth"])
    app.include_router(bets.router, tags=["Bets"])

    return app
