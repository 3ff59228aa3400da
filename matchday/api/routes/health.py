"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from matchday.api.dependencies import get_db_connection, get_settings
from matchday.config.settings import Settings
from matchday.db.connection import DatabaseConnection

router = APIRouter()


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_settings),
    connection: DatabaseConnection = Depends(get_db_connection),
) -> JSONResponse:
    """Application info and database status; 503 when the database is unhealthy."""
    database = await connection.health_check()
    body: dict[str, Any] = {
        "status": "healthy" if database["healthy"] else "degraded",
        "name": settings.app.name,
        "version": settings.app.version,
        "environment": settings.app.environment,
        "database": database,
    }
    return JSONResponse(status_code=200 if database["healthy"] else 503, content=body)
