# src/crush_confessions/api/v1/endpoints/system.py
"""System endpoints for the CrushConfessions API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from crush_confessions.core.settings import settings
from crush_confessions.db.defaults import utcnow

from ..dependencies import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/db-health", response_model=None)
async def database_health(db: SessionDep) -> dict[str, object] | JSONResponse:
    """Run a trivial query to keep the database connection warm and verify it.

    Returns:
        Dictionary with status and timestamp, or a 500 response carrying the
        database error message
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database health check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "error",
                "message": "Database connection failed",
                "error": str(exc),
            },
        )
    return {
        "status": "ok",
        "message": "Database connection is healthy",
        "timestamp": utcnow().isoformat(),
        "version": settings.app_version,
    }
