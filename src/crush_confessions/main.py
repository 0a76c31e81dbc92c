# src/crush_confessions/main.py
"""Main entry point for the CrushConfessions application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from crush_confessions.api.errors import register_exception_handlers
from crush_confessions.api.v1 import (
    auth_router,
    comments_router,
    confessions_router,
    conversations_router,
    profile_router,
    system_router,
)
from crush_confessions.core.log_config import configure_logging
from crush_confessions.core.settings import settings
from crush_confessions.services.presence import build_presence_tracker

configure_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="CrushConfessions API",
    description="Anonymous campus confessions with mutual reveals and chat",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Typing presence lives for the lifetime of the app instance
app.state.presence = build_presence_tracker(settings)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(profile_router, prefix="/api/v1")
app.include_router(confessions_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(conversations_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")

logger.info("%s %s ready", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "CrushConfessions API",
        "version": settings.app_version,
        "description": "Anonymous campus confessions with mutual reveals and chat",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("crush_confessions.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
