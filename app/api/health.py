"""Health check and monitoring endpoints.

Provides endpoints for:
- Basic health checks
- Detailed service status
- Kubernetes readiness/liveness probes
"""

import time
from typing import Dict, Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import get_logger
from app.core.db_client import db
from app.core.indexer_config import indexer_config
from app.core.sessions import session_store

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/")
async def root() -> Dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "status": "running",
        "docs": "/docs" if settings.DEBUG else None,
        "health": "/health",
        "status_endpoint": "/status",
    }


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint with database connectivity verification.

    Returns 200 if healthy, 503 if database is unavailable.
    """
    if not settings.DATABASE_ENABLED:
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "database": "disabled",
        }

    db_available = await db.test_connection(timeout=5.0)

    if not db_available:
        logger.warning("Health check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "timestamp": time.time(),
                "version": settings.VERSION,
                "database": "unavailable",
            },
        )

    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "connected",
    }


@router.get("/status")
async def detailed_status() -> Dict[str, Any]:
    """Detailed status endpoint with service health checks."""
    db_available = await db.test_connection(timeout=5.0)

    return {
        "application": {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG,
            "status": "healthy" if db_available else "degraded",
        },
        "services": {
            "database": {
                "status": "connected" if db_available else "unavailable",
                "enabled": settings.DATABASE_ENABLED,
            },
            "indexer": {
                "server_uri": indexer_config.get_server_uri(),
                "aws_signing": indexer_config.uses_aws_signing,
            },
            "sessions": {
                "active": session_store.get_active_session_count(),
            },
        },
        "configuration": {
            "api_prefix": settings.API_V1_STR,
            "registration_strategy": settings.ACCOUNT_REGISTRATION_STRATEGY,
            "jwt_enabled": settings.JWT_ENABLED,
            "log_level": settings.LOG_LEVEL,
            "log_format": settings.LOG_FORMAT,
        },
        "timestamp": time.time(),
    }


@router.get("/ready")
async def readiness_check() -> Dict[str, Any]:
    """Readiness probe endpoint for Kubernetes."""
    db_available = await db.test_connection(timeout=5.0)

    if not db_available:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "ready": False,
                "reason": "Database not ready",
                "timestamp": time.time(),
            },
        )

    return {"ready": True, "timestamp": time.time()}


@router.get("/live")
async def liveness_check() -> Dict[str, Any]:
    """Liveness probe endpoint for Kubernetes."""
    return {"alive": True, "timestamp": time.time()}
