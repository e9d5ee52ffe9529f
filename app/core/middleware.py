"""Middleware configuration for FastAPI application.

Provides:
- CORS middleware setup
- Trusted host middleware (production)
- Request timing middleware
"""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def setup_cors_middleware(app: FastAPI) -> None:
    """Configure CORS middleware with settings from config.

    The ``jwt`` header is exposed so browser clients can read the token
    returned on account creation.
    """
    cors_origins = settings.resolved_cors_origins

    logger.info(
        "CORS configuration",
        environment=settings.ENVIRONMENT,
        origins=cors_origins,
        credentials=settings.CORS_CREDENTIALS,
        methods=settings.CORS_METHODS,
        expose_headers=settings.CORS_EXPOSE_HEADERS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
        expose_headers=settings.CORS_EXPOSE_HEADERS,
    )


def setup_trusted_host_middleware(app: FastAPI) -> None:
    """Restrict Host headers in production."""
    if not settings.is_production:
        return

    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=list(settings.ALLOWED_HOST_PATTERNS),
    )


def setup_timing_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(round(process_time, 4))
        return response


def setup_all_middleware(app: FastAPI) -> None:
    """Setup all middleware in correct order.

    CORS must be added first for OPTIONS requests to work correctly.
    """
    setup_cors_middleware(app)
    setup_trusted_host_middleware(app)
    setup_timing_middleware(app)
