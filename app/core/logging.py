"""
Logging setup.

Application events go through structlog. Library loggers (uvicorn,
SQLAlchemy, passlib) go through the standard logging tree, configured with
dictConfig to print in the same format. Each HTTP exchange produces one
``Request handled`` event carrying the caller's login once authentication has
run. Events emitted while serving a request also carry its request id.

Credentials never reach a record: password, authorization, token and session
cookie values are masked by ``redact_credentials``, and the request event
only reports whether a session cookie or a ``jwt`` header was issued.
"""

import logging
import logging.config
import time
import uuid
from typing import Any, Dict

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

from app.core.config import settings

HEALTH_ENDPOINTS = ("/health", "/ready", "/live")

REDACTED = "***"
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "new_password",
        "newpassword",
        "authorization",
        "jwt",
        "token",
        settings.SESSION_COOKIE_NAME.lower(),
    }
)


def redact_credentials(logger, method_name, event_dict):
    """structlog processor masking credential values."""
    for key in list(event_dict):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def _library_levels() -> Dict[str, str]:
    return {
        "uvicorn.error": "INFO",
        "sqlalchemy.engine": "INFO" if settings.DB_ECHO else "WARNING",
        # bcrypt version probing is noisy
        "passlib": "ERROR",
        "asyncio": "INFO" if settings.DEBUG else "WARNING",
    }


def configure_logging() -> None:
    """Configure structlog and the standard logging tree from settings."""
    json_output = settings.LOG_FORMAT == "json"

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            redact_credentials,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = (
        {
            "class": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        }
        if json_output
        else {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}
    )

    stdout = {"class": "logging.StreamHandler", "formatter": "default", "stream": "ext://sys.stdout"}

    loggers: Dict[str, Dict[str, Any]] = {
        name: {"level": level, "handlers": ["default"], "propagate": False}
        for name, level in _library_levels().items()
    }
    loggers["uvicorn.access"] = {"level": "INFO", "handlers": ["access"], "propagate": False}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"skip_health_checks": {"()": HealthCheckFilter}},
            "formatters": {"default": formatter},
            "handlers": {
                "default": stdout,
                "access": {**stdout, "filters": ["skip_health_checks"]},
            },
            "root": {"level": settings.LOG_LEVEL, "handlers": ["default"]},
            "loggers": loggers,
        }
    )


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access lines for probe endpoints."""

    def filter(self, record):
        message = record.getMessage()
        return not any(endpoint in message for endpoint in HEALTH_ENDPOINTS)


def bind_caller(login: str, auth_method: str) -> None:
    """Attach the authenticated caller to every event of the current request."""
    bind_contextvars(login=login, auth_method=auth_method)


class RequestLoggingMiddleware:
    """ASGI middleware writing one event per HTTP exchange."""

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("request")
        self.session_cookie_prefix = f"{settings.SESSION_COOKIE_NAME}=".encode()

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or scope["path"] in HEALTH_ENDPOINTS:
            await self.app(scope, receive, send)
            return

        clear_contextvars()
        bind_contextvars(request_id=uuid.uuid4().hex[:12])
        started = time.perf_counter()
        outcome: Dict[str, Any] = {}

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                headers = message.get("headers", [])
                outcome["status_code"] = message["status"]
                outcome["jwt_issued"] = any(key == b"jwt" for key, _ in headers)
                outcome["session_cookie_set"] = any(
                    key == b"set-cookie" and value.startswith(self.session_cookie_prefix)
                    for key, value in headers
                )
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            state = scope.get("state") or {}
            self.logger.info(
                "Request handled",
                method=scope["method"],
                path=scope["path"],
                caller=state.get("caller_login"),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                **outcome,
            )
            clear_contextvars()


def setup_request_logging(app):
    app.add_middleware(RequestLoggingMiddleware)


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def get_auth_logger() -> structlog.BoundLogger:
    return get_logger("auth")


def get_service_logger(service_name: str) -> structlog.BoundLogger:
    return get_logger(f"service.{service_name}")
