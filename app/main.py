"""FastAPI Application Entry Point.

PLM server REST API, featuring:
- Account registration and self-service (session, Basic or JWT authentication)
- Workspaces with user memberships
- Versioned document iterations
- Administration of accounts and search indexer settings
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.core.logging import configure_logging, setup_request_logging, get_logger
from app.core.exceptions import setup_exception_handlers
from app.core.db_client import db
from app.core.middleware import setup_all_middleware
from app.core.sessions import session_store
from app.services.account_service import account_service

# Configure logging first
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info(
        "Starting application",
        project_name=settings.PROJECT_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        registration_strategy=settings.ACCOUNT_REGISTRATION_STRATEGY,
    )

    startup_tasks = []

    try:
        engine = await db.get_engine_async()
        if engine:
            if not settings.is_production:
                await db.create_tables()
                startup_tasks.append("Database tables created/verified")

            if await db.test_connection():
                startup_tasks.append("Database connected")
            else:
                logger.warning("Database connection test failed")
        else:
            logger.warning("Database engine not initialized")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        if settings.is_production:
            raise

    if settings.ADMIN_LOGIN and settings.ADMIN_PASSWORD:
        await account_service.ensure_admin_account(
            settings.ADMIN_LOGIN, settings.ADMIN_PASSWORD, settings.ADMIN_EMAIL
        )
        startup_tasks.append("Administrator account verified")

    logger.info("Application startup completed", tasks=startup_tasks)

    yield

    logger.info("Shutting down application")

    removed = session_store.cleanup_expired_sessions()
    try:
        await db.close_all()
    except Exception as e:
        logger.error("Error closing database", error=str(e))

    logger.info("Application shutdown completed", expired_sessions_removed=removed)


API_DESCRIPTION = """# PLM Server API

## Authentication
Requests authenticate with one of:
- **JWT**: `Authorization: Bearer <token>` (token returned in the `jwt` header on account creation)
- **Basic**: `Authorization: Basic <login:password>`
- **Session**: `PLMSESSIONID` cookie

## Getting Started
1. **Create an account**: `POST /api/v1/accounts/create`
2. **Create a workspace**: `POST /api/v1/workspaces`
3. **Create documents**: `POST /api/v1/workspaces/{workspaceId}/documents`
"""

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=API_DESCRIPTION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json" if settings.DEBUG else None,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS first, then trusted hosts and timing
setup_all_middleware(app)

setup_exception_handlers(app)

setup_request_logging(app)


from app.api.health import router as health_router

app.include_router(health_router, tags=["Health"])

from app.api.v1.accounts import router as accounts_router
from app.api.v1.workspaces import router as workspaces_router
from app.api.v1.documents import router as documents_router
from app.api.v1.admin import router as admin_router

app.include_router(accounts_router, prefix=settings.API_V1_STR, tags=["Accounts"])
app.include_router(workspaces_router, prefix=settings.API_V1_STR, tags=["Workspaces"])
app.include_router(documents_router, prefix=settings.API_V1_STR, tags=["Documents"])
app.include_router(admin_router, prefix=settings.API_V1_STR, tags=["Administration"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )
