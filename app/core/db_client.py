"""
Async database access for the PLM store.

PostgreSQL (asyncpg) in deployments, SQLite (aiosqlite) for local runs and
tests. An async engine cannot cross event loops, so one engine and session
factory are kept per running loop: the server loop, and in tests the loop of
each test.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, NamedTuple

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class _LoopBinding(NamedTuple):
    engine: AsyncEngine
    sessions: async_sessionmaker


def _loop_key() -> int:
    try:
        return id(asyncio.get_running_loop())
    except RuntimeError:
        return 0


class DatabaseManager:
    """Engines and unit-of-work sessions for the accounts/workspaces/documents store."""

    def __init__(self):
        self._bindings: Dict[int, _LoopBinding] = {}

    @property
    def database_url(self) -> str:
        if settings.DATABASE_URL:
            return settings.DATABASE_URL
        return (
            f"postgresql+asyncpg://{settings.DATABASE_USER}:{settings.DATABASE_PASSWORD}"
            f"@{settings.DATABASE_HOST}:{settings.DATABASE_PORT}/{settings.DATABASE_NAME}"
        )

    def _create_engine(self) -> AsyncEngine:
        url = self.database_url
        if url.startswith("sqlite"):
            # One shared connection keeps an in-memory database alive
            return create_async_engine(
                url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=settings.DB_ECHO,
            )

        logger.info(
            "Connecting to PostgreSQL",
            host=settings.DATABASE_HOST,
            port=settings.DATABASE_PORT,
            database=settings.DATABASE_NAME,
            user=settings.DATABASE_USER,
        )
        return create_async_engine(
            url,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,
            echo=settings.DB_ECHO,
        )

    def _binding(self) -> _LoopBinding:
        key = _loop_key()
        binding = self._bindings.get(key)
        if binding is None:
            engine = self._create_engine()
            binding = _LoopBinding(
                engine,
                async_sessionmaker(engine, expire_on_commit=False, autoflush=False),
            )
            self._bindings[key] = binding
            logger.debug("Database engine created", loop=key)
        return binding

    async def get_engine_async(self) -> AsyncEngine:
        return self._binding().engine

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Unit of work: commits when the block exits normally, rolls back when
        it raises.

            async with db.session() as session:
                account = await session.get(AccountModel, login)
        """
        async with self._binding().sessions() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def test_connection(self, timeout: float = 15.0) -> bool:
        try:
            async with asyncio.timeout(timeout):
                async with self._binding().engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            return True
        except TimeoutError:
            logger.error("Database connection test timed out", timeout=timeout)
        except Exception as e:
            logger.error("Database connection test failed", error=str(e))
        return False

    async def create_tables(self):
        from app.models.db_models import Base

        async with self._binding().engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_tables(self):
        from app.models.db_models import Base

        async with self._binding().engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def close(self):
        """Dispose the engine bound to the running loop."""
        binding = self._bindings.pop(_loop_key(), None)
        if binding is not None:
            await binding.engine.dispose()

    async def close_all(self):
        """Dispose the running loop's engine and forget engines of other loops."""
        await self.close()
        self._bindings.clear()
        logger.info("Database connections closed")


# Global database manager instance
db = DatabaseManager()
