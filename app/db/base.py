"""Async SQLAlchemy engine handle, declarative Base, and FastAPI dependency."""


from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import Settings

# ---------------------------------------------------------------------------
# Declarative Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """All ORM models inherit from this base."""

# ---------------------------------------------------------------------------
# Engine + session factory
# ---------------------------------------------------------------------------
class Database:
    """Owns one engine with a bounded connection pool and its session factory.

    Built once by the application factory, kept on ``app.state.db`` and
    disposed at shutdown. Nothing reaches for a module-level engine.
    """

    def __init__(self, settings: Settings):
        engine_kwargs: dict = {
            "pool_pre_ping": True,
            "echo": False,
        }
        # SQLite (local dev) doesn't support connection pooling parameters
        if settings.is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["pool_size"] = settings.db_pool_size
            engine_kwargs["max_overflow"] = settings.db_max_overflow

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
            autocommit=False,
        )

    async def create_all(self) -> None:
        """Create all tables (dev / tests). Production schema goes through Alembic."""
        import app.domain  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session; commit on success, roll back on error."""
    database: Database = request.app.state.db
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
