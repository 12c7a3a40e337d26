"""Pytest configuration and fixtures.

Every test gets its own SQLite database file and upload directory under
tmp_path. HTTP tests drive the app factory through httpx's ASGITransport.
"""

import os
import tempfile

# Importing app.main builds the default app; keep its upload dir out of the repo.
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="empanelment-uploads-"))

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.db.base import Database
from app.main import create_app
from app.storage.local import LocalFileStorage


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        app_env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        public_base_url="http://testserver",
        jwt_secret="test-jwt-secret-with-enough-entropy-0123456789",
    )

@pytest.fixture
async def database(settings: Settings) -> Database:
    db = Database(settings)
    await db.create_all()
    yield db
    await db.dispose()

@pytest.fixture
async def session(database: Database) -> AsyncSession:
    async with database.session_factory() as s:
        yield s

@pytest.fixture
def storage(settings: Settings) -> LocalFileStorage:
    return LocalFileStorage(settings.upload_dir)

@pytest.fixture
async def app(settings: Settings):
    application = create_app(settings)
    await application.state.db.create_all()
    yield application
    await application.state.db.dispose()

@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
