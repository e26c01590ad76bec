"""Shared test fixtures and configuration."""
import pytest
import os
from pathlib import Path
from unittest.mock import AsyncMock
import httpx
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("FB_PAGE_TOKEN", "test-page-token")
os.environ.setdefault("FB_VERIFY_TOKEN", "test-verify-token")
os.environ.setdefault("RESTAURANT_NAME", "Test Restaurant")

from snacktrack.main import app
from snacktrack.db.database import get_db, get_session_factory
from snacktrack.db.models import Base
from snacktrack.core.dependencies import get_menu_repository, get_notifier
from snacktrack.services.menu.repository import MenuRepository
from snacktrack.services.menu.in_memory_menu import InMemoryMenuProvider


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def test_session_factory(test_db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    """Create test database session."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def test_menu_path():
    """Return path to test menu YAML file."""
    return Path(__file__).parent / "fixtures" / "test_menu.yaml"


@pytest.fixture
def test_menu_repository(test_menu_path):
    """Create menu repository with test data."""
    provider = InMemoryMenuProvider(menu_file=str(test_menu_path))
    return MenuRepository(provider)


@pytest.fixture
def mock_notifier():
    """Notifier that records messages instead of sending them."""
    notifier = AsyncMock()
    notifier.send_text = AsyncMock(return_value={"message_id": "mid.test"})
    return notifier


@pytest.fixture
async def test_client(test_db, test_session_factory, test_menu_repository, mock_notifier):
    """Create HTTP test client with overrides."""
    async def _override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_menu_repository] = lambda: test_menu_repository
    app.dependency_overrides[get_notifier] = lambda: mock_notifier
    app.dependency_overrides[get_session_factory] = lambda: test_session_factory

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
