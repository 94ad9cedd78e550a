"""Global test fixtures for Schedule Hub."""

# ruff: noqa: E402
# Set test environment BEFORE importing application modules
import os
import tempfile

os.environ["STORE_BACKEND"] = "sql"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["SQLITE_PATH"] = os.path.join(tempfile.mkdtemp(prefix="schedulehub-"), "app.db")
os.environ["API_PREFIX"] = "/api"
os.environ.pop("GOOGLE_CLIENT_ID", None)
os.environ.pop("GOOGLE_CLIENT_SECRET", None)

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from schedulehub.database import create_engine, init_db
from schedulehub.main import app
from schedulehub.schemas import Role, StaffAccount
from schedulehub.store import get_store
from schedulehub.store.base import Store
from schedulehub.store.sql import build_sql_store
from tests.helpers import ADMIN_PASSWORD, STAFF_PASSWORD, create_account


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """A fresh SQLite file database with all tables created."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def store(session_factory) -> AsyncGenerator[Store]:
    async with session_factory() as session:
        yield build_sql_store(session)


@pytest_asyncio.fixture
async def other_store(session_factory) -> AsyncGenerator[Store]:
    """A second store on its own session, for concurrent writers."""
    async with session_factory() as session:
        yield build_sql_store(session)


# =============================================================================
# EVENT FIXTURES
# =============================================================================

@pytest.fixture
def events() -> list[tuple[str, dict]]:
    return []


@pytest.fixture
def publish(events):
    def _publish(event: str, data: dict) -> None:
        events.append((event, data))

    return _publish


# =============================================================================
# ACCOUNT FIXTURES
# =============================================================================

@pytest_asyncio.fixture
async def admin(store) -> StaffAccount:
    return await create_account(store, "Admin User", "admin@schedule.com", Role.ADMIN, ADMIN_PASSWORD)


@pytest_asyncio.fixture
async def john(store) -> StaffAccount:
    return await create_account(store, "John Doe", "john@schedule.com", Role.STAFF, STAFF_PASSWORD)


@pytest_asyncio.fixture
async def jane(store) -> StaffAccount:
    return await create_account(store, "Jane Smith", "jane@schedule.com", Role.STAFF, STAFF_PASSWORD)


# =============================================================================
# API CLIENT FIXTURES
# =============================================================================

@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client against the app, backed by the per-test database."""

    async def override_get_store():
        async with session_factory() as session:
            yield build_sql_store(session)

    app.dependency_overrides[get_store] = override_get_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
