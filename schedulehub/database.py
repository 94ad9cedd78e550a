"""Async SQLAlchemy engine and session management for the SQL store."""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from schedulehub.config import get_settings
from schedulehub.models import Base


def create_engine(url: str) -> AsyncEngine:
    """Create an async engine; SQLite connections get foreign keys switched on."""
    engine = create_async_engine(url, echo=False)
    if engine.dialect.name == "sqlite":
        # Cascade deletes and FK checks are off by default in SQLite
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


settings = get_settings()

engine = create_engine(settings.database_url)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create tables if they do not exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """Dependency: yields a read-write session."""
    async with SessionLocal() as session:
        yield session
