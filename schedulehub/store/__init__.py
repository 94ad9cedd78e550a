"""Store selection: one implementation per backend, picked from settings."""

from collections.abc import AsyncGenerator

from fastapi import Request

from schedulehub.config import get_settings
from schedulehub.database import SessionLocal
from schedulehub.store.base import ScheduleRepository, StaffRepository, Store
from schedulehub.store.hosted import build_hosted_store
from schedulehub.store.sql import build_sql_store

__all__ = ["Store", "StaffRepository", "ScheduleRepository", "get_store"]


async def get_store(request: Request) -> AsyncGenerator[Store]:
    """Dependency: yields a request-scoped store for the configured backend."""
    settings = get_settings()
    if settings.STORE_BACKEND == "hosted":
        yield build_hosted_store(request.app.state.hosted_client)
        return

    async with SessionLocal() as session:
        yield build_sql_store(session)

