"""Store access for command-line maintenance scripts."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from schedulehub.config import get_settings
from schedulehub.database import SessionLocal, engine, init_db
from schedulehub.store.base import Store
from schedulehub.store.hosted import build_hosted_store, create_hosted_client
from schedulehub.store.sql import build_sql_store


@asynccontextmanager
async def open_store() -> AsyncIterator[Store]:
    """Open the configured store outside of a request, closing it afterwards."""
    settings = get_settings()
    if settings.STORE_BACKEND == "hosted":
        async with create_hosted_client(
            settings.hosted_rest_url, settings.HOSTED_KEY, settings.HOSTED_TIMEOUT
        ) as client:
            yield build_hosted_store(client)
        return

    await init_db()
    try:
        async with SessionLocal() as session:
            yield build_sql_store(session)
    finally:
        await engine.dispose()
