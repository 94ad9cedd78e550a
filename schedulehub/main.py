"""Schedule Hub - FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from schedulehub.auth.routes import router as auth_router
from schedulehub.config import get_settings, load_seed_data
from schedulehub.database import SessionLocal, engine, init_db
from schedulehub.events.notifier import ChangeNotifier
from schedulehub.events.routes import router as events_router
from schedulehub.exceptions import AppError, StoreError, Unauthenticated
from schedulehub.schedules.routes import router as schedules_router
from schedulehub.staff.routes import router as staff_router
from schedulehub.store.hosted import build_hosted_store, create_hosted_client
from schedulehub.store.seed import seed_store
from schedulehub.store.sql import build_sql_store

logger = logging.getLogger(__name__)

settings = get_settings()


async def _seed_demo_data(app: FastAPI) -> None:
    seed = load_seed_data()
    if settings.STORE_BACKEND == "hosted":
        await seed_store(build_hosted_store(app.state.hosted_client), seed)
        return
    async with SessionLocal() as session:
        await seed_store(build_sql_store(session), seed)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Startup: prepare the configured store
    if settings.STORE_BACKEND == "hosted":
        app.state.hosted_client = create_hosted_client(
            settings.hosted_rest_url, settings.HOSTED_KEY, settings.HOSTED_TIMEOUT
        )
    else:
        await init_db()

    if settings.SEED_DEMO_DATA:
        try:
            await _seed_demo_data(app)
        except Exception:
            logger.exception("Seeding demo data failed, starting without it")

    logger.info("Schedule Hub started (store=%s)", settings.STORE_BACKEND)

    yield

    # Shutdown: close clients and dispose engines
    if settings.STORE_BACKEND == "hosted":
        await app.state.hosted_client.aclose()
    await engine.dispose()


app = FastAPI(
    title="Schedule Hub",
    description="Staff shift scheduling API.",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.notifier = ChangeNotifier()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Exception Handlers ───────────────────────────────────────

@app.exception_handler(AppError)
async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    message = StoreError.default_message if isinstance(exc, StoreError) else exc.message
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()} - {""})
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request: {', '.join(fields) or 'malformed body'}"},
    )


# ─── Routes ───────────────────────────────────────────────────

@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
    return {"status": "healthy", "store": settings.STORE_BACKEND}


app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(schedules_router, prefix=settings.API_PREFIX)
app.include_router(staff_router, prefix=settings.API_PREFIX)
app.include_router(events_router)


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    uvicorn.run("schedulehub.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
