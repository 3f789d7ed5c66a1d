"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.bg_common.errors import AppError
from src.bg_common.logging_config import configure_logging
from src.bg_common.response import error_response
from src.bg_gateway.api.router import router as auth_router
from src.bg_gateway.api.router import users_router
from src.bg_gateway.middleware.request_log import RequestLogMiddleware
from src.bg_guesses.api.router import router as guesses_router
from src.bg_prices.api.router import router as prices_router
from src.bg_resolution.bootstrap import build_lease, build_scheduler
from src.bg_store.dependencies import get_store


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify backing services, start the resolution job. Shutdown: reverse."""
    configure_logging(settings.LOG_LEVEL)

    if settings.STORE_BACKEND == "postgres":
        from src.bg_common.database import engine

        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    lease = build_lease(settings)
    if lease is not None:
        await lease.ping()

    scheduler = None
    if settings.RESOLUTION_ENABLED:
        scheduler = build_scheduler(get_store(), settings, lease)
        scheduler.start()
    app.state.scheduler = scheduler

    yield

    if scheduler is not None:
        await scheduler.stop()
    if settings.STORE_BACKEND == "postgres":
        from src.bg_common.database import engine

        await engine.dispose()
    if lease is not None:
        await lease.close()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(prices_router, prefix="/api/v1")
app.include_router(guesses_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
