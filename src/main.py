"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 3000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import settings
from src.um_common.database import create_engine, create_session_factory
from src.um_common.errors import (
    AppError,
    EmailExistsError,
    InternalError,
    RouteNotFoundError,
    ValidationFailedError,
)
from src.um_common.redis_client import close_redis, create_redis, ping_redis
from src.um_common.response import error_response
from src.um_gateway.middleware.request_log import RequestLogMiddleware
from src.um_user.api.router import router as user_router
from src.um_user.application.service import UserAccessService
from src.um_user.infrastructure.persistence import EMAIL_UNIQUE_INDEX, UserRepository
from src.um_user.infrastructure.redis_cache import RedisCacheStore

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build store handles, verify DB, probe Redis. Shutdown: dispose."""
    engine = create_engine(settings)
    redis = create_redis(settings)

    # Database is authoritative: fail fast. Redis is optional: warn only.
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    if not await ping_redis(redis):
        logger.warning("Redis unavailable at startup; serving without cache")

    app.state.engine = engine
    app.state.redis = redis
    app.state.user_service = UserAccessService(
        repo=UserRepository(create_session_factory(engine)),
        cache=RedisCacheStore(redis),
        ttl_seconds=settings.CACHE_TTL_SECONDS,
    )
    logger.info("Configuration: %s", settings.redacted())
    yield
    await engine.dispose()
    await close_redis(redis)


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.details)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"] if part != "body")
        details.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return _error_json(request, ValidationFailedError(details))


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # Only email unique-index races map to 409; CHECK and other violations are 500s
    if EMAIL_UNIQUE_INDEX in str(exc.orig):
        logger.warning("Email uniqueness race: %s", exc.orig)
        return _error_json(request, EmailExistsError())
    return await unhandled_error_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error_json(request, RouteNotFoundError(request.url.path))
    return _error_json(request, AppError(9003, str(exc.detail), exc.status_code))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = str(exc) if settings.DEBUG else "Internal server error"
    return _error_json(request, InternalError(detail))


app.include_router(user_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict[str, object]:
    return {
        "success": True,
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "documentation": "/docs",
    }


@app.get("/health")
async def health(request: Request) -> dict[str, str]:
    """Database down → error; cache down → degraded (cache is optional)."""
    async with request.app.state.engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    cache_ok = await ping_redis(request.app.state.redis)
    return {
        "status": "ok" if cache_ok else "degraded",
        "database": "up",
        "cache": "up" if cache_ok else "down",
        "version": settings.APP_VERSION,
    }
