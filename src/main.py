"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import Settings, settings
from src.container import build_services
from src.tw_admin.api.router import router as admin_router
from src.tw_bet.api.router import router as bet_router
from src.tw_common.database import build_engine, build_session_factory
from src.tw_common.errors import AppError
from src.tw_common.redis_client import build_redis, close_redis
from src.tw_common.response import error_response
from src.tw_gateway.middleware.rate_limit import RateLimitMiddleware
from src.tw_gateway.middleware.request_log import RequestLogMiddleware
from src.tw_token.api.router import router as token_router
from src.tw_user.api.router import router as user_router
from src.tw_war.api.router import router as war_router

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    async with app.state.engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    if app.state.redis is not None:
        await app.state.redis.ping()
    logger.info("%s started", app.title)
    yield
    await app.state.engine.dispose()
    await close_redis(app.state.redis)


def create_app(cfg: Settings | None = None) -> FastAPI:
    cfg = cfg or settings

    app = FastAPI(title=cfg.APP_NAME, version=VERSION, lifespan=lifespan)

    app.state.settings = cfg
    app.state.engine = build_engine(cfg.DATABASE_URL, cfg.DEBUG)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.redis = build_redis(cfg.REDIS_URL) if cfg.RATE_LIMIT_ENABLED else None
    app.state.services = build_services(cfg)

    # Starlette runs the last-added middleware first: request log wraps rate limit.
    app.add_middleware(
        RateLimitMiddleware,
        limit_per_minute=cfg.RATE_LIMIT_BETS_PER_MINUTE,
        enabled=cfg.RATE_LIMIT_ENABLED,
    )
    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(exc.code, exc.message, request)
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    app.include_router(war_router, prefix="/api/v1")
    app.include_router(bet_router, prefix="/api/v1")
    app.include_router(token_router, prefix="/api/v1")
    app.include_router(user_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()
