"""Fixed-window rate limiting for bet placement.

    count = INCR ratelimit:{ip}:bets:{window}
    first hit in the window -> EXPIRE 60
    count > RATE_LIMIT_BETS_PER_MINUTE -> 429 RateLimitError

Client IP is the first X-Forwarded-For entry when behind a proxy.
Skipped when RATE_LIMIT_ENABLED is false or no Redis client is configured.
Exceptions raised in middleware bypass the app's exception handlers, so
the 429 envelope is rendered here.
"""

import logging
import time

from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.tw_common.errors import RateLimitError
from src.tw_common.response import error_response

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60
LIMITED_ROUTES = {("POST", "/api/v1/bets")}


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, limit_per_minute: int, enabled: bool = True) -> None:
        super().__init__(app)
        self._limit = limit_per_minute
        self._enabled = enabled

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled or (request.method, request.url.path.rstrip("/")) not in LIMITED_ROUTES:
            return await call_next(request)

        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            return await call_next(request)

        window = int(time.time()) // WINDOW_SECONDS
        key = f"ratelimit:{client_ip(request)}:bets:{window}"
        try:
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, WINDOW_SECONDS)
        except RedisError:
            logger.warning("Rate limiter unavailable, request allowed: %s", key)
            return await call_next(request)

        if count > self._limit:
            logger.warning("Rate limit exceeded: %s (%d/%d)", key, count, self._limit)
            exc = RateLimitError()
            resp = error_response(exc.code, exc.message, request)
            return JSONResponse(
                status_code=exc.http_status,
                content=resp.model_dump(),
                headers={"Retry-After": str(WINDOW_SECONDS - int(time.time()) % WINDOW_SECONDS)},
            )
        return await call_next(request)
