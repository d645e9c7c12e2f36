from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("linalg.practice.rate_limit")


@dataclass(frozen=True)
class RateLimitRule:
    key_prefix: str
    limit: int
    window_seconds: int


GLOBAL_RULE = RateLimitRule(key_prefix="global", limit=120, window_seconds=60)
VALIDATE_RULE = RateLimitRule(key_prefix="validate", limit=30, window_seconds=60)
VALIDATE_PATH = "/api/practice/validate"


def _extract_ip(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _too_many_requests() -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"code": "RATE_LIMIT", "message": "Too many requests"},
    )


async def _increment_and_check(redis: Redis, *, rule: RateLimitRule, ip: str) -> bool:
    key = f"rate:{rule.key_prefix}:{ip}"
    value = await redis.incr(key)
    if value == 1:
        await redis.expire(key, rule.window_seconds)
    return int(value) <= rule.limit


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        redis: Redis | None = getattr(request.app.state, "redis", None)
        if redis is None:
            return await call_next(request)

        ip = _extract_ip(request)
        try:
            if not await _increment_and_check(redis, rule=GLOBAL_RULE, ip=ip):
                return _too_many_requests()

            if request.url.path == VALIDATE_PATH and request.method.upper() == "POST":
                if not await _increment_and_check(redis, rule=VALIDATE_RULE, ip=ip):
                    return _too_many_requests()
        except (RedisError, OSError):
            # Redis outages must not take the API down.
            logger.warning("rate_limit.unavailable", exc_info=True, extra={"route": request.url.path})
            return await call_next(request)

        return await call_next(request)
