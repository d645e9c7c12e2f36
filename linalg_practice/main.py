from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

from linalg_practice.api.routes.assignments import router as assignments_router
from linalg_practice.api.routes.practice import router as practice_router
from linalg_practice.api.routes.progress import router as progress_router
from linalg_practice.core.config import settings
from linalg_practice.core.exceptions import register_exception_handlers
from linalg_practice.core.logging import setup_json_logging
from linalg_practice.core.rate_limit import RateLimitMiddleware
from linalg_practice.core.request_logging import RequestLoggingMiddleware

setup_json_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    redis = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    app.state.redis = redis
    try:
        yield
    finally:
        await redis.aclose()


app = FastAPI(title="linalg-practice api", lifespan=lifespan)
register_exception_handlers(app)
allowed_origins = [item.strip() for item in settings.cors_allowed_origins.split(",") if item.strip()]
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-User-Id", "X-Guest-Id", "X-Request-Id"],
)
app.include_router(practice_router)
app.include_router(progress_router)
app.include_router(assignments_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.app_env}
