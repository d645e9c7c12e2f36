from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from linalg_practice.core.rate_limit import GLOBAL_RULE, VALIDATE_PATH, VALIDATE_RULE, RateLimitMiddleware


class _FakeRedis:
    def __init__(self) -> None:
        self.counts: dict[str, int] = {}
        self.expirations: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.expirations[key] = seconds
        return True


class _BrokenRedis:
    async def incr(self, key: str) -> int:
        raise RedisConnectionError("redis is down")


def _app(redis: object | None) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware)
    if redis is not None:
        app.state.redis = redis

    @app.get("/ping")
    def ping() -> dict[str, bool]:
        return {"ok": True}

    @app.post(VALIDATE_PATH)
    def validate() -> dict[str, bool]:
        return {"ok": True}

    return app


def test_validate_route_has_a_tighter_limit() -> None:
    redis = _FakeRedis()
    client = TestClient(_app(redis))

    statuses = [client.post(VALIDATE_PATH).status_code for _ in range(VALIDATE_RULE.limit + 1)]

    assert statuses[:-1] == [200] * VALIDATE_RULE.limit
    assert statuses[-1] == 429
    assert redis.expirations["rate:validate:testclient"] == VALIDATE_RULE.window_seconds
    assert client.get("/ping").status_code == 200


def test_global_limit_applies_to_every_route() -> None:
    redis = _FakeRedis()
    redis.counts["rate:global:testclient"] = GLOBAL_RULE.limit
    client = TestClient(_app(redis))

    response = client.get("/ping")

    assert response.status_code == 429
    assert response.json() == {"code": "RATE_LIMIT", "message": "Too many requests"}


def test_rate_limit_fails_open_without_redis() -> None:
    assert TestClient(_app(_BrokenRedis())).get("/ping").status_code == 200
    assert TestClient(_app(None)).get("/ping").status_code == 200
