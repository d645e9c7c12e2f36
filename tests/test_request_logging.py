from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from linalg_practice.api.deps import CurrentActor
from linalg_practice.core.request_logging import RequestLoggingMiddleware


def _app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/open")
    def open_route() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/me")
    def me(actor: CurrentActor) -> dict[str, str | None]:
        return {"userId": actor.user_id}

    return app


def _completed(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [record for record in caplog.records if record.getMessage() == "request.completed"]


def test_logged_user_comes_from_the_resolved_actor(caplog: pytest.LogCaptureFixture) -> None:
    client = TestClient(_app())
    caplog.set_level(logging.INFO, logger="linalg.practice.request")

    unresolved = client.get("/open", headers={"X-User-Id": "spoofed"})
    resolved = client.get("/me", headers={"X-User-Id": "user-7", "X-Request-Id": "req-1"})

    assert unresolved.status_code == 200
    assert resolved.headers["X-Request-Id"] == "req-1"
    first, second = _completed(caplog)
    assert first.user_id is None
    assert second.user_id == "user-7"
    assert second.request_id == "req-1"
