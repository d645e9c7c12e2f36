from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from linalg_practice.api.deps import get_db
from linalg_practice.main import app
from linalg_practice.models import PracticeSection


@pytest.fixture()
def client(session_factory: sessionmaker[Session]) -> Iterator[TestClient]:
    with session_factory() as db:
        db.add(
            PracticeSection(
                slug="module-2-matrices-core",
                title="Matrices (Core)",
                topics=["m2.matrix_ops", "m2.matrix_inverse", "m2.matrix_properties"],
                sort_order=30,
            )
        )
        db.commit()

    def _get_db() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_sections_listing(client: TestClient) -> None:
    response = client.get("/api/practice/sections")

    assert response.status_code == 200
    assert response.json()[0]["slug"] == "module-2-matrices-core"
    assert response.json()[0]["sortOrder"] == 30


def test_get_exercise_sets_guest_cookie_and_hides_answer(client: TestClient) -> None:
    response = client.get("/api/practice", params={"topic": "m0.dot", "difficulty": "easy", "seed": "route"})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"exercise", "key", "sessionId"}
    assert body["sessionId"] is None
    assert body["exercise"]["topic"] == "m0.dot"
    assert "expected" not in body["exercise"]
    assert "guestId" in response.cookies


def test_reveal_flow_over_http(client: TestClient) -> None:
    headers = {"X-User-Id": "user-42"}
    issued = client.get(
        "/api/practice",
        params={"topic": "matrix_inverse", "section": "module-2-matrices-core", "seed": "http"},
        headers=headers,
    ).json()
    assert issued["sessionId"]

    response = client.post("/api/practice/validate", json={"key": issued["key"], "reveal": True}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is False
    assert body["expected"]["kind"] == issued["exercise"]["kind"]
    assert body["sessionComplete"] is False
    assert body["summary"] is None

    summary = client.get(f"/api/practice/session/{issued['sessionId']}/summary", headers=headers)
    assert summary.status_code == 200
    assert summary.json()["session"]["total"] == 1
    assert summary.json()["session"]["correct"] == 0
    assert summary.json()["missed"] == []

    history = client.get("/api/practice/history", params={"status": "active"}, headers=headers)
    assert [item["id"] for item in history.json()["sessions"]] == [issued["sessionId"]]

    progress = client.get("/api/progress", params={"range": "7d"}, headers=headers)
    assert progress.status_code == 200
    assert progress.json()["totals"]["attempts"] == 1
    assert progress.json()["meta"] == {"range": "7d"}


def test_answer_kind_mismatch_is_a_conflict(client: TestClient) -> None:
    headers = {"X-Guest-Id": "guest-kind"}
    issued = client.get(
        "/api/practice",
        params={"topic": "m2.matmul", "seed": "kind"},
        headers=headers,
    ).json()
    wrong_kind = (
        {"kind": "matrix_input", "values": [[1]]}
        if issued["exercise"]["kind"] != "matrix_input"
        else {"kind": "numeric", "value": 1}
    )

    response = client.post(
        "/api/practice/validate",
        json={"key": issued["key"], "answer": wrong_kind},
        headers=headers,
    )

    assert response.status_code == 409
    assert response.json()["code"] == "ANSWER_KIND_MISMATCH"


def test_key_is_bound_to_its_actor(client: TestClient) -> None:
    issued = client.get("/api/practice", params={"seed": "bound"}, headers={"X-Guest-Id": "owner"}).json()

    response = client.post(
        "/api/practice/validate",
        json={"key": issued["key"], "reveal": True},
        headers={"X-Guest-Id": "intruder"},
    )

    assert response.status_code == 401


def test_invalid_key_and_unknown_topic_use_error_envelope(client: TestClient) -> None:
    bad_key = client.post("/api/practice/validate", json={"key": "garbage", "reveal": True})
    assert bad_key.status_code == 401
    assert bad_key.json()["code"] == "INVALID_PRACTICE_KEY"

    unknown = client.get("/api/practice", params={"topic": "eigenvalues"})
    assert unknown.status_code == 400
    assert unknown.json()["code"] == "UNKNOWN_TOPIC"
    assert "m0.dot" in unknown.json()["details"]["known"]

    missing = client.get("/api/practice", params={"sessionId": "nope"})
    assert missing.status_code == 404
    assert missing.json()["code"] == "NOT_FOUND"
