from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from linalg_practice.api.deps import get_db
from linalg_practice.main import app
from linalg_practice.models import Assignment, AssignmentStatus, PracticeSection, PracticeSession
from linalg_practice.practice.lifecycle import SessionStatus
from linalg_practice.services.assignments import (
    AssignmentAttemptsExhaustedError,
    AssignmentClosedError,
    AssignmentNotFoundError,
    list_available_assignments,
    start_assignment_session,
)
from linalg_practice.services.practice import Actor, issue_exercise, start_or_resume_session

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
SECTION = "module-1-systems"


def _seed(db: Session) -> dict[str, Assignment]:
    db.add(PracticeSection(slug=SECTION, title="Linear Systems", topics=["m1.linear_systems"], sort_order=10))
    rows = {
        "open_late": Assignment(
            slug="open-late",
            title="Systems quiz",
            status=AssignmentStatus.PUBLISHED,
            section_slug=SECTION,
            topics=["m1.rref"],
            difficulty="medium",
            question_count=3,
            due_at=NOW + timedelta(days=5),
            max_attempts=1,
        ),
        "open_soon": Assignment(
            slug="open-soon",
            title="Warm-up",
            status=AssignmentStatus.PUBLISHED,
            topics=["m0.dot"],
            difficulty="easy",
            question_count=2,
            available_from=NOW - timedelta(days=1),
            due_at=NOW + timedelta(days=1),
        ),
        "open_undated": Assignment(
            slug="open-undated",
            title="Anytime",
            status=AssignmentStatus.PUBLISHED,
            topics=["m0.angle"],
            question_count=4,
        ),
        "draft": Assignment(slug="draft", title="Draft", status=AssignmentStatus.DRAFT, topics=["m0.dot"]),
        "future": Assignment(
            slug="future",
            title="Next week",
            status=AssignmentStatus.PUBLISHED,
            topics=["m0.dot"],
            available_from=NOW + timedelta(days=7),
        ),
        "past_due": Assignment(
            slug="past-due",
            title="Last week",
            status=AssignmentStatus.PUBLISHED,
            topics=["m0.dot"],
            due_at=NOW - timedelta(days=1),
        ),
    }
    db.add_all(rows.values())
    db.commit()
    return rows


def test_only_published_assignments_inside_their_window_are_listed(db: Session) -> None:
    _seed(db)

    items = list_available_assignments(db, actor=Actor(), now=NOW)

    assert [item.assignment.slug for item in items] == ["open-soon", "open-late", "open-undated"]
    assert all(item.attempts_used == 0 for item in items)
    assert [item.attempts_remaining for item in items] == [None, 1, None]


def test_assignment_session_uses_question_count_and_attempt_limit(db: Session) -> None:
    rows = _seed(db)
    actor = Actor(user_id="student-1")
    assignment = rows["open_late"]

    started = start_assignment_session(db, actor=actor, assignment_id=assignment.id, now=NOW)
    db.commit()
    resumed = start_assignment_session(db, actor=actor, assignment_id=assignment.id, now=NOW)

    assert not started.resumed
    assert started.session.target_count == 3
    assert started.session.difficulty == "medium"
    assert started.session.assignment_id == assignment.id
    assert started.attempts_remaining == 0
    assert resumed.resumed
    assert resumed.session.id == started.session.id

    issued = issue_exercise(db, actor=actor, topic="all", difficulty="easy", seed="a1", session_id=started.session.id)
    assert issued.instance.topic == "m1.rref"
    assert issued.exercise["difficulty"] == "medium"

    free_practice = start_or_resume_session(db, actor=actor, section_slug=SECTION, difficulty="medium")
    assert free_practice.id != started.session.id
    assert free_practice.target_count == 10

    session_row = db.get(PracticeSession, started.session.id)
    assert session_row is not None
    session_row.status = SessionStatus.COMPLETED
    db.commit()

    with pytest.raises(AssignmentAttemptsExhaustedError):
        start_assignment_session(db, actor=actor, assignment_id=assignment.id, now=NOW)
    listed = {item.assignment.slug: item for item in list_available_assignments(db, actor=actor, now=NOW)}
    assert (listed["open-late"].attempts_used, listed["open-late"].attempts_remaining) == (1, 0)
    other = list_available_assignments(db, actor=Actor(user_id="student-2"), now=NOW)
    assert all(item.attempts_used == 0 for item in other)


def test_closed_or_missing_assignments_cannot_start(db: Session) -> None:
    rows = _seed(db)
    actor = Actor(guest_id="guest-a")

    for key in ("draft", "future", "past_due"):
        with pytest.raises(AssignmentClosedError):
            start_assignment_session(db, actor=actor, assignment_id=rows[key].id, now=NOW)
    with pytest.raises(AssignmentNotFoundError):
        start_assignment_session(db, actor=actor, assignment_id="missing", now=NOW)


@pytest.fixture()
def client(session_factory: sessionmaker[Session]) -> Iterator[TestClient]:
    with session_factory() as db:
        db.add(PracticeSection(slug=SECTION, title="Linear Systems", topics=["m1.linear_systems"], sort_order=10))
        db.add_all(
            [
                Assignment(
                    id="assignment-open",
                    slug="open",
                    title="Row reduction",
                    status=AssignmentStatus.PUBLISHED,
                    section_slug=SECTION,
                    topics=["m1.rref"],
                    difficulty="hard",
                    question_count=3,
                    max_attempts=2,
                ),
                Assignment(
                    id="assignment-archived",
                    slug="archived",
                    title="Old",
                    status=AssignmentStatus.ARCHIVED,
                    topics=["m0.dot"],
                ),
            ]
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


def test_assignment_routes(client: TestClient) -> None:
    headers = {"X-User-Id": "student-9"}

    listed = client.get("/api/assignments", headers=headers)
    assert listed.status_code == 200
    [item] = listed.json()["assignments"]
    assert item["id"] == "assignment-open"
    assert item["section"] == {"slug": SECTION, "title": "Linear Systems"}
    assert (item["questionCount"], item["attemptsUsed"], item["attemptsRemaining"]) == (3, 0, 2)

    started = client.post("/api/assignments/assignment-open/start", headers=headers)
    assert started.status_code == 200
    body = started.json()
    assert (body["targetCount"], body["difficulty"], body["resumed"]) == (3, "hard", False)

    exercise = client.get("/api/practice", params={"topic": "all", "sessionId": body["sessionId"]}, headers=headers)
    assert exercise.status_code == 200
    assert exercise.json()["exercise"]["topic"] == "m1.rref"

    again = client.get("/api/assignments", headers=headers).json()["assignments"][0]
    assert (again["attemptsUsed"], again["attemptsRemaining"]) == (1, 1)

    closed = client.post("/api/assignments/assignment-archived/start", headers=headers)
    assert closed.status_code == 409
    assert closed.json()["code"] == "ASSIGNMENT_CLOSED"
    assert client.post("/api/assignments/nope/start", headers=headers).status_code == 404
