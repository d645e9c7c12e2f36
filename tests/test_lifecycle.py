from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from answers import correct_answer, wrong_answer
from sqlalchemy.orm import Session

from linalg_practice.core.security import decode_practice_key
from linalg_practice.models import PracticeAttempt, PracticeQuestionInstance, PracticeSection, PracticeSession
from linalg_practice.practice.lifecycle import (
    AttemptRecord,
    SessionSnapshot,
    SessionStatus,
    build_missed_summary,
    rollup_session,
    score_pct,
)
from linalg_practice.practice.types import expected_from_payload
from linalg_practice.services.practice import (
    Actor,
    ActorMismatchError,
    IssuedExercise,
    SessionClosedError,
    SessionForbiddenError,
    SubmissionOutcome,
    adopt_key_actor,
    issue_exercise,
    list_history,
    session_summary,
    submit_answer,
)

SECTION = "module-0-dot"


def _seed_section(db: Session) -> None:
    db.add(PracticeSection(slug=SECTION, title="Dot Product", topics=["m0.dot", "m0.vectors"], sort_order=0))
    db.commit()


def _answer(db: Session, actor: Actor, issued: IssuedExercise, *, mode: str) -> SubmissionOutcome:
    expected = expected_from_payload(issued.instance.secret_payload)
    outcome = submit_answer(
        db,
        actor=actor,
        claims=decode_practice_key(issued.key),
        answer=correct_answer(expected) if mode == "correct" else wrong_answer(expected),
        reveal=mode == "reveal",
    )
    db.commit()
    return outcome


def test_rollup_counts_only_the_first_validation() -> None:
    snapshot = SessionSnapshot(total=3, correct=2, target_count=10)

    first = rollup_session(snapshot, was_unanswered=True, ok=True, reveal=False)
    repeat = rollup_session(snapshot, was_unanswered=False, ok=True, reveal=False)

    assert (first.total, first.correct, first.counted) == (4, 3, True)
    assert (repeat.total, repeat.correct, repeat.counted) == (3, 2, False)


def test_rollup_reveal_counts_total_but_not_correct() -> None:
    rollup = rollup_session(SessionSnapshot(total=0, correct=0, target_count=10), True, ok=True, reveal=True)

    assert (rollup.total, rollup.correct) == (1, 0)


def test_rollup_completes_at_target_and_then_freezes() -> None:
    done = rollup_session(SessionSnapshot(total=9, correct=5, target_count=10), True, ok=False, reveal=False)
    assert done.just_completed
    assert done.completed
    assert done.total == 10

    after = rollup_session(
        SessionSnapshot(total=10, correct=5, target_count=10, status=SessionStatus.COMPLETED),
        True,
        ok=True,
        reveal=False,
    )
    assert not after.counted
    assert (after.total, after.correct, after.status) == (10, 5, SessionStatus.COMPLETED)


def test_missed_summary_keeps_first_wrong_attempt_per_instance() -> None:
    start = datetime(2026, 10, 1, tzinfo=UTC)
    attempts = [
        AttemptRecord("i2", ok=False, reveal_used=False, created_at=start + timedelta(minutes=3), answer={"v": 2}),
        AttemptRecord("i1", ok=False, reveal_used=False, created_at=start + timedelta(minutes=1), answer={"v": 1}),
        AttemptRecord("i1", ok=False, reveal_used=False, created_at=start + timedelta(minutes=2), answer={"v": 9}),
        AttemptRecord("i3", ok=False, reveal_used=True, created_at=start, answer={"reveal": True}),
        AttemptRecord("i4", ok=True, reveal_used=False, created_at=start),
    ]

    missed = build_missed_summary(attempts)

    assert [item.instance_id for item in missed] == ["i1", "i2"]
    assert missed[0].your_answer == {"v": 1}
    assert set(missed[0].to_dict()) == {"instanceId", "title", "prompt", "yourAnswer", "expected"}


def test_score_pct() -> None:
    assert score_pct(0, 0) == 0
    assert score_pct(7, 10) == 70
    assert score_pct(2, 3) == 67


def test_session_of_ten_completes_and_missed_excludes_reveals(db: Session) -> None:
    _seed_section(db)
    actor = Actor(guest_id="guest-1")
    modes = ["reveal", "wrong"] + ["correct"] * 8
    outcomes: list[SubmissionOutcome] = []
    issued_list: list[IssuedExercise] = []
    session_id: str | None = None

    for index, mode in enumerate(modes):
        issued = issue_exercise(
            db,
            actor=actor,
            topic="all",
            difficulty="easy",
            seed=f"session-{index}",
            session_id=session_id,
            section_slug=SECTION if session_id is None else None,
        )
        db.commit()
        session_id = issued.session_id
        issued_list.append(issued)
        outcomes.append(_answer(db, actor, issued, mode=mode))

    assert session_id is not None
    assert [outcome.session_complete for outcome in outcomes] == [False] * 9 + [True]
    assert all(outcome.counted for outcome in outcomes)
    assert not outcomes[0].result.ok

    final = outcomes[-1].summary
    assert final is not None
    assert (final.correct, final.total) == (8, 10)
    assert [item.instance_id for item in final.missed] == [issued_list[1].instance.id]

    session_row = db.get(PracticeSession, session_id)
    assert session_row is not None
    assert session_row.status == SessionStatus.COMPLETED
    assert session_row.completed_at is not None
    assert session_row.last_instance_id == issued_list[-1].instance.id

    with pytest.raises(SessionClosedError):
        issue_exercise(db, actor=actor, topic="dot", difficulty="easy", session_id=session_id)


def test_instance_counts_at_most_once(db: Session) -> None:
    _seed_section(db)
    actor = Actor(user_id="user-1")
    issued = issue_exercise(db, actor=actor, topic="dot", difficulty="medium", seed="once", section_slug=SECTION)
    db.commit()

    first = _answer(db, actor, issued, mode="wrong")
    second = _answer(db, actor, issued, mode="correct")
    third = _answer(db, actor, issued, mode="reveal")

    assert first.counted
    assert not second.counted
    assert second.result.ok
    assert not third.counted

    session_row = db.get(PracticeSession, issued.session_id)
    assert session_row is not None
    assert (session_row.total, session_row.correct) == (1, 0)
    instance = db.get(PracticeQuestionInstance, issued.instance.id)
    assert instance is not None and instance.answered_at is not None
    assert db.query(PracticeAttempt).filter(PracticeAttempt.instance_id == issued.instance.id).count() == 3


def test_first_validation_without_an_answer_still_counts(db: Session) -> None:
    _seed_section(db)
    actor = Actor(guest_id="guest-empty")
    issued = issue_exercise(db, actor=actor, topic="dot", difficulty="easy", seed="empty", section_slug=SECTION)
    db.commit()

    outcome = submit_answer(db, actor=actor, claims=decode_practice_key(issued.key), answer=None)
    db.commit()
    retry = _answer(db, actor, issued, mode="correct")

    assert not outcome.result.ok
    assert outcome.counted
    assert not retry.counted
    instance = db.get(PracticeQuestionInstance, issued.instance.id)
    assert instance is not None and instance.answered_at is not None
    session_row = db.get(PracticeSession, issued.session_id)
    assert session_row is not None
    assert (session_row.total, session_row.correct) == (1, 0)


def test_active_session_is_resumed_per_section_and_difficulty(db: Session) -> None:
    _seed_section(db)
    actor = Actor(guest_id="guest-2")

    first = issue_exercise(db, actor=actor, topic="dot", difficulty="easy", section_slug=SECTION)
    second = issue_exercise(db, actor=actor, topic="dot", difficulty="easy", section_slug=SECTION)
    other = issue_exercise(db, actor=actor, topic="dot", difficulty="hard", section_slug=SECTION)
    db.commit()

    assert first.session_id == second.session_id
    assert other.session_id != first.session_id


def test_exercise_payload_hides_the_answer(db: Session) -> None:
    issued = issue_exercise(db, actor=Actor(guest_id="g"), topic="m1.rref", difficulty="hard", seed="hide")
    db.commit()

    assert issued.session_id is None
    assert issued.exercise["id"] == issued.instance.id
    assert issued.exercise["topic"] == "m1.rref"
    assert "expected" not in issued.exercise
    assert issued.instance.secret_payload["kind"] == issued.exercise["kind"]


def test_key_owner_must_match_actor(db: Session) -> None:
    issued = issue_exercise(db, actor=Actor(guest_id="owner"), topic="dot", difficulty="easy", seed="k")
    db.commit()
    claims = decode_practice_key(issued.key)

    with pytest.raises(ActorMismatchError):
        submit_answer(db, actor=Actor(guest_id="intruder"), claims=claims, answer=None)

    assert adopt_key_actor(Actor(), claims) == Actor(guest_id="owner")
    assert adopt_key_actor(Actor(user_id="u"), claims) == Actor(user_id="u")


def test_session_summary_and_history_are_owner_scoped(db: Session) -> None:
    _seed_section(db)
    actor = Actor(guest_id="guest-3")
    issued = issue_exercise(db, actor=actor, topic="dot", difficulty="easy", seed="h", section_slug=SECTION)
    db.commit()
    _answer(db, actor, issued, mode="wrong")
    assert issued.session_id is not None

    session_row, section, pct, missed = session_summary(db, actor=actor, session_id=issued.session_id)
    assert session_row.total == 1
    assert section is not None and section.slug == SECTION
    assert pct == 0
    assert [item.instance_id for item in missed] == [issued.instance.id]

    with pytest.raises(SessionForbiddenError):
        session_summary(db, actor=Actor(guest_id="someone-else"), session_id=issued.session_id)

    history = list_history(db, actor=actor, status=SessionStatus.ACTIVE, take=500)
    assert [row.id for row, _, _ in history] == [issued.session_id]
    assert list_history(db, actor=actor, status=SessionStatus.COMPLETED) == []
