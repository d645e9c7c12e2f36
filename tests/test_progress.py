from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

from answers import correct_answer, wrong_answer
from sqlalchemy.orm import Session

from linalg_practice.core.security import decode_practice_key
from linalg_practice.practice.progress import (
    Bucket,
    ProgressAttempt,
    ProgressRange,
    best_topic,
    streak_days,
    summarize_attempts,
    summary_rows,
)
from linalg_practice.practice.types import expected_from_payload
from linalg_practice.services.practice import Actor, issue_exercise, progress_report, submit_answer


def test_range_start_is_midnight_n_days_back() -> None:
    now = datetime(2026, 10, 19, 15, 30, tzinfo=UTC)

    assert ProgressRange("7d").start(now) == datetime(2026, 10, 12, tzinfo=UTC)
    assert ProgressRange.DAYS_90.days == 90


def test_streak_counts_consecutive_days_ending_today() -> None:
    today = date(2026, 10, 19)
    days = [today, today - timedelta(days=1), today - timedelta(days=2), today - timedelta(days=4)]

    assert streak_days(days, today) == 3
    assert streak_days([today - timedelta(days=1)], today) == 0


def test_best_topic_needs_enough_attempts() -> None:
    strong = Bucket()
    for _ in range(5):
        strong.add(True)
    lucky = Bucket()
    lucky.add(True)

    assert best_topic({"m0.angle": lucky, "m0.dot": strong}) == "m0.dot"
    assert best_topic({"m0.angle": lucky}) == "m0.angle"
    assert best_topic({}) == "m0.dot"


def test_summary_groups_by_topic_difficulty_and_day() -> None:
    day = datetime(2026, 10, 18, 9, tzinfo=UTC)
    attempts = [
        ProgressAttempt("m0.dot", "easy", True, day),
        ProgressAttempt("m0.dot", "easy", False, day + timedelta(hours=1)),
        ProgressAttempt("m1.rref", "hard", True, day + timedelta(days=1)),
    ]

    summary = summarize_attempts(attempts, today=date(2026, 10, 19))
    rows = summary_rows(summary)

    assert (summary.attempts, summary.correct, summary.streak_days) == (3, 2, 2)
    assert rows["byTopic"][0] == {"topic": "m0.dot", "attempts": 2, "correct": 1, "accuracy": 0.5}
    assert [row["difficulty"] for row in rows["byDifficulty"]] == ["easy", "hard"]
    assert [row["date"] for row in rows["accuracyTimeline"]] == ["2026-10-18", "2026-10-19"]


def test_progress_report_for_actor(db: Session) -> None:
    actor = Actor(user_id="learner")
    for index, correct in enumerate([True, False, True]):
        issued = issue_exercise(db, actor=actor, topic="dot", difficulty="easy", seed=f"p{index}")
        db.commit()
        expected = expected_from_payload(issued.instance.secret_payload)
        submit_answer(
            db,
            actor=actor,
            claims=decode_practice_key(issued.key),
            answer=correct_answer(expected) if correct else wrong_answer(expected),
        )
        db.commit()

    report = progress_report(db, actor=actor, range_=ProgressRange.DAYS_7)

    assert report["totals"]["attempts"] == 3
    assert report["totals"]["correct"] == 2
    assert report["totals"]["streakDays"] == 1
    assert report["totals"]["sessionsCompleted"] == 0
    assert report["byTopic"][0]["topic"] == "m0.dot"
    assert len(report["missed"]) == 1
    assert report["meta"] == {"range": "7d"}

    other = progress_report(db, actor=Actor(user_id="someone-else"), range_=ProgressRange.DAYS_30)
    assert other["totals"]["attempts"] == 0
