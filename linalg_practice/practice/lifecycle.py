"""Session and instance lifecycle rules, independent of storage.

``services.practice`` applies these rules inside a database transaction; the
functions here only decide what the new counters and summary should be.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    total: int
    correct: int
    target_count: int
    status: SessionStatus = SessionStatus.ACTIVE


@dataclass(frozen=True, slots=True)
class SessionRollup:
    total: int
    correct: int
    status: SessionStatus
    counted: bool
    just_completed: bool

    @property
    def completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED


@dataclass(frozen=True, slots=True)
class AttemptRecord:
    instance_id: str
    ok: bool
    reveal_used: bool
    created_at: datetime
    answer: Any = None
    title: str | None = None
    prompt: str | None = None
    expected: Any = None


@dataclass(frozen=True, slots=True)
class MissedQuestion:
    instance_id: str
    title: str | None
    prompt: str | None
    your_answer: Any
    expected: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "instanceId": self.instance_id,
            "title": self.title,
            "prompt": self.prompt,
            "yourAnswer": self.your_answer,
            "expected": self.expected,
        }


def ensure_utc(value: datetime) -> datetime:
    """Read naive timestamps (SQLite) as UTC so they compare with aware ones."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def rollup_session(session: SessionSnapshot, was_unanswered: bool, ok: bool, reveal: bool) -> SessionRollup:
    """Apply one validation to the session counters.

    Only the validation that moved the instance out of the unanswered state
    counts. ``correct`` grows only for a correct, non-revealed answer, and a
    completed session never changes again.
    """
    if session.status == SessionStatus.COMPLETED or not was_unanswered or session.total >= session.target_count:
        return SessionRollup(
            total=session.total,
            correct=session.correct,
            status=session.status,
            counted=False,
            just_completed=False,
        )

    total = session.total + 1
    correct = session.correct + (1 if ok and not reveal else 0)
    done = total >= session.target_count
    return SessionRollup(
        total=total,
        correct=correct,
        status=SessionStatus.COMPLETED if done else SessionStatus.ACTIVE,
        counted=True,
        just_completed=done,
    )


def build_missed_summary(attempts: Iterable[AttemptRecord]) -> list[MissedQuestion]:
    """Wrong, non-revealed attempts, first one per instance, oldest first."""
    seen: set[str] = set()
    missed: list[MissedQuestion] = []
    for attempt in sorted(attempts, key=lambda item: ensure_utc(item.created_at)):
        if attempt.ok or attempt.reveal_used or attempt.instance_id in seen:
            continue
        seen.add(attempt.instance_id)
        missed.append(
            MissedQuestion(
                instance_id=attempt.instance_id,
                title=attempt.title,
                prompt=attempt.prompt,
                your_answer=attempt.answer,
                expected=attempt.expected,
            )
        )
    return missed


def score_pct(correct: int, total: int) -> int:
    return round(100 * correct / total) if total else 0
