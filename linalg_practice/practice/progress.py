from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

from linalg_practice.practice.lifecycle import ensure_utc

BEST_TOPIC_MIN_ATTEMPTS = 5
STREAK_LOOKBACK_DAYS = 365
DEFAULT_BEST_TOPIC = "m0.dot"


class ProgressRange(str, Enum):
    DAYS_7 = "7d"
    DAYS_30 = "30d"
    DAYS_90 = "90d"

    @property
    def days(self) -> int:
        return int(self.value[:-1])

    def start(self, now: datetime) -> datetime:
        """Midnight ``days`` days before ``now``, in ``now``'s timezone."""
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return midnight - timedelta(days=self.days)


@dataclass(frozen=True, slots=True)
class ProgressAttempt:
    topic: str
    difficulty: str
    ok: bool
    created_at: datetime


@dataclass(slots=True)
class Bucket:
    attempts: int = 0
    correct: int = 0

    def add(self, ok: bool) -> None:
        self.attempts += 1
        self.correct += 1 if ok else 0

    @property
    def accuracy(self) -> float:
        return self.correct / self.attempts if self.attempts else 0.0


@dataclass(frozen=True, slots=True)
class ProgressSummary:
    attempts: int
    correct: int
    accuracy: float
    best_topic: str
    streak_days: int
    by_topic: dict[str, Bucket]
    by_difficulty: dict[str, Bucket]
    timeline: dict[str, Bucket]


def _bucket_rows(buckets: dict[str, Bucket], label: str) -> list[dict[str, Any]]:
    return [
        {label: name, "attempts": bucket.attempts, "correct": bucket.correct, "accuracy": bucket.accuracy}
        for name, bucket in buckets.items()
    ]


def best_topic(by_topic: dict[str, Bucket]) -> str:
    """Most accurate topic with enough attempts, else the first topic seen."""
    eligible = [(name, bucket) for name, bucket in by_topic.items() if bucket.attempts >= BEST_TOPIC_MIN_ATTEMPTS]
    if eligible:
        return max(eligible, key=lambda item: item[1].accuracy)[0]
    return next(iter(by_topic), DEFAULT_BEST_TOPIC)


def streak_days(active_days: Iterable[date], today: date) -> int:
    """Consecutive days ending today with at least one attempt."""
    days = set(active_days)
    streak = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        if today - timedelta(days=offset) not in days:
            break
        streak += 1
    return streak


def summarize_attempts(attempts: Sequence[ProgressAttempt], today: date) -> ProgressSummary:
    by_topic: dict[str, Bucket] = {}
    by_difficulty: dict[str, Bucket] = {}
    timeline: dict[str, Bucket] = {}

    for attempt in sorted(attempts, key=lambda item: ensure_utc(item.created_at)):
        by_topic.setdefault(attempt.topic, Bucket()).add(attempt.ok)
        by_difficulty.setdefault(attempt.difficulty, Bucket()).add(attempt.ok)
        timeline.setdefault(ensure_utc(attempt.created_at).date().isoformat(), Bucket()).add(attempt.ok)

    total = len(attempts)
    correct = sum(1 for attempt in attempts if attempt.ok)
    return ProgressSummary(
        attempts=total,
        correct=correct,
        accuracy=correct / total if total else 0.0,
        best_topic=best_topic(by_topic),
        streak_days=streak_days((ensure_utc(attempt.created_at).date() for attempt in attempts), today),
        by_topic=by_topic,
        by_difficulty=by_difficulty,
        timeline=timeline,
    )


def summary_rows(summary: ProgressSummary) -> dict[str, list[dict[str, Any]]]:
    return {
        "byTopic": _bucket_rows(summary.by_topic, "topic"),
        "byDifficulty": _bucket_rows(summary.by_difficulty, "difficulty"),
        "accuracyTimeline": _bucket_rows(summary.timeline, "date"),
    }
