from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProgressTotalsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sessions_completed: int = Field(alias="sessionsCompleted")
    attempts: int
    correct: int
    accuracy: float
    best_topic: str = Field(alias="bestTopic")
    streak_days: int = Field(alias="streakDays")


class TopicRowOut(BaseModel):
    topic: str
    attempts: int
    correct: int
    accuracy: float


class DifficultyRowOut(BaseModel):
    difficulty: str
    attempts: int
    correct: int
    accuracy: float


class TimelineRowOut(BaseModel):
    date: str
    attempts: int
    correct: int
    accuracy: float


class RecentSessionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    completed_at: datetime = Field(alias="completedAt")
    section: str | None = None
    difficulty: str
    total: int
    correct: int
    accuracy: float


class MissedAttemptOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    occurred_at: datetime = Field(alias="occurredAt")
    topic: str
    difficulty: str
    kind: str
    title: str
    prompt: str
    your_answer: Any = Field(default=None, alias="yourAnswer")
    expected: Any = None


class ProgressMetaOut(BaseModel):
    range: str


class ProgressResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    totals: ProgressTotalsOut
    by_topic: list[TopicRowOut] = Field(alias="byTopic")
    by_difficulty: list[DifficultyRowOut] = Field(alias="byDifficulty")
    accuracy_timeline: list[TimelineRowOut] = Field(alias="accuracyTimeline")
    recent_sessions: list[RecentSessionOut] = Field(alias="recentSessions")
    missed: list[MissedAttemptOut]
    meta: ProgressMetaOut
