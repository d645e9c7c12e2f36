from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from linalg_practice.schemas.practice import SectionRefOut


class AssignmentOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    slug: str
    title: str
    description: str | None = None
    section: SectionRefOut | None = None
    topics: list[str]
    difficulty: str
    question_count: int = Field(alias="questionCount")
    available_from: datetime | None = Field(default=None, alias="availableFrom")
    due_at: datetime | None = Field(default=None, alias="dueAt")
    time_limit_sec: int | None = Field(default=None, alias="timeLimitSec")
    max_attempts: int | None = Field(default=None, alias="maxAttempts")
    attempts_used: int = Field(alias="attemptsUsed")
    attempts_remaining: int | None = Field(default=None, alias="attemptsRemaining")


class AssignmentListResponse(BaseModel):
    assignments: list[AssignmentOut]


class AssignmentStartResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    assignment_id: str = Field(alias="assignmentId")
    difficulty: str
    target_count: int = Field(alias="targetCount")
    resumed: bool
    attempts_remaining: int | None = Field(default=None, alias="attemptsRemaining")
