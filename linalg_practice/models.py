from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from linalg_practice.db.base import Base
from linalg_practice.practice.lifecycle import SessionStatus
from linalg_practice.practice.types import Difficulty, ExerciseKind

JsonPayload = JSON().with_variant(JSONB(), "postgresql")


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


class AssignmentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class PracticeSection(Base):
    __tablename__ = "practice_sections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    topics: Mapped[list[str]] = mapped_column(JsonPayload, nullable=False, default=list)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )


class Assignment(Base):
    __tablename__ = "assignments"
    __table_args__ = (Index("ix_assignments_status_due", "status", "due_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[AssignmentStatus] = mapped_column(
        SqlEnum(AssignmentStatus, name="assignment_status", values_callable=_enum_values),
        nullable=False,
        default=AssignmentStatus.DRAFT,
    )
    section_slug: Mapped[str | None] = mapped_column(
        String(120),
        ForeignKey("practice_sections.slug"),
        nullable=True,
    )
    topics: Mapped[list[str]] = mapped_column(JsonPayload, nullable=False, default=list)
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False, default="all", server_default="all")
    question_count: Mapped[int] = mapped_column(Integer, nullable=False, default=10, server_default="10")
    available_from: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    due_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    time_limit_sec: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_attempts: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )


class PracticeSession(Base):
    __tablename__ = "practice_sessions"
    __table_args__ = (
        Index("ix_practice_sessions_user_started", "user_id", "started_at"),
        Index("ix_practice_sessions_guest_started", "guest_id", "started_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    section_slug: Mapped[str | None] = mapped_column(
        String(120),
        ForeignKey("practice_sections.slug"),
        nullable=True,
    )
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False)
    target_count: Mapped[int] = mapped_column(Integer, nullable=False, default=10, server_default="10")
    total: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    correct: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    status: Mapped[SessionStatus] = mapped_column(
        SqlEnum(SessionStatus, name="practice_session_status", values_callable=_enum_values),
        nullable=False,
        default=SessionStatus.ACTIVE,
    )
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    guest_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    assignment_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("assignments.id"),
        nullable=True,
        index=True,
    )
    last_instance_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class PracticeQuestionInstance(Base):
    __tablename__ = "practice_question_instances"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    session_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("practice_sessions.id"),
        nullable=True,
        index=True,
    )
    exercise_id: Mapped[str] = mapped_column(String(80), nullable=False)
    gen_key: Mapped[str] = mapped_column(String(40), nullable=False)
    topic: Mapped[str] = mapped_column(String(120), nullable=False)
    kind: Mapped[ExerciseKind] = mapped_column(
        SqlEnum(ExerciseKind, name="practice_kind", values_callable=_enum_values),
        nullable=False,
    )
    difficulty: Mapped[Difficulty] = mapped_column(
        SqlEnum(Difficulty, name="practice_difficulty", values_callable=_enum_values),
        nullable=False,
    )
    archetype: Mapped[str] = mapped_column(String(64), nullable=False)
    seed: Mapped[str | None] = mapped_column(String(128), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    public_payload: Mapped[dict[str, Any]] = mapped_column(JsonPayload, nullable=False)
    secret_payload: Mapped[dict[str, Any]] = mapped_column(JsonPayload, nullable=False)
    answered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )


class PracticeAttempt(Base):
    __tablename__ = "practice_attempts"
    __table_args__ = (
        Index("ix_practice_attempts_session_created", "session_id", "created_at"),
        Index("ix_practice_attempts_user_created", "user_id", "created_at"),
        Index("ix_practice_attempts_guest_created", "guest_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    session_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("practice_sessions.id"),
        nullable=True,
    )
    instance_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("practice_question_instances.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    guest_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    answer_payload: Mapped[dict[str, Any] | None] = mapped_column(JsonPayload, nullable=True)
    ok: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    reveal_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
