from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select, update
from sqlalchemy.orm import Session

from linalg_practice.core.config import settings
from linalg_practice.core.security import PracticeKeyClaims, create_practice_key
from linalg_practice.models import (
    Assignment,
    PracticeAttempt,
    PracticeQuestionInstance,
    PracticeSection,
    PracticeSession,
)
from linalg_practice.practice.dispatcher import ALL, generate_exercise
from linalg_practice.practice.lifecycle import (
    AttemptRecord,
    MissedQuestion,
    SessionSnapshot,
    SessionStatus,
    build_missed_summary,
    rollup_session,
    score_pct,
)
from linalg_practice.practice.progress import ProgressAttempt, ProgressRange, summarize_attempts, summary_rows
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.types import Difficulty, ExerciseKind, SubmitAnswer, expected_from_payload
from linalg_practice.practice.validator import ValidationResult, ValidationStatus, validate_answer

logger = logging.getLogger("linalg.practice.service")


class SectionNotFoundError(ValueError):
    pass


class SessionNotFoundError(ValueError):
    pass


class InstanceNotFoundError(ValueError):
    pass


class SessionClosedError(ValueError):
    pass


class AnswerKindMismatchError(ValueError):
    pass


class ActorMismatchError(PermissionError):
    pass


class SessionForbiddenError(PermissionError):
    pass


@dataclass(frozen=True, slots=True)
class Actor:
    user_id: str | None = None
    guest_id: str | None = None

    @property
    def is_anonymous(self) -> bool:
        return not self.user_id and not self.guest_id

    def owns(self, *, user_id: str | None, guest_id: str | None) -> bool:
        if user_id and user_id != self.user_id:
            return False
        if guest_id and guest_id != self.guest_id:
            return False
        return True


@dataclass(slots=True)
class IssuedExercise:
    exercise: dict[str, Any]
    key: str
    session_id: str | None
    instance: PracticeQuestionInstance


@dataclass(slots=True)
class SessionScore:
    correct: int
    total: int
    missed: list[MissedQuestion] = field(default_factory=list)


@dataclass(slots=True)
class SubmissionOutcome:
    result: ValidationResult
    counted: bool
    session_complete: bool
    summary: SessionScore | None


def _now() -> datetime:
    return datetime.now(UTC)


def owned_by(model: type[PracticeSession] | type[PracticeAttempt], actor: Actor) -> ColumnElement[bool]:
    clauses = []
    if actor.user_id:
        clauses.append(model.user_id == actor.user_id)
    if actor.guest_id:
        clauses.append(model.guest_id == actor.guest_id)
    if not clauses:
        raise ActorMismatchError("No actor.")
    return or_(*clauses)


def _ensure_owner(session_row: PracticeSession, actor: Actor) -> None:
    if not actor.owns(user_id=session_row.user_id, guest_id=session_row.guest_id):
        raise SessionForbiddenError("Forbidden.")


def list_sections(db: Session) -> list[PracticeSection]:
    return list(db.scalars(select(PracticeSection).order_by(PracticeSection.sort_order, PracticeSection.slug)))


def get_section(db: Session, *, slug: str) -> PracticeSection:
    section = db.scalar(select(PracticeSection).where(PracticeSection.slug == slug))
    if section is None:
        raise SectionNotFoundError("Section not found.")
    return section


def get_session(db: Session, *, actor: Actor, session_id: str) -> PracticeSession:
    session_row = db.get(PracticeSession, session_id)
    if session_row is None:
        raise SessionNotFoundError("Session not found.")
    _ensure_owner(session_row, actor)
    return session_row


def start_or_resume_session(
    db: Session,
    *,
    actor: Actor,
    section_slug: str,
    difficulty: str,
    target_count: int | None = None,
) -> PracticeSession:
    """Latest active session for this actor, section and difficulty, or a new one."""
    section = get_section(db, slug=section_slug)
    active = db.scalar(
        select(PracticeSession)
        .where(
            PracticeSession.status == SessionStatus.ACTIVE,
            PracticeSession.section_slug == section.slug,
            PracticeSession.difficulty == difficulty,
            PracticeSession.assignment_id.is_(None),
            owned_by(PracticeSession, actor),
        )
        .order_by(PracticeSession.started_at.desc())
        .limit(1)
    )
    if active is not None:
        return active

    session_row = PracticeSession(
        section_slug=section.slug,
        difficulty=difficulty,
        target_count=target_count or settings.session_target_count,
        total=0,
        correct=0,
        status=SessionStatus.ACTIVE,
        user_id=actor.user_id,
        guest_id=actor.guest_id,
    )
    db.add(session_row)
    db.flush()
    logger.info(
        "practice.session_started",
        extra={"session_id": session_row.id, "user_id": actor.user_id, "guest_id": actor.guest_id},
    )
    return session_row


def _session_topics(db: Session, session_row: PracticeSession) -> list[str]:
    if session_row.assignment_id:
        assignment = db.get(Assignment, session_row.assignment_id)
        if assignment is not None and assignment.topics:
            return list(assignment.topics)
    section = (
        db.scalar(select(PracticeSection).where(PracticeSection.slug == session_row.section_slug))
        if session_row.section_slug
        else None
    )
    return list(section.topics) if section is not None and section.topics else []


def _section_topic(db: Session, session_row: PracticeSession, seed: str | None) -> str:
    topics = _session_topics(db, session_row)
    if not topics:
        return ALL
    return SeededRng(f"{seed}:section" if seed is not None else None).choice(topics)


def issue_exercise(
    db: Session,
    *,
    actor: Actor,
    topic: str,
    difficulty: str,
    seed: str | None = None,
    variant: str | None = None,
    session_id: str | None = None,
    section_slug: str | None = None,
) -> IssuedExercise:
    session_row: PracticeSession | None = None
    if session_id:
        session_row = get_session(db, actor=actor, session_id=session_id)
    elif section_slug:
        session_row = start_or_resume_session(db, actor=actor, section_slug=section_slug, difficulty=difficulty)

    if session_row is not None and session_row.status == SessionStatus.COMPLETED:
        raise SessionClosedError("Session already completed.")

    if topic == ALL and session_row is not None:
        topic = _section_topic(db, session_row, seed)
    generated = generate_exercise(
        topic,
        session_row.difficulty if session_row is not None else difficulty,
        seed=seed,
        variant=variant,
    )
    exercise = generated.exercise

    instance = PracticeQuestionInstance(
        session_id=session_row.id if session_row is not None else None,
        exercise_id=exercise.id,
        gen_key=generated.gen_key.value,
        topic=exercise.topic,
        kind=exercise.kind,
        difficulty=exercise.difficulty,
        archetype=generated.archetype,
        seed=seed,
        title=exercise.title,
        prompt=exercise.prompt,
        public_payload=exercise.to_public(),
        secret_payload=generated.expected.to_payload(),
    )
    db.add(instance)
    db.flush()

    if session_row is not None:
        session_row.last_instance_id = instance.id

    key = create_practice_key(
        instance_id=instance.id,
        session_id=instance.session_id,
        user_id=actor.user_id,
        guest_id=actor.guest_id,
    )
    logger.info(
        "practice.exercise_issued",
        extra={
            "instance_id": instance.id,
            "session_id": instance.session_id,
            "topic": instance.topic,
            "archetype": instance.archetype,
            "difficulty": exercise.difficulty.value,
            "kind": exercise.kind.value,
        },
    )
    return IssuedExercise(
        exercise={**instance.public_payload, "id": instance.id},
        key=key,
        session_id=instance.session_id,
        instance=instance,
    )


def _claim_instance(db: Session, instance_id: str, now: datetime) -> bool:
    """Set answered_at if it is still null; True when this call made the transition."""
    result = db.execute(
        update(PracticeQuestionInstance)
        .where(PracticeQuestionInstance.id == instance_id, PracticeQuestionInstance.answered_at.is_(None))
        .values(answered_at=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _count_toward_session(db: Session, session_row: PracticeSession, *, claimed: bool, ok: bool, reveal: bool) -> bool:
    snapshot = SessionSnapshot(
        total=session_row.total,
        correct=session_row.correct,
        target_count=session_row.target_count,
        status=session_row.status,
    )
    rollup = rollup_session(snapshot, claimed, ok, reveal)
    if not rollup.counted:
        return False

    result = db.execute(
        update(PracticeSession)
        .where(
            PracticeSession.id == session_row.id,
            PracticeSession.status == SessionStatus.ACTIVE,
            PracticeSession.total < PracticeSession.target_count,
        )
        .values(
            total=PracticeSession.total + 1,
            correct=PracticeSession.correct + (rollup.correct - snapshot.correct),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _complete_if_full(db: Session, session_row: PracticeSession, now: datetime) -> bool:
    result = db.execute(
        update(PracticeSession)
        .where(
            PracticeSession.id == session_row.id,
            PracticeSession.status == SessionStatus.ACTIVE,
            PracticeSession.total >= PracticeSession.target_count,
        )
        .values(status=SessionStatus.COMPLETED, completed_at=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def missed_questions(
    db: Session,
    *,
    session_id: str,
    completed_at: datetime | None = None,
) -> list[MissedQuestion]:
    """Missed questions of a session; a completed session ignores later attempts."""
    query = (
        select(PracticeAttempt, PracticeQuestionInstance)
        .join(PracticeQuestionInstance, PracticeAttempt.instance_id == PracticeQuestionInstance.id)
        .where(
            PracticeAttempt.session_id == session_id,
            PracticeAttempt.ok.is_(False),
            PracticeAttempt.reveal_used.is_(False),
        )
    )
    if completed_at is not None:
        query = query.where(PracticeAttempt.created_at <= completed_at)
    rows = db.execute(query.order_by(PracticeAttempt.created_at.asc())).all()
    return build_missed_summary(
        AttemptRecord(
            instance_id=attempt.instance_id,
            ok=attempt.ok,
            reveal_used=attempt.reveal_used,
            created_at=attempt.created_at,
            answer=attempt.answer_payload,
            title=instance.title,
            prompt=instance.prompt,
            expected=instance.secret_payload,
        )
        for attempt, instance in rows
    )


def adopt_key_actor(actor: Actor, claims: PracticeKeyClaims) -> Actor:
    """An actor with no identity takes the guest id the key was issued to."""
    if actor.is_anonymous and claims.guest_id:
        return Actor(user_id=None, guest_id=claims.guest_id)
    return actor


def submit_answer(
    db: Session,
    *,
    actor: Actor,
    claims: PracticeKeyClaims,
    answer: SubmitAnswer | None,
    reveal: bool = False,
) -> SubmissionOutcome:
    if not actor.owns(user_id=claims.user_id, guest_id=claims.guest_id):
        raise ActorMismatchError("Actor mismatch.")

    instance = db.get(PracticeQuestionInstance, claims.instance_id)
    if instance is None:
        raise InstanceNotFoundError("Instance not found.")

    session_row: PracticeSession | None = None
    if instance.session_id:
        session_row = db.get(PracticeSession, instance.session_id, populate_existing=True)
        if session_row is not None:
            _ensure_owner(session_row, actor)

    kind = ExerciseKind(instance.kind)
    result = validate_answer(kind, expected_from_payload(instance.secret_payload), answer, reveal)
    if result.status == ValidationStatus.TYPE_MISMATCH:
        raise AnswerKindMismatchError(f"Answer kind does not match exercise kind '{kind.value}'.")

    now = _now()
    db.add(
        PracticeAttempt(
            session_id=instance.session_id,
            instance_id=instance.id,
            user_id=actor.user_id,
            guest_id=actor.guest_id,
            answer_payload={"reveal": True} if reveal else (answer.to_payload() if answer is not None else None),
            ok=result.ok,
            reveal_used=reveal,
            created_at=now,
        )
    )
    db.flush()

    claimed = _claim_instance(db, instance.id, now)
    if claimed:
        db.refresh(instance)
    counted = False
    session_complete = False
    summary: SessionScore | None = None

    if claimed and session_row is not None:
        counted = _count_toward_session(db, session_row, claimed=claimed, ok=result.ok, reveal=reveal)
        if counted:
            session_complete = _complete_if_full(db, session_row, now)
        db.refresh(session_row)
        if session_complete:
            summary = SessionScore(
                correct=session_row.correct,
                total=session_row.total,
                missed=missed_questions(db, session_id=session_row.id, completed_at=session_row.completed_at),
            )

    logger.info(
        "practice.answer_validated",
        extra={
            "instance_id": instance.id,
            "session_id": instance.session_id,
            "topic": instance.topic,
            "kind": kind.value,
            "ok": result.ok,
            "reveal": reveal,
            "counted": counted,
            "session_complete": session_complete,
        },
    )
    return SubmissionOutcome(result=result, counted=counted, session_complete=session_complete, summary=summary)


def session_summary(
    db: Session,
    *,
    actor: Actor,
    session_id: str,
) -> tuple[PracticeSession, PracticeSection | None, int, list[MissedQuestion]]:
    session_row = get_session(db, actor=actor, session_id=session_id)
    section = (
        db.scalar(select(PracticeSection).where(PracticeSection.slug == session_row.section_slug))
        if session_row.section_slug
        else None
    )
    return (
        session_row,
        section,
        score_pct(session_row.correct, session_row.total),
        missed_questions(db, session_id=session_row.id, completed_at=session_row.completed_at),
    )


def list_history(
    db: Session,
    *,
    actor: Actor,
    status: SessionStatus | None = None,
    take: int = 40,
) -> list[tuple[PracticeSession, PracticeSection | None, list[MissedQuestion]]]:
    query = select(PracticeSession).where(owned_by(PracticeSession, actor))
    if status is not None:
        query = query.where(PracticeSession.status == status)
    limit = min(settings.history_max_take, max(1, take))
    sessions = list(db.scalars(query.order_by(PracticeSession.started_at.desc()).limit(limit)))

    slugs = {row.section_slug for row in sessions if row.section_slug}
    sections: dict[str, PracticeSection] = {}
    if slugs:
        sections = {
            section.slug: section
            for section in db.scalars(select(PracticeSection).where(PracticeSection.slug.in_(slugs)))
        }
    return [
        (
            row,
            sections.get(row.section_slug or ""),
            missed_questions(db, session_id=row.id, completed_at=row.completed_at),
        )
        for row in sessions
    ]


def progress_report(
    db: Session,
    *,
    actor: Actor,
    range_: ProgressRange,
    now: datetime | None = None,
) -> dict[str, Any]:
    current = now or _now()
    start = range_.start(current)

    rows = db.execute(
        select(PracticeAttempt, PracticeQuestionInstance)
        .join(PracticeQuestionInstance, PracticeAttempt.instance_id == PracticeQuestionInstance.id)
        .where(owned_by(PracticeAttempt, actor), PracticeAttempt.created_at >= start)
        .order_by(PracticeAttempt.created_at.asc())
    ).all()
    summary = summarize_attempts(
        [
            ProgressAttempt(
                topic=instance.topic,
                difficulty=Difficulty(instance.difficulty).value,
                ok=attempt.ok,
                created_at=attempt.created_at,
            )
            for attempt, instance in rows
        ],
        today=current.date(),
    )

    sessions_completed = db.scalar(
        select(func.count())
        .select_from(PracticeSession)
        .where(
            owned_by(PracticeSession, actor),
            PracticeSession.status == SessionStatus.COMPLETED,
            PracticeSession.completed_at >= start,
        )
    )
    recent_sessions = db.scalars(
        select(PracticeSession)
        .where(owned_by(PracticeSession, actor), PracticeSession.status == SessionStatus.COMPLETED)
        .order_by(PracticeSession.completed_at.desc())
        .limit(settings.progress_recent_sessions)
    )
    missed = [
        (attempt, instance)
        for attempt, instance in reversed(rows)
        if not attempt.ok and not attempt.reveal_used
    ][: settings.progress_missed_limit]

    return {
        "totals": {
            "sessionsCompleted": int(sessions_completed or 0),
            "attempts": summary.attempts,
            "correct": summary.correct,
            "accuracy": summary.accuracy,
            "bestTopic": summary.best_topic,
            "streakDays": summary.streak_days,
        },
        **summary_rows(summary),
        "recentSessions": [
            {
                "id": row.id,
                "completedAt": row.completed_at or row.started_at,
                "section": row.section_slug,
                "difficulty": row.difficulty,
                "total": row.total,
                "correct": row.correct,
                "accuracy": row.correct / row.total if row.total else 0.0,
            }
            for row in recent_sessions
        ],
        "missed": [
            {
                "occurredAt": attempt.created_at,
                "topic": instance.topic,
                "difficulty": Difficulty(instance.difficulty).value,
                "kind": ExerciseKind(instance.kind).value,
                "title": instance.title,
                "prompt": instance.prompt,
                "yourAnswer": attempt.answer_payload,
                "expected": instance.secret_payload,
            }
            for attempt, instance in missed
        ],
        "meta": {"range": range_.value},
    }
