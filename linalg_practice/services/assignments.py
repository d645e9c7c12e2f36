from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from linalg_practice.models import Assignment, AssignmentStatus, PracticeSession
from linalg_practice.practice.lifecycle import SessionStatus, ensure_utc
from linalg_practice.services.practice import Actor, owned_by

logger = logging.getLogger("linalg.practice.assignments")


class AssignmentNotFoundError(ValueError):
    pass


class AssignmentClosedError(ValueError):
    pass


class AssignmentAttemptsExhaustedError(ValueError):
    pass


@dataclass(slots=True)
class AvailableAssignment:
    assignment: Assignment
    attempts_used: int
    attempts_remaining: int | None


@dataclass(slots=True)
class AssignmentStart:
    session: PracticeSession
    assignment: Assignment
    resumed: bool
    attempts_remaining: int | None


def _now() -> datetime:
    return datetime.now(UTC)


def attempts_remaining(max_attempts: int | None, used: int) -> int | None:
    if max_attempts is None:
        return None
    return max(0, max_attempts - used)


def is_open(assignment: Assignment, now: datetime) -> bool:
    """Published, and ``now`` falls inside the optional availability window."""
    if assignment.status != AssignmentStatus.PUBLISHED:
        return False
    if assignment.available_from is not None and ensure_utc(assignment.available_from) > now:
        return False
    if assignment.due_at is not None and ensure_utc(assignment.due_at) < now:
        return False
    return True


def _attempts_by_assignment(db: Session, *, actor: Actor, assignment_ids: list[str]) -> dict[str, int]:
    if actor.is_anonymous or not assignment_ids:
        return {}
    rows = db.execute(
        select(PracticeSession.assignment_id, func.count(PracticeSession.id))
        .where(PracticeSession.assignment_id.in_(assignment_ids), owned_by(PracticeSession, actor))
        .group_by(PracticeSession.assignment_id)
    ).all()
    return {assignment_id: int(count) for assignment_id, count in rows if assignment_id is not None}


def list_available_assignments(
    db: Session,
    *,
    actor: Actor,
    now: datetime | None = None,
) -> list[AvailableAssignment]:
    current = now or _now()
    assignments = list(
        db.scalars(
            select(Assignment)
            .where(
                Assignment.status == AssignmentStatus.PUBLISHED,
                or_(Assignment.available_from.is_(None), Assignment.available_from <= current),
                or_(Assignment.due_at.is_(None), Assignment.due_at >= current),
            )
            .order_by(Assignment.due_at.asc().nulls_last(), Assignment.created_at.desc())
        )
    )
    used = _attempts_by_assignment(db, actor=actor, assignment_ids=[item.id for item in assignments])
    return [
        AvailableAssignment(
            assignment=item,
            attempts_used=used.get(item.id, 0),
            attempts_remaining=attempts_remaining(item.max_attempts, used.get(item.id, 0)),
        )
        for item in assignments
    ]


def start_assignment_session(
    db: Session,
    *,
    actor: Actor,
    assignment_id: str,
    now: datetime | None = None,
) -> AssignmentStart:
    """Resume the actor's active session for the assignment or open a new attempt.

    A new attempt takes its target count, difficulty and section from the
    assignment and is refused once ``max_attempts`` sessions exist.
    """
    current = now or _now()
    assignment = db.get(Assignment, assignment_id)
    if assignment is None:
        raise AssignmentNotFoundError("Assignment not found.")
    if not is_open(assignment, current):
        raise AssignmentClosedError("Assignment is not open.")

    used = _attempts_by_assignment(db, actor=actor, assignment_ids=[assignment.id]).get(assignment.id, 0)
    active = db.scalar(
        select(PracticeSession)
        .where(
            PracticeSession.assignment_id == assignment.id,
            PracticeSession.status == SessionStatus.ACTIVE,
            owned_by(PracticeSession, actor),
        )
        .order_by(PracticeSession.started_at.desc())
        .limit(1)
    )
    if active is not None:
        return AssignmentStart(
            session=active,
            assignment=assignment,
            resumed=True,
            attempts_remaining=attempts_remaining(assignment.max_attempts, used),
        )

    if assignment.max_attempts is not None and used >= assignment.max_attempts:
        raise AssignmentAttemptsExhaustedError("No attempts remaining.")

    session_row = PracticeSession(
        section_slug=assignment.section_slug,
        assignment_id=assignment.id,
        difficulty=assignment.difficulty,
        target_count=assignment.question_count,
        total=0,
        correct=0,
        status=SessionStatus.ACTIVE,
        user_id=actor.user_id,
        guest_id=actor.guest_id,
    )
    db.add(session_row)
    db.flush()
    logger.info(
        "practice.assignment_started",
        extra={"session_id": session_row.id, "user_id": actor.user_id, "guest_id": actor.guest_id},
    )
    return AssignmentStart(
        session=session_row,
        assignment=assignment,
        resumed=False,
        attempts_remaining=attempts_remaining(assignment.max_attempts, used + 1),
    )
