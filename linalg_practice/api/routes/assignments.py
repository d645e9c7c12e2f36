from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status
from sqlalchemy import select

from linalg_practice.api.deps import CurrentActor, DBSession, GuestOrUser
from linalg_practice.models import PracticeSection
from linalg_practice.schemas.assignments import AssignmentListResponse, AssignmentOut, AssignmentStartResponse
from linalg_practice.schemas.practice import SectionRefOut
from linalg_practice.services.assignments import (
    AssignmentAttemptsExhaustedError,
    AssignmentClosedError,
    AssignmentNotFoundError,
    list_available_assignments,
    start_assignment_session,
)

router = APIRouter(prefix="/api/assignments", tags=["assignments"])


@router.get("", response_model=AssignmentListResponse)
def get_assignments(db: DBSession, actor: CurrentActor) -> AssignmentListResponse:
    items = list_available_assignments(db, actor=actor)
    slugs = {item.assignment.section_slug for item in items if item.assignment.section_slug}
    sections: dict[str, PracticeSection] = {}
    if slugs:
        sections = {
            section.slug: section
            for section in db.scalars(select(PracticeSection).where(PracticeSection.slug.in_(slugs)))
        }

    assignments: list[AssignmentOut] = []
    for item in items:
        row = item.assignment
        section = sections.get(row.section_slug or "")
        assignments.append(
            AssignmentOut(
                id=row.id,
                slug=row.slug,
                title=row.title,
                description=row.description,
                section=SectionRefOut(slug=section.slug, title=section.title) if section is not None else None,
                topics=list(row.topics or []),
                difficulty=row.difficulty,
                questionCount=row.question_count,
                availableFrom=row.available_from,
                dueAt=row.due_at,
                timeLimitSec=row.time_limit_sec,
                maxAttempts=row.max_attempts,
                attemptsUsed=item.attempts_used,
                attemptsRemaining=item.attempts_remaining,
            )
        )
    return AssignmentListResponse(assignments=assignments)


@router.post("/{assignment_id}/start", response_model=AssignmentStartResponse)
def start_assignment(
    db: DBSession,
    actor: GuestOrUser,
    assignment_id: Annotated[str, Path()],
) -> AssignmentStartResponse:
    try:
        started = start_assignment_session(db, actor=actor, assignment_id=assignment_id)
    except AssignmentNotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AssignmentClosedError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "ASSIGNMENT_CLOSED", "message": str(exc)},
        ) from exc
    except AssignmentAttemptsExhaustedError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "ASSIGNMENT_ATTEMPTS_EXHAUSTED", "message": str(exc)},
        ) from exc
    db.commit()

    return AssignmentStartResponse(
        sessionId=started.session.id,
        assignmentId=started.assignment.id,
        difficulty=started.session.difficulty,
        targetCount=started.session.target_count,
        resumed=started.resumed,
        attemptsRemaining=started.attempts_remaining,
    )
