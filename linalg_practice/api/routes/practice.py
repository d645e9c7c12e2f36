from __future__ import annotations

from typing import Annotated, Literal

from fastapi import APIRouter, HTTPException, Path, Query, status

from linalg_practice.api.deps import CurrentActor, DBSession, GuestOrUser
from linalg_practice.core.security import decode_practice_key
from linalg_practice.models import PracticeSection, PracticeSession
from linalg_practice.practice.lifecycle import MissedQuestion, SessionStatus
from linalg_practice.practice.registry import UnknownGeneratorError
from linalg_practice.schemas.practice import (
    MissedQuestionOut,
    PracticeExerciseResponse,
    PracticeHistoryItemOut,
    PracticeHistoryResponse,
    PracticeSectionOut,
    PracticeSessionOut,
    PracticeSessionSummaryResponse,
    PracticeValidateRequest,
    PracticeValidateResponse,
    SectionRefOut,
    SessionScoreOut,
)
from linalg_practice.services.practice import (
    ActorMismatchError,
    AnswerKindMismatchError,
    InstanceNotFoundError,
    SectionNotFoundError,
    SessionClosedError,
    SessionForbiddenError,
    SessionNotFoundError,
    adopt_key_actor,
    issue_exercise,
    list_history,
    list_sections,
    session_summary,
    submit_answer,
)

router = APIRouter(prefix="/api/practice", tags=["practice"])

DifficultyParam = Literal["easy", "medium", "hard", "all"]


def _missed_out(items: list[MissedQuestion]) -> list[MissedQuestionOut]:
    return [MissedQuestionOut.model_validate(item.to_dict()) for item in items]


def _session_out(session_row: PracticeSession, section: PracticeSection | None = None) -> dict[str, object]:
    return {
        "id": session_row.id,
        "section": SectionRefOut(slug=section.slug, title=section.title) if section is not None else None,
        "difficulty": session_row.difficulty,
        "status": session_row.status,
        "targetCount": session_row.target_count,
        "total": session_row.total,
        "correct": session_row.correct,
        "startedAt": session_row.started_at,
        "completedAt": session_row.completed_at,
    }


@router.get("/sections", response_model=list[PracticeSectionOut])
def get_sections(db: DBSession) -> list[PracticeSectionOut]:
    return [
        PracticeSectionOut(
            slug=section.slug,
            title=section.title,
            description=section.description,
            topics=list(section.topics or []),
            sortOrder=section.sort_order,
        )
        for section in list_sections(db)
    ]


@router.get("", response_model=PracticeExerciseResponse)
def get_exercise(
    db: DBSession,
    actor: GuestOrUser,
    topic: str = "dot",
    difficulty: DifficultyParam = "easy",
    seed: str | None = None,
    variant: str | None = None,
    session_id: Annotated[str | None, Query(alias="sessionId")] = None,
    section: str | None = None,
) -> PracticeExerciseResponse:
    try:
        issued = issue_exercise(
            db,
            actor=actor,
            topic=topic,
            difficulty=difficulty,
            seed=seed,
            variant=variant,
            session_id=session_id,
            section_slug=section,
        )
    except (SessionNotFoundError, SectionNotFoundError) as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except SessionForbiddenError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except SessionClosedError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except UnknownGeneratorError:
        db.rollback()
        raise
    except ValueError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    db.commit()
    return PracticeExerciseResponse(exercise=issued.exercise, key=issued.key, sessionId=issued.session_id)


@router.post("/validate", response_model=PracticeValidateResponse)
def validate(
    payload: PracticeValidateRequest,
    db: DBSession,
    actor: CurrentActor,
) -> PracticeValidateResponse:
    claims = decode_practice_key(payload.key)
    try:
        outcome = submit_answer(
            db,
            actor=adopt_key_actor(actor, claims),
            claims=claims,
            answer=payload.answer.to_answer() if payload.answer is not None else None,
            reveal=payload.reveal,
        )
    except ActorMismatchError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except SessionForbiddenError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except InstanceNotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AnswerKindMismatchError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "ANSWER_KIND_MISMATCH", "message": str(exc)},
        ) from exc
    db.commit()

    summary = outcome.summary
    return PracticeValidateResponse(
        ok=outcome.result.ok,
        expected=outcome.result.expected,
        explanation=outcome.result.explanation,
        sessionComplete=outcome.session_complete,
        summary=(
            SessionScoreOut(correct=summary.correct, total=summary.total, missed=_missed_out(summary.missed))
            if summary is not None
            else None
        ),
    )


@router.get("/session/{session_id}/summary", response_model=PracticeSessionSummaryResponse)
def get_session_summary(
    db: DBSession,
    actor: CurrentActor,
    session_id: Annotated[str, Path()],
) -> PracticeSessionSummaryResponse:
    if actor.is_anonymous:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized.")
    try:
        session_row, section, pct, missed = session_summary(db, actor=actor, session_id=session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except SessionForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return PracticeSessionSummaryResponse(
        session=PracticeSessionOut(**_session_out(session_row, section)),
        scorePct=pct,
        missed=_missed_out(missed),
    )


@router.get("/history", response_model=PracticeHistoryResponse)
def get_history(
    db: DBSession,
    actor: CurrentActor,
    status_filter: Annotated[SessionStatus | None, Query(alias="status")] = None,
    take: Annotated[int, Query()] = 40,
) -> PracticeHistoryResponse:
    if actor.is_anonymous:
        return PracticeHistoryResponse(sessions=[])
    rows = list_history(db, actor=actor, status=status_filter, take=take)
    return PracticeHistoryResponse(
        sessions=[
            PracticeHistoryItemOut(**_session_out(session_row, section), missed=_missed_out(missed))
            for session_row, section, missed in rows
        ]
    )
