from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from linalg_practice.api.deps import CurrentActor, DBSession
from linalg_practice.practice.progress import ProgressRange
from linalg_practice.schemas.progress import ProgressResponse
from linalg_practice.services.practice import progress_report

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("", response_model=ProgressResponse)
def get_progress(
    db: DBSession,
    actor: CurrentActor,
    range_: Annotated[ProgressRange, Query(alias="range")] = ProgressRange.DAYS_30,
) -> ProgressResponse:
    if actor.is_anonymous:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized.")
    return ProgressResponse.model_validate(progress_report(db, actor=actor, range_=range_))
