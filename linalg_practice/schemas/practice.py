from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from linalg_practice.practice.lifecycle import SessionStatus
from linalg_practice.practice.types import (
    MatrixInputAnswer,
    MultiChoiceAnswer,
    NumericAnswer,
    SingleChoiceAnswer,
    SubmitAnswer,
    Vec3,
    VectorDragDotAnswer,
    VectorDragTargetAnswer,
)


class Vec3In(BaseModel):
    x: float
    y: float
    z: float = 0.0

    def to_vec(self) -> Vec3:
        return Vec3(self.x, self.y, self.z)


class NumericAnswerIn(BaseModel):
    kind: Literal["numeric"]
    value: float

    def to_answer(self) -> SubmitAnswer:
        return NumericAnswer(value=self.value)


class SingleChoiceAnswerIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["single_choice"]
    option_id: str = Field(alias="optionId")

    def to_answer(self) -> SubmitAnswer:
        return SingleChoiceAnswer(option_id=self.option_id)


class MultiChoiceAnswerIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["multi_choice"]
    option_ids: list[str] = Field(alias="optionIds")

    def to_answer(self) -> SubmitAnswer:
        return MultiChoiceAnswer(option_ids=tuple(self.option_ids))


class VectorDragTargetAnswerIn(BaseModel):
    kind: Literal["vector_drag_target"]
    a: Vec3In
    b: Vec3In | None = None

    def to_answer(self) -> SubmitAnswer:
        return VectorDragTargetAnswer(a=self.a.to_vec(), b=self.b.to_vec() if self.b is not None else None)


class VectorDragDotAnswerIn(BaseModel):
    kind: Literal["vector_drag_dot"]
    a: Vec3In

    def to_answer(self) -> SubmitAnswer:
        return VectorDragDotAnswer(a=self.a.to_vec())


class MatrixInputAnswerIn(BaseModel):
    kind: Literal["matrix_input"]
    values: list[list[float]]

    def to_answer(self) -> SubmitAnswer:
        return MatrixInputAnswer.of(self.values)


AnswerIn = Annotated[
    Union[
        NumericAnswerIn,
        SingleChoiceAnswerIn,
        MultiChoiceAnswerIn,
        VectorDragTargetAnswerIn,
        VectorDragDotAnswerIn,
        MatrixInputAnswerIn,
    ],
    Field(discriminator="kind"),
]


class PracticeExerciseResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exercise: dict[str, Any]
    key: str
    session_id: str | None = Field(default=None, alias="sessionId")


class PracticeValidateRequest(BaseModel):
    key: str = Field(min_length=1)
    answer: AnswerIn | None = None
    reveal: bool = False


class MissedQuestionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    instance_id: str = Field(alias="instanceId")
    title: str | None = None
    prompt: str | None = None
    your_answer: Any = Field(default=None, alias="yourAnswer")
    expected: Any = None


class SessionScoreOut(BaseModel):
    correct: int
    total: int
    missed: list[MissedQuestionOut]


class PracticeValidateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    expected: dict[str, Any] | None = None
    explanation: str
    session_complete: bool = Field(alias="sessionComplete")
    summary: SessionScoreOut | None = None


class PracticeSectionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    slug: str
    title: str
    description: str | None = None
    topics: list[str]
    sort_order: int = Field(alias="sortOrder")


class SectionRefOut(BaseModel):
    slug: str
    title: str


class PracticeSessionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    section: SectionRefOut | None = None
    difficulty: str
    status: SessionStatus
    target_count: int = Field(alias="targetCount")
    total: int
    correct: int
    started_at: datetime = Field(alias="startedAt")
    completed_at: datetime | None = Field(default=None, alias="completedAt")


class PracticeSessionSummaryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session: PracticeSessionOut
    score_pct: int = Field(alias="scorePct")
    missed: list[MissedQuestionOut]


class PracticeHistoryItemOut(PracticeSessionOut):
    missed: list[MissedQuestionOut]


class PracticeHistoryResponse(BaseModel):
    sessions: list[PracticeHistoryItemOut]
