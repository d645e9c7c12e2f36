from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ExerciseKind(str, Enum):
    NUMERIC = "numeric"
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    VECTOR_DRAG_TARGET = "vector_drag_target"
    VECTOR_DRAG_DOT = "vector_drag_dot"
    MATRIX_INPUT = "matrix_input"


@dataclass(frozen=True, slots=True)
class Vec3:
    x: float
    y: float
    z: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Vec3":
        return cls(x=float(data["x"]), y=float(data["y"]), z=float(data.get("z") or 0.0))


@dataclass(frozen=True, slots=True)
class ChoiceOption:
    id: str
    text: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "text": self.text}


def _matrix_tuple(values: Sequence[Sequence[float]]) -> tuple[tuple[float, ...], ...]:
    return tuple(tuple(float(cell) for cell in row) for row in values)


# ---------------------------------------------------------------------------
# Public exercises
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class ExerciseBase:
    kind: ClassVar[ExerciseKind]

    id: str
    topic: str
    difficulty: Difficulty
    title: str
    prompt: str
    hint: str | None = None

    def _kind_fields(self) -> dict[str, Any]:
        return {}

    def to_public(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "topic": self.topic,
            "difficulty": self.difficulty.value,
            "kind": self.kind.value,
            "title": self.title,
            "prompt": self.prompt,
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        payload.update(self._kind_fields())
        return payload


@dataclass(frozen=True, slots=True, kw_only=True)
class NumericExercise(ExerciseBase):
    kind: ClassVar[ExerciseKind] = ExerciseKind.NUMERIC


@dataclass(frozen=True, slots=True, kw_only=True)
class SingleChoiceExercise(ExerciseBase):
    kind: ClassVar[ExerciseKind] = ExerciseKind.SINGLE_CHOICE

    options: tuple[ChoiceOption, ...]

    def _kind_fields(self) -> dict[str, Any]:
        return {"options": [option.to_dict() for option in self.options]}


@dataclass(frozen=True, slots=True, kw_only=True)
class MultiChoiceExercise(ExerciseBase):
    kind: ClassVar[ExerciseKind] = ExerciseKind.MULTI_CHOICE

    options: tuple[ChoiceOption, ...]

    def _kind_fields(self) -> dict[str, Any]:
        return {"options": [option.to_dict() for option in self.options]}


@dataclass(frozen=True, slots=True, kw_only=True)
class VectorDragTargetExercise(ExerciseBase):
    kind: ClassVar[ExerciseKind] = ExerciseKind.VECTOR_DRAG_TARGET

    initial_a: Vec3
    initial_b: Vec3 | None = None
    lock_b: bool
    tolerance: float

    def _kind_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "initialA": self.initial_a.to_dict(),
            "lockB": self.lock_b,
            "tolerance": self.tolerance,
        }
        if self.initial_b is not None:
            fields["initialB"] = self.initial_b.to_dict()
        return fields


@dataclass(frozen=True, slots=True, kw_only=True)
class VectorDragDotExercise(ExerciseBase):
    kind: ClassVar[ExerciseKind] = ExerciseKind.VECTOR_DRAG_DOT

    initial_a: Vec3
    b: Vec3
    tolerance: float

    def _kind_fields(self) -> dict[str, Any]:
        return {"initialA": self.initial_a.to_dict(), "b": self.b.to_dict(), "tolerance": self.tolerance}


@dataclass(frozen=True, slots=True, kw_only=True)
class MatrixInputExercise(ExerciseBase):
    kind: ClassVar[ExerciseKind] = ExerciseKind.MATRIX_INPUT

    rows: int
    cols: int
    tolerance: float
    step: float | None = None
    integer_only: bool | None = None

    def _kind_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"rows": self.rows, "cols": self.cols, "tolerance": self.tolerance}
        if self.step is not None:
            fields["step"] = self.step
        if self.integer_only is not None:
            fields["integerOnly"] = self.integer_only
        return fields


Exercise = Union[
    NumericExercise,
    SingleChoiceExercise,
    MultiChoiceExercise,
    VectorDragTargetExercise,
    VectorDragDotExercise,
    MatrixInputExercise,
]


# ---------------------------------------------------------------------------
# Secret expected payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NumericExpected:
    kind: ClassVar[ExerciseKind] = ExerciseKind.NUMERIC

    value: float
    tolerance: float

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value, "tolerance": self.tolerance}


@dataclass(frozen=True, slots=True)
class SingleChoiceExpected:
    kind: ClassVar[ExerciseKind] = ExerciseKind.SINGLE_CHOICE

    option_id: str

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "optionId": self.option_id}


@dataclass(frozen=True, slots=True)
class MultiChoiceExpected:
    kind: ClassVar[ExerciseKind] = ExerciseKind.MULTI_CHOICE

    option_ids: tuple[str, ...]

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "optionIds": list(self.option_ids)}


@dataclass(frozen=True, slots=True)
class VectorDragTargetExpected:
    kind: ClassVar[ExerciseKind] = ExerciseKind.VECTOR_DRAG_TARGET

    target_a: Vec3
    tolerance: float
    lock_b: bool

    def to_payload(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "targetA": self.target_a.to_dict(),
            "tolerance": self.tolerance,
            "lockB": self.lock_b,
        }


@dataclass(frozen=True, slots=True)
class VectorDragDotExpected:
    kind: ClassVar[ExerciseKind] = ExerciseKind.VECTOR_DRAG_DOT

    b: Vec3
    target_dot: float
    tolerance: float
    min_mag: float = 0.0

    def to_payload(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "b": self.b.to_dict(),
            "targetDot": self.target_dot,
            "tolerance": self.tolerance,
            "minMag": self.min_mag,
        }


@dataclass(frozen=True, slots=True)
class MatrixInputExpected:
    kind: ClassVar[ExerciseKind] = ExerciseKind.MATRIX_INPUT

    values: tuple[tuple[float, ...], ...]
    tolerance: float

    def to_payload(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "values": [list(row) for row in self.values],
            "tolerance": self.tolerance,
        }

    @property
    def shape(self) -> tuple[int, int]:
        return len(self.values), len(self.values[0]) if self.values else 0


Expected = Union[
    NumericExpected,
    SingleChoiceExpected,
    MultiChoiceExpected,
    VectorDragTargetExpected,
    VectorDragDotExpected,
    MatrixInputExpected,
]


def matrix_expected(values: Sequence[Sequence[float]], tolerance: float) -> MatrixInputExpected:
    return MatrixInputExpected(values=_matrix_tuple(values), tolerance=tolerance)


def expected_from_payload(payload: Mapping[str, Any]) -> Expected:
    """Rebuild an ``Expected`` from its stored JSON form."""
    kind = ExerciseKind(payload["kind"])
    if kind == ExerciseKind.NUMERIC:
        return NumericExpected(value=float(payload["value"]), tolerance=float(payload.get("tolerance") or 0.0))
    if kind == ExerciseKind.SINGLE_CHOICE:
        return SingleChoiceExpected(option_id=str(payload["optionId"]))
    if kind == ExerciseKind.MULTI_CHOICE:
        return MultiChoiceExpected(option_ids=tuple(str(item) for item in payload["optionIds"]))
    if kind == ExerciseKind.VECTOR_DRAG_TARGET:
        return VectorDragTargetExpected(
            target_a=Vec3.from_mapping(payload["targetA"]),
            tolerance=float(payload["tolerance"]),
            lock_b=bool(payload.get("lockB", True)),
        )
    if kind == ExerciseKind.VECTOR_DRAG_DOT:
        return VectorDragDotExpected(
            b=Vec3.from_mapping(payload["b"]),
            target_dot=float(payload["targetDot"]),
            tolerance=float(payload["tolerance"]),
            min_mag=float(payload.get("minMag") or 0.0),
        )
    return matrix_expected(payload["values"], float(payload.get("tolerance") or 0.0))


# ---------------------------------------------------------------------------
# Submitted answers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NumericAnswer:
    kind: ClassVar[ExerciseKind] = ExerciseKind.NUMERIC

    value: float

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value}


@dataclass(frozen=True, slots=True)
class SingleChoiceAnswer:
    kind: ClassVar[ExerciseKind] = ExerciseKind.SINGLE_CHOICE

    option_id: str

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "optionId": self.option_id}


@dataclass(frozen=True, slots=True)
class MultiChoiceAnswer:
    kind: ClassVar[ExerciseKind] = ExerciseKind.MULTI_CHOICE

    option_ids: tuple[str, ...]

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "optionIds": list(self.option_ids)}


@dataclass(frozen=True, slots=True)
class VectorDragTargetAnswer:
    kind: ClassVar[ExerciseKind] = ExerciseKind.VECTOR_DRAG_TARGET

    a: Vec3
    b: Vec3 | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind.value, "a": self.a.to_dict()}
        if self.b is not None:
            payload["b"] = self.b.to_dict()
        return payload


@dataclass(frozen=True, slots=True)
class VectorDragDotAnswer:
    kind: ClassVar[ExerciseKind] = ExerciseKind.VECTOR_DRAG_DOT

    a: Vec3

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "a": self.a.to_dict()}


@dataclass(frozen=True, slots=True)
class MatrixInputAnswer:
    kind: ClassVar[ExerciseKind] = ExerciseKind.MATRIX_INPUT

    values: tuple[tuple[float, ...], ...]

    @classmethod
    def of(cls, values: Sequence[Sequence[float]]) -> "MatrixInputAnswer":
        return cls(values=_matrix_tuple(values))

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "values": [list(row) for row in self.values]}


SubmitAnswer = Union[
    NumericAnswer,
    SingleChoiceAnswer,
    MultiChoiceAnswer,
    VectorDragTargetAnswer,
    VectorDragDotAnswer,
    MatrixInputAnswer,
]


@dataclass(frozen=True, slots=True)
class GenOut:
    exercise: Exercise
    expected: Expected
    archetype: str


@dataclass(frozen=True, slots=True)
class GenOptions:
    """Caller overrides for a single generation.

    ``archetype`` pins the sub-template, ``variant`` selects a matrices-part-1
    slug and ``params`` fixes named inputs (``a``, ``b``, ``matrix``...) that a
    generator would otherwise draw.
    """

    archetype: str | None = None
    variant: str | None = None
    params: Mapping[str, Any] = field(default_factory=dict)

    def param(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)
