from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from linalg_practice.practice.formatting import fmt_number
from linalg_practice.practice.numeric import ZERO_EPSILON, distance_squared, dot
from linalg_practice.practice.types import (
    ExerciseKind,
    Expected,
    MatrixInputAnswer,
    MatrixInputExpected,
    MultiChoiceAnswer,
    MultiChoiceExpected,
    NumericAnswer,
    NumericExpected,
    SingleChoiceAnswer,
    SingleChoiceExpected,
    SubmitAnswer,
    Vec3,
    VectorDragDotAnswer,
    VectorDragDotExpected,
    VectorDragTargetAnswer,
    VectorDragTargetExpected,
)


class ValidationStatus(str, Enum):
    GRADED = "graded"
    REVEALED = "revealed"
    NO_ANSWER = "no_answer"
    TYPE_MISMATCH = "type_mismatch"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    ok: bool
    expected: dict[str, Any] | None
    explanation: str
    status: ValidationStatus


def _finite(*values: float) -> bool:
    return all(math.isfinite(value) for value in values)


def solution_for_dot(b: Vec3, target_dot: float, min_mag: float) -> Vec3:
    """One vector ``a`` with ``a · b == target_dot`` and ``|a| >= min_mag``."""
    b2 = b.x * b.x + b.y * b.y + b.z * b.z
    if not math.isfinite(b2) or b2 < ZERO_EPSILON:
        return Vec3(min_mag, 0.0, 0.0)

    k = target_dot / b2
    ax, ay, az = k * b.x, k * b.y, k * b.z

    if abs(b.x) + abs(b.y) > 1e-6:
        px, py, pz = -b.y, b.x, 0.0
    else:
        px, py, pz = 1.0, 0.0, 0.0
    length = math.sqrt(px * px + py * py + pz * pz) or 1.0
    px, py, pz = px / length, py / length, pz / length

    # Moving along a direction perpendicular to b leaves a · b unchanged.
    parallel2 = ax * ax + ay * ay + az * az
    need = math.sqrt(max(0.0, min_mag * min_mag - parallel2))
    return Vec3(ax + px * need, ay + py * need, az + pz * need)


def _reveal(expected: Expected) -> ValidationResult:
    payload = expected.to_payload()
    explanation = "Revealed."
    if isinstance(expected, VectorDragDotExpected):
        solution = solution_for_dot(expected.b, expected.target_dot, expected.min_mag)
        payload["solutionA"] = solution.to_dict()
        explanation = f"One valid answer is shown (a · b = {fmt_number(expected.target_dot)})."
    elif isinstance(expected, VectorDragTargetExpected):
        payload["solutionA"] = expected.target_a.to_dict()
        explanation = f"Solution shown. Drag a to ({fmt_number(expected.target_a.x)}, {fmt_number(expected.target_a.y)})."
    return ValidationResult(ok=False, expected=payload, explanation=explanation, status=ValidationStatus.REVEALED)


def _grade(expected: Expected, answer: SubmitAnswer) -> tuple[bool, str]:
    if isinstance(expected, NumericExpected) and isinstance(answer, NumericAnswer):
        value = float(answer.value)
        ok = _finite(value, expected.value) and abs(value - expected.value) <= expected.tolerance
        if ok:
            return True, "Correct."
        suffix = f" ± {fmt_number(expected.tolerance)}" if expected.tolerance else ""
        return False, f"Expected {fmt_number(expected.value)}{suffix}."

    if isinstance(expected, SingleChoiceExpected) and isinstance(answer, SingleChoiceAnswer):
        ok = answer.option_id == expected.option_id
        return ok, "Correct choice." if ok else "Not quite, review the concept."

    if isinstance(expected, MultiChoiceExpected) and isinstance(answer, MultiChoiceAnswer):
        ok = set(answer.option_ids) == set(expected.option_ids)
        return ok, "Correct." if ok else "Not quite, check which options apply."

    if isinstance(expected, VectorDragTargetExpected) and isinstance(answer, VectorDragTargetAnswer):
        a = answer.a
        ok = _finite(a.x, a.y, a.z) and distance_squared(a, expected.target_a) <= expected.tolerance**2
        return ok, "Nice drag accuracy." if ok else "Get closer to the target."

    if isinstance(expected, VectorDragDotExpected) and isinstance(answer, VectorDragDotAnswer):
        a = answer.a
        current = dot(a, expected.b)
        magnitude = math.sqrt(a.x * a.x + a.y * a.y + a.z * a.z)
        if not _finite(current, magnitude) or magnitude + ZERO_EPSILON < expected.min_mag:
            return False, f"a cannot be the zero vector (|a| must be ≥ {fmt_number(expected.min_mag)})."
        if abs(current - expected.target_dot) <= expected.tolerance:
            return True, "Correct."
        return False, f"Your a · b = {current:.2f}. Aim for the target within ± {fmt_number(expected.tolerance)}."

    if isinstance(expected, MatrixInputExpected) and isinstance(answer, MatrixInputAnswer):
        rows = answer.values
        if len(rows) != len(expected.values) or any(
            len(row) != len(want) for row, want in zip(rows, expected.values)
        ):
            return False, "Matrix shape does not match."
        ok = all(
            _finite(got) and abs(got - want) <= expected.tolerance
            for row, want_row in zip(rows, expected.values)
            for got, want in zip(row, want_row)
        )
        return ok, "Correct." if ok else "Some entries are incorrect."

    return False, "Answer type mismatch."


def validate_answer(
    kind: ExerciseKind,
    expected: Expected,
    answer: SubmitAnswer | None,
    reveal: bool = False,
) -> ValidationResult:
    """Grade ``answer`` against the secret ``expected`` payload.

    Never raises. A reveal always returns ``ok=False`` with the expected
    payload, whatever answer came with it.
    """
    if reveal:
        return _reveal(expected)
    if answer is None:
        return ValidationResult(
            ok=False, expected=None, explanation="No answer submitted.", status=ValidationStatus.NO_ANSWER
        )
    if answer.kind != kind or expected.kind != kind:
        return ValidationResult(
            ok=False, expected=None, explanation="Answer type mismatch.", status=ValidationStatus.TYPE_MISMATCH
        )

    ok, explanation = _grade(expected, answer)
    return ValidationResult(
        ok=ok,
        expected=expected.to_payload(),
        explanation=explanation,
        status=ValidationStatus.GRADED,
    )
