from __future__ import annotations

from linalg_practice.practice.formatting import fmt_2x2
from linalg_practice.practice.numeric import (
    MAX_DRAW_ATTEMPTS,
    Matrix,
    by_difficulty,
    det2,
    inverse2,
    is_zero,
    make_2x2,
    round_to,
)
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import param, pick_archetype, yes_no
from linalg_practice.practice.types import (
    Difficulty,
    GenOptions,
    GenOut,
    NumericExercise,
    NumericExpected,
    SingleChoiceExercise,
    SingleChoiceExpected,
)

TOPIC = "matrix_inverse"

_IDENTITY: Matrix = [[1, 0], [0, 1]]


def draw_invertible_2x2(rng: SeededRng, value_range: int) -> Matrix:
    for _ in range(MAX_DRAW_ATTEMPTS):
        candidate = make_2x2(rng, value_range)
        if not is_zero(det2(candidate)):
            return candidate
    return [row[:] for row in _IDENTITY]


def generate_matrix_inverse(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(
        rng,
        options,
        [
            ("invertible_yesno", 4),
            ("det_numeric", 3),
            ("inv_entry", 3 if difficulty == Difficulty.HARD else 2),
        ],
    )
    value_range = by_difficulty(difficulty, 4, 6, 9)

    matrix: Matrix = param(options, "matrix", lambda: make_2x2(rng, value_range))
    if archetype == "inv_entry" and is_zero(det2(matrix)):
        matrix = draw_invertible_2x2(rng, value_range)
    det = det2(matrix)

    if archetype == "invertible_yesno":
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Invertible?",
            prompt=f"Let A={fmt_2x2(matrix)}. Is A invertible?",
            options=yes_no("Yes (det(A) ≠ 0)", "No (det(A) = 0)"),
        )
        return GenOut(
            exercise=exercise,
            expected=SingleChoiceExpected(option_id="no" if is_zero(det) else "yes"),
            archetype=archetype,
        )

    if archetype == "det_numeric":
        exercise = NumericExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Determinant of a 2×2",
            prompt=f"Compute det(A) for A={fmt_2x2(matrix)}.",
            hint="For [[a,b],[c,d]], det = ad - bc.",
        )
        return GenOut(exercise=exercise, expected=NumericExpected(value=det, tolerance=0.0), archetype=archetype)

    inverse = inverse2(matrix)
    if inverse is None:
        raise ValueError("inv_entry needs an invertible matrix")
    decimals = by_difficulty(difficulty, 2, 3, 4)
    exercise = NumericExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="One entry of the inverse",
        prompt=f"Let A={fmt_2x2(matrix)}.\nCompute (A⁻¹)₁₁. Round to {decimals} decimals.",
        hint="A⁻¹ = (1/det(A))·[[d,-b],[-c,a]]",
    )
    return GenOut(
        exercise=exercise,
        expected=NumericExpected(
            value=round_to(inverse[0][0], decimals),
            tolerance=by_difficulty(difficulty, 0.05, 0.02, 0.01),
        ),
        archetype=archetype,
    )
