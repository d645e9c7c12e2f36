from __future__ import annotations

from linalg_practice.practice.formatting import fmt_2x2
from linalg_practice.practice.numeric import by_difficulty, make_2x2
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

TOPIC = "matrix_ops"

_LEFT_SHAPES = ((2, 3), (3, 2), (2, 2), (3, 3))
_RIGHT_SHAPES = ((2, 3), (3, 2), (2, 2), (3, 1))


def generate_matrix_ops(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(
        rng,
        options,
        [
            ("entry_AB", 4),
            ("dims_defined", 3),
            ("entry_AplusB", 2),
            ("entry_Av", 3 if difficulty == Difficulty.HARD else 2),
        ],
    )
    value_range = by_difficulty(difficulty, 3, 6, 9)

    if archetype == "dims_defined":
        a_rows, a_cols = rng.choice(_LEFT_SHAPES)
        b_rows, b_cols = rng.choice(_RIGHT_SHAPES)
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Is AB defined?",
            prompt=f"A is {a_rows}×{a_cols} and B is {b_rows}×{b_cols}. Is the product AB defined?",
            options=yes_no(),
        )
        return GenOut(
            exercise=exercise,
            expected=SingleChoiceExpected(option_id="yes" if a_cols == b_rows else "no"),
            archetype=archetype,
        )

    if archetype == "entry_AplusB":
        a = param(options, "a", lambda: make_2x2(rng, value_range))
        b = param(options, "b", lambda: make_2x2(rng, value_range))
        exercise = NumericExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Matrix addition entry",
            prompt=f"Let A={fmt_2x2(a)} and B={fmt_2x2(b)}.\nCompute (A + B)₂₁ (row 2, col 1).",
            hint="Addition is entrywise.",
        )
        return GenOut(
            exercise=exercise,
            expected=NumericExpected(value=a[1][0] + b[1][0], tolerance=0.0),
            archetype=archetype,
        )

    if archetype == "entry_Av":
        a = param(options, "a", lambda: make_2x2(rng, value_range))
        vx = rng.randint(-value_range, value_range)
        vy = rng.randint(-value_range, value_range)
        exercise = NumericExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Matrix–vector multiply",
            prompt=f"Let A={fmt_2x2(a)} and v=({vx}, {vy}).\nCompute the first component of Av.",
            hint="First component = row1(A) · v",
        )
        return GenOut(
            exercise=exercise,
            expected=NumericExpected(value=a[0][0] * vx + a[0][1] * vy, tolerance=0.0),
            archetype=archetype,
        )

    a = param(options, "a", lambda: make_2x2(rng, value_range))
    b = param(options, "b", lambda: make_2x2(rng, value_range))
    exercise = NumericExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Matrix multiplication entry",
        prompt=f"Let A={fmt_2x2(a)} and B={fmt_2x2(b)}.\nCompute (AB)₁₁ (top-left entry).",
        hint="Top-left = row1(A) · col1(B).",
    )
    return GenOut(
        exercise=exercise,
        expected=NumericExpected(value=a[0][0] * b[0][0] + a[0][1] * b[1][0], tolerance=0.0),
        archetype=archetype,
    )
