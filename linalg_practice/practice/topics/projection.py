from __future__ import annotations

from linalg_practice.practice.formatting import fmt_vec2
from linalg_practice.practice.numeric import ZERO_EPSILON, by_difficulty, classify_sign, dot, magnitude_2d, non_zero_vec, round_to
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import choices, param, pick_archetype
from linalg_practice.practice.types import (
    Difficulty,
    GenOptions,
    GenOut,
    NumericExercise,
    NumericExpected,
    SingleChoiceExercise,
    SingleChoiceExpected,
    Vec3,
)

TOPIC = "projection"


def generate_projection(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(
        rng,
        options,
        [
            ("proj_numeric", 6),
            ("proj_concept", 5 if difficulty == Difficulty.EASY else 3),
            ("proj_sign", 5 if difficulty == Difficulty.HARD else 2),
        ],
    )

    a: Vec3 = param(options, "a", lambda: non_zero_vec(rng, difficulty))
    b: Vec3 = param(options, "b", lambda: non_zero_vec(rng, difficulty))
    b_mag = magnitude_2d(b)
    scalar_projection = dot(a, b) / b_mag if b_mag > ZERO_EPSILON else 0.0

    if archetype == "proj_concept":
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Projection concept",
            prompt="Which statement is always true?",
            options=choices(
                ("parallel", "proj_b(a) is parallel to b"),
                ("perp", "proj_b(a) is always perpendicular to b"),
                ("sameLen", "proj_b(a) always has length |a|"),
                ("undef", "proj_b(a) is undefined if b ≠ 0"),
            ),
        )
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id="parallel"), archetype=archetype)

    if archetype == "proj_sign":
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Projection sign",
            prompt=(
                f"Consider the scalar projection of a onto b for a={fmt_vec2(a)}, b={fmt_vec2(b)}. "
                "What is the sign?"
            ),
            options=choices(
                ("positive", "Positive"),
                ("zero", "Zero"),
                ("negative", "Negative"),
                ("depends", "Depends on |a|, cannot be determined"),
            ),
        )
        return GenOut(
            exercise=exercise,
            expected=SingleChoiceExpected(option_id=classify_sign(scalar_projection)),
            archetype=archetype,
        )

    decimals = 1 if difficulty == Difficulty.EASY else 2
    exercise = NumericExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Scalar projection (tricky)" if difficulty == Difficulty.HARD else "Scalar projection",
        prompt=(
            f"Compute the scalar projection of a onto b for a={fmt_vec2(a)}, b={fmt_vec2(b)}. "
            f"Round to {decimals} decimals."
        ),
        hint="scalar proj = (a·b)/|b|" if difficulty == Difficulty.EASY else None,
    )
    return GenOut(
        exercise=exercise,
        expected=NumericExpected(
            value=round_to(scalar_projection, decimals),
            tolerance=by_difficulty(difficulty, 0.2, 0.05, 0.03),
        ),
        archetype=archetype,
    )
