from __future__ import annotations

import math

from linalg_practice.practice.formatting import fmt_vec2
from linalg_practice.practice.numeric import ZERO_EPSILON, by_difficulty, dot, is_zero, magnitude_2d, non_zero_vec, round_to
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

TOPIC = "angle"


def generate_angle(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(
        rng,
        options,
        [
            ("angle_numeric", 6),
            ("angle_classify", 6 if difficulty == Difficulty.EASY else 3),
            ("cos_numeric", 5 if difficulty == Difficulty.HARD else 2),
        ],
    )

    a: Vec3 = param(options, "a", lambda: non_zero_vec(rng, difficulty))
    b: Vec3 = param(options, "b", lambda: non_zero_vec(rng, difficulty))
    a_mag = magnitude_2d(a)
    b_mag = magnitude_2d(b)
    cos_exact = dot(a, b) / (a_mag * b_mag) if a_mag > ZERO_EPSILON and b_mag > ZERO_EPSILON else 1.0
    cos_clamped = max(-1.0, min(1.0, cos_exact))
    vectors = f"a={fmt_vec2(a)} and b={fmt_vec2(b)}"

    if archetype == "angle_classify":
        d = dot(a, b)
        if is_zero(d):
            correct = "right"
        else:
            correct = "acute" if d > 0 else "obtuse"
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Angle type",
            prompt=f"For {vectors}, classify the angle between them.",
            options=choices(
                ("acute", "Acute (< 90°)"),
                ("right", "Right (= 90°)"),
                ("obtuse", "Obtuse (> 90°)"),
                ("cannot", "Cannot be determined without magnitudes"),
            ),
        )
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=correct), archetype=archetype)

    if archetype == "cos_numeric":
        decimals = 3 if difficulty == Difficulty.HARD else 2
        tolerance = 0.02 if difficulty == Difficulty.HARD else 0.05
        exercise = NumericExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Cosine of angle",
            prompt=f"Compute cos(θ) between {vectors}. Round to {decimals} decimals.",
            hint="cos(θ) = (a·b)/(|a||b|)",
        )
        return GenOut(
            exercise=exercise,
            expected=NumericExpected(value=round_to(cos_clamped, decimals), tolerance=tolerance),
            archetype=archetype,
        )

    decimals = 0 if difficulty == Difficulty.EASY else 1
    degrees = math.degrees(math.acos(cos_clamped))
    exercise = NumericExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Angle between vectors",
        prompt=f"Compute the angle θ (degrees) between {vectors}. Round to {decimals} decimals.",
        hint="cos(θ) = (a·b)/(|a||b|)" if difficulty == Difficulty.EASY else None,
    )
    return GenOut(
        exercise=exercise,
        expected=NumericExpected(value=round_to(degrees, decimals), tolerance=by_difficulty(difficulty, 3.0, 1.5, 1.0)),
        archetype=archetype,
    )
