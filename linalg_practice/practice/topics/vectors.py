from __future__ import annotations

from linalg_practice.practice.formatting import fmt_vec2
from linalg_practice.practice.numeric import non_zero_vec, tolerance_for
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import param, pick_archetype
from linalg_practice.practice.types import (
    Difficulty,
    ExerciseKind,
    GenOptions,
    GenOut,
    Vec3,
    VectorDragDotExercise,
    VectorDragDotExpected,
    VectorDragTargetExercise,
    VectorDragTargetExpected,
)

TOPIC = "vectors"

# The untouched zero vector satisfies a · b = 0, so perpendicular drags need a minimum length.
PERPENDICULAR_MIN_MAGNITUDE = 0.25


def generate_vectors(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(
        rng,
        options,
        [
            ("drag_target", 6),
            ("drag_perp", 5 if difficulty == Difficulty.HARD else 2),
        ],
    )

    if archetype == "drag_perp":
        b: Vec3 = param(options, "b", lambda: non_zero_vec(rng, difficulty))
        tolerance = tolerance_for(difficulty, ExerciseKind.VECTOR_DRAG_DOT)
        exercise = VectorDragDotExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Drag: make perpendicular",
            prompt=(
                "Drag a so that a · b ≈ 0 (perpendicular). Try to do it with a not too small."
                if difficulty == Difficulty.HARD
                else "Drag a so that a · b ≈ 0 (perpendicular)."
            ),
            initial_a=Vec3(0, 0),
            b=b,
            tolerance=tolerance,
        )
        return GenOut(
            exercise=exercise,
            expected=VectorDragDotExpected(
                b=b,
                target_dot=0.0,
                tolerance=tolerance,
                min_mag=PERPENDICULAR_MIN_MAGNITUDE,
            ),
            archetype=archetype,
        )

    target: Vec3 = param(options, "target", lambda: non_zero_vec(rng, difficulty))
    initial_b: Vec3 = param(options, "b", lambda: non_zero_vec(rng, difficulty))
    lock_b = difficulty != Difficulty.HARD
    tolerance = tolerance_for(difficulty, ExerciseKind.VECTOR_DRAG_TARGET)
    exercise = VectorDragTargetExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Drag to target (hard)" if difficulty == Difficulty.HARD else "Drag to target",
        prompt=(
            f"Drag a to land on {fmt_vec2(target)}. (Hard: tolerance is tight.)"
            if difficulty == Difficulty.HARD
            else f"Drag a to land on {fmt_vec2(target)} within tolerance."
        ),
        initial_a=Vec3(0, 0),
        initial_b=initial_b,
        lock_b=lock_b,
        tolerance=tolerance,
    )
    return GenOut(
        exercise=exercise,
        expected=VectorDragTargetExpected(target_a=target, tolerance=tolerance, lock_b=lock_b),
        archetype=archetype,
    )
