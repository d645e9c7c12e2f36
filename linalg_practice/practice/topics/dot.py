from __future__ import annotations

from linalg_practice.practice.formatting import fmt_number, fmt_vec2
from linalg_practice.practice.numeric import by_difficulty, classify_sign, dot, non_zero_vec, round_to, tolerance_for
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import choices, param, pick_archetype
from linalg_practice.practice.types import (
    Difficulty,
    ExerciseKind,
    GenOptions,
    GenOut,
    NumericExercise,
    NumericExpected,
    SingleChoiceExercise,
    SingleChoiceExpected,
    Vec3,
    VectorDragDotExercise,
    VectorDragDotExpected,
)

TOPIC = "dot"


def generate_dot(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(
        rng,
        options,
        [
            ("dot_classify", 5 if difficulty == Difficulty.EASY else 1),
            ("dot_numeric", 2 if difficulty == Difficulty.EASY else 6),
            ("dot_drag", 3),
            ("dot_word_work", 4 if difficulty == Difficulty.HARD else 2),
        ],
    )

    a: Vec3 = param(options, "a", lambda: non_zero_vec(rng, difficulty))
    b: Vec3 = param(options, "b", lambda: non_zero_vec(rng, difficulty))
    target = dot(a, b)

    if archetype == "dot_drag":
        tolerance = tolerance_for(difficulty, ExerciseKind.VECTOR_DRAG_DOT)
        goal = fmt_number(round_to(target, 2))
        exercise = VectorDragDotExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Drag: hit a dot target" if difficulty == Difficulty.HARD else "Drag to match dot",
            prompt=(
                f"Drag a so that a · b ≈ {goal} (watch the sign)."
                if difficulty == Difficulty.HARD
                else f"Drag a so that a · b ≈ {goal}."
            ),
            initial_a=Vec3(0, 0),
            b=b,
            tolerance=tolerance,
        )
        return GenOut(
            exercise=exercise,
            expected=VectorDragDotExpected(b=b, target_dot=target, tolerance=tolerance),
            archetype=archetype,
        )

    if archetype == "dot_classify":
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Dot product sign",
            prompt=f"For a={fmt_vec2(a)} and b={fmt_vec2(b)}, what is the sign of a · b?",
            options=choices(
                ("positive", "Positive (acute angle)"),
                ("zero", "Zero (perpendicular)"),
                ("negative", "Negative (obtuse angle)"),
                ("cannot", "Cannot be determined from given vectors"),
            ),
        )
        return GenOut(
            exercise=exercise,
            expected=SingleChoiceExpected(option_id=classify_sign(target)),
            archetype=archetype,
        )

    if archetype == "dot_word_work":
        force: Vec3 = param(options, "force", lambda: non_zero_vec(rng, difficulty))
        displacement: Vec3 = param(options, "displacement", lambda: non_zero_vec(rng, difficulty))
        decimals = by_difficulty(difficulty, 0, 1, 2)
        work = round_to(dot(force, displacement), decimals)
        tolerance = by_difficulty(difficulty, 0.5, 0.2, 0.05)
        rounding = f" Round to {decimals} decimal place(s)." if decimals else ""
        exercise = NumericExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Work (dot product)",
            prompt=(
                f"A force F={fmt_vec2(force)} N moves an object by displacement "
                f"d={fmt_vec2(displacement)} m. Compute W = F · d.{rounding}"
            ),
            hint="Work is a dot product: W = Fx·dx + Fy·dy",
        )
        return GenOut(
            exercise=exercise,
            expected=NumericExpected(value=work, tolerance=tolerance),
            archetype=archetype,
        )

    tolerance = tolerance_for(difficulty, ExerciseKind.NUMERIC)
    if difficulty == Difficulty.HARD:
        prompt = f"Compute a · b for a={fmt_vec2(a)} and b={fmt_vec2(b)}. (Be careful with negatives.)"
    else:
        prompt = f"Compute a · b for a={fmt_vec2(a)} and b={fmt_vec2(b)}."
    exercise = NumericExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Dot product (tricky)" if difficulty == Difficulty.HARD else "Dot product",
        prompt=prompt,
        hint="a · b = ax·bx + ay·by" if difficulty == Difficulty.EASY else None,
    )
    return GenOut(
        exercise=exercise,
        expected=NumericExpected(value=target, tolerance=tolerance),
        archetype=archetype,
    )
