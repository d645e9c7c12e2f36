from __future__ import annotations

from linalg_practice.practice.numeric import rand_nonzero_int
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import pick_archetype, shuffled_choices
from linalg_practice.practice.topics.linear_systems import linear_equation
from linalg_practice.practice.types import Difficulty, GenOptions, GenOut, SingleChoiceExercise, SingleChoiceExpected

TOPIC = "augmented"


def augmented_text(row1: tuple[int, int, int], row2: tuple[int, int, int]) -> str:
    return f"[[{row1[0]}, {row1[1]} | {row1[2]}], [{row2[0]}, {row2[1]} | {row2[2]}]]"


def generate_augmented(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(rng, options, [("augmented_basic", 1)])

    a = rand_nonzero_int(rng, -5, 5)
    b = rand_nonzero_int(rng, -5, 5)
    d = rand_nonzero_int(rng, -5, 5)
    e = rand_nonzero_int(rng, -5, 5)
    x0 = rng.randint(-3, 3)
    y0 = rng.randint(-3, 3)
    c = a * x0 + b * y0
    f = d * x0 + e * y0

    correct = augmented_text((a, b, c), (d, e, f))
    distractors = [
        augmented_text((a, b, f), (d, e, c)),
        augmented_text((a, b, c), (e, d, f)),
        augmented_text((a, c, b), (d, f, e)),
    ]
    option_list, correct_id = shuffled_choices(rng, correct, distractors)

    exercise = SingleChoiceExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Build the augmented matrix",
        prompt=f"Convert the system to an augmented matrix:\n{linear_equation(a, b, c)}\n{linear_equation(d, e, f)}",
        options=option_list,
    )
    return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=correct_id), archetype=archetype)
