from __future__ import annotations

from linalg_practice.practice.numeric import MAX_DRAW_ATTEMPTS, rand_nonzero_int
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import pick_archetype, shuffled_choices
from linalg_practice.practice.types import Difficulty, GenOptions, GenOut, SingleChoiceExercise, SingleChoiceExpected

TOPIC = "parametric"


def parametric_line(px: int, py: int, dx: int, dy: int) -> str:
    return f"x = {px} + ({dx})t,  y = {py} + ({dy})t"


def _direction(rng: SeededRng) -> tuple[int, int]:
    # |dx| != |dy| keeps the swapped-direction distractor off the true line.
    for _ in range(MAX_DRAW_ATTEMPTS):
        dx = rand_nonzero_int(rng, -4, 4)
        dy = rand_nonzero_int(rng, -4, 4)
        if abs(dx) != abs(dy):
            return dx, dy
    return 1, 2


def generate_parametric(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(rng, options, [("parametric_pattern", 1)])

    px = rng.randint(-4, 4)
    py = rng.randint(-4, 4)
    dx, dy = _direction(rng)

    correct = parametric_line(px, py, dx, dy)
    distractors = [
        parametric_line(px, py, dy, dx),
        parametric_line(px, py, dx, -dy),
        parametric_line(px + 1, py, dx, dy),
    ]
    option_list, correct_id = shuffled_choices(rng, correct, distractors)

    exercise = SingleChoiceExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Parametric form",
        prompt=(
            f"The solution set of a system is the line through ({px}, {py}) with direction ({dx}, {dy}).\n"
            "Which option is a valid parametric representation? (t is free)"
        ),
        options=option_list,
    )
    return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=correct_id), archetype=archetype)
