from __future__ import annotations

from linalg_practice.practice.formatting import display_math
from linalg_practice.practice.numeric import rand_nonzero_int
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import choices, pick_archetype
from linalg_practice.practice.topics.linear_systems import linear_equation
from linalg_practice.practice.types import Difficulty, GenOptions, GenOut, SingleChoiceExercise, SingleChoiceExpected

TOPIC = "solution_types"

_SOLUTION_CHOICES = choices(
    ("unique", "Unique solution"),
    ("infinite", "Infinitely many solutions"),
    ("none", "No solution"),
)

_RREF_CASES: tuple[tuple[tuple[tuple[int, int, int], tuple[int, int, int]], str], ...] = (
    (((1, 0, 2), (0, 1, -1)), "unique"),
    (((1, 2, 3), (0, 0, 0)), "infinite"),
    (((1, 2, 3), (0, 0, 5)), "none"),
)


def _augmented_latex(rows: tuple[tuple[int, int, int], tuple[int, int, int]]) -> str:
    body = "\\\\\n".join(f"{r[0]} & {r[1]} & {r[2]}" for r in rows)
    return display_math("\\left[\\begin{array}{cc|c}\n" + body + "\n\\end{array}\\right]")


def _system_latex(a: int, b: int, c: int, d: int, e: int, f: int) -> str:
    body = "\\\\\n".join([linear_equation(a, b, c), linear_equation(d, e, f)])
    return display_math("\\begin{aligned}\n" + body + "\n\\end{aligned}")


def generate_solution_types(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(rng, options, [("from_rref", 5), ("from_equations", 5)])

    if archetype == "from_rref":
        rows, answer = rng.choice(_RREF_CASES)
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Classify by RREF",
            prompt=(
                f"Given the RREF augmented matrix:\n\n{_augmented_latex(rows)}\n\n"
                "How many solutions does the system have?"
            ),
            options=_SOLUTION_CHOICES,
        )
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=answer), archetype=archetype)

    # Second equation is k times the first, then nudged into the requested case.
    answer = rng.choice(("unique", "infinite", "none"))
    a = rand_nonzero_int(rng, -5, 5)
    b = rand_nonzero_int(rng, -5, 5)
    c = rng.randint(-8, 8)
    k = rng.choice((2, -2, 3, -3))
    d, e, f = k * a, k * b, k * c

    if answer == "none":
        f += rng.choice((1, 2, -1, -2))
    elif answer == "unique":
        # det becomes a * tweak, never zero.
        e += rng.choice((1, -1, 2, -2))

    exercise = SingleChoiceExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Solution type from equations",
        prompt=f"Classify the system:\n\n{_system_latex(a, b, c, d, e, f)}",
        options=_SOLUTION_CHOICES,
    )
    return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=answer), archetype=archetype)
