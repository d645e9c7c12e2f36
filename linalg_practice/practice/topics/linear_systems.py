from __future__ import annotations

from dataclasses import dataclass

from linalg_practice.practice.formatting import fmt_vec2
from linalg_practice.practice.numeric import MAX_DRAW_ATTEMPTS, by_difficulty, rand_nonzero_int, unique
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import choices, pick_archetype, shuffled_choices
from linalg_practice.practice.types import (
    Difficulty,
    GenOptions,
    GenOut,
    NumericExercise,
    NumericExpected,
    SingleChoiceExercise,
    SingleChoiceExpected,
    Vec3,
    VectorDragTargetExercise,
    VectorDragTargetExpected,
)

TOPIC = "linear_systems"
MIN_ABS_DET = 2


@dataclass(frozen=True, slots=True)
class IntegerSystem:
    """``a1 x + b1 y = c1``, ``a2 x + b2 y = c2`` with integer solution ``(x, y)``."""

    a1: int
    b1: int
    a2: int
    b2: int
    x: int
    y: int

    @property
    def det(self) -> int:
        return self.a1 * self.b2 - self.a2 * self.b1

    @property
    def c1(self) -> int:
        return self.a1 * self.x + self.b1 * self.y

    @property
    def c2(self) -> int:
        return self.a2 * self.x + self.b2 * self.y

    def satisfied_by(self, x: float, y: float) -> bool:
        return self.a1 * x + self.b1 * y == self.c1 and self.a2 * x + self.b2 * y == self.c2

    def text(self) -> str:
        return f"{linear_equation(self.a1, self.b1, self.c1)}\n{linear_equation(self.a2, self.b2, self.c2)}"


def linear_equation(a: int, b: int, c: int) -> str:
    sign = "-" if b < 0 else "+"
    return f"{a}x {sign} {abs(b)}y = {c}"


def draw_integer_system(rng: SeededRng) -> IntegerSystem:
    """Draw coefficients until ``|det| >= 2``; the identity system is the fallback."""
    for _ in range(MAX_DRAW_ATTEMPTS):
        x = rng.randint(-4, 4)
        y = rng.randint(-4, 4)
        system = IntegerSystem(
            a1=rand_nonzero_int(rng, -6, 6),
            b1=rand_nonzero_int(rng, -6, 6),
            a2=rand_nonzero_int(rng, -6, 6),
            b2=rand_nonzero_int(rng, -6, 6),
            x=x,
            y=y,
        )
        if abs(system.det) >= MIN_ABS_DET:
            return system
    return IntegerSystem(a1=1, b1=0, a2=0, b2=1, x=rng.randint(-4, 4), y=rng.randint(-4, 4))


def nearby_decoys(x: int, y: int, count: int = 3) -> list[Vec3]:
    """Off-by-one shifts of the solution, the usual arithmetic slips."""
    shifted = unique([(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1), (x + 2, y - 1), (x - 2, y + 1)])
    return [Vec3(px, py) for px, py in shifted if (px, py) != (x, y)][:count]


def generate_linear_systems(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(
        rng,
        options,
        [
            ("drag_solve", 5),
            ("which_point", 3),
            ("check_candidate", 2),
            ("word_problem", 3 if difficulty == Difficulty.HARD else 2),
        ],
    )
    system = draw_integer_system(rng)
    solution = Vec3(system.x, system.y)

    if archetype == "drag_solve":
        tolerance = by_difficulty(difficulty, 0.5, 0.35, 0.25)
        exercise = VectorDragTargetExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Solve the system (drag)",
            prompt=f"Find (x, y) that satisfies:\n{system.text()}\nDrag point a to the solution.",
            initial_a=Vec3(0, 0),
            initial_b=Vec3(0, 0),
            lock_b=True,
            tolerance=tolerance,
        )
        return GenOut(
            exercise=exercise,
            expected=VectorDragTargetExpected(target_a=solution, tolerance=tolerance, lock_b=True),
            archetype=archetype,
        )

    decoys = nearby_decoys(system.x, system.y)

    if archetype == "which_point":
        option_list, correct = shuffled_choices(rng, fmt_vec2(solution), [fmt_vec2(point) for point in decoys])
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Which point solves the system?",
            prompt=f"Which point satisfies BOTH equations?\n{system.text()}",
            options=option_list,
        )
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=correct), archetype=archetype)

    if archetype == "check_candidate":
        is_solution = rng.random() < 0.5
        candidate = solution if is_solution else rng.choice(decoys)
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Check a candidate solution",
            prompt=f"Does (x, y) = {fmt_vec2(candidate)} satisfy:\n{system.text()}?",
            options=choices(
                ("true", "Yes, it satisfies both equations"),
                ("false", "No, it fails at least one equation"),
            ),
        )
        return GenOut(
            exercise=exercise,
            expected=SingleChoiceExpected(option_id="true" if is_solution else "false"),
            archetype=archetype,
        )

    adult_price = max(1, abs(system.a1))
    child_price = max(1, abs(system.b1))
    if child_price == adult_price:
        # Equal prices make the adult count undetermined.
        child_price = adult_price + 1
    adults = abs(system.x) + 1
    children = abs(system.y) + 1
    total_cost = adult_price * adults + child_price * children
    exercise = NumericExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Word problem (system)",
        prompt=(
            f"At an event, adult tickets cost ${adult_price} and child tickets cost ${child_price}.\n"
            f"A group buys {adults + children} tickets total for ${total_cost}.\n"
            "How many adult tickets did they buy?"
        ),
        hint="Let a = adults, c = children. Use a + c = total tickets and adult*a + child*c = total cost.",
    )
    return GenOut(exercise=exercise, expected=NumericExpected(value=adults, tolerance=0.0), archetype=archetype)
