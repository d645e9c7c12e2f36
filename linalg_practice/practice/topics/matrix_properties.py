from __future__ import annotations

from linalg_practice.practice.formatting import fmt_2x2
from linalg_practice.practice.numeric import by_difficulty, make_2x2, matmul, transpose
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import choices, param, pick_archetype, shuffled_choices, yes_no
from linalg_practice.practice.types import (
    Difficulty,
    GenOptions,
    GenOut,
    MultiChoiceExercise,
    MultiChoiceExpected,
    NumericExercise,
    NumericExpected,
    SingleChoiceExercise,
    SingleChoiceExpected,
)

TOPIC = "matrix_properties"

# (id, statement, always true for square matrices of equal size)
_PROPERTY_POOL: tuple[tuple[str, str, bool], ...] = (
    ("assoc", "(AB)C = A(BC)", True),
    ("distrib", "A(B + C) = AB + AC", True),
    ("transpose_sum", "(A + B)ᵀ = Aᵀ + Bᵀ", True),
    ("transpose_twice", "(Aᵀ)ᵀ = A", True),
    ("identity", "AI = IA = A", True),
    ("commute", "AB = BA", False),
    ("transpose_product_same_order", "(AB)ᵀ = AᵀBᵀ", False),
    ("cancel", "AB = AC implies B = C", False),
    ("zero_product", "AB = 0 implies A = 0 or B = 0", False),
)


def generate_matrix_properties(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(
        rng,
        options,
        [
            ("transpose_product_rule", 3),
            ("commutativity", 3 if difficulty == Difficulty.EASY else 4),
            ("true_properties", 2 if difficulty == Difficulty.EASY else 4),
            ("inverse_product_rule", 2 if difficulty == Difficulty.EASY else 3),
            ("transpose_entry", 3),
        ],
    )
    value_range = by_difficulty(difficulty, 3, 5, 8)

    if archetype == "transpose_product_rule":
        option_list, correct_id = shuffled_choices(rng, "BᵀAᵀ", ["AᵀBᵀ", "AB", "BA"])
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Transpose of a product",
            prompt="For matrices A and B with AB defined, (AB)ᵀ equals:",
            options=option_list,
            hint="The order reverses.",
        )
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=correct_id), archetype=archetype)

    if archetype == "inverse_product_rule":
        option_list, correct_id = shuffled_choices(rng, "B⁻¹A⁻¹", ["A⁻¹B⁻¹", "A⁻¹ + B⁻¹", "BA"])
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Inverse of a product",
            prompt="A and B are invertible n×n matrices. (AB)⁻¹ equals:",
            options=option_list,
        )
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=correct_id), archetype=archetype)

    if archetype == "commutativity":
        a = param(options, "a", lambda: make_2x2(rng, value_range))
        b = param(options, "b", lambda: make_2x2(rng, value_range))
        commute = matmul(a, b) == matmul(b, a)
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Do they commute?",
            prompt=f"Let A={fmt_2x2(a)} and B={fmt_2x2(b)}. Is AB = BA?",
            options=yes_no(),
            hint="Compute both products; matrix multiplication is not commutative in general.",
        )
        return GenOut(
            exercise=exercise,
            expected=SingleChoiceExpected(option_id="yes" if commute else "no"),
            archetype=archetype,
        )

    if archetype == "true_properties":
        count = by_difficulty(difficulty, 4, 5, 6)
        picked = rng.shuffle(_PROPERTY_POOL)[:count]
        if not any(holds for _, _, holds in picked):
            picked[0] = _PROPERTY_POOL[0]
        exercise = MultiChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Which properties always hold?",
            prompt="A, B, C are n×n matrices and I is the identity. Select ALL statements that are always true.",
            options=choices(*((option_id, text) for option_id, text, _ in picked)),
        )
        return GenOut(
            exercise=exercise,
            expected=MultiChoiceExpected(option_ids=tuple(option_id for option_id, _, holds in picked if holds)),
            archetype=archetype,
        )

    a = param(options, "a", lambda: make_2x2(rng, value_range))
    b = param(options, "b", lambda: make_2x2(rng, value_range))
    row = rng.randint(0, 1)
    col = rng.randint(0, 1)
    value = transpose(matmul(a, b))[row][col]
    exercise = NumericExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Entry of (AB)ᵀ",
        prompt=(
            f"Let A={fmt_2x2(a)} and B={fmt_2x2(b)}.\n"
            f"Compute ((AB)ᵀ)_{row + 1}{col + 1} (row {row + 1}, col {col + 1})."
        ),
        hint="(AB)ᵀ = BᵀAᵀ, so ((AB)ᵀ)ᵢⱼ = (AB)ⱼᵢ.",
    )
    return GenOut(exercise=exercise, expected=NumericExpected(value=value, tolerance=0.0), archetype=archetype)
