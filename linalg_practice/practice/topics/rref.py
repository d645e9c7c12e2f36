from __future__ import annotations

from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import choices, pick_archetype, shuffled_choices
from linalg_practice.practice.types import (
    Difficulty,
    GenOptions,
    GenOut,
    MultiChoiceExercise,
    MultiChoiceExpected,
    SingleChoiceExercise,
    SingleChoiceExpected,
)

TOPIC = "rref"

_RREF = "[[1, 0, 2 | 3], [0, 1, -1 | 4]]"
_NOT_RREF = (
    "[[1, 2, 0 | 3], [0, 1, -1 | 4]]",
    "[[1, 0, 2 | 3], [0, 2, -2 | 8]]",
    "[[0, 1, -1 | 4], [1, 0, 2 | 3]]",
)


def generate_rref(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    archetype = pick_archetype(rng, options, [("is_rref", 4), ("valid_ops", 3)])

    if archetype == "valid_ops":
        exercise = MultiChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Elementary row operations",
            prompt="Select ALL operations that are valid elementary row operations.",
            options=choices(
                ("swap", "Swap two rows"),
                ("scale", "Multiply a row by a nonzero constant"),
                ("add", "Replace a row by (row + k·another row)"),
                ("square", "Square every entry in a row"),
            ),
        )
        return GenOut(
            exercise=exercise,
            expected=MultiChoiceExpected(option_ids=("swap", "scale", "add")),
            archetype=archetype,
        )

    option_list, correct_id = shuffled_choices(rng, _RREF, _NOT_RREF)
    exercise = SingleChoiceExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Recognize RREF",
        prompt="Which augmented matrix is in RREF?",
        options=option_list,
    )
    return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=correct_id), archetype=archetype)
