from __future__ import annotations

import math

from linalg_practice.practice.dispatcher import generate_exercise
from linalg_practice.practice.numeric import dot, tolerance_for
from linalg_practice.practice.types import (
    Difficulty,
    ExerciseKind,
    GenOptions,
    MatrixInputAnswer,
    MultiChoiceAnswer,
    MultiChoiceExpected,
    NumericAnswer,
    NumericExpected,
    SingleChoiceAnswer,
    SingleChoiceExpected,
    Vec3,
    VectorDragDotAnswer,
    VectorDragDotExpected,
    VectorDragTargetAnswer,
    VectorDragTargetExpected,
    expected_from_payload,
    matrix_expected,
)
from linalg_practice.practice.validator import ValidationStatus, solution_for_dot, validate_answer


def test_dot_numeric_with_fixed_vectors() -> None:
    generated = generate_exercise(
        "dot",
        "easy",
        seed="t1",
        options=GenOptions(archetype="dot_numeric", params={"a": Vec3(2, 3), "b": Vec3(-1, 4)}),
    )

    assert generated.archetype == "dot_numeric"
    assert generated.expected == NumericExpected(value=10, tolerance=tolerance_for(Difficulty.EASY, ExerciseKind.NUMERIC))
    result = validate_answer(ExerciseKind.NUMERIC, generated.expected, NumericAnswer(value=10))
    assert result.ok
    assert result.status == ValidationStatus.GRADED


def test_invertible_yes_no_for_known_matrix() -> None:
    generated = generate_exercise(
        "matrix_inverse",
        "easy",
        seed="inv",
        options=GenOptions(archetype="invertible_yesno", params={"matrix": [[1, 2], [3, 4]]}),
    )

    assert generated.expected == SingleChoiceExpected(option_id="yes")
    assert validate_answer(ExerciseKind.SINGLE_CHOICE, generated.expected, SingleChoiceAnswer(option_id="yes")).ok
    assert not validate_answer(ExerciseKind.SINGLE_CHOICE, generated.expected, SingleChoiceAnswer(option_id="no")).ok


def test_drag_target_within_tolerance() -> None:
    expected = VectorDragTargetExpected(target_a=Vec3(3, 1), tolerance=0.25, lock_b=True)

    assert validate_answer(ExerciseKind.VECTOR_DRAG_TARGET, expected, VectorDragTargetAnswer(a=Vec3(3.1, 0.95))).ok
    assert not validate_answer(ExerciseKind.VECTOR_DRAG_TARGET, expected, VectorDragTargetAnswer(a=Vec3(3.3, 1.2))).ok


def test_reveal_returns_expected_and_is_never_ok() -> None:
    expected = NumericExpected(value=10, tolerance=0.5)

    result = validate_answer(ExerciseKind.NUMERIC, expected, NumericAnswer(value=10), reveal=True)

    assert not result.ok
    assert result.status == ValidationStatus.REVEALED
    assert result.expected == expected.to_payload()


def test_reveal_for_drag_dot_includes_a_valid_solution() -> None:
    expected = VectorDragDotExpected(b=Vec3(2, -1), target_dot=0, tolerance=0.25, min_mag=1)

    result = validate_answer(ExerciseKind.VECTOR_DRAG_DOT, expected, None, reveal=True)

    assert result.expected is not None
    solution = Vec3.from_mapping(result.expected["solutionA"])
    assert abs(dot(solution, expected.b)) <= expected.tolerance
    assert math.hypot(solution.x, solution.y) >= 1 - 1e-9


def test_missing_answer_and_kind_mismatch() -> None:
    expected = SingleChoiceExpected(option_id="yes")

    missing = validate_answer(ExerciseKind.SINGLE_CHOICE, expected, None)
    assert not missing.ok
    assert missing.status == ValidationStatus.NO_ANSWER
    assert missing.expected is None

    mismatch = validate_answer(ExerciseKind.SINGLE_CHOICE, expected, NumericAnswer(value=1))
    assert not mismatch.ok
    assert mismatch.status == ValidationStatus.TYPE_MISMATCH
    assert mismatch.explanation == "Answer type mismatch."


def test_numeric_tolerance_is_monotonic_and_rejects_non_finite() -> None:
    answer = NumericAnswer(value=10.3)
    results = [
        validate_answer(ExerciseKind.NUMERIC, NumericExpected(value=10, tolerance=tolerance), answer).ok
        for tolerance in (0.05, 0.15, 0.5)
    ]

    assert results == [False, False, True]
    assert not validate_answer(ExerciseKind.NUMERIC, NumericExpected(value=10, tolerance=1), NumericAnswer(math.nan)).ok
    assert not validate_answer(ExerciseKind.NUMERIC, NumericExpected(value=10, tolerance=1), NumericAnswer(math.inf)).ok


def test_difficulty_tolerances_never_grow_with_difficulty() -> None:
    for kind in ExerciseKind:
        easy = tolerance_for(Difficulty.EASY, kind)
        medium = tolerance_for(Difficulty.MEDIUM, kind)
        hard = tolerance_for(Difficulty.HARD, kind)
        assert easy >= medium >= hard >= 0


def test_multi_choice_is_set_equality() -> None:
    expected = MultiChoiceExpected(option_ids=("a", "c"))

    assert validate_answer(ExerciseKind.MULTI_CHOICE, expected, MultiChoiceAnswer(option_ids=("c", "a"))).ok
    assert not validate_answer(ExerciseKind.MULTI_CHOICE, expected, MultiChoiceAnswer(option_ids=("a",))).ok
    assert not validate_answer(ExerciseKind.MULTI_CHOICE, expected, MultiChoiceAnswer(option_ids=("a", "b", "c"))).ok


def test_drag_dot_rejects_short_vectors() -> None:
    expected = VectorDragDotExpected(b=Vec3(1, 1), target_dot=0, tolerance=0.25, min_mag=0.5)

    zero = validate_answer(ExerciseKind.VECTOR_DRAG_DOT, expected, VectorDragDotAnswer(a=Vec3(0, 0)))
    perpendicular = validate_answer(ExerciseKind.VECTOR_DRAG_DOT, expected, VectorDragDotAnswer(a=Vec3(1, -1)))

    assert not zero.ok
    assert perpendicular.ok


def test_solution_for_dot_is_accepted_at_the_minimum_length() -> None:
    cases = [
        VectorDragDotExpected(b=Vec3(-2, 1), target_dot=0, tolerance=0.25, min_mag=0.25),
        VectorDragDotExpected(b=Vec3(3, 4), target_dot=1, tolerance=0.25, min_mag=0.5),
        VectorDragDotExpected(b=Vec3(0, 0, 2), target_dot=0, tolerance=0.25, min_mag=1),
    ]

    for expected in cases:
        solution = solution_for_dot(expected.b, expected.target_dot, expected.min_mag)

        assert math.sqrt(solution.x**2 + solution.y**2 + solution.z**2) >= expected.min_mag - 1e-9
        assert abs(dot(solution, expected.b) - expected.target_dot) <= 1e-9
        assert validate_answer(ExerciseKind.VECTOR_DRAG_DOT, expected, VectorDragDotAnswer(a=solution)).ok


def test_matrix_shape_and_cells() -> None:
    expected = matrix_expected([[1, 2], [3, 4]], 0)

    assert validate_answer(ExerciseKind.MATRIX_INPUT, expected, MatrixInputAnswer.of([[1, 2], [3, 4]])).ok
    assert not validate_answer(ExerciseKind.MATRIX_INPUT, expected, MatrixInputAnswer.of([[1, 2], [3, 5]])).ok
    shape = validate_answer(ExerciseKind.MATRIX_INPUT, expected, MatrixInputAnswer.of([[1, 2, 0], [3, 4, 0]]))
    assert not shape.ok
    assert shape.explanation == "Matrix shape does not match."


def test_solution_for_dot_handles_zero_b() -> None:
    assert solution_for_dot(Vec3(0, 0), 3, 2) == Vec3(2, 0, 0)


def test_expected_payload_round_trips_through_storage() -> None:
    expected = VectorDragDotExpected(b=Vec3(1, 2), target_dot=4.5, tolerance=0.35, min_mag=1)

    assert expected_from_payload(expected.to_payload()) == expected
