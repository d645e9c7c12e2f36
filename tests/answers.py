from __future__ import annotations

from linalg_practice.practice.types import (
    Expected,
    MatrixInputAnswer,
    MatrixInputExpected,
    MultiChoiceAnswer,
    MultiChoiceExpected,
    NumericAnswer,
    NumericExpected,
    SingleChoiceAnswer,
    SingleChoiceExpected,
    SubmitAnswer,
    Vec3,
    VectorDragDotAnswer,
    VectorDragDotExpected,
    VectorDragTargetAnswer,
    VectorDragTargetExpected,
)
from linalg_practice.practice.validator import solution_for_dot


def correct_answer(expected: Expected) -> SubmitAnswer:
    if isinstance(expected, NumericExpected):
        return NumericAnswer(value=expected.value)
    if isinstance(expected, SingleChoiceExpected):
        return SingleChoiceAnswer(option_id=expected.option_id)
    if isinstance(expected, MultiChoiceExpected):
        return MultiChoiceAnswer(option_ids=tuple(reversed(expected.option_ids)))
    if isinstance(expected, VectorDragTargetExpected):
        return VectorDragTargetAnswer(a=expected.target_a)
    if isinstance(expected, VectorDragDotExpected):
        return VectorDragDotAnswer(a=solution_for_dot(expected.b, expected.target_dot, expected.min_mag))
    assert isinstance(expected, MatrixInputExpected)
    return MatrixInputAnswer(values=expected.values)


def wrong_answer(expected: Expected) -> SubmitAnswer:
    if isinstance(expected, NumericExpected):
        return NumericAnswer(value=expected.value + 1000)
    if isinstance(expected, SingleChoiceExpected):
        return SingleChoiceAnswer(option_id="not-an-option")
    if isinstance(expected, MultiChoiceExpected):
        return MultiChoiceAnswer(option_ids=("not-an-option",))
    if isinstance(expected, VectorDragTargetExpected):
        target = expected.target_a
        return VectorDragTargetAnswer(a=Vec3(target.x + 100, target.y + 100))
    if isinstance(expected, VectorDragDotExpected):
        solution = solution_for_dot(expected.b, expected.target_dot + 1000, expected.min_mag)
        return VectorDragDotAnswer(a=solution)
    assert isinstance(expected, MatrixInputExpected)
    return MatrixInputAnswer(values=tuple(tuple(cell + 1000 for cell in row) for row in expected.values))
