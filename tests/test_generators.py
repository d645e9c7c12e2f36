from __future__ import annotations

import json
import re

import pytest
from answers import correct_answer

from linalg_practice.practice.dispatcher import generate_exercise
from linalg_practice.practice.numeric import dot_n, inverse2, matmul
from linalg_practice.practice.registry import (
    CANONICAL_SLUGS,
    GenKey,
    UnknownGeneratorError,
    known_topics,
    resolve_topic,
)
from linalg_practice.practice.topics.matrices_part1 import MatricesPart1Variant
from linalg_practice.practice.types import (
    Difficulty,
    GenOptions,
    MatrixInputExercise,
    MatrixInputExpected,
    MultiChoiceExercise,
    MultiChoiceExpected,
    SingleChoiceExercise,
    SingleChoiceExpected,
    VectorDragDotExercise,
    VectorDragDotExpected,
)
from linalg_practice.practice.validator import validate_answer

DIFFICULTIES = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)
PUBLIC_FIELDS = {
    "id",
    "topic",
    "difficulty",
    "kind",
    "title",
    "prompt",
    "hint",
    "options",
    "initialA",
    "initialB",
    "lockB",
    "tolerance",
    "b",
    "rows",
    "cols",
    "step",
    "integerOnly",
}
ID_PATTERN = re.compile(r"^[a-z0-9_]+-(easy|medium|hard)-[0-9a-f]+$")


def _check_round_trip(topic: str, difficulty: Difficulty, seed: str, variant: str | None = None) -> None:
    generated = generate_exercise(topic, difficulty, seed=seed, variant=variant)
    exercise, expected = generated.exercise, generated.expected

    assert exercise.kind == expected.kind
    assert exercise.difficulty == difficulty
    assert ID_PATTERN.match(exercise.id)
    assert exercise.topic in known_topics()

    public = exercise.to_public()
    assert set(public) <= PUBLIC_FIELDS
    assert "expected" not in json.dumps(public)

    if isinstance(exercise, SingleChoiceExercise):
        assert isinstance(expected, SingleChoiceExpected)
        ids = [option.id for option in exercise.options]
        assert expected.option_id in ids
        assert len(ids) == len(set(ids))
    if isinstance(exercise, MultiChoiceExercise):
        assert isinstance(expected, MultiChoiceExpected)
        assert set(expected.option_ids) <= {option.id for option in exercise.options}
    if isinstance(exercise, MatrixInputExercise):
        assert isinstance(expected, MatrixInputExpected)
        assert expected.shape == (exercise.rows, exercise.cols)
    if isinstance(exercise, VectorDragDotExercise):
        assert isinstance(expected, VectorDragDotExpected)
        assert expected.b == exercise.b

    result = validate_answer(exercise.kind, expected, correct_answer(expected))
    assert result.ok, (topic, difficulty, seed, generated.archetype, result.explanation)


@pytest.mark.parametrize("key", list(GenKey))
@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_every_generator_round_trips(key: GenKey, difficulty: Difficulty) -> None:
    for index in range(30):
        _check_round_trip(key.value, difficulty, f"{key.value}-{index}")


@pytest.mark.parametrize("variant", list(MatricesPart1Variant))
@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_every_matrices_part1_variant_round_trips(variant: MatricesPart1Variant, difficulty: Difficulty) -> None:
    for index in range(20):
        _check_round_trip("matrices_part1", difficulty, f"{variant.value}-{index}", variant=variant.value)


def test_generation_is_deterministic_for_a_seed() -> None:
    for key in GenKey:
        first = generate_exercise(key.value, "medium", seed="same-seed")
        second = generate_exercise(key.value, "medium", seed="same-seed")

        assert first.exercise.to_public() == second.exercise.to_public()
        assert first.expected.to_payload() == second.expected.to_payload()
        assert first.archetype == second.archetype


def test_topic_is_rewritten_to_canonical_slug() -> None:
    for key, slug in CANONICAL_SLUGS.items():
        assert generate_exercise(key.value, "easy", seed=1).exercise.topic == slug
        assert generate_exercise(slug, "easy", seed=1).gen_key is key


def test_variant_slug_resolves_to_matrices_part1() -> None:
    assert resolve_topic("m2.matmul") == (GenKey.MATRICES_PART1, MatricesPart1Variant.MATMUL)
    assert resolve_topic("m2.matrices_part1") == (GenKey.MATRICES_PART1, None)

    generated = generate_exercise("m2.matmul", "easy", seed="slug")
    assert generated.gen_key is GenKey.MATRICES_PART1
    assert generated.exercise.topic == "m2.matmul"

    short = generate_exercise("matrices_part1", "easy", seed="slug", variant="matmul")
    assert short.exercise.topic == "m2.matmul"


def test_unknown_topic_fails_fast_with_known_keys() -> None:
    with pytest.raises(UnknownGeneratorError) as excinfo:
        generate_exercise("eigenvalues", "easy", seed=1)

    assert excinfo.value.topic == "eigenvalues"
    assert "dot" in excinfo.value.known
    assert isinstance(excinfo.value, ValueError)


def test_unknown_difficulty_is_rejected() -> None:
    with pytest.raises(ValueError):
        generate_exercise("dot", "impossible", seed=1)


def test_all_topic_and_all_difficulty_pick_registered_values() -> None:
    seen_difficulties = set()
    for index in range(60):
        generated = generate_exercise("all", "all", seed=index)
        seen_difficulties.add(generated.exercise.difficulty)
        assert generated.gen_key in set(GenKey)

    assert seen_difficulties == set(DIFFICULTIES)


def test_matmul_result_takes_outer_dimensions_and_row_column_dots() -> None:
    a = [[1, -2, 3], [0, 4, -1]]
    b = [[2, 1, 0, -1], [3, -2, 5, 1], [-1, 0, 2, 4]]

    generated = generate_exercise(
        "m2.matmul",
        "medium",
        seed="pinned-product",
        options=GenOptions(archetype="matmul_full_matrix", params={"a": a, "b": b}),
    )

    expected = generated.expected
    assert isinstance(expected, MatrixInputExpected)
    assert expected.shape == (len(a), len(b[0]))
    for i, row in enumerate(a):
        for j in range(len(b[0])):
            assert expected.values[i][j] == dot_n(row, [b_row[j] for b_row in b])

    with pytest.raises(ValueError):
        matmul([[1, 2]], [[1, 2]])


def test_full_matrix_archetypes_cap_dimensions_by_difficulty() -> None:
    caps = {"easy": 3, "medium": 4, "hard": 5}
    for difficulty, cap in caps.items():
        for index in range(40):
            for topic, archetype in (("m2.matmul", "matmul_full_matrix"), ("m2.transpose_liveevil", "transpose_fill_matrix")):
                generated = generate_exercise(
                    topic,
                    difficulty,
                    seed=f"cap-{index}",
                    options=GenOptions(archetype=archetype),
                )
                exercise = generated.exercise
                assert isinstance(exercise, MatrixInputExercise)
                assert 2 <= exercise.rows <= cap
                assert 2 <= exercise.cols <= cap


def test_inverse_entry_reads_from_the_inverse() -> None:
    matrix = [[4, 7], [2, 6]]

    generated = generate_exercise(
        "matrix_inverse",
        "hard",
        seed="inverse",
        options=GenOptions(archetype="inv_entry", params={"matrix": matrix}),
    )

    assert generated.expected.value == pytest.approx(0.6)
    inverse = inverse2(matrix)
    assert inverse is not None
    product = matmul(matrix, inverse)
    assert product == [[pytest.approx(1), pytest.approx(0)], [pytest.approx(0), pytest.approx(1)]]
    assert inverse2([[1, 2], [2, 4]]) is None
