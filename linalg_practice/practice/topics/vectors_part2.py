"""Vectors, part 2: sets of vectors, linear combinations, independence, span and bases."""

from __future__ import annotations

from linalg_practice.practice.formatting import display_math, latex_column
from linalg_practice.practice.numeric import MAX_DRAW_ATTEMPTS, by_difficulty, det2, rand_nonzero_int
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import choices, param, pick_archetype
from linalg_practice.practice.types import (
    ChoiceOption,
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

TOPIC = "vectors_part2"

_DEPENDENCE_CHOICES = choices(
    ("independent", "Linearly independent"),
    ("dependent", "Linearly dependent"),
    ("cannot", "Cannot be determined"),
)

# (id, statement, required of every subspace)
_SUBSPACE_POOL: tuple[tuple[str, str, bool], ...] = (
    ("zero", "It contains the zero vector.", True),
    ("add", "It is closed under vector addition.", True),
    ("scale", "It is closed under scalar multiplication.", True),
    ("positive", "All of its vectors have positive entries.", False),
    ("finite", "It contains finitely many vectors.", False),
    ("two", "It contains at least two nonzero vectors.", False),
    ("unit", "Every vector in it has length 1.", False),
)


def _vector_set_latex(vectors: list[list[int]], name: str = "S") -> str:
    body = ",\\ ".join(latex_column(v) for v in vectors)
    return display_math(rf"{name}=\left\{{{body}\right\}}")


def _int_vector(rng: SeededRng, length: int, value_range: int) -> list[int]:
    return [rng.randint(-value_range, value_range) for _ in range(length)]


def _nonzero_vector(rng: SeededRng, length: int, value_range: int) -> list[int]:
    vector = _int_vector(rng, length, value_range)
    if not any(vector):
        vector[0] = rand_nonzero_int(rng, -value_range, value_range)
    return vector


def _scaled(vector: list[int], k: int) -> list[int]:
    return [k * item for item in vector]


def _independent_pair(rng: SeededRng, value_range: int) -> tuple[list[int], list[int]]:
    for _ in range(MAX_DRAW_ATTEMPTS):
        u = _nonzero_vector(rng, 2, value_range)
        v = _nonzero_vector(rng, 2, value_range)
        if det2([[u[0], v[0]], [u[1], v[1]]]) != 0:
            return u, v
    return [1, 0], [0, 1]


def _unimodular_basis(rng: SeededRng) -> tuple[list[int], list[int]]:
    """Basis with determinant ±1, so integer vectors keep integer coordinates."""
    a = rng.randint(-3, 3)
    b = rng.choice((1, -1))
    if rng.randint(0, 1) == 1:
        return [1, a], [0, b]
    return [b, 0], [a, 1]


def generate_vectors_part2(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    easy = difficulty == Difficulty.EASY
    archetype = pick_archetype(
        rng,
        options,
        [
            ("set_cardinality", 3 if easy else 1),
            ("linear_combination_component", 5),
            ("zero_vector_dependence", 3),
            ("independence_2d", 5),
            ("span_dimension_2d", 2 if easy else 4),
            ("subspace_rules", 2 if easy else 4),
            ("basis_check_2d", 4),
            ("basis_coordinates", 2 if easy else 4),
        ],
    )
    value_range = by_difficulty(difficulty, 4, 6, 9)
    dim = by_difficulty(difficulty, 2, 3, 3)

    if archetype == "set_cardinality":
        count = rng.randint(2, by_difficulty(difficulty, 4, 5, 6))
        vectors = [_int_vector(rng, dim, value_range) for _ in range(count)]
        exercise = NumericExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Size of a vector set",
            prompt=f"Consider the set\n\n{_vector_set_latex(vectors)}\n\nHow many vectors does S contain?",
            hint="Count the vectors, not their entries.",
        )
        return GenOut(exercise=exercise, expected=NumericExpected(value=count, tolerance=0.0), archetype=archetype)

    if archetype == "linear_combination_component":
        v1 = param(options, "v1", lambda: _nonzero_vector(rng, dim, value_range))
        v2 = param(options, "v2", lambda: _nonzero_vector(rng, len(v1), value_range))
        c1 = rand_nonzero_int(rng, -4, 4)
        c2 = rand_nonzero_int(rng, -4, 4)
        component = rng.randint(1, len(v1))
        combo = rf"w={c1}\,{latex_column(v1)}+({c2})\,{latex_column(v2)}."
        exercise = NumericExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Linear combination",
            prompt=f"Let\n\n{display_math(combo)}\n\nCompute component {component} of w.",
            hint="Scale each vector, then add component by component.",
        )
        value = c1 * v1[component - 1] + c2 * v2[component - 1]
        return GenOut(exercise=exercise, expected=NumericExpected(value=value, tolerance=0.0), archetype=archetype)

    if archetype == "zero_vector_dependence":
        others = [_nonzero_vector(rng, dim, value_range) for _ in range(rng.randint(1, 2))]
        vectors = rng.shuffle([*others, [0] * dim])
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Sets containing the zero vector",
            prompt=f"Consider\n\n{_vector_set_latex(vectors)}\n\nIs S linearly independent or dependent?",
            options=_DEPENDENCE_CHOICES,
            hint="1·0 = 0 is a nontrivial combination that gives the zero vector.",
        )
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id="dependent"), archetype=archetype)

    if archetype == "independence_2d":
        dependent = rng.randint(0, 1) == 1
        if dependent:
            u = _nonzero_vector(rng, 2, max(2, value_range // 2))
            v = _scaled(u, rand_nonzero_int(rng, -3, 3))
        else:
            u, v = _independent_pair(rng, value_range)
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Independence in ℝ²",
            prompt=f"Are the vectors in\n\n{_vector_set_latex([u, v])}\n\nlinearly independent?",
            options=_DEPENDENCE_CHOICES,
            hint="Two vectors in ℝ² are dependent exactly when one is a multiple of the other (det = 0).",
        )
        return GenOut(
            exercise=exercise,
            expected=SingleChoiceExpected(option_id="dependent" if dependent else "independent"),
            archetype=archetype,
        )

    if archetype == "span_dimension_2d":
        rank = rng.choice((1, 2))
        count = rng.randint(2, 3)
        if rank == 1:
            base = _nonzero_vector(rng, 2, max(2, value_range // 2))
            vectors = [_scaled(base, rand_nonzero_int(rng, -3, 3)) for _ in range(count)]
        else:
            u, v = _independent_pair(rng, value_range)
            vectors = [u, v] + [_scaled(u, rand_nonzero_int(rng, -2, 2)) for _ in range(count - 2)]
            vectors = rng.shuffle(vectors)
        exercise = NumericExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Dimension of a span",
            prompt=f"Let\n\n{_vector_set_latex(vectors)}\n\nWhat is the dimension of span(S)?",
            hint="Count how many of the vectors point in genuinely different directions.",
        )
        return GenOut(exercise=exercise, expected=NumericExpected(value=rank, tolerance=0.0), archetype=archetype)

    if archetype == "subspace_rules":
        required = [item for item in _SUBSPACE_POOL if item[2]]
        decoys = rng.shuffle([item for item in _SUBSPACE_POOL if not item[2]])[: by_difficulty(difficulty, 2, 3, 4)]
        picked = rng.shuffle([*required, *decoys])
        exercise = MultiChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Subspace requirements",
            prompt="A subset W of ℝⁿ is a subspace. Select ALL properties W is guaranteed to have.",
            options=tuple(ChoiceOption(id=option_id, text=text) for option_id, text, _ in picked),
            hint="Zero vector, closure under addition, closure under scaling.",
        )
        return GenOut(
            exercise=exercise,
            expected=MultiChoiceExpected(option_ids=tuple(option_id for option_id, _, needed in picked if needed)),
            archetype=archetype,
        )

    if archetype == "basis_check_2d":
        case = rng.choice(("basis", "parallel", "too_many") if not easy else ("basis", "parallel"))
        if case == "basis":
            vectors = list(_independent_pair(rng, value_range))
        elif case == "parallel":
            u = _nonzero_vector(rng, 2, max(2, value_range // 2))
            vectors = [u, _scaled(u, rand_nonzero_int(rng, -3, 3))]
        else:
            u, v = _independent_pair(rng, value_range)
            vectors = rng.shuffle([u, v, _nonzero_vector(rng, 2, value_range)])
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Basis of ℝ²?",
            prompt=f"Is\n\n{_vector_set_latex(vectors, 'B')}\n\na basis for ℝ²?",
            options=choices(
                ("yes", "Yes"),
                ("no_dependent", "No: the vectors are dependent"),
                ("no_count", "No: a basis of ℝ² has exactly two vectors"),
            ),
            hint="A basis of ℝ² is exactly two independent vectors.",
        )
        answer = {"basis": "yes", "parallel": "no_dependent", "too_many": "no_count"}[case]
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=answer), archetype=archetype)

    b1, b2 = _unimodular_basis(rng)
    c1 = rand_nonzero_int(rng, -5, 5)
    c2 = rand_nonzero_int(rng, -5, 5)
    w = [c1 * b1[0] + c2 * b2[0], c1 * b1[1] + c2 * b2[1]]
    ask_first = rng.randint(0, 1) == 1
    setup = rf"\mathbf{{b}}_1={latex_column(b1)},\quad \mathbf{{b}}_2={latex_column(b2)},\quad w={latex_column(w)}."
    exercise = NumericExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title="Coordinates in a basis",
        prompt=(
            f"Let\n\n{display_math(setup)}\n\nWrite w = c₁b₁ + c₂b₂. "
            f"What is {'c₁' if ask_first else 'c₂'}?"
        ),
        hint="Solve the 2×2 system whose columns are the basis vectors.",
    )
    return GenOut(
        exercise=exercise,
        expected=NumericExpected(value=c1 if ask_first else c2, tolerance=0.0),
        archetype=archetype,
    )
