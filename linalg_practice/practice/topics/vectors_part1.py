"""Vectors, part 1: dimensionality, NumPy shapes, norms, dot and outer products."""

from __future__ import annotations

from linalg_practice.practice.formatting import display_math, latex_column, latex_row, numpy_shape
from linalg_practice.practice.numeric import by_difficulty, dot_n, norm, rand_nonzero_int, round_to
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import choices, param, pick_archetype, shuffled_choices, yes_no
from linalg_practice.practice.types import (
    Difficulty,
    GenOptions,
    GenOut,
    NumericExercise,
    NumericExpected,
    SingleChoiceExercise,
    SingleChoiceExpected,
)

TOPIC = "vectors_part1"

MAGNITUDE_TOLERANCE = {Difficulty.EASY: 0.2, Difficulty.MEDIUM: 0.05, Difficulty.HARD: 0.05}
UNIT_VECTOR_TOLERANCE = 0.03
BETA_TOLERANCE = 0.01

_NORM_FORMULA = r"\lVert v\rVert=\sqrt{v_x^2+v_y^2}"
_UNIT_FORMULA = r"\hat v=\frac{1}{\lVert v\rVert}v."
_DOT_EXPR = r"a\cdot b."
_BETA_FORMULA = r"\beta=\frac{a\cdot b}{a\cdot a}"

_ORIENTATION_GRID = choices(
    *(
        (f"{n}d_{orientation}", f"{n}D, {'row' if orientation == 'row' else 'column'}")
        for n in (2, 3, 4, 5)
        for orientation in ("row", "col")
    )
)

_NUMPY_SNIPPET = """```python
asList  = [1,2,3]
asArray = np.array([1,2,3])
rowVec  = np.array([[1,2,3]])
colVec  = np.array([[1],[2],[3]])
```"""

_BROADCAST_SNIPPET = """```python
v = np.array([[1,2,3]])      # shape (1,3)
w = np.array([[10,20]]).T   # shape (2,1)
v + w
```"""

_HADAMARD_SNIPPET = """```python
a = np.array([5,4,8,2])
b = np.array([1,0,0.5])
a*b
```"""


def _vector_length(difficulty: Difficulty) -> int:
    return by_difficulty(difficulty, 3, 4, 5)


def _int_vector(rng: SeededRng, length: int, value_range: int) -> list[int]:
    """Random integer vector that is never entirely zero."""
    vector = [rng.randint(-value_range, value_range) for _ in range(length)]
    if any(vector):
        return vector
    vector[0] = rand_nonzero_int(rng, -value_range, value_range)
    return vector


def _pair_latex(a: str, b: str) -> str:
    return display_math(rf"a={a},\qquad b={b}.")


def _numeric(
    exercise_id: str,
    difficulty: Difficulty,
    title: str,
    prompt: str,
    hint: str,
) -> NumericExercise:
    return NumericExercise(
        id=exercise_id,
        topic=TOPIC,
        difficulty=difficulty,
        title=title,
        prompt=prompt,
        hint=hint,
    )


def generate_vectors_part1(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    hard = difficulty == Difficulty.HARD
    archetype = pick_archetype(
        rng,
        options,
        [
            ("dim_and_orientation", 4),
            ("R_n_membership", 3),
            ("numpy_shapes", 5),
            ("add_defined_math", 4),
            ("add_broadcasting_python", 3),
            ("scalar_mult_list_vs_array", 4),
            ("magnitude_numeric", 4),
            ("unit_vector_numeric", 4 if hard else 2),
            ("dot_numeric", 5),
            ("dot_sign_angle", 3),
            ("hadamard_bug", 3),
            ("outer_product_entry", 4 if hard else 2),
            ("orth_proj_beta", 4 if hard else 2),
        ],
    )
    value_range = by_difficulty(difficulty, 5, 8, 12)

    def single(title: str, prompt: str, correct: str, distractors: list[str], hint: str) -> GenOut:
        option_list, correct_id = shuffled_choices(rng, correct, distractors)
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title=title,
            prompt=prompt,
            options=option_list,
            hint=hint,
        )
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=correct_id), archetype=archetype)

    if archetype == "dim_and_orientation":
        n = _vector_length(difficulty)
        v = _int_vector(rng, n, value_range)
        is_row = rng.randint(0, 1) == 1
        shown = latex_row(v) if is_row else latex_column(v)
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Dimensionality and orientation",
            prompt=(
                f"Consider the vector\n\n{display_math(f'v={shown}.')}\n\n"
                "1) What is the **mathematical dimensionality** of v?\n"
                "2) Is v written as a **row** vector or a **column** vector?"
            ),
            options=_ORIENTATION_GRID,
            hint="Math dimensionality = number of elements. Orientation = row vs column layout.",
        )
        return GenOut(
            exercise=exercise,
            expected=SingleChoiceExpected(option_id=f"{n}d_{'row' if is_row else 'col'}"),
            archetype=archetype,
        )

    if archetype == "R_n_membership":
        n = _vector_length(difficulty)
        v = _int_vector(rng, n, value_range)
        return single(
            "Vector in ℝⁿ",
            f"Let\n\n{display_math(f'v={latex_column(v)}.')}\n\nWhich statement is correct?",
            rf"$$v\in\mathbb{{R}}^{{{n}}}$$",
            [
                rf"$$v\in\mathbb{{R}}^{{{n - 1}}}$$",
                rf"$$v\in\mathbb{{R}}^{{{n + 1}}}$$",
                "Cannot be determined",
            ],
            "If a vector has n elements, it lives in ℝⁿ.",
        )

    if archetype == "numpy_shapes":
        n = 3
        flat, row, col = numpy_shape(n), numpy_shape(1, n), numpy_shape(n, 1)
        return single(
            "Vector shapes in NumPy",
            f"In Python/NumPy, consider:\n\n{_NUMPY_SNIPPET}\n\n"
            "Which set of shapes is correct (asList, asArray, rowVec, colVec)?",
            f"{flat} , {flat} , {row} , {col}",
            [
                f"{row} , {col} , {flat} , {flat}",
                f"{col} , {row} , {flat} , {flat}",
                f"{flat} , {row} , {col} , {flat}",
            ],
            "1D arrays have shape (n,). Row vector is (1,n). Column vector is (n,1).",
        )

    if archetype == "add_defined_math":
        n1 = _vector_length(difficulty)
        n2 = rng.choice((n1, max(2, n1 - 1), n1 + 1))
        a = _int_vector(rng, n1, value_range)
        b = _int_vector(rng, n2, value_range)
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="When is addition defined?",
            prompt=f"Let\n\n{_pair_latex(latex_column(a), latex_column(b))}\n\n"
            "Is the sum a + b **defined** in linear algebra?",
            options=yes_no(),
            hint="Vector addition requires the same number of elements (same ℝⁿ).",
        )
        return GenOut(
            exercise=exercise,
            expected=SingleChoiceExpected(option_id="yes" if n1 == n2 else "no"),
            archetype=archetype,
        )

    if archetype == "add_broadcasting_python":
        return single(
            "Broadcasting shape",
            f"In NumPy:\n\n{_BROADCAST_SNIPPET}\n\nWhat is the **shape** of the result?",
            numpy_shape(2, 3),
            [numpy_shape(1, 3), numpy_shape(2, 1), numpy_shape(3, 2)],
            "Broadcasting expands (2,1) across columns and (1,3) across rows → (2,3).",
        )

    if archetype == "scalar_mult_list_vs_array":
        s = rng.choice((2, 3, 4))
        snippet = (
            f"```python\ns = {s}\na = [3,4,5]            # list\n"
            "b = np.array([3,4,5])  # NumPy array\na*s\nb*s\n```"
        )
        return single(
            "Scalar multiplication in Python",
            f"In Python:\n\n{snippet}\n\nWhich statement is correct?",
            "a*s repeats the list; b*s does element-wise multiplication.",
            [
                "Both a*s and b*s do element-wise multiplication.",
                "a*s errors; b*s repeats the array.",
                "Both repeat their contents.",
            ],
            "In Python, list * integer repeats the list.",
        )

    if archetype == "magnitude_numeric":
        v = param(
            options,
            "v",
            lambda: [rand_nonzero_int(rng, -value_range, value_range), rng.randint(-value_range, value_range)],
        )
        decimals = 1 if difficulty == Difficulty.EASY else 2
        exercise = _numeric(
            exercise_id,
            difficulty,
            "Vector magnitude",
            f"Compute the magnitude (Euclidean norm) of\n\n{display_math(f'v={latex_column(v)}.')}\n\n"
            f"That is, compute\n\n{display_math(_NORM_FORMULA + '.')}\n\n"
            f"Round to {decimals} decimal place(s).",
            display_math(_NORM_FORMULA),
        )
        return GenOut(
            exercise=exercise,
            expected=NumericExpected(value=round_to(norm(v), decimals), tolerance=MAGNITUDE_TOLERANCE[difficulty]),
            archetype=archetype,
        )

    if archetype == "unit_vector_numeric":
        v = [rand_nonzero_int(rng, -value_range, value_range), rand_nonzero_int(rng, -value_range, value_range)]
        length = norm(v)
        ask_x = rng.randint(0, 1) == 1
        component = "the x-component" if ask_x else "the y-component"
        exercise = _numeric(
            exercise_id,
            difficulty,
            "Unit vector component",
            f"Let\n\n{display_math(f'v={latex_column(v)}.')}\n\n"
            f"Compute the associated unit vector\n\n{display_math(_UNIT_FORMULA)}\n\n"
            f"What is {component} of v̂? Round to 2 decimal place(s).",
            display_math(r"\hat v=\frac{v}{\lVert v\rVert}"),
        )
        value = round_to((v[0] if ask_x else v[1]) / length, 2)
        return GenOut(
            exercise=exercise,
            expected=NumericExpected(value=value, tolerance=UNIT_VECTOR_TOLERANCE),
            archetype=archetype,
        )

    if archetype == "dot_numeric":
        n = _vector_length(difficulty)
        a = param(options, "a", lambda: _int_vector(rng, n, value_range))
        b = param(options, "b", lambda: _int_vector(rng, len(a), value_range))
        exercise = _numeric(
            exercise_id,
            difficulty,
            "Dot product",
            f"Let\n\n{_pair_latex(latex_column(a), latex_column(b))}\n\n"
            f"Compute the dot product\n\n{display_math(_DOT_EXPR)}",
            display_math(r"a\cdot b=\sum_{i=1}^{n} a_i b_i"),
        )
        return GenOut(exercise=exercise, expected=NumericExpected(value=dot_n(a, b), tolerance=0.0), archetype=archetype)

    if archetype == "dot_sign_angle":
        a = [rand_nonzero_int(rng, -value_range, value_range), rand_nonzero_int(rng, -value_range, value_range)]
        sign = rng.choice(("positive", "negative", "zero"))
        if sign == "zero":
            b = [-a[1], a[0]]
        else:
            k = rng.choice((1, 2, 3)) * (1 if sign == "positive" else -1)
            b = [k * a[0], k * a[1]]
        exercise = SingleChoiceExercise(
            id=exercise_id,
            topic=TOPIC,
            difficulty=difficulty,
            title="Dot sign ↔ angle",
            prompt=f"Let\n\n{_pair_latex(latex_column(a), latex_column(b))}\n\n"
            "Classify the angle θ between a and b as **acute**, **right**, or **obtuse**.",
            options=choices(("acute", "Acute"), ("right", "Right"), ("obtuse", "Obtuse")),
            hint="If a·b > 0 → acute; a·b = 0 → right; a·b < 0 → obtuse.",
        )
        answer = {"zero": "right", "positive": "acute", "negative": "obtuse"}[sign]
        return GenOut(exercise=exercise, expected=SingleChoiceExpected(option_id=answer), archetype=archetype)

    if archetype == "hadamard_bug":
        return single(
            "Hadamard multiplication",
            "Hadamard (element-wise) multiplication requires equal-length vectors.\n\n"
            f"{_HADAMARD_SNIPPET}\n\nWhy does this error?",
            "Because the vectors have different numbers of elements.",
            [
                "Because Hadamard multiplication is not defined in NumPy.",
                "Because arrays must be column vectors for multiplication.",
                "Because a*b computes a dot product, not Hadamard.",
            ],
            "Element-wise operations pair up entries. If lengths differ, entries can’t pair up.",
        )

    if archetype == "outer_product_entry":
        m = 3 if hard else 2
        n = 4 if hard else 3
        v = _int_vector(rng, m, value_range)
        w = _int_vector(rng, n, value_range)
        i = rng.randint(1, m)
        j = rng.randint(1, n)
        vectors = display_math(rf"v={latex_column(v)},\qquad w^T={latex_row(w)}.")
        exercise = _numeric(
            exercise_id,
            difficulty,
            "Outer product entry",
            f"Let\n\n{vectors}\n\nConsider the outer product vwᵀ.\n\n"
            f"Compute the entry (vwᵀ) at row {i}, column {j}.",
            display_math(r"(vw^T)_{ij}=v_i w_j"),
        )
        return GenOut(
            exercise=exercise,
            expected=NumericExpected(value=v[i - 1] * w[j - 1], tolerance=0.0),
            archetype=archetype,
        )

    # b = beta * a + t * perp(a), so the projection scalar is exactly beta.
    a = [rand_nonzero_int(rng, -6, 6), rand_nonzero_int(rng, -6, 6)]
    beta = rand_nonzero_int(rng, -3, 3)
    t = rng.randint(-2, 2)
    b = [beta * a[0] - t * a[1], beta * a[1] + t * a[0]]
    exercise = _numeric(
        exercise_id,
        difficulty,
        "Orthogonal projection (β)",
        f"Let\n\n{_pair_latex(latex_column(a), latex_column(b))}\n\n"
        "Compute the scalar β such that the point βa is the orthogonal projection of b "
        f"onto the line spanned by a:\n\n{display_math(_BETA_FORMULA + '.')}\n\n"
        "Round to 2 decimal place(s).",
        display_math(_BETA_FORMULA),
    )
    return GenOut(
        exercise=exercise,
        expected=NumericExpected(value=round_to(beta, 2), tolerance=BETA_TOLERANCE),
        archetype=archetype,
    )
