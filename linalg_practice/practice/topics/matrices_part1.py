"""Matrices, part 1: shapes, indexing, special matrices, products and transposes.

One generator serves eight public topic slugs. The slug is modelled as the
closed :class:`MatricesPart1Variant` enum; each variant owns its own weighted
archetype table.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from linalg_practice.practice.formatting import display_math, latex_column, latex_matrix, shape_latex
from linalg_practice.practice.numeric import (
    by_difficulty,
    matmul,
    matvec,
    rand_matrix,
    rand_nonzero_int,
    tolerance_for,
    transpose,
)
from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.topics.base import choices, param, pick_archetype, shuffled_choices
from linalg_practice.practice.types import (
    Difficulty,
    Exercise,
    ExerciseKind,
    Expected,
    GenOptions,
    GenOut,
    MatrixInputExercise,
    NumericExercise,
    NumericExpected,
    SingleChoiceExercise,
    SingleChoiceExpected,
    matrix_expected,
)

SLUG_PREFIX = "m2."

_A = r"\mathbf{A}"
_C_EQUALS_AB = r"\mathbf{C}=\mathbf{A}\mathbf{B}."
_A_TRANSPOSE = r"\mathbf{A}^T."


class MatricesPart1Variant(str, Enum):
    MATRICES_INTRO = "m2.matrices_intro"
    INDEX_SLICE = "m2.index_slice"
    SPECIAL = "m2.special"
    ELEMENTWISE_SHIFT = "m2.elementwise_shift"
    MATMUL = "m2.matmul"
    MATVEC = "m2.matvec"
    TRANSPOSE_LIVEEVIL = "m2.transpose_liveevil"
    SYMMETRIC = "m2.symmetric"

    @classmethod
    def parse(cls, raw: "str | MatricesPart1Variant") -> "MatricesPart1Variant":
        if isinstance(raw, cls):
            return raw
        text = str(raw).strip()
        slug = text if text.startswith(SLUG_PREFIX) else f"{SLUG_PREFIX}{text}"
        try:
            return cls(slug)
        except ValueError as exc:
            known = ", ".join(item.value for item in cls)
            raise ValueError(f"Unknown matrices part 1 variant '{raw}'. Known: {known}") from exc


ARCHETYPE_WEIGHTS: dict[MatricesPart1Variant, tuple[tuple[str, float], ...]] = {
    MatricesPart1Variant.MATRICES_INTRO: (("shape_rows_cols", 5), ("shape_entries_count", 3), ("mental_model", 2)),
    MatricesPart1Variant.INDEX_SLICE: (("indexing_math_to_numpy", 5), ("slicing_shape", 4), ("slicing_halfopen", 2)),
    MatricesPart1Variant.SPECIAL: (("identity_def", 4), ("diagonal_def", 3), ("triangular_def", 3)),
    MatricesPart1Variant.ELEMENTWISE_SHIFT: (("star_vs_at", 5), ("shifting_diagonal_only", 5), ("hadamard_def", 3)),
    MatricesPart1Variant.MATMUL: (
        ("matmul_shape", 5),
        ("matmul_entry_dot", 5),
        ("valid_or_invalid", 3),
        ("matmul_full_matrix", 4),
    ),
    MatricesPart1Variant.MATVEC: (("weighted_sum_columns", 5), ("matvec_shape", 4), ("compute_small_matvec", 4)),
    MatricesPart1Variant.TRANSPOSE_LIVEEVIL: (
        ("transpose_product_rule", 6),
        ("transpose_shape", 3),
        ("double_transpose", 1),
        ("transpose_fill_matrix", 3),
    ),
    MatricesPart1Variant.SYMMETRIC: (("symmetric_definition", 4), ("ata_shape", 5), ("ata_is_symmetric", 3)),
}


@dataclass(frozen=True, slots=True)
class _ConceptCard:
    title: str
    prompt: str
    correct: str
    distractors: tuple[str, ...]
    hint: str
    true_false: bool = False


_CONCEPTS: dict[str, _ConceptCard] = {
    "mental_model": _ConceptCard(
        title="What is a matrix?",
        prompt="Which statement is a correct “mental model” of a matrix?",
        correct="A matrix can be seen as a data table or as stacked column vectors.",
        distractors=(
            "A matrix is only used for solving systems of equations.",
            "A matrix is always a single column vector.",
        ),
        hint="Think: data tables, images, transformations, stacks of vectors.",
    ),
    "slicing_halfopen": _ConceptCard(
        title="Half-open intervals",
        prompt="In Python slicing, what does the slice\n" + display_math(r"\texttt{1:4}") + "\nselect?",
        correct="Indices 1, 2, 3",
        distractors=("Indices 1, 2, 3, 4", "Indices 0, 1, 2, 3"),
        hint="Stop is excluded.",
    ),
    "identity_def": _ConceptCard(
        title="Identity matrix",
        prompt="Which matrix has 1s on the diagonal and 0s elsewhere?",
        correct="Identity matrix",
        distractors=("Diagonal matrix", "Upper triangular matrix"),
        hint="Identity is a special diagonal matrix with all diagonal entries = 1.",
    ),
    "diagonal_def": _ConceptCard(
        title="Diagonal definition",
        prompt="A diagonal matrix is a square matrix where:",
        correct="Only diagonal entries may be nonzero.",
        distractors=("All entries above the diagonal are 0.", "All entries are 1."),
        hint="Triangular is about above/below diagonal; diagonal means only diagonal may be nonzero.",
    ),
    "triangular_def": _ConceptCard(
        title="Triangular definition",
        prompt="An **upper triangular** matrix is a square matrix where:",
        correct="All entries below the diagonal are 0.",
        distractors=("All entries above the diagonal are 0.", "Only diagonal entries are 1."),
        hint="Upper = zeros below. Lower = zeros above.",
    ),
    "star_vs_at": _ConceptCard(
        title="* vs @",
        prompt="In NumPy, which operator performs **standard matrix multiplication**?",
        correct="`@`",
        distractors=("`*`", "`**`"),
        hint="`*` is element-wise; `@` is matrix multiplication.",
    ),
    "hadamard_def": _ConceptCard(
        title="Hadamard product",
        prompt="Hadamard (element-wise) multiplication is:",
        correct="Multiply entries component-wise (same shape required)",
        distractors=("Dot product of rows and columns", "Only multiply diagonal entries"),
        hint="Hadamard = element-by-element.",
    ),
    "shifting_diagonal_only": _ConceptCard(
        title="Shifting",
        prompt="Which operation changes **only the diagonal** entries of a square matrix\n"
        + display_math(r"\mathbf{A}")
        + "\n?",
        correct=r"$$\mathbf{A} + \lambda\mathbf{I}$$",
        distractors=(r"$$\mathbf{A} + \lambda$$", r"$$\lambda\mathbf{A}$$"),
        hint="Shifting is A + λI, which touches only the diagonal.",
    ),
    "weighted_sum_columns": _ConceptCard(
        title="Columns interpretation",
        prompt="If the columns of\n"
        + display_math(r"\mathbf{A}")
        + "\nare vectors\n"
        + display_math(r"\mathbf{a}_1,\dots,\mathbf{a}_n,")
        + "\nwhich interpretation matches\n"
        + display_math(r"\mathbf{A}\vec w")
        + "\n?",
        correct="Weighted sum of columns of A",
        distractors=("Element-wise multiplication of A and w", "Always equals the dot product"),
        hint="A w = w₁a₁ + w₂a₂ + ...",
    ),
    "transpose_product_rule": _ConceptCard(
        title="LIVE EVIL",
        prompt="Which identity is correct?",
        correct=r"$$(AB)^T = B^T A^T$$",
        distractors=(r"$$(AB)^T = A^T B^T$$", r"$$(AB)^T = AB$$"),
        hint="Transpose reverses order: (AB)ᵀ = BᵀAᵀ.",
    ),
    "double_transpose": _ConceptCard(
        title="Double transpose",
        prompt="True or false:\n" + display_math(r"(\mathbf{A}^T)^T = \mathbf{A}."),
        correct="true",
        distractors=(),
        hint="Transpose is an involution: doing it twice returns the original.",
        true_false=True,
    ),
    "symmetric_definition": _ConceptCard(
        title="Symmetry",
        prompt="A matrix\n" + display_math(r"\mathbf{A}") + "\nis **symmetric** if:",
        correct=r"$$\mathbf{A}=\mathbf{A}^T$$",
        distractors=(r"$$\mathbf{A}^T=-\mathbf{A}$$", r"$$\mathbf{A}\mathbf{A}=\mathbf{I}$$"),
        hint="Symmetric means mirrored across the diagonal: A = Aᵀ.",
    ),
    "ata_is_symmetric": _ConceptCard(
        title="AᵀA symmetry",
        prompt="True or false: for any matrix\n"
        + display_math(r"\mathbf{A},")
        + "\nthe matrix\n"
        + display_math(r"\mathbf{A}^T\mathbf{A}")
        + "\nis symmetric.",
        correct="true",
        distractors=(),
        hint="Use LIVE EVIL: (AᵀA)ᵀ = Aᵀ(Aᵀ)ᵀ = AᵀA.",
        true_false=True,
    ),
}


_Parts = tuple[Exercise, Expected]


@dataclass(frozen=True, slots=True)
class _Context:
    rng: SeededRng
    difficulty: Difficulty
    exercise_id: str
    topic: str
    value_range: int
    options: GenOptions | None = None

    def single(self, title: str, prompt: str, correct: str, distractors: Sequence[str], hint: str) -> _Parts:
        option_list, correct_id = shuffled_choices(self.rng, correct, distractors)
        exercise = SingleChoiceExercise(
            id=self.exercise_id,
            topic=self.topic,
            difficulty=self.difficulty,
            title=title,
            prompt=prompt,
            options=option_list,
            hint=hint,
        )
        return exercise, SingleChoiceExpected(option_id=correct_id)

    def numeric(self, title: str, prompt: str, value: float, hint: str) -> _Parts:
        exercise = NumericExercise(
            id=self.exercise_id,
            topic=self.topic,
            difficulty=self.difficulty,
            title=title,
            prompt=prompt,
            hint=hint,
        )
        return exercise, NumericExpected(value=value, tolerance=0.0)

    def matrix(self, title: str, prompt: str, values: Sequence[Sequence[float]], hint: str) -> _Parts:
        tolerance = tolerance_for(self.difficulty, ExerciseKind.MATRIX_INPUT)
        exercise = MatrixInputExercise(
            id=self.exercise_id,
            topic=self.topic,
            difficulty=self.difficulty,
            title=title,
            prompt=prompt,
            hint=hint,
            rows=len(values),
            cols=len(values[0]),
            tolerance=tolerance,
            step=1,
            integer_only=True,
        )
        return exercise, matrix_expected(values, tolerance)


def _in_r(symbol: str, rows: int, cols: int) -> str:
    return rf"{symbol}\in\mathbb{{R}}^{{{shape_latex(rows, cols)}}}"


def _concept(ctx: _Context, card: _ConceptCard) -> _Parts:
    if not card.true_false:
        return ctx.single(card.title, card.prompt, card.correct, card.distractors, card.hint)
    exercise = SingleChoiceExercise(
        id=ctx.exercise_id,
        topic=ctx.topic,
        difficulty=ctx.difficulty,
        title=card.title,
        prompt=card.prompt,
        options=choices(("true", "True"), ("false", "False")),
        hint=card.hint,
    )
    return exercise, SingleChoiceExpected(option_id=card.correct)


def _shape_rows_cols(ctx: _Context) -> _Parts:
    m = ctx.rng.randint(2, 6)
    n = ctx.rng.randint(2, 6)
    prompt = f"If\n{display_math(_in_r(_A, m, n))}\nhow many rows and columns does A have?"
    return ctx.single(
        "Matrix shape",
        prompt,
        f"{m} rows, {n} columns",
        [f"{n} rows, {m} columns", f"{m + n} total rows/cols"],
        "m×n means rows × columns.",
    )


def _shape_entries_count(ctx: _Context) -> _Parts:
    m = ctx.rng.randint(2, 6)
    n = ctx.rng.randint(2, 6)
    prompt = f"If\n{display_math(_in_r(_A, m, n))}\nhow many total entries does A have?"
    return ctx.numeric("How many entries?", prompt, m * n, "Total entries = rows × columns.")


def _indexing_math_to_numpy(ctx: _Context) -> _Parts:
    i = ctx.rng.randint(2, 6)
    j = ctx.rng.randint(2, 6)
    prompt = (
        f"In math,\n{display_math(f'a_{{{i},{j}}}')}\nmeans row {i}, column {j}.\n\n"
        "In NumPy (0-based), which index selects that entry from matrix A?"
    )
    return ctx.single(
        "Indexing (math vs NumPy)",
        prompt,
        f"A[{i - 1}, {j - 1}]",
        [f"A[{i}, {j}]", f"A[{j - 1}, {i - 1}]"],
        "Subtract 1 from each coordinate for 0-based indexing.",
    )


def _slicing_shape(ctx: _Context) -> _Parts:
    rng = ctx.rng
    rows = rng.randint(5, 10)
    cols = rng.randint(6, 12)
    r0 = rng.randint(0, rows - 3)
    r1 = rng.randint(r0 + 1, rows - 1)
    c0 = rng.randint(0, cols - 4)
    c1 = rng.randint(c0 + 1, cols - 1)
    slice_expr = rf"\texttt{{A[{r0}:{r1},\ {c0}:{c1}]}}"
    prompt = f"Let A be a {rows}×{cols} matrix in NumPy.\n\nWhat is the shape of\n{display_math(slice_expr)}\n?"
    return ctx.single(
        "Slicing shape",
        prompt,
        f"{r1 - r0}×{c1 - c0}",
        [f"{c1 - c0}×{r1 - r0}", f"{r1}×{c1}"],
        "Stop is exclusive: rows = r1−r0, cols = c1−c0.",
    )


def _matmul_shape(ctx: _Context) -> _Parts:
    m = ctx.rng.randint(2, 4)
    n = ctx.rng.randint(2, 5)
    k = ctx.rng.randint(2, 5)
    shapes = _in_r(r"\mathbf{A}", m, n) + r" \quad \text{and} \quad " + _in_r(r"\mathbf{B}", n, k)
    prompt = f"If\n{display_math(shapes + ',')}\nwhat is the shape of AB?"
    return ctx.single(
        "Matmul shape",
        prompt,
        f"{m}×{k}",
        [f"{n}×{n}", f"{k}×{m}"],
        "Inner dims match; result takes outer dims.",
    )


def _valid_or_invalid(ctx: _Context) -> _Parts:
    rng = ctx.rng
    m = rng.randint(2, 4)
    n = rng.randint(2, 5)
    inner = n if rng.randint(0, 1) == 1 else rng.randint(2, 6)
    cols_of_b = rng.randint(2, 6)
    shapes = _in_r(r"\mathbf{A}", m, n) + r",\quad " + _in_r(r"\mathbf{B}", inner, cols_of_b)
    exercise = SingleChoiceExercise(
        id=ctx.exercise_id,
        topic=ctx.topic,
        difficulty=ctx.difficulty,
        title="Matmul validity",
        prompt=f"Is the product valid?\n\n{display_math(shapes)}\n\nIs AB defined?",
        options=choices(("yes", "Yes"), ("no", "No")),
        hint="Valid iff inner dimensions match.",
    )
    return exercise, SingleChoiceExpected(option_id="yes" if inner == n else "no")


def _matmul_entry_dot(ctx: _Context) -> _Parts:
    a = rand_matrix(ctx.rng, 2, 2, ctx.value_range)
    b = rand_matrix(ctx.rng, 2, 2, ctx.value_range)
    i = ctx.rng.choice((0, 1))
    j = ctx.rng.choice((0, 1))
    value = matmul(a, b)[i][j]
    setup = rf"\mathbf{{A}}={latex_matrix(a)},\quad \mathbf{{B}}={latex_matrix(b)},\quad \mathbf{{C}}=\mathbf{{A}}\mathbf{{B}}."
    prompt = f"Let\n{display_math(setup)}\n\nCompute the entry\n{display_math(f'c_{{{i + 1},{j + 1}}}.')}"
    return ctx.numeric("One matmul entry", prompt, value, "cᵢⱼ = (row i of A) · (col j of B).")


def _matmul_full_matrix(ctx: _Context) -> _Parts:
    a = param(ctx.options, "a", lambda: None)
    b = param(ctx.options, "b", lambda: None)
    if a is None or b is None:
        max_dim = by_difficulty(ctx.difficulty, 3, 4, 5)
        m = ctx.rng.randint(2, max_dim)
        n = ctx.rng.randint(2, max_dim)
        k = ctx.rng.randint(2, max_dim)
        a = rand_matrix(ctx.rng, m, n, ctx.value_range)
        b = rand_matrix(ctx.rng, n, k, ctx.value_range)
    m, n, k = len(a), len(b), len(b[0])
    shapes = _in_r(r"\mathbf{A}", m, n) + r",\quad " + _in_r(r"\mathbf{B}", n, k) + "."
    values = rf"\mathbf{{A}}={latex_matrix(a)},\qquad \mathbf{{B}}={latex_matrix(b)}."
    prompt = (
        f"Let\n{display_math(shapes)}\n\n{display_math(values)}\n\n"
        f"Compute the full product:\n{display_math(_C_EQUALS_AB)}"
    )
    return ctx.matrix("Compute A·B (full matrix)", prompt, matmul(a, b), "Each entry cᵢⱼ is (row i of A) · (col j of B).")


def _matvec_shape(ctx: _Context) -> _Parts:
    m = ctx.rng.randint(2, 5)
    n = ctx.rng.randint(2, 6)
    shapes = _in_r(r"\mathbf{A}", m, n) + rf" \quad \text{{and}} \quad \vec x\in\mathbb{{R}}^{{{n}}},"
    prompt = f"If\n{display_math(shapes)}\nwhat is the shape of Ax?"
    return ctx.single(
        "Mat-vec shape",
        prompt,
        f"{m}×1 (a vector in ℝ^{m})",
        [f"{n}×1 (a vector in ℝ^{n})", f"{m}×{n}"],
        "(m×n)(n×1) = (m×1).",
    )


def _compute_small_matvec(ctx: _Context) -> _Parts:
    a = rand_matrix(ctx.rng, 2, 2, ctx.value_range)
    x = [rand_nonzero_int(ctx.rng, -4, 4), rand_nonzero_int(ctx.rng, -4, 4)]
    y = matvec(a, x)
    ask_first = ctx.rng.randint(0, 1) == 1
    setup = rf"\mathbf{{A}}={latex_matrix(a)},\quad \vec x={latex_column(x)},\quad \vec y=\mathbf{{A}}\vec x."
    prompt = f"Let\n{display_math(setup)}\n\nCompute\n{display_math('y_1.' if ask_first else 'y_2.')}"
    return ctx.numeric("Compute A·x", prompt, y[0] if ask_first else y[1], "Multiply A by x: each row dot the vector.")


def _transpose_shape(ctx: _Context) -> _Parts:
    m = ctx.rng.randint(2, 6)
    n = ctx.rng.randint(2, 6)
    prompt = f"If\n{display_math(_in_r(_A, m, n) + ',')}\nwhat is the shape of Aᵀ?"
    return ctx.single("Transpose shape", prompt, f"{n}×{m}", [f"{m}×{n}", f"{m}×{m}"], "Transpose swaps rows and columns.")


def _transpose_fill_matrix(ctx: _Context) -> _Parts:
    max_dim = by_difficulty(ctx.difficulty, 3, 4, 5)
    m = ctx.rng.randint(2, max_dim)
    n = ctx.rng.randint(2, max_dim)
    a = rand_matrix(ctx.rng, m, n, ctx.value_range)
    setup = _in_r(r"\mathbf{A}", m, n) + rf",\qquad \mathbf{{A}}={latex_matrix(a)}."
    prompt = f"Let\n{display_math(setup)}\n\nCompute the transpose:\n{display_math(_A_TRANSPOSE)}"
    return ctx.matrix("Compute Aᵀ (full matrix)", prompt, transpose(a), "Transpose swaps rows and columns: (Aᵀ)ᵢⱼ = Aⱼᵢ.")


def _ata_shape(ctx: _Context) -> _Parts:
    m = ctx.rng.randint(2, 6)
    n = ctx.rng.randint(2, 6)
    prompt = f"If\n{display_math(_in_r(_A, m, n) + ',')}\nwhat is the shape of AᵀA?"
    return ctx.single("Shape of AᵀA", prompt, f"{n}×{n}", [f"{m}×{m}", f"{m}×{n}"], "Aᵀ is n×m, so (n×m)(m×n)=n×n.")


_BUILDERS: dict[str, Callable[[_Context], _Parts]] = {
    "shape_rows_cols": _shape_rows_cols,
    "shape_entries_count": _shape_entries_count,
    "indexing_math_to_numpy": _indexing_math_to_numpy,
    "slicing_shape": _slicing_shape,
    "matmul_shape": _matmul_shape,
    "valid_or_invalid": _valid_or_invalid,
    "matmul_entry_dot": _matmul_entry_dot,
    "matmul_full_matrix": _matmul_full_matrix,
    "matvec_shape": _matvec_shape,
    "compute_small_matvec": _compute_small_matvec,
    "transpose_shape": _transpose_shape,
    "transpose_fill_matrix": _transpose_fill_matrix,
    "ata_shape": _ata_shape,
}


def generate_matrices_part1(
    rng: SeededRng,
    difficulty: Difficulty,
    exercise_id: str,
    options: GenOptions | None = None,
) -> GenOut:
    raw_variant = options.variant if options is not None else None
    if raw_variant:
        variant = MatricesPart1Variant.parse(raw_variant)
    else:
        variant = rng.choice(list(MatricesPart1Variant))

    archetype = pick_archetype(rng, options, ARCHETYPE_WEIGHTS[variant])
    ctx = _Context(
        rng=rng,
        difficulty=difficulty,
        exercise_id=exercise_id,
        topic=variant.value,
        value_range=by_difficulty(difficulty, 5, 9, 12),
        options=options,
    )
    card = _CONCEPTS.get(archetype)
    exercise, expected = _concept(ctx, card) if card is not None else _BUILDERS[archetype](ctx)
    return GenOut(exercise=exercise, expected=expected, archetype=archetype)
