from __future__ import annotations

import math
from collections.abc import Hashable, Iterable, Sequence
from typing import TypeVar

from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.types import Difficulty, ExerciseKind, Vec3

H = TypeVar("H", bound=Hashable)
V = TypeVar("V")

Matrix = list[list[float]]

ZERO_EPSILON = 1e-9
MAX_DRAW_ATTEMPTS = 200
NON_ZERO_VEC_ATTEMPTS = 40

_TOLERANCE_TABLE: dict[ExerciseKind, dict[Difficulty, float]] = {
    ExerciseKind.NUMERIC: {Difficulty.EASY: 0.5, Difficulty.MEDIUM: 0.15, Difficulty.HARD: 0.05},
    ExerciseKind.VECTOR_DRAG_DOT: {Difficulty.EASY: 0.5, Difficulty.MEDIUM: 0.35, Difficulty.HARD: 0.25},
    ExerciseKind.VECTOR_DRAG_TARGET: {Difficulty.EASY: 0.5, Difficulty.MEDIUM: 0.35, Difficulty.HARD: 0.25},
    ExerciseKind.SINGLE_CHOICE: {Difficulty.EASY: 0.0, Difficulty.MEDIUM: 0.0, Difficulty.HARD: 0.0},
    ExerciseKind.MULTI_CHOICE: {Difficulty.EASY: 0.0, Difficulty.MEDIUM: 0.0, Difficulty.HARD: 0.0},
    ExerciseKind.MATRIX_INPUT: {Difficulty.EASY: 0.0, Difficulty.MEDIUM: 0.0, Difficulty.HARD: 0.0},
}


def tolerance_for(difficulty: Difficulty, kind: ExerciseKind) -> float:
    return _TOLERANCE_TABLE[ExerciseKind(kind)][Difficulty(difficulty)]


def by_difficulty(difficulty: Difficulty, easy: V, medium: V, hard: V) -> V:
    """Pick one of three per-difficulty values (decimals, tolerances, ranges)."""
    if difficulty == Difficulty.EASY:
        return easy
    if difficulty == Difficulty.MEDIUM:
        return medium
    return hard


def is_zero(value: float) -> bool:
    return abs(value) < ZERO_EPSILON


def classify_sign(value: float) -> str:
    if is_zero(value):
        return "zero"
    return "positive" if value > 0 else "negative"


def round_to(value: float, decimals: int) -> float:
    # Half-up: 2.5 -> 3, -2.5 -> -2.
    factor = 10**decimals
    rounded = math.floor(value * factor + 0.5) / factor
    return rounded + 0.0


def dot(a: Vec3, b: Vec3) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def dot_n(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        raise ValueError(f"length mismatch: {len(a)} vs {len(b)}")
    return sum(x * y for x, y in zip(a, b, strict=True))


def magnitude_2d(v: Vec3) -> float:
    return math.hypot(v.x, v.y)


def norm(values: Sequence[float]) -> float:
    return math.sqrt(sum(item * item for item in values))


def distance_squared(a: Vec3, b: Vec3) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    dz = a.z - b.z
    return dx * dx + dy * dy + dz * dz


def det2(m: Sequence[Sequence[float]]) -> float:
    return m[0][0] * m[1][1] - m[0][1] * m[1][0]


def inverse2(m: Sequence[Sequence[float]]) -> Matrix | None:
    d = det2(m)
    if is_zero(d):
        return None
    return [
        [m[1][1] / d, -m[0][1] / d],
        [-m[1][0] / d, m[0][0] / d],
    ]


def matmul(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> Matrix:
    inner = len(a[0]) if a else 0
    if inner != len(b):
        raise ValueError(f"shape mismatch: {len(a)}x{inner} times {len(b)}x{len(b[0]) if b else 0}")
    cols = len(b[0]) if b else 0
    return [[sum(row[k] * b[k][j] for k in range(inner)) for j in range(cols)] for row in a]


def matvec(a: Sequence[Sequence[float]], v: Sequence[float]) -> list[float]:
    return [dot_n(row, v) for row in a]


def transpose(m: Sequence[Sequence[float]]) -> Matrix:
    if not m:
        return []
    return [[m[i][j] for i in range(len(m))] for j in range(len(m[0]))]


def rand_matrix(rng: SeededRng, rows: int, cols: int, value_range: int) -> Matrix:
    return [[rng.randint(-value_range, value_range) for _ in range(cols)] for _ in range(rows)]


def make_2x2(rng: SeededRng, value_range: int) -> Matrix:
    return rand_matrix(rng, 2, 2, value_range)


def rand_nonzero_int(rng: SeededRng, min_value: int, max_value: int) -> int:
    for _ in range(MAX_DRAW_ATTEMPTS):
        value = rng.randint(min_value, max_value)
        if value != 0:
            return value
    return max_value if max_value != 0 else min_value


def vec2_for_difficulty(rng: SeededRng, difficulty: Difficulty) -> Vec3:
    if difficulty == Difficulty.EASY:
        return Vec3(x=rng.randint(-4, 4), y=rng.randint(-4, 4))
    if difficulty == Difficulty.MEDIUM:
        return Vec3(x=rng.step(-7, 7, 0.5), y=rng.step(-7, 7, 0.5))
    return Vec3(x=rng.step(-12, 12, 0.5), y=rng.step(-12, 12, 0.5))


def non_zero_vec(rng: SeededRng, difficulty: Difficulty) -> Vec3:
    vector = vec2_for_difficulty(rng, difficulty)
    for _ in range(NON_ZERO_VEC_ATTEMPTS):
        if abs(vector.x) + abs(vector.y) >= 1:
            return vector
        vector = vec2_for_difficulty(rng, difficulty)
    if abs(vector.x) + abs(vector.y) >= 1:
        return vector
    return Vec3(x=1, y=0)


def unique(values: Iterable[H]) -> list[H]:
    return list(dict.fromkeys(values))
