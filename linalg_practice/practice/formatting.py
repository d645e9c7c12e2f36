from __future__ import annotations

from collections.abc import Sequence

from linalg_practice.practice.types import Vec3


def fmt_number(value: float) -> str:
    """Render a number without a trailing ``.0`` for integral values."""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if value == 0:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def fmt_vec2(v: Vec3) -> str:
    return f"({fmt_number(v.x)}, {fmt_number(v.y)})"


def fmt_2x2(m: Sequence[Sequence[float]]) -> str:
    return f"[[{fmt_number(m[0][0])}, {fmt_number(m[0][1])}], [{fmt_number(m[1][0])}, {fmt_number(m[1][1])}]]"


def shape_latex(rows: int, cols: int) -> str:
    return rf"{rows}\times{cols}"


def latex_matrix(m: Sequence[Sequence[float]]) -> str:
    body = r"\\ ".join(" & ".join(fmt_number(cell) for cell in row) for row in m)
    return rf"\begin{{bmatrix}}{body}\end{{bmatrix}}"


def latex_column(values: Sequence[float]) -> str:
    body = r"\\ ".join(fmt_number(item) for item in values)
    return rf"\begin{{bmatrix}}{body}\end{{bmatrix}}"


def display_math(expression: str) -> str:
    return f"$$\n{expression}\n$$"


def latex_row(values: Sequence[float]) -> str:
    body = " & ".join(fmt_number(item) for item in values)
    return rf"\begin{{bmatrix}}{body}\end{{bmatrix}}"


def numpy_shape(rows: int, cols: int | None = None) -> str:
    return f"({rows},)" if cols is None else f"({rows}, {cols})"
