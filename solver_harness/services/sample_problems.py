# solver_harness/services/sample_problems.py
"""
Sample problems shipped with the harness.

- toy_lp: integer x, y >= 0; max 3x + 4y
    s.t. x + 2y <= 14, 3x - y >= 0, x - y <= 2
- integer_vector: integer x_1..x_n >= 0; max sum((i + 1) * x_i)
    s.t. sum(i * x_i) <= 10, 2x_1 - x_2 - ... - x_n >= 5
- matrix_qp: continuous x[i, j] >= 0 on an m x n grid; min sum(x_ij^2 + 3 x_ij)
    s.t. each row sum <= 5, each column sum >= 2

Each function returns a filled ProblemBuilder; nothing is solved here.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, List

from solver_harness.services.optimization.problem_builder import ProblemBuilder


def build_toy_lp() -> ProblemBuilder:
    builder = ProblemBuilder(name="toy_lp")

    x = builder.create_int_variable(0.0, math.inf, "x")
    y = builder.create_int_variable(0.0, math.inf, "y")

    # x + 2y <= 14
    builder.add_constraint(-math.inf, 14, {x: 1, y: 2}, name="c0")
    # 3x - y >= 0
    builder.add_constraint(0, math.inf, {x: 3, y: -1}, name="c1")
    # x - y <= 2
    builder.add_constraint(-math.inf, 2, {x: 1, y: -1}, name="c2")

    builder.set_objective({x: 3, y: 4}, direction="maximize")
    return builder


def build_integer_vector_program(n: int = 5, capacity: float = 10.0, floor: float = 5.0) -> ProblemBuilder:
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")

    builder = ProblemBuilder(name="integer_vector")
    builder.metadata["n"] = n

    x = [builder.create_int_variable(0.0, math.inf, f"x_{i + 1}") for i in range(n)]

    # x_1 + 2x_2 + ... + n x_n <= capacity
    builder.add_constraint(
        -math.inf, capacity, {x[i]: i + 1 for i in range(n)}, name="constraint1"
    )
    # 2x_1 - x_2 - ... - x_n >= floor
    builder.add_constraint(
        floor, math.inf, {x[i]: (2 if i == 0 else -1) for i in range(n)}, name="constraint2"
    )

    # max 2x_1 + 3x_2 + ... + (n + 1) x_n
    builder.set_objective({x[i]: i + 2 for i in range(n)}, direction="maximize")
    return builder


def build_matrix_qp(
    rows: int = 3,
    cols: int = 4,
    row_cap: float = 5.0,
    col_floor: float = 2.0,
) -> ProblemBuilder:
    if rows < 1 or cols < 1:
        raise ValueError(f"rows and cols must be >= 1, got {rows}x{cols}")

    builder = ProblemBuilder(name="matrix_qp")
    builder.metadata.update({"rows": rows, "cols": cols})

    x: List[List] = [
        [builder.create_num_variable(0.0, math.inf, f"x_{i}_{j}") for j in range(cols)]
        for i in range(rows)
    ]

    for i in range(rows):
        builder.add_constraint(
            -math.inf, row_cap, {x[i][j]: 1 for j in range(cols)}, name=f"row_constraint_{i}"
        )

    for j in range(cols):
        builder.add_constraint(
            col_floor, math.inf, {x[i][j]: 1 for i in range(rows)}, name=f"column_constraint_{j}"
        )

    # min sum(x_ij^2 + 3 x_ij)
    cells = [x[i][j] for i in range(rows) for j in range(cols)]
    builder.set_objective(
        {v: 3 for v in cells},
        quadratic_coefficients={(v, v): 1 for v in cells},
        direction="minimize",
    )
    return builder


SAMPLE_PROBLEMS: Dict[str, Callable[[], ProblemBuilder]] = {
    "toy_lp": build_toy_lp,
    "integer_vector": build_integer_vector_program,
    "matrix_qp": build_matrix_qp,
}


def get_sample(name: str) -> ProblemBuilder:
    factory = SAMPLE_PROBLEMS.get((name or "").strip().lower())
    if factory is None:
        raise ValueError(
            f"Unknown sample problem: {name!r} (available: {', '.join(SAMPLE_PROBLEMS)})"
        )
    return factory()
