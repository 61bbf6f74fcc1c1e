# solver_harness/services/solution_report.py
"""Human-readable rendering of solve results."""
from __future__ import annotations

from typing import List

from solver_harness.schemas.optimization_problem import ObjectiveDirection
from solver_harness.schemas.optimization_solution import SolveResult


def format_value(value: float) -> str:
    rounded = round(float(value), 6)
    if rounded == 0:
        rounded = 0.0  # no "-0"
    return f"{rounded:g}"


def format_solve_result(result: SolveResult, direction: ObjectiveDirection) -> str:
    """
    Render a SolveResult as console text.

    Only optimal results list variable values; every other status collapses
    into a single "No optimal solution found" line carrying the status.
    """
    if not result.is_optimal:
        return f"No optimal solution found (status: {result.status})."

    lines: List[str] = ["Optimal solution:"]
    for name, value in result.variable_values.items():
        lines.append(f"{name} = {format_value(value)}")

    label = "Maximized" if direction == "maximize" else "Minimized"
    objective = result.objective_value if result.objective_value is not None else float("nan")
    lines.append(f"{label} objective value = {format_value(objective)}")
    return "\n".join(lines)
