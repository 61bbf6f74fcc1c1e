# solver_harness/services/optimization/solution_checker.py
"""
Substitute reported variable values back into the problem and report violations.

Checks, within tolerance:
- variable bounds and integrality
- every constraint's lower/upper bound
- the reported objective value against the recomputed one (warning only)
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from solver_harness.schemas.feasibility import FeasibilityIssue, FeasibilityReport
from solver_harness.schemas.optimization_problem import OptimizationProblem
from solver_harness.schemas.optimization_solution import SolveResult

logger = logging.getLogger(__name__)


def _scaled_tolerance(bound: float, tolerance: float) -> float:
    """Absolute tolerance for comparing against a bound of the given magnitude."""
    if not math.isfinite(bound):
        return tolerance
    return tolerance * max(1.0, abs(bound))


def _violation(value: float, lower: float, upper: float, tolerance: float) -> Optional[float]:
    """Amount by which value leaves [lower, upper] beyond tolerance, else None."""
    if value < lower - _scaled_tolerance(lower, tolerance):
        return lower - value
    if value > upper + _scaled_tolerance(upper, tolerance):
        return value - upper
    return None


def check_solution(
    problem: OptimizationProblem,
    result: SolveResult,
    tolerance: Optional[float] = None,
) -> FeasibilityReport:
    """
    Verify an optimal SolveResult against its problem.

    Args:
        problem: The problem that was solved
        result: Solver output
        tolerance: Absolute tolerance, scaled by bound magnitude (defaults to settings)

    Returns:
        FeasibilityReport; is_feasible is False when any bound, integrality
        or constraint is violated.
    """
    if tolerance is None:
        from solver_harness.config import settings

        tolerance = settings.SOLUTION_TOLERANCE

    if not result.is_optimal:
        return FeasibilityReport.from_issues(
            [
                FeasibilityIssue(
                    severity="warning",
                    code="NO_SOLUTION",
                    message=f"No optimal solution to check (status: {result.status}).",
                    details={"status": result.status},
                )
            ]
        )

    values = result.variable_values
    issues: List[FeasibilityIssue] = []

    # ---- Variables ----
    for v in problem.variables:
        if v.name not in values:
            issues.append(
                FeasibilityIssue(
                    severity="error",
                    code="VALUE_MISSING",
                    message=f"No value reported for variable {v.name}.",
                    variable_names=[v.name],
                )
            )
            continue

        val = float(values[v.name])
        amount = _violation(val, v.lower_bound, v.upper_bound, tolerance)
        if amount is not None:
            issues.append(
                FeasibilityIssue(
                    severity="error",
                    code="VARIABLE_BOUND_VIOLATED",
                    message=f"Variable {v.name}={val} is outside [{v.lower_bound}, {v.upper_bound}].",
                    variable_names=[v.name],
                    details={"value": val, "violation": amount},
                )
            )

        if v.is_integer and abs(val - round(val)) > tolerance:
            issues.append(
                FeasibilityIssue(
                    severity="error",
                    code="INTEGRALITY_VIOLATED",
                    message=f"Integer variable {v.name} has fractional value {val}.",
                    variable_names=[v.name],
                    details={"value": val},
                )
            )

    # ---- Constraints ----
    activities: Dict[str, float] = {}
    for c in problem.constraints:
        act = c.activity(values)
        activities[c.name] = act
        amount = _violation(act, c.lower_bound, c.upper_bound, tolerance)
        if amount is not None:
            issues.append(
                FeasibilityIssue(
                    severity="error",
                    code="CONSTRAINT_VIOLATED",
                    message=(
                        f"Constraint {c.name} activity {act} is outside "
                        f"[{c.lower_bound}, {c.upper_bound}]."
                    ),
                    constraint_name=c.name,
                    variable_names=sorted(c.coefficients),
                    details={"activity": act, "violation": amount},
                )
            )

    # ---- Objective ----
    recomputed = problem.objective.evaluate(values)
    if result.objective_value is not None:
        diff = abs(recomputed - result.objective_value)
        if diff > _scaled_tolerance(result.objective_value, tolerance):
            issues.append(
                FeasibilityIssue(
                    severity="warning",
                    code="OBJECTIVE_MISMATCH",
                    message=(
                        f"Reported objective {result.objective_value} differs from "
                        f"recomputed {recomputed}."
                    ),
                    details={"reported": result.objective_value, "recomputed": recomputed},
                )
            )

    report = FeasibilityReport.from_issues(issues)
    details: Dict[str, Any] = {
        "tolerance": tolerance,
        "constraint_activities": activities,
        "recomputed_objective": recomputed,
    }
    report.details = details

    if not report.is_feasible:
        logger.warning(
            "Reported solution violates the problem",
            extra={"problem": problem.name, "errors_count": len(report.errors)},
        )
    return report
