# solver_harness/services/optimization/feasibility_checker.py
"""
Fast, deterministic feasibility checks BEFORE calling the solver.
Operates purely on OptimizationProblem.

This catches hard contradictions (undeclared variables, inverted constraint
bounds, integer variables with no integer in range) and cheap bound
impossibilities that would make the solver return infeasible anyway.
"""
from __future__ import annotations

import math
from typing import Dict, List, Set, Tuple

from solver_harness.schemas.feasibility import FeasibilityIssue, FeasibilityReport
from solver_harness.schemas.optimization_problem import (
    Constraint,
    DecisionVariable,
    OptimizationProblem,
)

_BOUND_TOLERANCE = 1e-9


def activity_range(constraint: Constraint, variables: Dict[str, DecisionVariable]) -> Tuple[float, float]:
    """
    Smallest and largest value sum(coef * x) can take over the variable bounds.

    Unknown variables and zero coefficients are skipped.
    """
    lo = 0.0
    hi = 0.0
    for name, coef in constraint.coefficients.items():
        var = variables.get(name)
        if var is None or coef == 0:
            continue
        if coef > 0:
            lo += coef * var.lower_bound
            hi += coef * var.upper_bound
        else:
            lo += coef * var.upper_bound
            hi += coef * var.lower_bound
    return lo, hi


class FeasibilityChecker:
    """
    Fast, deterministic feasibility checks BEFORE calling the solver.
    """

    def check(self, problem: OptimizationProblem) -> FeasibilityReport:
        """
        Run all feasibility checks and return structured report.

        Args:
            problem: The optimization problem to check

        Returns:
            FeasibilityReport with errors and warnings
        """
        issues: List[FeasibilityIssue] = []

        variables = {v.name: v for v in problem.variables}

        # --- 1) Variable sanity ---
        issues.extend(self._check_variables(problem))

        # --- 2) Constraints ---
        issues.extend(self._check_constraint_references(problem, set(variables)))
        issues.extend(self._check_constraint_bounds(problem, variables))

        # --- 3) Objective ---
        issues.extend(self._check_objective(problem, set(variables)))

        report = FeasibilityReport.from_issues(issues)
        report.details = {
            "variable_count": len(problem.variables),
            "constraint_count": len(problem.constraints),
            "integer_variable_count": sum(1 for v in problem.variables if v.is_integer),
            "quadratic_objective": problem.objective.is_quadratic,
        }
        return report

    # -------------------------
    # Variables
    # -------------------------

    def _check_variables(self, problem: OptimizationProblem) -> List[FeasibilityIssue]:
        issues: List[FeasibilityIssue] = []
        if not problem.variables:
            issues.append(
                FeasibilityIssue(
                    severity="error",
                    code="NO_VARIABLES",
                    message="Problem has no decision variables.",
                )
            )

        for v in problem.variables:
            if not v.is_integer or math.isinf(v.lower_bound) or math.isinf(v.upper_bound):
                continue
            # An integer variable needs at least one integer inside [lb, ub]
            if math.ceil(v.lower_bound - _BOUND_TOLERANCE) > math.floor(v.upper_bound + _BOUND_TOLERANCE):
                issues.append(
                    FeasibilityIssue(
                        severity="error",
                        code="INTEGER_DOMAIN_EMPTY",
                        message=f"Integer variable {v.name} has no integer value within its bounds.",
                        variable_names=[v.name],
                        details={"lower_bound": v.lower_bound, "upper_bound": v.upper_bound},
                    )
                )
        return issues

    # -------------------------
    # Constraints
    # -------------------------

    def _check_constraint_references(
        self, problem: OptimizationProblem, declared: Set[str]
    ) -> List[FeasibilityIssue]:
        issues: List[FeasibilityIssue] = []
        for c in problem.constraints:
            missing = sorted(k for k in c.coefficients if k not in declared)
            if missing:
                issues.append(
                    FeasibilityIssue(
                        severity="error",
                        code="CONSTRAINT_UNKNOWN_VARIABLE",
                        message=f"Constraint {c.name} references undeclared variable(s).",
                        variable_names=missing,
                        constraint_name=c.name,
                    )
                )
        return issues

    def _check_constraint_bounds(
        self, problem: OptimizationProblem, variables: Dict[str, DecisionVariable]
    ) -> List[FeasibilityIssue]:
        issues: List[FeasibilityIssue] = []
        for c in problem.constraints:
            if c.lower_bound > c.upper_bound:
                issues.append(
                    FeasibilityIssue(
                        severity="error",
                        code="CONSTRAINT_INVERTED_BOUNDS",
                        message=f"Constraint {c.name} has lower_bound > upper_bound.",
                        constraint_name=c.name,
                        details={"lower_bound": c.lower_bound, "upper_bound": c.upper_bound},
                    )
                )
                continue

            if not any(coef != 0 for coef in c.coefficients.values()):
                # Empty row: activity is always 0
                excludes_zero = c.lower_bound > _BOUND_TOLERANCE or c.upper_bound < -_BOUND_TOLERANCE
                issues.append(
                    FeasibilityIssue(
                        severity="error" if excludes_zero else "warning",
                        code="CONSTRAINT_EMPTY",
                        message=(
                            f"Constraint {c.name} has no non-zero coefficients"
                            + (" and its bounds exclude 0." if excludes_zero else ".")
                        ),
                        constraint_name=c.name,
                    )
                )
                continue

            lo, hi = activity_range(c, variables)
            tol_hi = _BOUND_TOLERANCE * max(1.0, abs(c.upper_bound)) if math.isfinite(c.upper_bound) else 0.0
            tol_lo = _BOUND_TOLERANCE * max(1.0, abs(c.lower_bound)) if math.isfinite(c.lower_bound) else 0.0
            if lo > c.upper_bound + tol_hi or hi < c.lower_bound - tol_lo:
                issues.append(
                    FeasibilityIssue(
                        severity="error",
                        code="CONSTRAINT_BOUND_UNREACHABLE",
                        message=(
                            f"Constraint {c.name} cannot be satisfied within the variable bounds "
                            f"(activity range [{lo}, {hi}], bounds [{c.lower_bound}, {c.upper_bound}])."
                        ),
                        constraint_name=c.name,
                        variable_names=sorted(c.coefficients),
                        details={
                            "min_activity": lo,
                            "max_activity": hi,
                            "lower_bound": c.lower_bound,
                            "upper_bound": c.upper_bound,
                        },
                    )
                )
        return issues

    # -------------------------
    # Objective
    # -------------------------

    def _check_objective(self, problem: OptimizationProblem, declared: Set[str]) -> List[FeasibilityIssue]:
        issues: List[FeasibilityIssue] = []
        referenced = problem.objective.referenced_variables()

        missing = sorted(k for k in referenced if k not in declared)
        if missing:
            issues.append(
                FeasibilityIssue(
                    severity="error",
                    code="OBJECTIVE_UNKNOWN_VARIABLE",
                    message="Objective references undeclared variable(s).",
                    variable_names=missing,
                )
            )

        if not problem.objective.linear_coefficients and not problem.objective.quadratic_terms:
            issues.append(
                FeasibilityIssue(
                    severity="warning",
                    code="OBJECTIVE_EMPTY",
                    message="Objective has no terms; any feasible point is optimal.",
                )
            )
        return issues
