# solver_harness/services/solvers/ortools_mathopt_adapter.py
"""
OR-Tools MathOpt solver adapter.

Translates OptimizationProblem -> mathopt.Model in order:
1. Resolve backend (fails fast with SolverUnavailableError)
2. Decision variables (continuous / integer, with bounds)
3. Linear constraints (lower <= sum(coef * x) <= upper)
4. Objective (linear + quadratic terms, offset, direction)
5. Solve and map the termination reason to SolveStatus

Values are only extracted when the termination reason is OPTIMAL.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Dict, List, Optional

from ortools.math_opt.python import mathopt

from solver_harness.services.solvers.errors import SolverUnavailableError

if TYPE_CHECKING:
    from solver_harness.config import Settings
    from solver_harness.schemas.optimization_problem import OptimizationProblem
    from solver_harness.schemas.optimization_solution import SolveResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendSpec:
    """A MathOpt solver type and what it can handle."""

    name: str
    solver_type: mathopt.SolverType
    supports_integer: bool
    supports_quadratic_objective: bool
    diagonal_quadratic_only: bool = False


# Backends shipped with the ortools wheel
SUPPORTED_BACKENDS: Dict[str, BackendSpec] = {
    "gscip": BackendSpec("gscip", mathopt.SolverType.GSCIP, True, True),
    "glop": BackendSpec("glop", mathopt.SolverType.GLOP, False, False),
    "pdlp": BackendSpec("pdlp", mathopt.SolverType.PDLP, False, True, diagonal_quadratic_only=True),
}

BACKEND_ALIASES: Dict[str, str] = {
    "scip": "gscip",
}

_TERMINATION_STATUS = {
    mathopt.TerminationReason.OPTIMAL: "optimal",
    mathopt.TerminationReason.FEASIBLE: "feasible",
    mathopt.TerminationReason.INFEASIBLE: "infeasible",
    mathopt.TerminationReason.UNBOUNDED: "unbounded",
    mathopt.TerminationReason.INFEASIBLE_OR_UNBOUNDED: "infeasible_or_unbounded",
    mathopt.TerminationReason.NO_SOLUTION_FOUND: "unknown",
    mathopt.TerminationReason.IMPRECISE: "error",
    mathopt.TerminationReason.NUMERICAL_ERROR: "error",
    mathopt.TerminationReason.OTHER_ERROR: "error",
}


@dataclass(frozen=True)
class MathOptConfig:
    """Configuration for the OR-Tools MathOpt solve call."""

    backend: str = "gscip"
    time_limit_seconds: Optional[float] = None
    enable_output: bool = False
    threads: Optional[int] = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "MathOptConfig":
        return cls(
            backend=settings.SOLVER_BACKEND,
            time_limit_seconds=settings.SOLVER_TIME_LIMIT_SECONDS,
            enable_output=settings.SOLVER_ENABLE_OUTPUT,
            threads=settings.SOLVER_THREADS,
        )


def resolve_backend(name: str, problem: Optional["OptimizationProblem"] = None) -> BackendSpec:
    """
    Look up a backend by name and check it can handle the problem.

    Args:
        name: Backend name (case-insensitive, aliases allowed)
        problem: Optional problem to check capabilities against

    Returns:
        BackendSpec for the backend

    Raises:
        SolverUnavailableError: unknown backend or missing capability
    """
    key = (name or "").strip().lower()
    key = BACKEND_ALIASES.get(key, key)
    spec = SUPPORTED_BACKENDS.get(key)
    if spec is None:
        raise SolverUnavailableError(
            name,
            f"unknown backend (supported: {', '.join(sorted(SUPPORTED_BACKENDS))})",
        )

    if problem is None:
        return spec

    if problem.has_integer_variables and not spec.supports_integer:
        raise SolverUnavailableError(spec.name, "backend does not support integer variables")

    if problem.objective.is_quadratic:
        if not spec.supports_quadratic_objective:
            raise SolverUnavailableError(spec.name, "backend does not support quadratic objectives")
        if spec.diagonal_quadratic_only and any(
            t.first != t.second for t in problem.objective.quadratic_terms if t.coefficient != 0
        ):
            raise SolverUnavailableError(
                spec.name, "backend only supports diagonal quadratic objectives"
            )

    return spec


def _missing_references(problem: "OptimizationProblem") -> List[str]:
    declared = set(problem.variable_names())
    missing = set()
    for c in problem.constraints:
        missing.update(k for k in c.coefficients if k not in declared)
    missing.update(k for k in problem.objective.referenced_variables() if k not in declared)
    return sorted(missing)


def _is_solver_not_linked(error: Exception) -> bool:
    msg = str(error).lower()
    return "not registered" in msg or "not linked" in msg or "unimplemented" in msg


class OrtoolsMathOptSolverAdapter:
    """
    Solver adapter using OR-Tools MathOpt.

    This adapter translates OptimizationProblem -> MathOpt model and back.
    """

    def __init__(self, config: Optional[MathOptConfig] = None) -> None:
        self.config = config or MathOptConfig()

    def solve(self, problem: "OptimizationProblem") -> "SolveResult":
        """
        Build and solve the MathOpt model.

        Returns:
            SolveResult with status; variable values only when optimal.

        Raises:
            SolverUnavailableError: backend unknown, not linked, or unable to
                handle the problem. Raised before any value is reported.
        """
        from solver_harness.schemas.optimization_solution import SolveResult

        backend = resolve_backend(self.config.backend, problem)

        logger.info(
            "Building MathOpt model",
            extra={
                "problem": problem.name,
                "backend": backend.name,
                "variable_count": len(problem.variables),
                "constraint_count": len(problem.constraints),
            },
        )

        missing = _missing_references(problem)
        if missing:
            # Should already be caught by feasibility checker, but keep solver defensive
            logger.error(
                "Problem references undeclared variables",
                extra={"problem": problem.name, "missing": missing[:10]},
            )
            return SolveResult(
                status="model_invalid",
                solver_name=backend.name,
                diagnostics={"error": "undeclared_variables", "missing_variables": missing},
            )

        # ---- Build model ----
        model = mathopt.Model(name=problem.name)

        x: Dict[str, mathopt.Variable] = {}
        for var in problem.variables:
            x[var.name] = model.add_variable(
                lb=var.lower_bound,
                ub=var.upper_bound,
                is_integer=var.is_integer,
                name=var.name,
            )

        for con in problem.constraints:
            lin_con = model.add_linear_constraint(
                lb=con.lower_bound, ub=con.upper_bound, name=con.name
            )
            for name, coef in con.coefficients.items():
                lin_con.set_coefficient(x[name], coef)

        objective = model.objective
        objective.is_maximize = problem.objective.is_maximize
        objective.offset = problem.objective.offset
        for name, coef in problem.objective.linear_coefficients.items():
            objective.set_linear_coefficient(x[name], coef)
        for term in problem.objective.quadratic_terms:
            objective.set_quadratic_coefficient(x[term.first], x[term.second], term.coefficient)

        params = mathopt.SolveParameters(enable_output=bool(self.config.enable_output))
        if self.config.time_limit_seconds is not None:
            params.time_limit = timedelta(seconds=float(self.config.time_limit_seconds))
        if self.config.threads is not None:
            params.threads = int(self.config.threads)

        logger.info(
            "Running MathOpt solver",
            extra={
                "problem": problem.name,
                "backend": backend.name,
                "time_limit_seconds": self.config.time_limit_seconds,
            },
        )

        try:
            result = mathopt.solve(model, backend.solver_type, params=params)
        except (RuntimeError, ValueError) as e:
            if _is_solver_not_linked(e):
                raise SolverUnavailableError(backend.name, str(e)) from e
            logger.error(
                "MathOpt solve failed",
                extra={"problem": problem.name, "backend": backend.name, "error": str(e)},
            )
            return SolveResult(
                status="error",
                solver_name=backend.name,
                diagnostics={"error": str(e)},
            )

        reason = result.termination.reason
        out_status = _TERMINATION_STATUS.get(reason, "unknown")
        solve_time = result.solve_time().total_seconds()

        logger.info(
            "MathOpt solver completed",
            extra={
                "problem": problem.name,
                "backend": backend.name,
                "status": out_status,
                "solve_time_seconds": solve_time,
            },
        )

        diagnostics = {
            "termination_reason": reason.name,
            "termination_detail": result.termination.detail,
            "variable_count": len(problem.variables),
            "constraint_count": len(problem.constraints),
            "quadratic_objective": problem.objective.is_quadratic,
        }

        if out_status != "optimal":
            return SolveResult(
                status=out_status,  # type: ignore[arg-type]
                solver_name=backend.name,
                solve_time_seconds=solve_time,
                diagnostics=diagnostics,
            )

        values = result.variable_values()
        variable_values = {v.name: float(values[x[v.name]]) for v in problem.variables}
        objective_value = float(result.objective_value())

        logger.info(
            "Solution built",
            extra={"problem": problem.name, "objective_value": objective_value},
        )

        return SolveResult(
            status="optimal",
            variable_values=variable_values,
            objective_value=objective_value,
            solver_name=backend.name,
            solve_time_seconds=solve_time,
            diagnostics=diagnostics,
        )
