# solver_harness/jobs/sample_run_job.py
"""
Sample run orchestration.

This job runs one sample problem end to end:
1. Build OptimizationProblem from the sample's ProblemBuilder and resolve
   the solver backend (fails before any other work when it is unavailable)
2. Run FeasibilityChecker (solver is skipped when it reports errors)
3. Solve with the OR-Tools MathOpt adapter
4. Check the reported values against every bound and constraint
5. Render the human-readable report

Nothing is persisted; the returned dict is the only artifact.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from solver_harness.schemas.feasibility import FeasibilityReport
from solver_harness.schemas.optimization_solution import SolveResult
from solver_harness.services.optimization.feasibility_checker import FeasibilityChecker
from solver_harness.services.optimization.solution_checker import check_solution
from solver_harness.services.sample_problems import get_sample
from solver_harness.services.solution_report import format_solve_result
from solver_harness.services.solvers.ortools_mathopt_adapter import (
    MathOptConfig,
    OrtoolsMathOptSolverAdapter,
    resolve_backend,
)

logger = logging.getLogger(__name__)


def run_sample(
    *,
    sample_name: str,
    solver_config: Optional[MathOptConfig] = None,
    tolerance: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Build, check, solve and report one sample problem.

    Args:
        sample_name: One of SAMPLE_PROBLEMS ("toy_lp", "integer_vector", "matrix_qp")
        solver_config: Optional MathOpt configuration (backend, time limit, ...)
        tolerance: Optional tolerance for the post-solve check

    Returns:
        Dict with sample_name, status, objective_value, variable_values,
        feasibility/solution check summaries, the SolveResult and the report text.

    Raises:
        ValueError: unknown sample name
        SolverUnavailableError: requested backend cannot be created
    """
    builder = get_sample(sample_name)
    problem = builder.build()
    solver_config = solver_config or MathOptConfig()
    resolve_backend(solver_config.backend, problem)

    logger.info(
        "Starting sample run",
        extra={
            "problem": problem.name,
            "variable_count": len(problem.variables),
            "constraint_count": len(problem.constraints),
        },
    )

    # 1) Feasibility check (pure, deterministic)
    feasibility: FeasibilityReport = FeasibilityChecker().check(problem)
    if not feasibility.is_feasible:
        logger.warning(
            "Problem failed pre-solve checks - solver will not run",
            extra={"problem": problem.name, "errors_count": len(feasibility.errors)},
        )
        result = SolveResult(
            status="model_invalid",
            diagnostics={
                "feasibility_summary": feasibility.summary,
                "feasibility_errors": [
                    {"code": err.code, "message": err.message} for err in feasibility.errors[:5]
                ],
            },
        )
        return {
            "sample_name": sample_name,
            "status": result.status,
            "objective_value": None,
            "variable_values": {},
            "feasibility_summary": feasibility.summary,
            "solution_check_summary": None,
            "result": result,
            "report": format_solve_result(result, problem.objective.direction),
        }

    # 2) Solve
    adapter = OrtoolsMathOptSolverAdapter(config=solver_config)
    result = adapter.solve(problem)

    # 3) Verify
    solution_check = check_solution(problem, result, tolerance=tolerance)

    logger.info(
        "Sample run completed",
        extra={
            "problem": problem.name,
            "status": result.status,
            "objective_value": result.objective_value,
            "solution_check": solution_check.summary,
        },
    )

    return {
        "sample_name": sample_name,
        "status": result.status,
        "objective_value": result.objective_value,
        "variable_values": dict(result.variable_values),
        "feasibility_summary": feasibility.summary,
        "solution_check_summary": solution_check.summary,
        "solution_check": solution_check,
        "result": result,
        "report": format_solve_result(result, problem.objective.direction),
    }
