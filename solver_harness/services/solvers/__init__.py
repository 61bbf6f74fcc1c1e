# solver_harness/services/solvers/__init__.py
"""
Solver adapters for optimization problems.

Each adapter translates OptimizationProblem into solver-specific format,
runs the solver, and returns SolveResult.
"""
from solver_harness.services.solvers.errors import (
    InvalidBoundsError,
    InvalidProblemError,
    SolverHarnessError,
    SolverUnavailableError,
)
from solver_harness.services.solvers.ortools_mathopt_adapter import (
    SUPPORTED_BACKENDS,
    MathOptConfig,
    OrtoolsMathOptSolverAdapter,
    resolve_backend,
)

__all__ = [
    "InvalidBoundsError",
    "InvalidProblemError",
    "SolverHarnessError",
    "SolverUnavailableError",
    "SUPPORTED_BACKENDS",
    "MathOptConfig",
    "OrtoolsMathOptSolverAdapter",
    "resolve_backend",
]
