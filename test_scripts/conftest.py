# Shared fixtures for solver harness tests
from __future__ import annotations

import math

import pytest

from solver_harness.schemas.optimization_solution import SolveResult
from solver_harness.services.optimization.problem_builder import ProblemBuilder
from solver_harness.services.solvers.ortools_mathopt_adapter import MathOptConfig


class StubAdapter:
    """Adapter double: records the problem and returns a canned result."""

    def __init__(self, result: SolveResult) -> None:
        self.result = result
        self.problems = []

    def solve(self, problem):
        self.problems.append(problem)
        return self.result


@pytest.fixture
def gscip_config() -> MathOptConfig:
    return MathOptConfig(backend="gscip", time_limit_seconds=60.0)


@pytest.fixture
def small_lp_builder() -> ProblemBuilder:
    """Continuous LP: max x + y s.t. x + 2y <= 4, x <= 3, x, y >= 0 (optimum 3.5)."""
    builder = ProblemBuilder(name="small_lp")
    x = builder.create_num_variable(0.0, math.inf, "x")
    y = builder.create_num_variable(0.0, math.inf, "y")
    builder.add_constraint(-math.inf, 4, {x: 1, y: 2}, name="cap")
    builder.add_constraint(-math.inf, 3, {x: 1}, name="x_cap")
    builder.set_objective({x: 1, y: 1}, direction="maximize")
    return builder


@pytest.fixture
def stub_adapter_factory():
    return StubAdapter
