from __future__ import annotations

import logging
import math

import pytest

from solver_harness.schemas.optimization_solution import SolveResult
from solver_harness.services.optimization.problem_builder import ProblemBuilder
from solver_harness.services.solvers.errors import (
    InvalidBoundsError,
    InvalidProblemError,
    SolverUnavailableError,
)
from solver_harness.services.solvers.ortools_mathopt_adapter import MathOptConfig


def test_create_variable_records_bounds_and_domain():
    builder = ProblemBuilder()
    x = builder.create_variable(0, 10, "integer", "x")
    y = builder.create_num_variable(-math.inf, math.inf, "y")

    assert x.name == "x" and x.lower_bound == 0.0 and x.upper_bound == 10.0 and x.is_integer
    assert y.domain == "continuous"
    assert [v.name for v in builder.variables] == ["x", "y"]


def test_create_variable_rejects_inverted_bounds():
    builder = ProblemBuilder()
    with pytest.raises(InvalidBoundsError) as exc:
        builder.create_int_variable(5, 1, "x")
    assert exc.value.name == "x"
    assert isinstance(exc.value, ValueError)
    assert builder.variables == []


def test_create_variable_allows_equal_bounds():
    builder = ProblemBuilder()
    v = builder.create_num_variable(3, 3, "fixed")
    assert v.lower_bound == v.upper_bound == 3.0


def test_create_variable_rejects_duplicate_names():
    builder = ProblemBuilder()
    builder.create_num_variable(0, 1, "x")
    with pytest.raises(ValueError, match="duplicate"):
        builder.create_num_variable(0, 1, "x")


def test_add_constraint_accepts_variables_or_names_and_merges_repeats():
    builder = ProblemBuilder()
    x = builder.create_num_variable(0, 1, "x")
    builder.create_num_variable(0, 1, "y")

    c = builder.add_constraint(-math.inf, 5, {x: 1, "y": 2, "x": 3})
    assert c.name == "c0"
    assert c.coefficients == {"x": 4.0, "y": 2.0}
    assert c.lower_bound == -math.inf and c.upper_bound == 5.0

    named = builder.add_constraint(1, math.inf, {"y": 1}, name="y_floor")
    assert named.name == "y_floor"
    assert len(builder.constraints) == 2


def test_add_constraint_rejects_unknown_variable():
    builder = ProblemBuilder()
    builder.create_num_variable(0, 1, "x")
    with pytest.raises(InvalidProblemError):
        builder.add_constraint(0, 1, {"z": 1})


def test_set_objective_merges_symmetric_quadratic_terms():
    builder = ProblemBuilder()
    x = builder.create_num_variable(0, 1, "x")
    y = builder.create_num_variable(0, 1, "y")

    obj = builder.set_objective(
        {x: 1},
        quadratic_coefficients={(x, y): 1.5, (y, x): 0.5, (x, x): 2},
        direction="maximize",
    )
    assert obj.is_maximize
    assert obj.linear_coefficients == {"x": 1.0}
    terms = {(t.first, t.second): t.coefficient for t in obj.quadratic_terms}
    assert terms == {("x", "y"): 2.0, ("x", "x"): 2.0}


def test_set_objective_rejects_bad_direction():
    builder = ProblemBuilder()
    x = builder.create_num_variable(0, 1, "x")
    with pytest.raises(ValueError):
        builder.set_objective({x: 1}, direction="up")


def test_build_freezes_a_snapshot():
    builder = ProblemBuilder(name="snap")
    x = builder.create_num_variable(0, 1, "x")
    builder.add_constraint(0, 1, {x: 1})
    builder.set_objective({x: 1})
    builder.metadata["k"] = "v"

    problem = builder.build()
    builder.create_num_variable(0, 1, "late")

    assert problem.name == "snap"
    assert problem.variable_names() == ["x"]
    assert problem.metadata == {"k": "v"}
    assert problem.objective.direction == "minimize"


def test_solve_delegates_to_adapter(stub_adapter_factory):
    stub = stub_adapter_factory(SolveResult(status="optimal", variable_values={"x": 1.0}, objective_value=1.0))
    builder = ProblemBuilder(name="delegated", adapter=stub)
    x = builder.create_num_variable(0, 1, "x")
    builder.set_objective({x: 1}, direction="maximize")

    result = builder.solve()

    assert result.is_optimal
    assert len(stub.problems) == 1
    assert stub.problems[0].name == "delegated"


def test_solve_reports_non_optimal_without_values(stub_adapter_factory):
    stub = stub_adapter_factory(SolveResult(status="infeasible"))
    builder = ProblemBuilder(adapter=stub)
    builder.create_num_variable(0, 1, "x")

    result = builder.solve()
    assert result.status == "infeasible"
    assert result.variable_values == {}
    assert result.objective_value is None


def test_solve_with_unavailable_backend_fails_before_solving():
    builder = ProblemBuilder()
    x = builder.create_int_variable(0, 10, "x")
    builder.set_objective({x: 1}, direction="maximize")

    with pytest.raises(SolverUnavailableError) as exc:
        builder.solve(MathOptConfig(backend="cbc"))
    assert exc.value.backend == "cbc"


def test_solve_small_lp_with_gscip(small_lp_builder, gscip_config):
    result = small_lp_builder.solve(gscip_config)

    assert result.status == "optimal"
    assert result.objective_value == pytest.approx(3.5, abs=1e-6)
    assert result.variable_values["x"] == pytest.approx(3.0, abs=1e-6)
    assert result.variable_values["y"] == pytest.approx(0.5, abs=1e-6)


def test_solve_warns_when_config_is_ignored_for_injected_adapter(stub_adapter_factory, caplog):
    stub = stub_adapter_factory(SolveResult(status="optimal", variable_values={"x": 0.0}, objective_value=0.0))
    builder = ProblemBuilder(name="injected", adapter=stub)
    x = builder.create_num_variable(0, 1, "x")
    builder.set_objective({x: 1})

    with caplog.at_level(logging.WARNING, logger="solver_harness.services.optimization.problem_builder"):
        builder.solve(MathOptConfig(backend="glop"))

    assert len(stub.problems) == 1
    assert any("config ignored" in r.getMessage() for r in caplog.records)
