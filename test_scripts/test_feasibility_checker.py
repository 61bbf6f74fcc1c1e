from __future__ import annotations

import math

from solver_harness.schemas.optimization_problem import (
    Constraint,
    DecisionVariable,
    Objective,
    OptimizationProblem,
    QuadraticTerm,
)
from solver_harness.services.optimization.feasibility_checker import (
    FeasibilityChecker,
    activity_range,
)
from solver_harness.services.sample_problems import SAMPLE_PROBLEMS, get_sample


def _check(**kwargs):
    kwargs.setdefault("objective", Objective(linear_coefficients={"x": 1.0}))
    kwargs.setdefault("variables", [DecisionVariable(name="x", upper_bound=10)])
    return FeasibilityChecker().check(OptimizationProblem(name="t", **kwargs))


def test_samples_pass_feasibility_checks():
    for name in SAMPLE_PROBLEMS:
        report = FeasibilityChecker().check(get_sample(name).build())
        assert report.is_feasible, (name, report.errors)
        assert report.warnings == []


def test_no_variables_is_an_error():
    report = FeasibilityChecker().check(OptimizationProblem(name="empty"))
    assert not report.is_feasible
    assert "NO_VARIABLES" in report.codes()
    assert "OBJECTIVE_EMPTY" in report.codes()


def test_integer_domain_empty():
    report = _check(variables=[DecisionVariable(name="x", lower_bound=0.2, upper_bound=0.8, domain="integer")])
    assert [e.code for e in report.errors] == ["INTEGER_DOMAIN_EMPTY"]
    assert report.errors[0].variable_names == ["x"]


def test_integer_domain_with_infinite_bounds_is_fine():
    report = _check(variables=[DecisionVariable(name="x", lower_bound=-math.inf, domain="integer")])
    assert report.is_feasible


def test_constraint_unknown_variable():
    report = _check(constraints=[Constraint(name="c", upper_bound=1, coefficients={"ghost": 1.0})])
    assert "CONSTRAINT_UNKNOWN_VARIABLE" in report.codes()
    issue = report.errors[0]
    assert issue.constraint_name == "c"
    assert issue.variable_names == ["ghost"]


def test_constraint_inverted_bounds():
    report = _check(constraints=[Constraint(name="c", lower_bound=3, upper_bound=1, coefficients={"x": 1.0})])
    assert report.codes() == ["CONSTRAINT_INVERTED_BOUNDS"]


def test_empty_constraint_warning_or_error():
    ok = _check(constraints=[Constraint(name="c", lower_bound=-1, upper_bound=1)])
    assert ok.is_feasible
    assert ok.codes() == ["CONSTRAINT_EMPTY"]

    bad = _check(constraints=[Constraint(name="c", lower_bound=1, coefficients={"x": 0.0})])
    assert not bad.is_feasible
    assert bad.codes() == ["CONSTRAINT_EMPTY"]


def test_constraint_bound_unreachable():
    # x in [0, 10] so 2x can never reach 25
    report = _check(constraints=[Constraint(name="c", lower_bound=25, coefficients={"x": 2.0})])
    assert report.codes() == ["CONSTRAINT_BOUND_UNREACHABLE"]
    assert report.errors[0].details["max_activity"] == 20.0

    # -x <= -11 is equally unreachable
    report = _check(constraints=[Constraint(name="c", upper_bound=-11, coefficients={"x": -1.0})])
    assert report.codes() == ["CONSTRAINT_BOUND_UNREACHABLE"]


def test_activity_range_with_infinite_bounds():
    variables = {
        "a": DecisionVariable(name="a"),
        "b": DecisionVariable(name="b", lower_bound=-1, upper_bound=2),
    }
    c = Constraint(name="c", coefficients={"a": 1.0, "b": -3.0})
    assert activity_range(c, variables) == (-6.0, math.inf)


def test_objective_unknown_variable():
    report = _check(
        objective=Objective(quadratic_terms=[QuadraticTerm(first="x", second="z", coefficient=1.0)])
    )
    assert report.codes() == ["OBJECTIVE_UNKNOWN_VARIABLE"]
    assert report.errors[0].variable_names == ["z"]


def test_report_details():
    report = FeasibilityChecker().check(get_sample("matrix_qp").build())
    assert report.details == {
        "variable_count": 12,
        "constraint_count": 7,
        "integer_variable_count": 0,
        "quadratic_objective": True,
    }
