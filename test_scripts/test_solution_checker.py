from __future__ import annotations

import math

from solver_harness.schemas.optimization_solution import SolveResult
from solver_harness.services.optimization.solution_checker import check_solution
from solver_harness.services.sample_problems import build_matrix_qp, build_toy_lp


def _toy_result(values, objective):
    return SolveResult(status="optimal", variable_values=values, objective_value=objective)


def test_known_optimum_passes():
    problem = build_toy_lp().build()
    report = check_solution(problem, _toy_result({"x": 6.0, "y": 4.0}, 34.0), tolerance=1e-6)

    assert report.is_feasible
    assert report.warnings == []
    assert report.details["constraint_activities"] == {"c0": 14.0, "c1": 14.0, "c2": 2.0}
    assert report.details["recomputed_objective"] == 34.0


def test_values_within_tolerance_pass():
    problem = build_toy_lp().build()
    report = check_solution(problem, _toy_result({"x": 6.0000001, "y": 3.9999999}, 34.0), tolerance=1e-5)
    assert report.is_feasible


def test_constraint_violation_is_reported():
    problem = build_toy_lp().build()
    # x + 2y = 16 > 14
    report = check_solution(problem, _toy_result({"x": 6.0, "y": 5.0}, 38.0), tolerance=1e-6)

    assert not report.is_feasible
    violated = [e for e in report.errors if e.code == "CONSTRAINT_VIOLATED"]
    assert [e.constraint_name for e in violated] == ["c0"]
    assert violated[0].details["violation"] == 2.0


def test_bound_and_integrality_violations():
    problem = build_toy_lp().build()
    report = check_solution(problem, _toy_result({"x": 1.5, "y": -1.0}, 0.5), tolerance=1e-6)

    codes = report.codes()
    assert "INTEGRALITY_VIOLATED" in codes
    assert "VARIABLE_BOUND_VIOLATED" in codes
    bound_issue = next(e for e in report.errors if e.code == "VARIABLE_BOUND_VIOLATED")
    assert bound_issue.variable_names == ["y"]


def test_missing_value_is_an_error():
    problem = build_toy_lp().build()
    report = check_solution(problem, _toy_result({"x": 6.0}, 18.0), tolerance=1e-6)
    assert "VALUE_MISSING" in report.codes()
    assert not report.is_feasible


def test_objective_mismatch_is_only_a_warning():
    problem = build_toy_lp().build()
    report = check_solution(problem, _toy_result({"x": 6.0, "y": 4.0}, 30.0), tolerance=1e-6)
    assert report.is_feasible
    assert [w.code for w in report.warnings] == ["OBJECTIVE_MISMATCH"]


def test_quadratic_objective_recomputed():
    problem = build_matrix_qp().build()
    values = {v.name: 2.0 / 3.0 for v in problem.variables}
    report = check_solution(
        problem,
        SolveResult(status="optimal", variable_values=values, objective_value=88.0 / 3.0),
        tolerance=1e-6,
    )
    assert report.is_feasible
    assert math.isclose(report.details["recomputed_objective"], 88.0 / 3.0)


def test_non_optimal_result_has_nothing_to_check():
    problem = build_toy_lp().build()
    report = check_solution(problem, SolveResult(status="unbounded"), tolerance=1e-6)
    assert report.is_feasible
    assert report.codes() == ["NO_SOLUTION"]
    assert report.warnings[0].details == {"status": "unbounded"}


def test_default_tolerance_comes_from_settings():
    problem = build_toy_lp().build()
    report = check_solution(problem, _toy_result({"x": 6.0, "y": 4.0}, 34.0))
    assert report.details["tolerance"] > 0
