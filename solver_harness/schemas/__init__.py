from .optimization_problem import (
	Constraint,
	DecisionVariable,
	Objective,
	ObjectiveDirection,
	OptimizationProblem,
	QuadraticTerm,
	VariableDomain,
)
from .optimization_solution import SolveResult, SolveStatus
from .feasibility import FeasibilityIssue, FeasibilityReport

__all__ = [
	"Constraint",
	"DecisionVariable",
	"Objective",
	"ObjectiveDirection",
	"OptimizationProblem",
	"QuadraticTerm",
	"VariableDomain",
	"SolveResult",
	"SolveStatus",
	"FeasibilityIssue",
	"FeasibilityReport",
]
