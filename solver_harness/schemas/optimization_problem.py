# solver_harness/schemas/optimization_problem.py
"""
Frozen solver-facing problem schema.

This schema defines the exact contract between ProblemBuilder and solver adapter.
Variables are identified by name: constraints and the objective reference them
by that name, never by solver handles.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Literal, Mapping, Set

from pydantic import BaseModel, ConfigDict, Field, model_validator


VariableDomain = Literal["continuous", "integer"]
ObjectiveDirection = Literal["minimize", "maximize"]


class DecisionVariable(BaseModel):
    """A single decision variable with bounds and domain."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., min_length=1)
    lower_bound: float = 0.0
    upper_bound: float = math.inf
    domain: VariableDomain = "continuous"

    @model_validator(mode="after")
    def _validate_bounds(self) -> "DecisionVariable":
        if math.isnan(self.lower_bound) or math.isnan(self.upper_bound):
            raise ValueError(f"variable '{self.name}' bounds must not be NaN")
        if self.lower_bound > self.upper_bound:
            raise ValueError(
                f"variable '{self.name}' has inverted bounds: "
                f"lower_bound={self.lower_bound} > upper_bound={self.upper_bound}"
            )
        return self

    @property
    def is_integer(self) -> bool:
        return self.domain == "integer"


class Constraint(BaseModel):
    """
    Linear constraint: lower_bound <= sum(coef * var) <= upper_bound.

    One-sided constraints use -inf / +inf for the open side.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., min_length=1)
    lower_bound: float = -math.inf
    upper_bound: float = math.inf
    coefficients: Dict[str, float] = Field(default_factory=dict)

    def activity(self, values: Mapping[str, float]) -> float:
        """Evaluate sum(coef * value) for the given variable values."""
        return sum(coef * float(values.get(name, 0.0)) for name, coef in self.coefficients.items())


class QuadraticTerm(BaseModel):
    """coefficient * first * second (first == second for squared terms)."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    first: str
    second: str
    coefficient: float


class Objective(BaseModel):
    """
    Objective function configuration.

    Quadratic terms are only meaningful for backends that support quadratic
    objectives; the solver adapter refuses other backends up front.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    direction: ObjectiveDirection = "minimize"
    linear_coefficients: Dict[str, float] = Field(default_factory=dict)
    quadratic_terms: List[QuadraticTerm] = Field(default_factory=list)
    offset: float = 0.0

    @property
    def is_quadratic(self) -> bool:
        return any(t.coefficient != 0 for t in self.quadratic_terms)

    @property
    def is_maximize(self) -> bool:
        return self.direction == "maximize"

    def referenced_variables(self) -> Set[str]:
        names = set(self.linear_coefficients)
        for t in self.quadratic_terms:
            names.add(t.first)
            names.add(t.second)
        return names

    def evaluate(self, values: Mapping[str, float]) -> float:
        total = self.offset
        for name, coef in self.linear_coefficients.items():
            total += coef * float(values.get(name, 0.0))
        for t in self.quadratic_terms:
            total += t.coefficient * float(values.get(t.first, 0.0)) * float(values.get(t.second, 0.0))
        return total


class OptimizationProblem(BaseModel):
    """
    Complete solver-facing problem object.

    Built by ProblemBuilder.build(); read-only from then on.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = "problem"
    variables: List[DecisionVariable] = Field(default_factory=list)
    constraints: List[Constraint] = Field(default_factory=list)
    objective: Objective = Field(default_factory=Objective)

    # Debuggable metadata (sample name, dimensions, etc.)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_unique_names(self) -> "OptimizationProblem":
        seen: Set[str] = set()
        for v in self.variables:
            if v.name in seen:
                raise ValueError(f"duplicate variable name: {v.name}")
            seen.add(v.name)
        return self

    @property
    def has_integer_variables(self) -> bool:
        return any(v.is_integer for v in self.variables)

    def variable_names(self) -> List[str]:
        return [v.name for v in self.variables]

    def get_variable(self, name: str) -> DecisionVariable:
        for v in self.variables:
            if v.name == name:
                return v
        raise KeyError(name)
