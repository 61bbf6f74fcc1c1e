# solver_harness/schemas/optimization_solution.py
"""
Optimization solution schemas for solver output.

Represents the structured result from the solver (OR-Tools MathOpt).
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Literal


SolveStatus = Literal[
    "optimal",
    "feasible",
    "infeasible",
    "unbounded",
    "infeasible_or_unbounded",
    "model_invalid",
    "error",
    "unknown",
]


class SolveResult(BaseModel):
    """
    Structured solver output.

    Contains:
    - Status (optimal, infeasible, unbounded, etc.)
    - Variable values and objective value, only when status is optimal
    - Diagnostics for debugging
    """

    model_config = ConfigDict(extra="ignore")

    status: SolveStatus

    # Keyed by variable name, in variable creation order
    variable_values: Dict[str, float] = Field(default_factory=dict)
    objective_value: Optional[float] = None

    solver_name: Optional[str] = None
    solve_time_seconds: Optional[float] = None

    # Useful diagnostics
    diagnostics: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _values_only_when_optimal(self) -> "SolveResult":
        """Partial values are never reported for non-optimal results."""
        if self.status != "optimal" and (self.variable_values or self.objective_value is not None):
            raise ValueError(
                f"variable values are only reported for optimal results (status={self.status})"
            )
        return self

    @property
    def is_optimal(self) -> bool:
        return self.status == "optimal"
