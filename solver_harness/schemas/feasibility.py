# solver_harness/schemas/feasibility.py
"""
Feasibility report schemas for pre-solver validation and post-solve checks.
Used to detect contradictions before calling the solver and to verify that
reported values satisfy every bound and constraint.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


Severity = Literal["error", "warning"]


class FeasibilityIssue(BaseModel):
    """A single feasibility issue (error or warning)."""
    model_config = ConfigDict(extra="ignore")

    severity: Severity
    code: str
    message: str

    # Optional fields for structured feedback / debugging
    variable_names: List[str] = Field(default_factory=list)
    constraint_name: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class FeasibilityReport(BaseModel):
    """
    Structured feasibility check report.
    """
    model_config = ConfigDict(extra="ignore")

    is_feasible: bool
    errors: List[FeasibilityIssue] = Field(default_factory=list)
    warnings: List[FeasibilityIssue] = Field(default_factory=list)
    summary: str = ""
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_issues(cls, issues: List[FeasibilityIssue]) -> "FeasibilityReport":
        """Build a report from a list of issues, auto-calculating feasibility status."""
        errors = [i for i in issues if i.severity == "error"]
        warnings = [i for i in issues if i.severity == "warning"]
        is_feasible = len(errors) == 0
        summary = (
            f"feasible ({len(warnings)} warnings)" if is_feasible else f"infeasible ({len(errors)} errors, {len(warnings)} warnings)"
        )
        return cls(is_feasible=is_feasible, errors=errors, warnings=warnings, summary=summary)

    def codes(self) -> List[str]:
        return [i.code for i in self.errors + self.warnings]
