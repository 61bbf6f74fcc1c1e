# solver_harness/services/solvers/errors.py
"""Exceptions raised while building or solving a problem."""
from __future__ import annotations


class SolverHarnessError(Exception):
    """Base class for harness errors."""


class SolverUnavailableError(SolverHarnessError):
    """Raised when the requested solving capability cannot be created.

    Either the backend is unknown / not linked into the installed OR-Tools,
    or it cannot handle the problem (integer variables, quadratic objective).
    """

    def __init__(self, backend: str, reason: str) -> None:
        self.backend = backend
        self.reason = reason
        super().__init__(f"solver backend '{backend}' unavailable: {reason}")


class InvalidProblemError(SolverHarnessError):
    """Raised when a problem references variables that were never declared."""


class InvalidBoundsError(ValueError):
    """Raised when a variable is created with lower_bound > upper_bound."""

    def __init__(self, name: str, lower_bound: float, upper_bound: float) -> None:
        self.name = name
        self.lower_bound = lower_bound
        self.upper_bound = upper_bound
        super().__init__(
            f"variable '{name}' has inverted bounds: lower_bound={lower_bound} > upper_bound={upper_bound}"
        )
