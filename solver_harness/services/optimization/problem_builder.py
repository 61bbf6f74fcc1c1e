# solver_harness/services/optimization/problem_builder.py
"""
Builder service for OptimizationProblem objects.

Responsibilities:
1. Create decision variables (bounds + domain)
2. Add linear constraints (coefficients keyed by variable)
3. Set the objective (linear + optional quadratic terms, direction)
4. Freeze into a solver-ready OptimizationProblem
5. Hand the problem to a solver adapter and return its SolveResult

Building the model and invoking the solver are separate steps: build() never
touches the solver, solve() is a single blocking call.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Union

from solver_harness.schemas.optimization_problem import (
    Constraint,
    DecisionVariable,
    Objective,
    ObjectiveDirection,
    OptimizationProblem,
    QuadraticTerm,
    VariableDomain,
)
from solver_harness.services.solvers.errors import InvalidBoundsError, InvalidProblemError

if TYPE_CHECKING:
    from solver_harness.schemas.optimization_solution import SolveResult
    from solver_harness.services.solvers.ortools_mathopt_adapter import MathOptConfig

logger = logging.getLogger(__name__)

VariableRef = Union[str, DecisionVariable]


class ProblemBuilder:
    """Construct-then-solve builder; one instance per problem."""

    def __init__(self, name: str = "problem", adapter: Any = None) -> None:
        self.name = name
        self.metadata: Dict[str, Any] = {}
        self._variables: Dict[str, DecisionVariable] = {}
        self._constraints: List[Constraint] = []
        self._objective = Objective()
        self._adapter = adapter

    # -------------------------
    # Variables
    # -------------------------

    def create_variable(
        self,
        lower_bound: float,
        upper_bound: float,
        domain: VariableDomain,
        name: str,
    ) -> DecisionVariable:
        """
        Create a decision variable.

        Raises:
            InvalidBoundsError: lower_bound > upper_bound
            ValueError: name already used in this problem
        """
        lb = float(lower_bound)
        ub = float(upper_bound)
        if lb > ub:
            raise InvalidBoundsError(name, lb, ub)
        if name in self._variables:
            raise ValueError(f"duplicate variable name: {name}")

        var = DecisionVariable(name=name, lower_bound=lb, upper_bound=ub, domain=domain)
        self._variables[name] = var
        return var

    def create_int_variable(self, lower_bound: float, upper_bound: float, name: str) -> DecisionVariable:
        return self.create_variable(lower_bound, upper_bound, "integer", name)

    def create_num_variable(self, lower_bound: float, upper_bound: float, name: str) -> DecisionVariable:
        return self.create_variable(lower_bound, upper_bound, "continuous", name)

    @property
    def variables(self) -> List[DecisionVariable]:
        return list(self._variables.values())

    @property
    def constraints(self) -> List[Constraint]:
        return list(self._constraints)

    @property
    def objective(self) -> Objective:
        return self._objective

    def _key(self, ref: VariableRef) -> str:
        name = ref.name if isinstance(ref, DecisionVariable) else str(ref)
        if name not in self._variables:
            raise InvalidProblemError(f"unknown variable: {name}")
        return name

    # -------------------------
    # Constraints / objective
    # -------------------------

    def add_constraint(
        self,
        lower_bound: float,
        upper_bound: float,
        coefficients: Mapping[VariableRef, float],
        name: Optional[str] = None,
    ) -> Constraint:
        """
        Add lower_bound <= sum(coef * var) <= upper_bound.

        Use -math.inf / math.inf for one-sided constraints. Repeated keys for
        the same variable are summed.
        """
        coefs: Dict[str, float] = {}
        for ref, coef in coefficients.items():
            key = self._key(ref)
            coefs[key] = coefs.get(key, 0.0) + float(coef)

        constraint = Constraint(
            name=name or f"c{len(self._constraints)}",
            lower_bound=float(lower_bound),
            upper_bound=float(upper_bound),
            coefficients=coefs,
        )
        self._constraints.append(constraint)
        return constraint

    def set_objective(
        self,
        linear_coefficients: Mapping[VariableRef, float],
        quadratic_coefficients: Optional[Mapping[Tuple[VariableRef, VariableRef], float]] = None,
        direction: ObjectiveDirection = "minimize",
        offset: float = 0.0,
    ) -> Objective:
        """
        Replace the objective.

        quadratic_coefficients maps (first, second) -> coefficient; (a, b) and
        (b, a) describe the same term and are merged.
        """
        if direction not in ("minimize", "maximize"):
            raise ValueError(f"direction must be 'minimize' or 'maximize', got {direction!r}")

        linear: Dict[str, float] = {}
        for ref, coef in linear_coefficients.items():
            key = self._key(ref)
            linear[key] = linear.get(key, 0.0) + float(coef)

        order = {name: i for i, name in enumerate(self._variables)}
        quadratic: Dict[Tuple[str, str], float] = {}
        for (first_ref, second_ref), coef in (quadratic_coefficients or {}).items():
            a, b = self._key(first_ref), self._key(second_ref)
            if order[a] > order[b]:
                a, b = b, a
            quadratic[(a, b)] = quadratic.get((a, b), 0.0) + float(coef)

        self._objective = Objective(
            direction=direction,
            linear_coefficients=linear,
            quadratic_terms=[
                QuadraticTerm(first=a, second=b, coefficient=c) for (a, b), c in quadratic.items()
            ],
            offset=float(offset),
        )
        return self._objective

    # -------------------------
    # Build / solve
    # -------------------------

    def build(self) -> OptimizationProblem:
        return OptimizationProblem(
            name=self.name,
            variables=self.variables,
            constraints=self.constraints,
            objective=self._objective,
            metadata=dict(self.metadata),
        )

    def solve(self, config: Optional["MathOptConfig"] = None) -> "SolveResult":
        """
        Freeze the problem and solve it (blocking).

        An adapter injected at construction carries its own configuration;
        `config` is ignored (with a warning) in that case.

        Raises:
            SolverUnavailableError: the configured backend cannot be created.
        """
        from solver_harness.services.solvers.ortools_mathopt_adapter import OrtoolsMathOptSolverAdapter

        if self._adapter is not None and config is not None:
            logger.warning(
                "Solver config ignored: builder has an injected adapter",
                extra={"problem": self.name, "backend": config.backend},
            )
        adapter = self._adapter or OrtoolsMathOptSolverAdapter(config=config)
        problem = self.build()
        logger.debug(
            "Solving built problem",
            extra={
                "problem": problem.name,
                "variable_count": len(problem.variables),
                "constraint_count": len(problem.constraints),
            },
        )
        return adapter.solve(problem)
