"""
Bounded global search for the GDD model parameters.

The objective surface is piecewise flat: predictions are integer days, so
small parameter changes usually leave the RMSE unchanged and then jump. No
gradient is available, which rules out local methods. The search strategies
here are stochastic and derivative-free:

  - ``annealing``: generalized simulated annealing (``scipy.optimize.dual_annealing``)
    without the gradient-based local polish.
  - ``differential_evolution``: ``scipy.optimize.differential_evolution``.

Every strategy runs behind the same ``minimize`` interface, and a counting
wrapper enforces the evaluation budget and the box bounds for all of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy import optimize

from phenocam_gdd.phenology.objective import rmse_objective
from phenocam_gdd.schemas import FitResult, ParameterBounds, ParameterVector

if TYPE_CHECKING:
    from collections.abc import Callable

    from phenocam_gdd.phenology.dataset import ModelDataset

DEFAULT_INITIAL_GUESS = ParameterVector(threshold=5.0, budget=150.0)
DEFAULT_BUDGET = 3000


class _BudgetExhausted(Exception):
    """Raised inside the objective wrapper to stop a search early."""


@dataclass
class OptimizeOutcome:
    """Best point found by a search."""

    parameters: ParameterVector
    value: float
    n_evaluations: int
    strategy: str
    budget_exhausted: bool


class _CountingObjective:
    """Adapts a ``ParameterVector`` objective to scipy and tracks the best point."""

    def __init__(
        self,
        objective: Callable[[ParameterVector], float],
        bounds: ParameterBounds,
        budget: int,
    ) -> None:
        self.objective = objective
        self.bounds = bounds
        self.budget = budget
        self.calls = 0
        self.best: ParameterVector | None = None
        self.best_value = np.inf

    def __call__(self, x: np.ndarray) -> float:
        if self.calls >= self.budget:
            raise _BudgetExhausted
        params = ParameterVector.from_sequence(list(x))
        if not self.bounds.contains(params):
            msg = f"Optimizer proposed out-of-bounds parameters: {params}"
            raise ValueError(msg)
        self.calls += 1
        value = float(self.objective(params))
        if value < self.best_value:
            self.best_value = value
            self.best = params
        return value


def _run_annealing(
    func: _CountingObjective, bounds: ParameterBounds, budget: int, seed: int | None, x0: np.ndarray
) -> None:
    optimize.dual_annealing(
        func,
        bounds=bounds.as_list(),
        maxfun=budget,
        seed=seed,
        x0=x0,
        no_local_search=True,
    )


def _run_differential_evolution(
    func: _CountingObjective, bounds: ParameterBounds, budget: int, seed: int | None, x0: np.ndarray
) -> None:
    popsize = 15
    per_generation = popsize * len(bounds.as_list())
    optimize.differential_evolution(
        func,
        bounds=bounds.as_list(),
        maxiter=max(1, budget // per_generation - 1),
        popsize=popsize,
        seed=seed,
        x0=x0,
        polish=False,
        tol=0.0,
    )


STRATEGIES: dict[str, Callable[..., Any]] = {
    "annealing": _run_annealing,
    "differential_evolution": _run_differential_evolution,
}


def minimize(
    objective: Callable[[ParameterVector], float],
    bounds: ParameterBounds | None = None,
    budget: int = DEFAULT_BUDGET,
    seed: int | None = None,
    x0: ParameterVector | None = None,
    strategy: str = "annealing",
) -> OptimizeOutcome:
    """Minimize ``objective`` over the parameter box.

    Args:
        objective: Maps a parameter vector to a non-negative score.
        bounds: Box constraints (defaults to the validated operating range).
        budget: Maximum number of objective evaluations.
        seed: Random seed; fix it for reproducible results.
        x0: Initial guess, must lie inside ``bounds``.
        strategy: Key of ``STRATEGIES``.

    Returns:
        The best parameters evaluated within the budget.

    Raises:
        ValueError: Unknown strategy, non-positive budget, or ``x0`` outside
            the bounds.
    """
    bounds = bounds or ParameterBounds()
    x0 = x0 or DEFAULT_INITIAL_GUESS
    if strategy not in STRATEGIES:
        msg = f"Unknown optimizer strategy {strategy!r}; choose from {sorted(STRATEGIES)}"
        raise ValueError(msg)
    if budget <= 0:
        msg = f"Evaluation budget must be positive, got {budget}"
        raise ValueError(msg)
    if not bounds.contains(x0):
        msg = f"Initial guess {x0} lies outside the bounds {bounds}"
        raise ValueError(msg)

    func = _CountingObjective(objective, bounds, budget)
    exhausted = False
    try:
        STRATEGIES[strategy](func, bounds, budget, seed, np.array(x0.as_tuple()))
    except _BudgetExhausted:
        exhausted = True

    best = func.best if func.best is not None else x0
    return OptimizeOutcome(
        parameters=best,
        value=float(func.best_value),
        n_evaluations=func.calls,
        strategy=strategy,
        budget_exhausted=exhausted,
    )


def fit_parameters(
    dataset: ModelDataset,
    bounds: ParameterBounds | None = None,
    budget: int = DEFAULT_BUDGET,
    seed: int | None = None,
    x0: ParameterVector | None = None,
    strategy: str = "annealing",
) -> FitResult:
    """Fit (threshold, budget) to a dataset by minimizing the RMSE objective."""
    outcome = minimize(
        lambda params: rmse_objective(params, dataset),
        bounds=bounds,
        budget=budget,
        seed=seed,
        x0=x0,
        strategy=strategy,
    )
    return FitResult(
        parameters=outcome.parameters,
        rmse=outcome.value,
        n_site_years=len(dataset),
        n_evaluations=outcome.n_evaluations,
        strategy=outcome.strategy,
        seed=seed,
        budget_exhausted=outcome.budget_exhausted,
    )
