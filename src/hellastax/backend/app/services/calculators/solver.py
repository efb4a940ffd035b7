"""Net-to-gross reverse calculation."""

from __future__ import annotations

import logging

from hellastax.backend.app.models import CalculationInput, CalculationResult, SolverResult
from hellastax.backend.config.year_config import YearConfiguration

from .income import calculate_income_tax

_LOGGER = logging.getLogger(__name__)


def solve_gross_from_net(
    desired_monthly_net: float,
    dependants: int,
    payments_per_year: int,
    *,
    config: YearConfiguration,
    tolerance: float | None = None,
    max_iterations: int | None = None,
    age: int | None = None,
    residence_transfer: bool = False,
    category: str = "employed",
) -> SolverResult:
    """Find the gross annual income whose net matches ``desired_monthly_net``.

    Bisection runs between the desired annual net and a configured multiple of
    it, evaluating the forward calculation at each midpoint. The credit
    reduction makes net income step-wise in places, so an exact match is not
    always reachable: the closest estimate is returned with ``converged`` set
    accordingly instead of raising.
    """

    solver = config.solver
    tolerance = solver.tolerance if tolerance is None else tolerance
    max_iterations = solver.max_iterations if max_iterations is None else max_iterations

    def evaluate(gross_income: float) -> CalculationResult:
        return calculate_income_tax(
            CalculationInput(
                year=config.year,
                gross_income=gross_income,
                payments_per_year=payments_per_year,
                dependants=dependants,
                age=age,
                residence_transfer=residence_transfer,
                category=category,
            ),
            config,
        )

    target = desired_monthly_net * payments_per_year
    if target <= 0:
        return SolverResult(
            result=evaluate(0.0), target_net_income=0.0, iterations=0, converged=True
        )

    lower = target
    upper = target * solver.upper_bound_multiplier
    best: CalculationResult | None = None
    best_gap = float("inf")
    iterations = 0
    converged = False

    while iterations < max_iterations:
        midpoint = (lower + upper) / 2
        candidate = evaluate(midpoint)
        difference = candidate.net_income - target

        if abs(difference) < best_gap:
            best, best_gap = candidate, abs(difference)

        if abs(difference) < tolerance:
            converged = True
            break

        if difference < 0:
            lower = midpoint
        else:
            upper = midpoint
        iterations += 1

    if best is None:
        best = evaluate(upper)
        best_gap = abs(best.net_income - target)

    if not converged:
        _LOGGER.warning(
            "Net-to-gross solver did not converge after %d iterations "
            "(target %.2f, closest gap %.2f)",
            iterations,
            target,
            best_gap,
        )

    return SolverResult(
        result=best,
        target_net_income=target,
        iterations=iterations,
        converged=converged,
    )


__all__ = ["solve_gross_from_net"]
