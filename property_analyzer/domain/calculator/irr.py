"""Internal rate of return over a holding horizon.

Builds the yearly cash-flow series of a buy-hold-sell scenario and solves
NPV(rate) = 0 with Newton-Raphson.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import isfinite
from typing import Sequence

import numpy as np
import numpy_financial as npf

from property_analyzer.core.exceptions import InvalidParameterError
from property_analyzer.core.financial import balance_after_months, generate_amortization_schedule
from property_analyzer.domain.models.deal import DealInputs
from property_analyzer.domain.models.results import (
    FinancingResult,
    IncomeExpenseResult,
    IRRResult,
)

DEFAULT_INITIAL_GUESS = 0.10
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_TOLERANCE = 1e-5


def solve_irr(
    cash_flows: Sequence[float],
    initial_guess: float = DEFAULT_INITIAL_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> tuple[float, bool, int]:
    """Find the rate where the NPV of `cash_flows` is zero.

    Newton-Raphson on f(r) = sum(cf_j / (1+r)^j) with
    f'(r) = sum(-j * cf_j / (1+r)^(j+1)). Stops when the step is below
    `tolerance`. Never raises: a flat derivative, a rate at or below -100%
    or a non-finite step ends the search with converged=False, as does
    exhausting the iteration cap. A series with outflows and no inflow
    reports -100% (unconverged) without iterating.

    Args:
        cash_flows: Period 0..n flows, period 0 usually the (negative) outlay
        initial_guess: Starting rate as a decimal (0.10 = 10%)
        max_iterations: Iteration cap
        tolerance: Convergence threshold on |delta rate|

    Returns:
        Tuple of (rate as decimal, converged, iterations used)
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(flows.size)
    rate = float(initial_guess)

    if flows.size < 2:
        return rate, False, 0

    # Nothing ever comes back: total loss, no root to search for
    if np.any(flows < 0) and not np.any(flows > 0):
        return -1.0, False, 0

    for iteration in range(1, max_iterations + 1):
        if rate <= -1.0:
            return rate, False, iteration - 1

        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            npv = float(npf.npv(rate, flows))
            derivative = float(np.sum(-periods * flows / (1.0 + rate) ** (periods + 1)))

        if not (isfinite(npv) and isfinite(derivative)) or derivative == 0.0:
            return rate, False, iteration - 1

        step = npv / derivative
        new_rate = rate - step
        if not isfinite(new_rate):
            return rate, False, iteration

        if abs(new_rate - rate) < tolerance:
            return new_rate, True, iteration
        rate = new_rate

    return rate, False, max_iterations


@dataclass(frozen=True)
class IRRParameters:
    """Scalars that drive the IRR cash-flow series."""

    total_initial_investment: float
    monthly_cash_flow: float
    property_price: float
    appreciation_rate_pct: float
    loan_amount: float = 0.0
    annual_interest_rate_pct: float = 0.0
    loan_term_years: int = 0

    @classmethod
    def from_deal(
        cls,
        inputs: DealInputs,
        financing: FinancingResult,
        income: IncomeExpenseResult,
    ) -> IRRParameters:
        return cls(
            total_initial_investment=financing.total_initial_investment,
            monthly_cash_flow=income.monthly_cash_flow,
            property_price=inputs.property_price,
            appreciation_rate_pct=inputs.appreciation_rate_pct,
            loan_amount=financing.loan_amount,
            annual_interest_rate_pct=inputs.annual_interest_rate_pct,
            loan_term_years=inputs.loan_term_years,
        )


def _exit_position(params: IRRParameters, horizon_years: int) -> tuple[float, float, float]:
    """Sale value, outstanding loan and net proceeds at the horizon."""
    appreciated = params.property_price * (1 + params.appreciation_rate_pct / 100.0) ** horizon_years

    schedule = generate_amortization_schedule(
        params.loan_amount,
        params.annual_interest_rate_pct,
        params.loan_term_years,
        max_months=horizon_years * 12,
    )
    remaining_loan = balance_after_months(schedule, horizon_years * 12)

    return appreciated, remaining_loan, max(0.0, appreciated - remaining_loan)


def _assemble_flows(params: IRRParameters, horizon_years: int, exit_proceeds: float) -> list[float]:
    annual = params.monthly_cash_flow * 12
    flows = [-params.total_initial_investment] + [annual] * horizon_years
    flows[-1] += exit_proceeds
    return flows


def build_cash_flow_series(params: IRRParameters, horizon_years: int) -> list[float]:
    """Yearly flows: the initial outlay, then constant cash flow, plus exit at the end.

    Rent and expenses are held flat over the horizon.

    Returns:
        List of horizon_years + 1 flows
    """
    if horizon_years < 1:
        raise InvalidParameterError("horizon_years", horizon_years, "must be >= 1")

    _, _, exit_proceeds = _exit_position(params, horizon_years)
    return _assemble_flows(params, horizon_years, exit_proceeds)


def calculate_property_irr(
    params: IRRParameters,
    horizon_years: int,
    *,
    initial_guess: float = DEFAULT_INITIAL_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> IRRResult:
    """IRR of buying, holding `horizon_years` and selling at the appreciated price.

    Args:
        params: Series drivers (see IRRParameters.from_deal)
        horizon_years: Holding period in years (>= 1)

    Returns:
        IRRResult with irr_pct in percent (None if the estimate is non-finite)
    """
    if horizon_years < 1:
        raise InvalidParameterError("horizon_years", horizon_years, "must be >= 1")

    appreciated, remaining_loan, exit_proceeds = _exit_position(params, horizon_years)
    flows = _assemble_flows(params, horizon_years, exit_proceeds)

    rate, converged, iterations = solve_irr(
        flows, initial_guess=initial_guess, max_iterations=max_iterations, tolerance=tolerance
    )
    irr_pct = rate * 100.0 if isfinite(rate) else None

    return IRRResult(
        horizon_years=horizon_years,
        irr_pct=irr_pct,
        converged=converged,
        iterations=iterations,
        cash_flows=tuple(flows),
        exit_proceeds=exit_proceeds,
        appreciated_value=appreciated,
        remaining_loan_balance=remaining_loan,
    )
