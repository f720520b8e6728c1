"""Year-by-year projection of a deal.

Tabulates property value, debt and cash position for each year of the
holding period, under the same flat rent/expense assumption as the IRR.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd

from property_analyzer.core.exceptions import InvalidParameterError
from property_analyzer.core.financial import balance_after_months, generate_amortization_schedule
from property_analyzer.core.settings import get_settings
from property_analyzer.domain.calculator.cashflow import compute_financing, compute_income_expense
from property_analyzer.domain.models.deal import DealInputs


@dataclass
class ProjectionYear:
    """Single projected year."""

    year: int
    property_value: float
    loan_balance: float
    equity: float
    annual_cash_flow: float
    cumulative_cash_flow: float
    principal_paid: float
    interest_paid: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "Year": self.year,
            "Property Value": self.property_value,
            "Loan Balance": self.loan_balance,
            "Equity": self.equity,
            "Annual Cash Flow": self.annual_cash_flow,
            "Cumulative Cash Flow": self.cumulative_cash_flow,
            "Principal Paid": self.principal_paid,
            "Interest Paid": self.interest_paid,
        }


def build_yearly_projection(
    inputs: DealInputs,
    years: int | None = None,
    transfer_fee_pct: float | None = None,
) -> pd.DataFrame:
    """Project a deal over `years`.

    Args:
        inputs: Deal parameters
        years: Number of years to project (default: projection_years setting)
        transfer_fee_pct: DLD transfer fee rate (default: transfer_fee_pct setting)

    Returns:
        DataFrame with one row per year (columns as in ProjectionYear.to_dict)
    """
    settings = get_settings()
    if years is None:
        years = settings.projection_years
    if transfer_fee_pct is None:
        transfer_fee_pct = settings.transfer_fee_pct
    if years < 1:
        raise InvalidParameterError("years", years, "must be >= 1")

    financing = compute_financing(inputs, transfer_fee_pct)
    income = compute_income_expense(inputs, financing.monthly_payment)
    schedule = generate_amortization_schedule(
        financing.loan_amount,
        inputs.annual_interest_rate_pct,
        inputs.loan_term_years,
        max_months=years * 12,
    )

    growth = 1 + inputs.appreciation_rate_pct / 100.0
    rows: list[ProjectionYear] = []
    cumulative = 0.0

    for year in range(1, years + 1):
        start, end = (year - 1) * 12, min(year * 12, schedule["n_months"])
        months = max(0, end - start)

        value = inputs.property_price * growth ** year
        balance = balance_after_months(schedule, year * 12)
        cumulative += income.annual_cash_flow

        rows.append(ProjectionYear(
            year=year,
            property_value=value,
            loan_balance=balance,
            equity=value - balance,
            annual_cash_flow=income.annual_cash_flow,
            cumulative_cash_flow=cumulative,
            principal_paid=sum(schedule["principal"][start:end]) if months > 0 else 0.0,
            interest_paid=sum(schedule["interest"][start:end]) if months > 0 else 0.0,
        ))

    return pd.DataFrame([r.to_dict() for r in rows])
