"""Financial calculation functions.

Core loan and amortization calculations for fixed-rate mortgages.
"""

from __future__ import annotations

from math import isfinite
from typing import Any

from property_analyzer.core.exceptions import InvalidParameterError

# Monthly rates at or below this are amortized straight-line
_RATE_EPSILON = 1e-12


def _monthly_rate(annual_rate_pct: float) -> float:
    return (annual_rate_pct / 100.0) / 12.0


def calculate_monthly_payment(
    principal: float,
    annual_rate_pct: float,
    years: float,
) -> float:
    """Calculate the level monthly payment (principal + interest).

    Args:
        principal: Loan amount in AED
        annual_rate_pct: Annual interest rate as percentage (e.g., 4.5 for 4.5%)
        years: Loan term in years

    Returns:
        Monthly payment amount in AED
    """
    duration_months = years * 12
    if principal <= 0 or duration_months <= 0:
        return 0.0

    monthly_rate = _monthly_rate(annual_rate_pct)

    if monthly_rate <= _RATE_EPSILON:
        return principal / duration_months

    # (1+r)^-n underflows to 0 on very long terms, leaving interest-only
    return principal * monthly_rate / (1 - (1 + monthly_rate) ** (-duration_months))


def calculate_remaining_balance(
    principal: float,
    annual_rate_pct: float,
    years: float,
    months_elapsed: float,
) -> float:
    """Calculate remaining loan balance after N monthly payments.

    Args:
        principal: Initial loan amount in AED
        annual_rate_pct: Annual interest rate %
        years: Original loan term in years
        months_elapsed: Number of payments already made

    Returns:
        Remaining balance in AED, never negative
    """
    duration_months = years * 12
    monthly_rate = _monthly_rate(annual_rate_pct)

    if not all(isfinite(x) for x in (principal, monthly_rate, duration_months, months_elapsed)):
        return 0.0
    if duration_months <= 0 or principal <= 0:
        return 0.0
    if months_elapsed >= duration_months:
        return 0.0
    if months_elapsed <= 0:
        return float(principal)

    if monthly_rate <= _RATE_EPSILON:
        return max(0.0, principal * (1 - months_elapsed / duration_months))

    # B_k = P * (1 - (1+r)^(k-n)) / (1 - (1+r)^-n)
    remaining = principal * (1 - (1 + monthly_rate) ** (months_elapsed - duration_months)) / (
        1 - (1 + monthly_rate) ** (-duration_months)
    )

    return max(0.0, remaining)


def generate_amortization_schedule(
    principal: float,
    annual_rate_pct: float,
    years: float,
    max_months: int | None = None,
) -> dict[str, Any]:
    """Generate the month-by-month amortization schedule.

    Interest and principal are recomputed every month from the running
    balance. Values keep full precision; rounding is a display concern.

    Args:
        principal: Loan amount in AED
        annual_rate_pct: Annual interest rate %
        years: Loan term in years
        max_months: Stop after this many months (None for the whole term)

    Returns:
        Dict with keys:
        - month: List of month numbers (1-based)
        - opening_balance: List of start balances
        - interest: List of interest payments
        - principal: List of principal payments
        - closing_balance: List of end balances
        - payment: Monthly payment amount
        - n_months: Months in the loan term, which can exceed the rows built
    """
    n_months = int(round(years * 12)) if isfinite(years) else 0
    if principal <= 0 or n_months <= 0:
        return {
            "month": [],
            "opening_balance": [],
            "interest": [],
            "principal": [],
            "closing_balance": [],
            "payment": 0.0,
            "n_months": 0,
        }

    monthly_rate = max(0.0, _monthly_rate(annual_rate_pct))
    payment = calculate_monthly_payment(principal, annual_rate_pct, n_months / 12)

    rows = n_months if max_months is None else max(0, min(n_months, max_months))

    opening, interests, principals, closing = [], [], [], []
    balance = float(principal)

    for _ in range(rows):
        interest = balance * monthly_rate
        principal_payment = min(balance, payment - interest)
        new_balance = max(0.0, balance - principal_payment)

        opening.append(balance)
        interests.append(interest)
        principals.append(principal_payment)
        closing.append(new_balance)

        balance = new_balance

    # Float drift on the last payment
    if rows == n_months:
        closing[-1] = 0.0

    return {
        "month": list(range(1, rows + 1)),
        "opening_balance": opening,
        "interest": interests,
        "principal": principals,
        "closing_balance": closing,
        "payment": payment,
        "n_months": n_months,
    }


def balance_after_months(schedule: dict[str, Any], months: int) -> float:
    """Read the outstanding balance after `months` payments from a schedule.

    Raises:
        InvalidParameterError: If the schedule was cut short of `months`
    """
    n_months = schedule["n_months"]
    if n_months == 0 or months >= n_months:
        return 0.0
    if not schedule["opening_balance"] or months > len(schedule["closing_balance"]):
        raise InvalidParameterError("months", months, "beyond the generated schedule")
    if months <= 0:
        return schedule["opening_balance"][0]
    return schedule["closing_balance"][months - 1]
