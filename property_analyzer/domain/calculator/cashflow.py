"""Financing, cash-flow and yield calculations.

Turns a deal into upfront cash, mortgage terms, NOI, cash flow and the
headline return ratios. Undefined ratios are None.
"""

from __future__ import annotations

from property_analyzer.core.financial import (
    calculate_monthly_payment,
    calculate_remaining_balance,
)
from property_analyzer.domain.models.deal import DealInputs
from property_analyzer.domain.models.results import FinancingResult, IncomeExpenseResult

DEFAULT_TRANSFER_FEE_PCT = 4.0


def compute_financing(
    inputs: DealInputs,
    transfer_fee_pct: float = DEFAULT_TRANSFER_FEE_PCT,
) -> FinancingResult:
    """Split the purchase into cash paid upfront and the mortgage.

    Ready property: the down payment is a share of the price and the rest
    is financed. Off-plan: the pre-handover share is paid in cash and the
    down payment / loan apply to the post-handover remainder only.
    Agent and transfer fees are always levied on the full price.

    Percentages are used as given; a split above 100% is reported by the
    engine as a warning, not clamped here.

    Args:
        inputs: Deal parameters
        transfer_fee_pct: DLD transfer fee rate, applied when enabled

    Returns:
        FinancingResult
    """
    price = inputs.property_price

    pre_handover_cash = price * (inputs.pre_handover_pct / 100.0) if inputs.is_off_plan else 0.0
    financed_base = price - pre_handover_cash

    down_payment = financed_base * (inputs.down_payment_pct / 100.0)
    loan_amount = max(0.0, financed_base - down_payment)

    agent_fee = price * (inputs.agent_fee_pct / 100.0)
    transfer_fee = price * (transfer_fee_pct / 100.0) if inputs.transfer_fee_enabled else 0.0

    total_initial = (
        pre_handover_cash
        + down_payment
        + agent_fee
        + transfer_fee
        + inputs.additional_upfront_costs
    )

    monthly_payment = calculate_monthly_payment(
        loan_amount, inputs.annual_interest_rate_pct, inputs.loan_term_years
    )

    return FinancingResult(
        down_payment=down_payment,
        loan_amount=loan_amount,
        total_initial_investment=total_initial,
        monthly_payment=monthly_payment,
        agent_fee=agent_fee,
        transfer_fee=transfer_fee,
        pre_handover_cash=pre_handover_cash,
        financed_base=financed_base,
    )


def compute_income_expense(inputs: DealInputs, monthly_payment: float) -> IncomeExpenseResult:
    """Roll up income and operating expenses.

    Maintenance and management are charged on effective income (after
    vacancy), not on gross rent. NOI excludes debt service.

    Args:
        inputs: Deal parameters
        monthly_payment: Mortgage payment from compute_financing

    Returns:
        IncomeExpenseResult
    """
    price = inputs.property_price

    gross_monthly_income = inputs.gross_monthly_income
    effective_income = gross_monthly_income * (1 - inputs.vacancy_rate_pct / 100.0)

    maintenance = effective_income * (inputs.maintenance_rate_pct / 100.0)
    management = effective_income * (inputs.management_fee_pct / 100.0)
    monthly_opex = (
        maintenance
        + management
        + inputs.fixed_monthly_fee
        + inputs.annual_insurance / 12.0
        + inputs.other_annual_expenses / 12.0
    )

    monthly_cash_flow = effective_income - monthly_opex - monthly_payment
    annual_opex = monthly_opex * 12
    noi = effective_income * 12 - annual_opex

    gross_yield = (gross_monthly_income * 12 / price) * 100 if price > 0 else None
    net_yield = (noi / price) * 100 if price > 0 else None
    dscr = (noi / 12.0) / monthly_payment if monthly_payment > 0 else None

    return IncomeExpenseResult(
        gross_monthly_income=gross_monthly_income,
        effective_monthly_income=effective_income,
        monthly_maintenance=maintenance,
        monthly_management=management,
        monthly_operating_expenses=monthly_opex,
        monthly_cash_flow=monthly_cash_flow,
        annual_cash_flow=monthly_cash_flow * 12,
        annual_operating_expenses=annual_opex,
        noi=noi,
        gross_yield_pct=gross_yield,
        net_yield_pct=net_yield,
        dscr=dscr,
    )


def calculate_cash_on_cash(annual_cash_flow: float, down_payment: float) -> float | None:
    """Annual cash flow as % of the down payment; None without a down payment."""
    if down_payment <= 0:
        return None
    return annual_cash_flow / down_payment * 100


def calculate_principal_paid(
    inputs: DealInputs,
    loan_amount: float,
    horizon_years: int,
) -> float:
    """Principal repaid over the first `horizon_years` of the mortgage."""
    remaining = calculate_remaining_balance(
        loan_amount,
        inputs.annual_interest_rate_pct,
        inputs.loan_term_years,
        horizon_years * 12,
    )
    return max(0.0, loan_amount - remaining)


def calculate_appreciation_gain(inputs: DealInputs, horizon_years: int) -> float:
    """Value gained from appreciation over the horizon, never negative."""
    price = inputs.property_price
    future_value = price * (1 + inputs.appreciation_rate_pct / 100.0) ** horizon_years
    return max(0.0, future_value - price)


def calculate_roi(
    inputs: DealInputs,
    financing: FinancingResult,
    income: IncomeExpenseResult,
    horizon_years: int,
) -> float | None:
    """Simplified total return on the down payment over a horizon.

    ROI = (cash flow x years + principal repaid + appreciation) / down payment.
    No discounting: the IRR is the time-value-aware counterpart.

    Returns:
        ROI in percent, or None when there is no down payment
    """
    if financing.down_payment <= 0:
        return None

    total_gain = (
        income.annual_cash_flow * horizon_years
        + calculate_principal_paid(inputs, financing.loan_amount, horizon_years)
        + calculate_appreciation_gain(inputs, horizon_years)
    )
    return total_gain / financing.down_payment * 100


def calculate_total_outlay(financing: FinancingResult, horizon_years: int) -> float:
    """Upfront cash plus every mortgage payment made within the horizon."""
    return financing.total_initial_investment + financing.monthly_payment * 12 * horizon_years
