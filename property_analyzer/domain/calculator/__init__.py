"""Cash-flow, IRR and grading calculators."""

from .cashflow import (
    calculate_cash_on_cash,
    calculate_roi,
    calculate_total_outlay,
    compute_financing,
    compute_income_expense,
)
from .irr import (
    IRRParameters,
    build_cash_flow_series,
    calculate_property_irr,
    solve_irr,
)
from .scoring import calculate_grade, letter_for_score, score_metric

__all__ = [
    "compute_financing",
    "compute_income_expense",
    "calculate_cash_on_cash",
    "calculate_roi",
    "calculate_total_outlay",
    "IRRParameters",
    "build_cash_flow_series",
    "calculate_property_irr",
    "solve_irr",
    "calculate_grade",
    "letter_for_score",
    "score_metric",
]
