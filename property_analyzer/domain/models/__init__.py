"""Data models for property_analyzer."""

from .deal import DealInputs
from .results import (
    Advisory,
    EngineResult,
    FinancingResult,
    GradeResult,
    IncomeExpenseResult,
    IRRResult,
    MetricContribution,
)

__all__ = [
    "DealInputs",
    "FinancingResult",
    "IncomeExpenseResult",
    "IRRResult",
    "GradeResult",
    "MetricContribution",
    "Advisory",
    "EngineResult",
]
