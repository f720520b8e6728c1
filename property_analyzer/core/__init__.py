"""Core amortization math, grading policies and ambient services."""

from .exceptions import (
    ConfigurationError,
    GradingPolicyError,
    InvalidParameterError,
    PropertyAnalyzerError,
)
from .financial import (
    calculate_monthly_payment,
    calculate_remaining_balance,
    generate_amortization_schedule,
)
from .scoring_constants import (
    FOUR_FACTOR_POLICY,
    GRADING_POLICIES,
    SIX_FACTOR_POLICY,
    GradingPolicy,
    get_grading_policy,
)

__all__ = [
    "calculate_monthly_payment",
    "calculate_remaining_balance",
    "generate_amortization_schedule",
    "GradingPolicy",
    "SIX_FACTOR_POLICY",
    "FOUR_FACTOR_POLICY",
    "GRADING_POLICIES",
    "get_grading_policy",
    # Exceptions
    "PropertyAnalyzerError",
    "InvalidParameterError",
    "GradingPolicyError",
    "ConfigurationError",
]
