"""Application services."""

from .advisor import build_recommendations
from .engine import analyze_deal, check_input_consistency
from .projection import build_yearly_projection

__all__ = [
    "analyze_deal",
    "check_input_consistency",
    "build_recommendations",
    "build_yearly_projection",
]
