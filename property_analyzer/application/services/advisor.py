"""Deal recommendations.

Plain-language notes shown under the results dashboard, derived from the
headline metrics of one analysis.
"""

from __future__ import annotations

from property_analyzer.domain.models.results import Advisory

LOW_CASH_FLOW_AED = 500.0
LOW_NET_YIELD_PCT = 4.0
MODEST_GROSS_YIELD_PCT = 6.0
STRONG_ROI_5Y_PCT = 80.0


def build_recommendations(
    monthly_cash_flow: float,
    net_yield_pct: float | None,
    gross_yield_pct: float | None,
    roi_5y_pct: float | None,
) -> list[Advisory]:
    """Recommendations for a deal, most severe first.

    Undefined ratios produce no note.
    """
    recs: list[Advisory] = []

    if monthly_cash_flow < 0:
        recs.append(Advisory(
            "negative_cash_flow", "danger",
            "Negative monthly cash flow. Consider higher down payment or rent.",
        ))
    elif monthly_cash_flow < LOW_CASH_FLOW_AED:
        recs.append(Advisory(
            "low_cash_flow", "warn",
            "Low cash flow. Account for vacancy and unexpected expenses.",
        ))

    if net_yield_pct is not None and net_yield_pct < LOW_NET_YIELD_PCT:
        recs.append(Advisory(
            "low_net_yield", "warn",
            "Net yield below typical Dubai averages. Revisit price or fees.",
        ))

    if gross_yield_pct is not None and gross_yield_pct < MODEST_GROSS_YIELD_PCT:
        recs.append(Advisory(
            "modest_gross_yield", "warn",
            "Gross yield is modest; ensure rent assumptions are realistic.",
        ))

    if roi_5y_pct is not None and roi_5y_pct > STRONG_ROI_5Y_PCT:
        recs.append(Advisory(
            "strong_roi", "success",
            "Strong 5-year ROI; deal looks attractive under current assumptions.",
        ))

    return recs
