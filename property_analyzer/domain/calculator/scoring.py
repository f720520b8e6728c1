"""Investment grade scoring.

Scores each metric against the bands of a grading policy, sums the points
to a 0-100 score and maps the score to a letter grade and verdict.
"""

from __future__ import annotations

from math import isfinite

from property_analyzer.core.scoring_constants import (
    CASH_FLOW,
    DSCR,
    GROSS_YIELD,
    IRR_5Y,
    NET_YIELD,
    ROI_5Y,
    GradingPolicy,
    MetricRule,
    get_grading_policy,
)
from property_analyzer.domain.models.results import GradeResult, MetricContribution


def _available(value: float | None) -> bool:
    return value is not None and isfinite(value)


def score_metric(rule: MetricRule, value: float | None) -> float:
    """Points for one metric: first band reached (>=), else the floor.

    Undefined values (None, NaN, inf) score the rule's neutral default.
    """
    if not _available(value):
        return rule.unavailable_points
    for band in rule.bands:
        if value >= band.threshold:
            return band.points
    return rule.floor_points


def letter_for_score(score: float, policy: GradingPolicy) -> str:
    """Map a total score to a letter; breakpoints are inclusive."""
    for cutoff, letter in policy.letter_breakpoints:
        if score >= cutoff:
            return letter
    return policy.failing_letter


def verdict_for_grade(letter: str, policy: GradingPolicy) -> str:
    """Verdict keyed by the grade's leading letter."""
    return policy.verdicts.get(letter[:1], policy.verdicts.get(policy.failing_letter, ""))


def calculate_grade(
    monthly_cash_flow: float,
    net_yield_pct: float | None,
    gross_yield_pct: float | None,
    roi_5y_pct: float | None,
    dscr: float | None,
    irr_5y_pct: float | None,
    *,
    policy: GradingPolicy | None = None,
) -> GradeResult:
    """Grade a deal from its headline metrics.

    Metrics the policy has no rule for are ignored, so the same call serves
    the four-factor and six-factor tables.

    Args:
        monthly_cash_flow: Monthly cash flow after debt service (AED)
        net_yield_pct: Net yield %, None if undefined
        gross_yield_pct: Gross yield %, None if undefined
        roi_5y_pct: 5-year ROI approximation %, None if undefined
        dscr: Debt service coverage ratio, None without debt
        irr_5y_pct: 5-year IRR %, the last estimate when the solver did not
            converge; None if unavailable
        policy: Grading table (defaults to the six-factor policy)

    Returns:
        GradeResult with per-metric contributions in policy order
    """
    policy = policy or get_grading_policy()

    values = {
        ROI_5Y: roi_5y_pct,
        NET_YIELD: net_yield_pct,
        DSCR: dscr,
        IRR_5Y: irr_5y_pct,
        GROSS_YIELD: gross_yield_pct,
        CASH_FLOW: monthly_cash_flow,
    }

    contributions = []
    for rule in policy.rules:
        value = values.get(rule.metric_id)
        contributions.append(
            MetricContribution(
                metric_id=rule.metric_id,
                label=rule.label,
                weight=rule.weight,
                value=value if _available(value) else None,
                points=score_metric(rule, value),
                target=rule.target,
                unit=rule.unit,
            )
        )

    score = sum(c.points for c in contributions)
    letter = letter_for_score(score, policy)

    return GradeResult(
        score=score,
        letter_grade=letter,
        verdict=verdict_for_grade(letter, policy),
        policy_version=policy.version,
        contributions=tuple(contributions),
    )
