"""Grading policies - single source of truth for grade weights and thresholds.

A policy is data: per-metric score bands, the score-to-letter breakpoints and
the verdict for each leading letter. The six-factor table is the current
policy; the four-factor table reproduces the first published grade so older
reports can be regraded the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from property_analyzer.core.exceptions import GradingPolicyError

# Metric identifiers, shared by policies and the scoring calculator
ROI_5Y = "roi_5y"
NET_YIELD = "net_yield"
DSCR = "dscr"
IRR_5Y = "irr_5y"
GROSS_YIELD = "gross_yield"
CASH_FLOW = "cash_flow"

METRIC_IDS = (ROI_5Y, NET_YIELD, DSCR, IRR_5Y, GROSS_YIELD, CASH_FLOW)


@dataclass(frozen=True)
class ScoreBand:
    """Points awarded when a metric value is >= threshold."""

    threshold: float
    points: float


@dataclass(frozen=True)
class MetricRule:
    """Scoring rule for one metric.

    Bands are checked from the highest threshold down; the first one the
    value reaches wins. `floor_points` applies when no band is reached and
    `unavailable_points` when the metric is undefined.
    """

    metric_id: str
    label: str
    weight: float
    bands: tuple[ScoreBand, ...]
    floor_points: float
    unavailable_points: float
    unit: str = "%"

    @property
    def target(self) -> float:
        """Threshold of the top band ("excellent")."""
        return self.bands[0].threshold


@dataclass(frozen=True)
class GradingPolicy:
    """Versioned grading table."""

    name: str
    version: str
    rules: tuple[MetricRule, ...]
    letter_breakpoints: tuple[tuple[float, str], ...]
    failing_letter: str = "F"
    verdicts: dict[str, str] = field(default_factory=dict, hash=False)

    @property
    def total_weight(self) -> float:
        return sum(r.weight for r in self.rules)

    def rule(self, metric_id: str) -> MetricRule:
        for r in self.rules:
            if r.metric_id == metric_id:
                return r
        raise GradingPolicyError(f"Policy '{self.name}' has no rule for metric '{metric_id}'")


LETTER_BREAKPOINTS: tuple[tuple[float, str], ...] = (
    (90, "A+"),
    (85, "A"),
    (80, "A-"),
    (75, "B+"),
    (70, "B"),
    (65, "B-"),
    (60, "C+"),
    (55, "C"),
    (50, "C-"),
    (40, "D"),
)

# Keyed by the grade's leading letter
VERDICTS = {
    "A": "Excellent investment potential",
    "B": "Solid investment — verify assumptions",
    "C": "Borderline; negotiate price/terms",
    "D": "Weak; high risk",
    "F": "Not recommended",
}


def _bands(*pairs: tuple[float, float]) -> tuple[ScoreBand, ...]:
    return tuple(ScoreBand(threshold=t, points=p) for t, p in pairs)


SIX_FACTOR_POLICY = GradingPolicy(
    name="six_factor",
    version="2.0",
    rules=(
        MetricRule(ROI_5Y, "ROI (5y)", 25, _bands((60, 25), (45, 20), (30, 15)), 10, 15),
        MetricRule(NET_YIELD, "Net Yield", 25, _bands((6, 25), (4, 20), (2, 15)), 10, 15),
        MetricRule(DSCR, "DSCR", 20, _bands((1.3, 20), (1.2, 16), (1.0, 12)), 8, 12, unit="x"),
        MetricRule(IRR_5Y, "IRR (5y)", 15, _bands((15, 15), (12, 12), (8, 9)), 6, 9),
        MetricRule(GROSS_YIELD, "Gross Yield", 10, _bands((8, 10), (6, 8), (4, 6)), 4, 6),
        MetricRule(
            CASH_FLOW, "Cash Flow", 5,
            _bands((2000, 5), (1000, 4), (500, 3), (0, 2)), 1, 3,
            unit=" AED/mo",
        ),
    ),
    letter_breakpoints=LETTER_BREAKPOINTS,
    verdicts=VERDICTS,
)

FOUR_FACTOR_POLICY = GradingPolicy(
    name="four_factor",
    version="1.0",
    rules=(
        MetricRule(ROI_5Y, "ROI (5y)", 30, _bands((60, 30), (45, 24), (30, 18)), 12, 18),
        MetricRule(
            CASH_FLOW, "Cash Flow", 25,
            _bands((2000, 25), (1000, 20), (500, 15), (0, 10)), 0, 15,
            unit=" AED/mo",
        ),
        MetricRule(NET_YIELD, "Net Yield", 25, _bands((6, 25), (4, 20), (2, 15)), 10, 15),
        MetricRule(GROSS_YIELD, "Gross Yield", 20, _bands((8, 20), (6, 16), (4, 12)), 8, 12),
    ),
    letter_breakpoints=LETTER_BREAKPOINTS,
    verdicts=VERDICTS,
)

GRADING_POLICIES: dict[str, GradingPolicy] = {
    SIX_FACTOR_POLICY.name: SIX_FACTOR_POLICY,
    FOUR_FACTOR_POLICY.name: FOUR_FACTOR_POLICY,
}

DEFAULT_POLICY_NAME = SIX_FACTOR_POLICY.name


def validate_policy(policy: GradingPolicy) -> bool:
    """Validate a grading policy's internal consistency.

    Args:
        policy: Policy to validate

    Returns:
        True if valid, raises GradingPolicyError otherwise
    """
    unknown = {r.metric_id for r in policy.rules} - set(METRIC_IDS)
    if unknown:
        raise GradingPolicyError(f"Unknown metric ids in '{policy.name}': {sorted(unknown)}")

    if abs(policy.total_weight - 100.0) > 1e-9:
        raise GradingPolicyError(
            f"Weights of '{policy.name}' must sum to 100, got {policy.total_weight:g}"
        )

    for r in policy.rules:
        if not r.bands:
            raise GradingPolicyError(f"Rule '{r.metric_id}' has no score bands")
        thresholds = [b.threshold for b in r.bands]
        if thresholds != sorted(thresholds, reverse=True):
            raise GradingPolicyError(f"Bands of '{r.metric_id}' must be ordered high to low")
        if r.bands[0].points != r.weight:
            raise GradingPolicyError(f"Top band of '{r.metric_id}' must award the full weight")

    cutoffs = [c for c, _ in policy.letter_breakpoints]
    if cutoffs != sorted(cutoffs, reverse=True):
        raise GradingPolicyError(f"Letter breakpoints of '{policy.name}' must be ordered high to low")

    return True


def get_grading_policy(name: str | None = None) -> GradingPolicy:
    """Look up a registered grading policy by name.

    Args:
        name: Policy key; None selects the default six-factor policy

    Returns:
        The registered GradingPolicy
    """
    key = name or DEFAULT_POLICY_NAME
    try:
        return GRADING_POLICIES[key]
    except KeyError:
        raise GradingPolicyError(
            f"Unknown grading policy '{key}' (available: {', '.join(sorted(GRADING_POLICIES))})"
        ) from None
