"""Unit tests for property_analyzer.domain.calculator.scoring module."""

from dataclasses import replace

import pytest

from property_analyzer.core.exceptions import GradingPolicyError
from property_analyzer.core.scoring_constants import (
    CASH_FLOW,
    DSCR,
    FOUR_FACTOR_POLICY,
    GRADING_POLICIES,
    IRR_5Y,
    NET_YIELD,
    SIX_FACTOR_POLICY,
    MetricRule,
    ScoreBand,
    get_grading_policy,
    validate_policy,
)
from property_analyzer.domain.calculator.scoring import (
    calculate_grade,
    letter_for_score,
    score_metric,
    verdict_for_grade,
)


def _grade(**overrides):
    metrics = dict(
        monthly_cash_flow=2_500,
        net_yield_pct=7.0,
        gross_yield_pct=9.0,
        roi_5y_pct=70.0,
        dscr=1.5,
        irr_5y_pct=16.0,
    )
    metrics.update(overrides)
    return calculate_grade(**metrics)


class TestGradingPolicies:
    """Tests for the registered grading tables."""

    @pytest.mark.parametrize("name", sorted(GRADING_POLICIES))
    def test_registered_policies_are_valid(self, name):
        """Every shipped policy passes validation."""
        assert validate_policy(GRADING_POLICIES[name])

    def test_weights_sum_to_100(self):
        assert SIX_FACTOR_POLICY.total_weight == 100
        assert FOUR_FACTOR_POLICY.total_weight == 100

    def test_six_factor_weights(self):
        """Current policy: ROI 25, net 25, DSCR 20, IRR 15, gross 10, cash flow 5."""
        weights = {r.metric_id: r.weight for r in SIX_FACTOR_POLICY.rules}
        assert weights == {
            "roi_5y": 25, "net_yield": 25, "dscr": 20,
            "irr_5y": 15, "gross_yield": 10, "cash_flow": 5,
        }

    def test_four_factor_weights(self):
        """First published policy: ROI 30, cash flow 25, net 25, gross 20."""
        weights = {r.metric_id: r.weight for r in FOUR_FACTOR_POLICY.rules}
        assert weights == {"roi_5y": 30, "cash_flow": 25, "net_yield": 25, "gross_yield": 20}

    def test_default_is_six_factor(self):
        assert get_grading_policy() is SIX_FACTOR_POLICY
        assert get_grading_policy("four_factor") is FOUR_FACTOR_POLICY

    def test_unknown_policy(self):
        with pytest.raises(GradingPolicyError, match="Unknown grading policy"):
            get_grading_policy("seven_factor")

    def test_rule_lookup(self):
        assert SIX_FACTOR_POLICY.rule(DSCR).unit == "x"
        with pytest.raises(GradingPolicyError):
            FOUR_FACTOR_POLICY.rule(IRR_5Y)

    def test_rule_target_is_top_band(self):
        assert SIX_FACTOR_POLICY.rule(NET_YIELD).target == 6


class TestValidatePolicy:
    """Tests for validate_policy rejections."""

    def test_weights_must_sum_to_100(self):
        bad = replace(SIX_FACTOR_POLICY, rules=SIX_FACTOR_POLICY.rules[:-1])
        with pytest.raises(GradingPolicyError, match="sum to 100"):
            validate_policy(bad)

    def test_unknown_metric(self):
        rule = MetricRule("vibes", "Vibes", 5, (ScoreBand(1, 5),), 0, 0)
        bad = replace(SIX_FACTOR_POLICY, rules=SIX_FACTOR_POLICY.rules[:-1] + (rule,))
        with pytest.raises(GradingPolicyError, match="Unknown metric"):
            validate_policy(bad)

    def test_bands_must_descend(self):
        rule = MetricRule(CASH_FLOW, "Cash Flow", 5, (ScoreBand(0, 5), ScoreBand(2000, 2)), 1, 3)
        bad = replace(SIX_FACTOR_POLICY, rules=SIX_FACTOR_POLICY.rules[:-1] + (rule,))
        with pytest.raises(GradingPolicyError, match="high to low"):
            validate_policy(bad)

    def test_top_band_awards_weight(self):
        rule = MetricRule(CASH_FLOW, "Cash Flow", 5, (ScoreBand(2000, 4),), 1, 3)
        bad = replace(SIX_FACTOR_POLICY, rules=SIX_FACTOR_POLICY.rules[:-1] + (rule,))
        with pytest.raises(GradingPolicyError, match="full weight"):
            validate_policy(bad)

    def test_empty_bands(self):
        rule = MetricRule(CASH_FLOW, "Cash Flow", 5, (), 1, 3)
        bad = replace(SIX_FACTOR_POLICY, rules=SIX_FACTOR_POLICY.rules[:-1] + (rule,))
        with pytest.raises(GradingPolicyError, match="no score bands"):
            validate_policy(bad)


class TestScoreMetric:
    """Tests for band lookup on a single metric."""

    @pytest.mark.parametrize(
        "value,points",
        [(2500, 5), (2000, 5), (1999.99, 4), (1000, 4), (500, 3), (0, 2), (-0.01, 1), (-5000, 1)],
    )
    def test_cash_flow_bands(self, value, points):
        """Thresholds are inclusive; below the last band scores the floor."""
        assert score_metric(SIX_FACTOR_POLICY.rule(CASH_FLOW), value) == points

    @pytest.mark.parametrize("value,points", [(1.3, 20), (1.25, 16), (1.0, 12), (0.99, 8)])
    def test_dscr_bands(self, value, points):
        assert score_metric(SIX_FACTOR_POLICY.rule(DSCR), value) == points

    @pytest.mark.parametrize("value", [None, float("nan"), float("inf")])
    def test_unavailable_scores_neutral(self, value):
        """Undefined metrics score the average band, never zero."""
        assert score_metric(SIX_FACTOR_POLICY.rule(DSCR), value) == 12
        assert score_metric(SIX_FACTOR_POLICY.rule(NET_YIELD), value) == 15


class TestLetterGrade:
    """Tests for score-to-letter mapping."""

    @pytest.mark.parametrize(
        "score,letter",
        [
            (100, "A+"), (90, "A+"), (89.9, "A"), (85, "A"), (80, "A-"),
            (75, "B+"), (70, "B"), (65, "B-"), (60, "C+"), (55, "C"),
            (50, "C-"), (40, "D"), (39.9, "F"), (0, "F"),
        ],
    )
    def test_breakpoints(self, score, letter):
        assert letter_for_score(score, SIX_FACTOR_POLICY) == letter

    @pytest.mark.parametrize(
        "letter,verdict",
        [
            ("A+", "Excellent investment potential"),
            ("B-", "Solid investment — verify assumptions"),
            ("C", "Borderline; negotiate price/terms"),
            ("D", "Weak; high risk"),
            ("F", "Not recommended"),
        ],
    )
    def test_verdict_by_leading_letter(self, letter, verdict):
        assert verdict_for_grade(letter, SIX_FACTOR_POLICY) == verdict


class TestCalculateGrade:
    """Tests for the full grade."""

    def test_perfect_deal(self):
        """Every metric at or above its top band scores 100."""
        result = _grade()
        assert result.score == 100
        assert result.letter_grade == "A+"
        assert result.verdict == "Excellent investment potential"
        assert result.policy_version == "2.0"

    def test_exact_boundary_85_is_a(self):
        """Band edges are inclusive at every level."""
        result = _grade(
            roi_5y_pct=60, net_yield_pct=6, dscr=1.2, irr_5y_pct=12,
            gross_yield_pct=4, monthly_cash_flow=-1,
        )
        assert result.score == 85
        assert result.letter_grade == "A"

    def test_weakest_deal(self):
        """All floors: 10 + 10 + 8 + 6 + 4 + 1."""
        result = _grade(
            roi_5y_pct=0, net_yield_pct=0, dscr=0.5, irr_5y_pct=0,
            gross_yield_pct=0, monthly_cash_flow=-100,
        )
        assert result.score == 39
        assert result.letter_grade == "F"
        assert result.verdict == "Not recommended"

    def test_score_bounds(self):
        """Score stays within 0-100."""
        for cf in (-10_000, 0, 10_000):
            result = _grade(monthly_cash_flow=cf, dscr=None, irr_5y_pct=None)
            assert 0 <= result.score <= 100

    def test_cash_purchase_neutral_dscr(self):
        """No debt: DSCR contributes its neutral 12 points."""
        result = _grade(dscr=None)
        assert result.score == 92
        dscr_row = next(c for c in result.contributions if c.metric_id == DSCR)
        assert dscr_row.points == 12
        assert dscr_row.value is None
        assert not dscr_row.available

    def test_all_unavailable(self):
        """Only the cash flow is known: neutral points elsewhere."""
        result = _grade(
            roi_5y_pct=None, net_yield_pct=None, dscr=None,
            irr_5y_pct=None, gross_yield_pct=None, monthly_cash_flow=0,
        )
        assert result.score == 15 + 15 + 12 + 9 + 6 + 2

    def test_contributions_in_policy_order(self):
        result = _grade()
        assert [c.metric_id for c in result.contributions] == [r.metric_id for r in SIX_FACTOR_POLICY.rules]
        assert sum(c.points for c in result.contributions) == result.score

    def test_achievement_clamped(self):
        """Achievement is value / target, capped at 1."""
        result = _grade(net_yield_pct=3.0, roi_5y_pct=200)
        rows = {c.metric_id: c for c in result.contributions}
        assert rows[NET_YIELD].achievement == pytest.approx(0.5)
        assert rows["roi_5y"].achievement == 1.0

    def test_four_factor_policy(self):
        """Legacy table ignores DSCR and IRR entirely."""
        result = calculate_grade(
            monthly_cash_flow=1_000,
            net_yield_pct=4.0,
            gross_yield_pct=6.0,
            roi_5y_pct=45.0,
            dscr=0.1,
            irr_5y_pct=-50.0,
            policy=FOUR_FACTOR_POLICY,
        )
        assert result.score == 24 + 20 + 20 + 16
        assert result.letter_grade == "A-"
        assert result.policy_version == "1.0"
        assert len(result.contributions) == 4

    def test_monotonic_in_each_metric(self):
        """Raising any one metric never lowers the score."""
        base = dict(
            monthly_cash_flow=0, net_yield_pct=1.0, gross_yield_pct=1.0,
            roi_5y_pct=10.0, dscr=0.8, irr_5y_pct=2.0,
        )
        steps = {
            "monthly_cash_flow": [0, 600, 1500, 3000],
            "net_yield_pct": [1, 3, 5, 7],
            "gross_yield_pct": [1, 5, 7, 9],
            "roi_5y_pct": [10, 35, 50, 65],
            "dscr": [0.8, 1.1, 1.25, 1.4],
            "irr_5y_pct": [2, 9, 13, 16],
        }
        for name, values in steps.items():
            scores = [calculate_grade(**{**base, name: v}).score for v in values]
            assert scores == sorted(scores), name
