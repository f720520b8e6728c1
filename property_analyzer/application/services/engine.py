"""Deal analysis pipeline.

Single entry point that runs amortization, cash flow and yields, IRR and
grading in order and returns everything as one EngineResult. Nothing is
kept between calls: the same inputs always give the same result.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from property_analyzer.application.services.advisor import build_recommendations
from property_analyzer.core.exceptions import InvalidParameterError
from property_analyzer.core.glossary import assess_kpi_health
from property_analyzer.core.logging import get_logger
from property_analyzer.core.scoring_constants import GradingPolicy, get_grading_policy, validate_policy
from property_analyzer.core.settings import AnalyzerSettings, get_settings
from property_analyzer.domain.calculator.cashflow import (
    calculate_cash_on_cash,
    calculate_roi,
    calculate_total_outlay,
    compute_financing,
    compute_income_expense,
)
from property_analyzer.domain.calculator.irr import IRRParameters, calculate_property_irr
from property_analyzer.domain.calculator.scoring import calculate_grade
from property_analyzer.domain.models.deal import CURRENCY_FIELDS, DealInputs
from property_analyzer.domain.models.results import Advisory, EngineResult, IRRResult

log = get_logger(__name__)

GRADING_HORIZON_YEARS = 5
OUTLAY_HORIZON_YEARS = 5


def check_input_consistency(inputs: DealInputs) -> list[Advisory]:
    """Flag inputs that are computable but inconsistent.

    The engine still computes with the values as given; these are
    advisories for the caller to surface.
    """
    warnings: list[Advisory] = []

    if inputs.down_payment_pct > 100:
        warnings.append(Advisory(
            "down_payment_over_100", "warn",
            f"Down payment of {inputs.down_payment_pct:g}% exceeds the financed amount.",
        ))

    if inputs.is_off_plan and inputs.pre_handover_pct + inputs.down_payment_pct > 100:
        warnings.append(Advisory(
            "off_plan_split_over_100", "warn",
            f"Pre-handover ({inputs.pre_handover_pct:g}%) plus down payment "
            f"({inputs.down_payment_pct:g}%) exceeds 100% of the price.",
        ))

    financed = inputs.down_payment_pct < 100 and inputs.property_price > 0
    if financed and inputs.loan_term_years <= 0:
        warnings.append(Advisory(
            "missing_loan_term", "warn",
            "A loan term is required for a financed purchase; mortgage payments are treated as 0.",
        ))

    if not 0 <= inputs.vacancy_rate_pct <= 100:
        warnings.append(Advisory(
            "vacancy_out_of_range", "warn",
            f"Vacancy rate of {inputs.vacancy_rate_pct:g}% is outside 0-100%.",
        ))

    negative = [name for name in CURRENCY_FIELDS if getattr(inputs, name) < 0]
    if negative:
        warnings.append(Advisory(
            "negative_amount", "warn",
            f"Negative amounts entered for: {', '.join(negative)}.",
        ))

    return warnings


def _coerce_inputs(deal: DealInputs | Mapping[str, Any]) -> DealInputs:
    if isinstance(deal, DealInputs):
        return deal
    try:
        return DealInputs.model_validate(deal)
    except ValidationError as e:
        raise InvalidParameterError("deal", type(deal).__name__, str(e)) from e


def analyze_deal(
    deal: DealInputs | Mapping[str, Any],
    *,
    policy: GradingPolicy | None = None,
    settings: AnalyzerSettings | None = None,
) -> EngineResult:
    """Run the full analysis for one deal.

    Args:
        deal: DealInputs, or a raw mapping (snake_case or form field ids)
        policy: Grading table override, validated before use; defaults to
            the configured policy
        settings: Settings override; defaults to get_settings()

    Returns:
        EngineResult with financing, income, returns, IRR per horizon,
        grade, warnings, recommendations and KPI health
    """
    settings = settings or get_settings()
    inputs = _coerce_inputs(deal)
    if policy is None:
        policy = get_grading_policy(settings.grading_policy)
    else:
        validate_policy(policy)
    log.debug("grading_policy_selected", policy=policy.name, version=policy.version)

    warnings = check_input_consistency(inputs)
    for w in warnings:
        log.warning("input_inconsistency", code=w.code, detail=w.message)

    financing = compute_financing(inputs, settings.transfer_fee_pct)
    income = compute_income_expense(inputs, financing.monthly_payment)
    cash_on_cash = calculate_cash_on_cash(income.annual_cash_flow, financing.down_payment)

    horizons = settings.irr_horizons
    roi = {h: calculate_roi(inputs, financing, income, h) for h in horizons}

    params = IRRParameters.from_deal(inputs, financing, income)
    irr: dict[int, IRRResult] = {}
    for h in horizons:
        result = calculate_property_irr(
            params,
            h,
            initial_guess=settings.irr_initial_guess,
            max_iterations=settings.irr_max_iterations,
            tolerance=settings.irr_tolerance,
        )
        if not result.converged:
            log.warning(
                "irr_not_converged",
                horizon_years=h,
                estimate_pct=result.irr_pct,
                iterations=result.iterations,
            )
            warnings.append(Advisory(
                "irr_not_converged", "info",
                f"{h}-year IRR did not converge; the figure shown is approximate.",
            ))
        irr[h] = result

    grade = calculate_grade(
        monthly_cash_flow=income.monthly_cash_flow,
        net_yield_pct=income.net_yield_pct,
        gross_yield_pct=income.gross_yield_pct,
        roi_5y_pct=roi[GRADING_HORIZON_YEARS],
        dscr=income.dscr,
        irr_5y_pct=irr[GRADING_HORIZON_YEARS].irr_pct,
        policy=policy,
    )

    recommendations = build_recommendations(
        income.monthly_cash_flow,
        income.net_yield_pct,
        income.gross_yield_pct,
        roi[GRADING_HORIZON_YEARS],
    )

    kpi_health = assess_kpi_health({
        "monthly_cash_flow": income.monthly_cash_flow,
        "cash_on_cash": cash_on_cash,
        "roi_5y": roi[GRADING_HORIZON_YEARS],
        "net_yield": income.net_yield_pct,
        "gross_yield": income.gross_yield_pct,
    })

    log.debug(
        "deal_analyzed",
        price=inputs.property_price,
        off_plan=inputs.is_off_plan,
        score=grade.score,
        grade=grade.letter_grade,
        warnings=len(warnings),
    )

    return EngineResult(
        inputs=inputs,
        financing=financing,
        income=income,
        cash_on_cash_pct=cash_on_cash,
        roi_pct=roi,
        total_outlay_5y=calculate_total_outlay(financing, OUTLAY_HORIZON_YEARS),
        irr=irr,
        grade=grade,
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
        kpi_health=kpi_health,
    )
