"""Result records produced by one engine run.

Every record is created fresh per analysis and never mutated afterwards.
Ratios that cannot be computed (zero price, zero down payment, no debt
service) are None, which presentation renders as an em-dash.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

from property_analyzer.core.glossary import KpiHealth
from property_analyzer.utils.formatting import format_currency_aed, format_percent

if TYPE_CHECKING:
    from property_analyzer.domain.models.deal import DealInputs


@dataclass(frozen=True)
class FinancingResult:
    """Upfront cash and mortgage terms."""

    down_payment: float
    loan_amount: float
    total_initial_investment: float
    monthly_payment: float
    agent_fee: float = 0.0
    transfer_fee: float = 0.0
    pre_handover_cash: float = 0.0
    financed_base: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IncomeExpenseResult:
    """Monthly/annual income roll-up, NOI and coverage ratios."""

    gross_monthly_income: float
    effective_monthly_income: float
    monthly_maintenance: float
    monthly_management: float
    monthly_operating_expenses: float
    monthly_cash_flow: float
    annual_cash_flow: float
    annual_operating_expenses: float
    noi: float
    gross_yield_pct: float | None
    net_yield_pct: float | None
    dscr: float | None

    @property
    def monthly_noi(self) -> float:
        return self.noi / 12.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IRRResult:
    """Internal rate of return for one holding horizon.

    `converged` is False when Newton-Raphson hit its iteration cap or a flat
    derivative; `irr_pct` is then the last estimate and only approximate.
    Grading still uses that estimate; only a missing `irr_pct` scores as
    unavailable.
    """

    horizon_years: int
    irr_pct: float | None
    converged: bool
    iterations: int
    cash_flows: tuple[float, ...]
    exit_proceeds: float
    appreciated_value: float
    remaining_loan_balance: float

    @property
    def is_reliable(self) -> bool:
        return self.converged and self.irr_pct is not None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["cash_flows"] = list(self.cash_flows)
        return d


@dataclass(frozen=True)
class MetricContribution:
    """One row of the grade breakdown."""

    metric_id: str
    label: str
    weight: float
    value: float | None
    points: float
    target: float
    unit: str = "%"

    @property
    def available(self) -> bool:
        return self.value is not None

    @property
    def achievement(self) -> float:
        """Share of the excellent target reached, clamped to [0, 1]."""
        if self.value is None or self.target <= 0:
            return 0.0
        return max(0.0, min(1.0, self.value / self.target))

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["achievement"] = self.achievement
        return d


@dataclass(frozen=True)
class GradeResult:
    score: float
    letter_grade: str
    verdict: str
    policy_version: str
    contributions: tuple[MetricContribution, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "letter_grade": self.letter_grade,
            "verdict": self.verdict,
            "policy_version": self.policy_version,
            "contributions": [c.to_dict() for c in self.contributions],
        }


@dataclass(frozen=True)
class Advisory:
    """Non-blocking note for the caller: input warning or recommendation.

    level is one of "info", "success", "warn", "danger".
    """

    code: str
    level: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class EngineResult:
    """Everything one analysis produces, returned from a single call."""

    inputs: DealInputs
    financing: FinancingResult
    income: IncomeExpenseResult
    cash_on_cash_pct: float | None
    roi_pct: dict[int, float | None]
    total_outlay_5y: float
    irr: dict[int, IRRResult]
    grade: GradeResult
    warnings: tuple[Advisory, ...] = ()
    recommendations: tuple[Advisory, ...] = ()
    kpi_health: dict[str, KpiHealth] = field(default_factory=dict, hash=False)

    @property
    def roi_5y_pct(self) -> float | None:
        return self.roi_pct.get(5)

    @property
    def irr_5y(self) -> IRRResult | None:
        return self.irr.get(5)

    def to_dict(self) -> dict[str, Any]:
        return {
            "inputs": self.inputs.model_dump(),
            "financing": self.financing.to_dict(),
            "income": self.income.to_dict(),
            "cash_on_cash_pct": self.cash_on_cash_pct,
            "roi_pct": dict(self.roi_pct),
            "total_outlay_5y": self.total_outlay_5y,
            "irr": {h: r.to_dict() for h, r in self.irr.items()},
            "grade": self.grade.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "kpi_health": {k: v.to_dict() for k, v in self.kpi_health.items()},
        }

    def to_display_dict(self) -> dict[str, str]:
        """Headline figures formatted the way the results dashboard shows them."""
        irr5 = self.irr_5y
        irr10 = self.irr.get(10)
        return {
            "down_payment": format_currency_aed(self.financing.down_payment),
            "loan_amount": format_currency_aed(self.financing.loan_amount),
            "total_initial_investment": format_currency_aed(self.financing.total_initial_investment),
            "monthly_payment": format_currency_aed(self.financing.monthly_payment),
            "monthly_cash_flow": format_currency_aed(self.income.monthly_cash_flow),
            "annual_cash_flow": format_currency_aed(self.income.annual_cash_flow),
            "total_outlay_5y": format_currency_aed(self.total_outlay_5y),
            "cash_on_cash": format_percent(self.cash_on_cash_pct),
            "roi_5y": format_percent(self.roi_5y_pct),
            "net_yield": format_percent(self.income.net_yield_pct),
            "gross_yield": format_percent(self.income.gross_yield_pct),
            "dscr": format_percent(self.income.dscr, decimals=2, suffix="x"),
            "irr_5y": format_percent(irr5.irr_pct if irr5 else None),
            "irr_10y": format_percent(irr10.irr_pct if irr10 else None),
            "grade": self.grade.letter_grade,
            "grade_score": str(round(self.grade.score)),
            "verdict": self.grade.verdict,
        }
