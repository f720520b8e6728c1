"""
Standardized KPI definitions and health thresholds.
Single source of truth for the good / warn / bad colouring of headline KPIs.
"""
from __future__ import annotations

from dataclasses import dataclass
from math import isfinite

GOOD = "good"
WARN = "warn"
BAD = "bad"
UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class KpiDefinition:
    kpi_id: str
    label: str
    good_at: float
    warn_at: float
    healthy_hint: str
    # Cash flow is "good" only strictly above zero
    strict: bool = False


@dataclass(frozen=True)
class KpiHealth:
    kpi_id: str
    label: str
    value: float | None
    status: str
    healthy_hint: str

    def to_dict(self) -> dict:
        return {
            "kpi_id": self.kpi_id,
            "label": self.label,
            "value": self.value,
            "status": self.status,
            "healthy_hint": self.healthy_hint,
        }


KPI_DEFINITIONS: dict[str, KpiDefinition] = {
    "monthly_cash_flow": KpiDefinition(
        "monthly_cash_flow", "Monthly Cash Flow", 0.0, -200.0,
        "Healthy: ≥ AED 0/month cash flow (buffer ≥ AED 500 preferred).",
        strict=True,
    ),
    "cash_on_cash": KpiDefinition(
        "cash_on_cash", "Cash on Cash", 8.0, 5.0,
        "Healthy: ≥ 8% CoC (Dubai typical 5–10%).",
    ),
    "roi_5y": KpiDefinition(
        "roi_5y", "ROI (5y)", 60.0, 40.0,
        "Healthy: ≥ 60% total over 5 years (incl. appreciation).",
    ),
    "net_yield": KpiDefinition(
        "net_yield", "Net Yield", 6.0, 4.0,
        "Healthy: ≥ 6% net yield (Dubai avg 3–6%).",
    ),
    "gross_yield": KpiDefinition(
        "gross_yield", "Gross Yield", 8.0, 6.0,
        "Healthy: ≥ 8% gross yield (Dubai avg 4–8%).",
    ),
}


def classify_kpi(kpi_id: str, value: float | None) -> KpiHealth:
    """
    Classify a KPI value as good / warn / bad.

    Undefined values (None, NaN) are reported as "unavailable" rather than bad,
    so a cash purchase or a zero price never shows a red tile.
    """
    d = KPI_DEFINITIONS[kpi_id]

    if value is None or not isfinite(value):
        status = UNAVAILABLE
    elif d.strict:
        status = GOOD if value > d.good_at else WARN if value > d.warn_at else BAD
    else:
        status = GOOD if value >= d.good_at else WARN if value >= d.warn_at else BAD

    return KpiHealth(kpi_id, d.label, value, status, d.healthy_hint)


def assess_kpi_health(values: dict[str, float | None]) -> dict[str, KpiHealth]:
    """Classify every known KPI present in `values`."""
    return {k: classify_kpi(k, v) for k, v in values.items() if k in KPI_DEFINITIONS}
