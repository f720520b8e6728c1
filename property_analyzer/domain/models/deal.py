"""Deal input model.

A deal is the complete parameter set for one analysis: price, financing
terms, rental income and operating costs. All currency amounts are AED.
"""

from __future__ import annotations

from math import isfinite
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from property_analyzer.core.settings import get_settings


def _alias(name: str, form_id: str) -> AliasChoices:
    """Accept both the snake_case field name and the original form field id."""
    return AliasChoices(name, form_id)


def _to_number(value: Any) -> float:
    """Parse a raw field value, mapping empty / unparsable / non-finite to 0."""
    if value is None or isinstance(value, bool):
        return float(value or 0)
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if isfinite(number) else 0.0


CURRENCY_FIELDS = (
    "property_price",
    "additional_upfront_costs",
    "monthly_rent",
    "additional_monthly_income",
    "fixed_monthly_fee",
    "annual_insurance",
    "other_annual_expenses",
)

PERCENT_FIELDS = (
    "down_payment_pct",
    "agent_fee_pct",
    "annual_interest_rate_pct",
    "vacancy_rate_pct",
    "maintenance_rate_pct",
    "management_fee_pct",
    "appreciation_rate_pct",
)


class DealInputs(BaseModel):
    """Validated deal parameters.

    Accepts either snake_case names or the original form field ids
    (e.g. ``propertyValue``, ``dldFeeEnabled``), so a form payload or a
    decoded share link can be passed straight in. Numeric fields never
    carry NaN: empty or invalid entries become 0.
    """

    # Purchase
    property_price: float = Field(
        default=0.0, validation_alias=_alias("property_price", "propertyValue"),
        description="Purchase price in AED",
    )
    down_payment_pct: float = Field(
        default=0.0, validation_alias=_alias("down_payment_pct", "downPayment"),
        description="Down payment % of the financed base",
    )
    agent_fee_pct: float = Field(
        default=0.0, validation_alias=_alias("agent_fee_pct", "agentFee"),
        description="Agent commission % of price",
    )
    transfer_fee_enabled: bool = Field(
        default=True, validation_alias=_alias("transfer_fee_enabled", "dldFeeEnabled"),
        description="Apply the DLD transfer fee",
    )
    additional_upfront_costs: float = Field(
        default=0.0, validation_alias=_alias("additional_upfront_costs", "additionalCosts"),
        description="Other closing costs in AED",
    )

    # Financing
    loan_term_years: int = Field(
        default=25, validation_alias=_alias("loan_term_years", "loanTerm"),
        description="Mortgage term in years",
    )
    annual_interest_rate_pct: float = Field(
        default=0.0, validation_alias=_alias("annual_interest_rate_pct", "interestRate"),
        description="Annual mortgage rate %",
    )

    # Income
    monthly_rent: float = Field(
        default=0.0, validation_alias=_alias("monthly_rent", "monthlyRent"),
        description="Monthly rent in AED",
    )
    additional_monthly_income: float = Field(
        default=0.0, validation_alias=_alias("additional_monthly_income", "additionalIncome"),
        description="Other monthly income (parking, storage) in AED",
    )
    vacancy_rate_pct: float = Field(
        default=0.0, validation_alias=_alias("vacancy_rate_pct", "vacancyRate"),
        description="Expected vacancy %",
    )

    # Expenses
    maintenance_rate_pct: float = Field(
        default=0.0, validation_alias=_alias("maintenance_rate_pct", "maintenanceRate"),
        description="Maintenance % of effective income",
    )
    management_fee_pct: float = Field(
        default=0.0, validation_alias=_alias("management_fee_pct", "managementFee"),
        description="Management fee % of effective income",
    )
    fixed_monthly_fee: float = Field(
        default=0.0, validation_alias=_alias("fixed_monthly_fee", "baseFee"),
        description="Service charge in AED per month",
    )
    annual_insurance: float = Field(
        default=0.0, validation_alias=_alias("annual_insurance", "annualInsurance"),
        description="Insurance in AED per year",
    )
    other_annual_expenses: float = Field(
        default=0.0, validation_alias=_alias("other_annual_expenses", "otherExpenses"),
        description="Other expenses in AED per year",
    )

    # Growth
    appreciation_rate_pct: float = Field(
        default_factory=lambda: get_settings().default_appreciation_pct,
        validation_alias=_alias("appreciation_rate_pct", "propertyAppreciation"),
        description="Annual property appreciation %",
    )

    # Off-plan
    pre_handover_pct: float | None = Field(
        default=None, validation_alias=_alias("pre_handover_pct", "preHandover"),
        description="% of price paid before handover (off-plan only)",
    )

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @field_validator(*CURRENCY_FIELDS, *PERCENT_FIELDS, mode="before")
    @classmethod
    def normalize_number(cls, v: Any) -> float:
        """Empty, unparsable or non-finite entries become 0."""
        return _to_number(v)

    @field_validator("loan_term_years", mode="before")
    @classmethod
    def normalize_term(cls, v: Any) -> int:
        """Whole years; invalid entries become 0."""
        return int(round(_to_number(v)))

    @field_validator("transfer_fee_enabled", mode="before")
    @classmethod
    def normalize_flag(cls, v: Any) -> Any:
        """Unchecked form boxes arrive as missing or empty."""
        if v is None or v == "":
            return False
        return v

    @field_validator("pre_handover_pct", mode="before")
    @classmethod
    def normalize_pre_handover(cls, v: Any) -> float | None:
        """Blank means a ready property."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return _to_number(v)

    @property
    def is_off_plan(self) -> bool:
        """Off-plan deals split the price into pre-handover cash and a financed remainder."""
        return self.pre_handover_pct is not None

    @property
    def gross_monthly_income(self) -> float:
        return self.monthly_rent + self.additional_monthly_income
