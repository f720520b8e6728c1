"""Pytest fixtures for property_analyzer tests."""

import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from property_analyzer.core.settings import AnalyzerSettings  # noqa: E402
from property_analyzer.domain.models.deal import DealInputs  # noqa: E402


@pytest.fixture
def sample_deal_data():
    """Financed 1-bed apartment, ready to move in."""
    return {
        "property_price": 1_500_000,
        "down_payment_pct": 25,
        "agent_fee_pct": 2,
        "transfer_fee_enabled": True,
        "additional_upfront_costs": 5_000,
        "loan_term_years": 25,
        "annual_interest_rate_pct": 4.5,
        "monthly_rent": 9_500,
        "additional_monthly_income": 300,
        "vacancy_rate_pct": 5,
        "maintenance_rate_pct": 5,
        "management_fee_pct": 5,
        "fixed_monthly_fee": 1_000,
        "annual_insurance": 1_500,
        "other_annual_expenses": 2_400,
        "appreciation_rate_pct": 3,
    }


@pytest.fixture
def sample_form_data():
    """Same deal as sample_deal_data, keyed by the form field ids."""
    return {
        "propertyValue": "1500000",
        "downPayment": "25",
        "agentFee": "2",
        "dldFeeEnabled": True,
        "additionalCosts": "5000",
        "loanTerm": "25",
        "interestRate": "4.5",
        "monthlyRent": "9500",
        "additionalIncome": "300",
        "vacancyRate": "5",
        "maintenanceRate": "5",
        "managementFee": "5",
        "baseFee": "1000",
        "annualInsurance": "1500",
        "otherExpenses": "2400",
        "propertyAppreciation": "3",
    }


@pytest.fixture
def sample_deal(sample_deal_data):
    return DealInputs(**sample_deal_data)


@pytest.fixture
def cash_deal(sample_deal_data):
    """All-cash purchase: no mortgage, no debt service."""
    return DealInputs(**{**sample_deal_data, "down_payment_pct": 100})


@pytest.fixture
def off_plan_deal_data():
    """Off-plan unit: 20% paid before handover, 20% down on the remainder."""
    return {
        "property_price": 1_000_000,
        "pre_handover_pct": 20,
        "down_payment_pct": 20,
        "agent_fee_pct": 2,
        "transfer_fee_enabled": True,
        "additional_upfront_costs": 3_000,
        "loan_term_years": 25,
        "annual_interest_rate_pct": 4.0,
        "monthly_rent": 6_500,
        "vacancy_rate_pct": 5,
        "maintenance_rate_pct": 5,
        "management_fee_pct": 5,
        "fixed_monthly_fee": 700,
        "annual_insurance": 1_000,
        "other_annual_expenses": 1_200,
        "appreciation_rate_pct": 3,
    }


@pytest.fixture
def default_settings():
    """Settings isolated from the environment and any .env file."""
    return AnalyzerSettings(_env_file=None)
