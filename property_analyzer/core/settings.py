"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AnalyzerSettings(BaseSettings):
    """Engine configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    # Market conventions
    transfer_fee_pct: float = Field(default=4.0, ge=0, description="DLD transfer fee % of price")
    default_appreciation_pct: float = Field(default=3.0, description="Annual property appreciation %")

    # Grading
    grading_policy: str = Field(default="six_factor", description="Active grading policy key")

    # IRR solver
    irr_horizons: list[int] = Field(default_factory=lambda: [5, 10], description="IRR horizons in years")
    irr_initial_guess: float = Field(default=0.10, gt=-1, description="Newton-Raphson starting rate")
    irr_max_iterations: int = Field(default=100, ge=1, description="Newton-Raphson iteration cap")
    irr_tolerance: float = Field(default=1e-5, gt=0, description="Convergence threshold on the rate step")

    # Projection
    projection_years: int = Field(default=10, ge=1, le=50)

    model_config = {
        "env_prefix": "PROPANALYZER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("irr_horizons")
    @classmethod
    def validate_horizons(cls, v: list[int]) -> list[int]:
        """Horizons must be positive; 5 years is always computed for grading."""
        if any(h < 1 for h in v):
            raise ValueError("IRR horizons must be >= 1 year")
        return sorted(set(v) | {5})


@lru_cache
def get_settings() -> AnalyzerSettings:
    """Get cached application settings."""
    return AnalyzerSettings()
