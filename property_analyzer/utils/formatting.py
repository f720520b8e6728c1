"""Display formatting helpers.

Currency is shown in whole dirhams; undefined values render as an em-dash.
"""

from __future__ import annotations

from math import isfinite

MISSING = "—"


def _is_missing(value: float | None) -> bool:
    return value is None or not isfinite(value)


def format_currency_aed(value: float | None) -> str:
    """Format a number as AED currency.

    Args:
        value: Amount to format

    Returns:
        Formatted string like "AED 1,234,567"
    """
    if _is_missing(value):
        return MISSING
    return f"AED {int(round(value)):,}"


def format_percent(value: float | None, decimals: int = 1, suffix: str = "%") -> str:
    """Format a number as percentage.

    Args:
        value: Value to format (as percentage, not decimal)
        decimals: Number of decimal places
        suffix: Unit appended to the number

    Returns:
        Formatted string like "6.5%"
    """
    if _is_missing(value):
        return MISSING
    return f"{value:.{decimals}f}{suffix}"
