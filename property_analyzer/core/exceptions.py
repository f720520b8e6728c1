"""Custom exceptions for property_analyzer.

Domain-specific exception types. Numeric input problems never raise
(they are normalized or reported as advisories); these are reserved for
programmer and configuration errors.
"""

from __future__ import annotations

from typing import Any


class PropertyAnalyzerError(Exception):
    """Base exception for all property_analyzer errors."""
    pass


# --- Input Errors ---

class InvalidParameterError(PropertyAnalyzerError):
    """Invalid parameter value provided."""

    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        msg = f"Invalid parameter '{param_name}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


# --- Configuration Errors ---

class ConfigurationError(PropertyAnalyzerError):
    """Error in application configuration."""
    pass


class GradingPolicyError(ConfigurationError):
    """Unknown or malformed grading policy."""
    pass
