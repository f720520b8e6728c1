"""Shared helpers."""

from .formatting import format_currency_aed, format_percent

__all__ = ["format_currency_aed", "format_percent"]
