"""
property_analyzer - Dubai Residential Investment Calculator

Financial engine behind the Smart Property Analyzer: turns a deal's price,
financing terms, rent and operating costs into cash flow, yields, IRR and a
weighted investment grade.

Modules:
    - core: Amortization math, grading policies, settings, logging
    - domain: Input/result models and the cash-flow, IRR and scoring calculators
    - application: Pipeline entry point, yearly projection, advisor
    - utils: Display formatting helpers
"""

__version__ = "2.1.0"
