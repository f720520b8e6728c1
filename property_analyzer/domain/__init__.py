"""Domain models and calculators."""
