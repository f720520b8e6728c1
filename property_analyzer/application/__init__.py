"""Application layer: pipeline and reporting services."""
