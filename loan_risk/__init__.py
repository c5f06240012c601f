"""Weighted loan risk-scoring engine with saved scoring profiles."""

__version__ = "1.0.0"
