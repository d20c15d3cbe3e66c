"""Adaptive league-weight learning and trade valuation engine."""

__version__ = "0.1.0"
