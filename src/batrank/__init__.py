"""Rank batters by the sum of their per-metric z-scores."""

__version__ = "0.1.0"
