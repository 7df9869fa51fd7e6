"""Value models for batter rankings."""

from .batter import METRIC_LABELS, TRACKED_METRICS, BatterRecord, ScoredRecord
from .stats import AggregateStats, MetricSummary, ZScore

__all__ = [
    "AggregateStats",
    "BatterRecord",
    "METRIC_LABELS",
    "MetricSummary",
    "ScoredRecord",
    "TRACKED_METRICS",
    "ZScore",
]
