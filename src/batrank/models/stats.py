"""Population statistics used to standardize batter metrics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from .batter import TRACKED_METRICS


@dataclass(frozen=True)
class ZScore:
    """Standardized value for one metric.

    ``degenerate`` is set when the population had no variance for the metric;
    the value is then exactly ``0.0`` rather than the result of a division.
    """

    metric: str
    value: float
    degenerate: bool = False


@dataclass(frozen=True)
class MetricSummary:
    metric: str
    mean: float
    stddev: float

    @property
    def is_degenerate(self) -> bool:
        return self.stddev == 0

    def standardize(self, value: float) -> ZScore:
        if self.is_degenerate:
            return ZScore(metric=self.metric, value=0.0, degenerate=True)
        return ZScore(metric=self.metric, value=(value - self.mean) / self.stddev)


@dataclass(frozen=True)
class AggregateStats:
    """Mean and population standard deviation for every tracked metric."""

    population_size: int
    summaries: Tuple[MetricSummary, ...]

    def __post_init__(self) -> None:
        metrics = tuple(summary.metric for summary in self.summaries)
        if metrics != TRACKED_METRICS:
            raise ValueError(f"summaries must cover {TRACKED_METRICS}, got {metrics}")

    def __getitem__(self, metric: str) -> MetricSummary:
        for summary in self.summaries:
            if summary.metric == metric:
                return summary
        raise KeyError(f"Unknown metric {metric!r}")

    def __iter__(self) -> Iterator[MetricSummary]:
        return iter(self.summaries)

    def as_dict(self) -> dict[str, dict[str, float]]:
        return {
            summary.metric: {"mean": summary.mean, "stddev": summary.stddev}
            for summary in self.summaries
        }
