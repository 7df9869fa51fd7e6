"""Population mean and standard deviation per tracked metric."""

from __future__ import annotations

import logging
from statistics import fmean, pstdev
from typing import Sequence

from batrank.models import AggregateStats, BatterRecord, MetricSummary, TRACKED_METRICS

from .errors import EmptyPopulationError


logger = logging.getLogger(__name__)


def summarize_metric(records: Sequence[BatterRecord], metric: str) -> MetricSummary:
    """Return the mean and population (divide-by-N) stddev of one metric.

    ``fmean`` sums through ``math.fsum`` so the mean does not depend on the
    order of ``records``; ``pstdev`` works on exact fractions, which keeps the
    stddev of a constant column at exactly zero.
    """

    if not records:
        raise EmptyPopulationError()
    values = [record.metric(metric) for record in records]
    return MetricSummary(metric=metric, mean=fmean(values), stddev=pstdev(values))


def compute_aggregate_stats(records: Sequence[BatterRecord]) -> AggregateStats:
    if not records:
        raise EmptyPopulationError()

    summaries = []
    for metric in TRACKED_METRICS:
        summary = summarize_metric(records, metric)
        logger.debug(
            "Metric %s: mean=%.6f stddev=%.6f%s",
            metric,
            summary.mean,
            summary.stddev,
            " (no variance)" if summary.is_degenerate else "",
        )
        summaries.append(summary)
    return AggregateStats(population_size=len(records), summaries=tuple(summaries))
