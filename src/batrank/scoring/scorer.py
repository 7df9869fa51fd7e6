"""Turn raw batter lines into composite z-scores."""

from __future__ import annotations

from typing import Iterable, List

from batrank.models import AggregateStats, BatterRecord, ScoredRecord, ZScore


def z_scores(record: BatterRecord, stats: AggregateStats) -> List[ZScore]:
    """Standardize every tracked metric of ``record`` in tracked order."""

    return [summary.standardize(record.metric(summary.metric)) for summary in stats]


def score_record(record: BatterRecord, stats: AggregateStats) -> ScoredRecord:
    components = z_scores(record, stats)
    score = 0.0
    for z in components:
        score += z.value
    return ScoredRecord(
        player_id=record.player_id,
        name=record.name,
        score=score,
        components={z.metric: z.value for z in components},
    )


def score_population(records: Iterable[BatterRecord], stats: AggregateStats) -> List[ScoredRecord]:
    return [score_record(record, stats) for record in records]
