"""Run the full stats -> score -> rank pass over one population."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from batrank.models import AggregateStats, BatterRecord, ScoredRecord

from .ranker import rank_records
from .scorer import score_population
from .stats import compute_aggregate_stats


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankingResult:
    stats: AggregateStats
    ranked: List[ScoredRecord]
    ranked_at: datetime

    def top(self, count: int) -> List[ScoredRecord]:
        return self.ranked[: max(0, count)]


def rank_population(
    records: Sequence[BatterRecord],
    *,
    ranked_at: Optional[datetime] = None,
) -> RankingResult:
    stats = compute_aggregate_stats(records)
    degenerate = [summary.metric for summary in stats if summary.is_degenerate]
    if degenerate:
        logger.warning(
            "Metrics with no variance contribute nothing to the composite: %s",
            ", ".join(degenerate),
        )

    ranked = rank_records(score_population(records, stats))
    ranked_at = ranked_at or datetime.now(timezone.utc)
    leader = ranked[0]
    logger.info(
        "Ranked %s batters; leader %s (%s) with score %.4f",
        stats.population_size,
        leader.name,
        leader.player_id,
        leader.score,
    )
    return RankingResult(stats=stats, ranked=ranked, ranked_at=ranked_at)
