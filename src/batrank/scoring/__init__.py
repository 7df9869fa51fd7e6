"""Z-score normalization and ranking engine."""

from .errors import EmptyPopulationError, NonFiniteScoreError, RankingError
from .ranker import rank_records
from .scorer import score_population, score_record, z_scores
from .service import RankingResult, rank_population
from .stats import compute_aggregate_stats, summarize_metric

__all__ = [
    "EmptyPopulationError",
    "NonFiniteScoreError",
    "RankingError",
    "RankingResult",
    "compute_aggregate_stats",
    "rank_population",
    "rank_records",
    "score_population",
    "score_record",
    "summarize_metric",
    "z_scores",
]
