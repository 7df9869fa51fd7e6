"""Pydantic models for API I/O."""

from .ranking import (
    MetricSummaryResponse,
    RankedBatterResponse,
    RankingResponse,
    RankingRunResponse,
    StoredBatterResponse,
)

__all__ = [
    "MetricSummaryResponse",
    "RankedBatterResponse",
    "RankingResponse",
    "RankingRunResponse",
    "StoredBatterResponse",
]
