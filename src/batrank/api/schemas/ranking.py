from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class MetricSummaryResponse(BaseModel):
    metric: str
    label: str
    mean: float
    stddev: float
    degenerate: bool


class RankedBatterResponse(BaseModel):
    rank: int = Field(..., ge=1)
    player_id: str
    name: str
    score: float
    components: Dict[str, float] = Field(default_factory=dict)


class StoredBatterResponse(BaseModel):
    player_id: str
    name: str
    score: float


class RankingResponse(BaseModel):
    run_id: str | None = None
    ranked_at: str
    population_size: int
    stats: List[MetricSummaryResponse]
    batters: List[RankedBatterResponse]
    inserted_ids: List[str] = Field(default_factory=list)
    skipped_ids: List[str] = Field(default_factory=list)


class RankingRunResponse(BaseModel):
    run_id: str
    created_at: str
    source: str
    population_size: int
    inserted: int
    skipped: int
