"""Canonical batter models shared across ingestion, scoring and persistence."""

from __future__ import annotations

from typing import Dict, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


TRACKED_METRICS: Tuple[str, ...] = (
    "home_runs",
    "runs",
    "rbi",
    "stolen_bases",
    "batting_average",
)

METRIC_LABELS: Dict[str, str] = {
    "home_runs": "HR",
    "runs": "R",
    "rbi": "RBI",
    "stolen_bases": "SB",
    "batting_average": "AVG",
}


class BatterRecord(BaseModel):
    """One batter's season line as fed into the ranking engine."""

    player_id: str = Field(..., min_length=1)
    name: str
    home_runs: int = Field(..., ge=0)
    runs: int = Field(..., ge=0)
    rbi: int = Field(..., ge=0)
    stolen_bases: int = Field(..., ge=0)
    batting_average: float = Field(..., ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)

    def metric(self, key: str) -> float:
        if key not in METRIC_LABELS:
            raise KeyError(f"Unknown metric {key!r}")
        return float(getattr(self, key))


class ScoredRecord(BaseModel):
    """Batter identity plus the composite z-score it was ranked on."""

    player_id: str = Field(..., min_length=1)
    name: str
    score: float
    components: Dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
