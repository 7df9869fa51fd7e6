"""Deterministic ordering of scored batters."""

from __future__ import annotations

import math
from typing import Iterable, List

from batrank.models import ScoredRecord

from .errors import NonFiniteScoreError


def _rank_key(record: ScoredRecord) -> tuple[float, str]:
    return (-record.score, record.player_id)


def rank_records(scored: Iterable[ScoredRecord]) -> List[ScoredRecord]:
    """Order by score descending, breaking ties on ``player_id`` ascending."""

    records = list(scored)
    for record in records:
        if not math.isfinite(record.score):
            raise NonFiniteScoreError(record.player_id, record.score)
    return sorted(records, key=_rank_key)
