"""Errors raised by the ranking engine."""

from __future__ import annotations


class RankingError(RuntimeError):
    """Base class for failures that abort a ranking run."""


class EmptyPopulationError(RankingError):
    """Raised when aggregate statistics are requested for zero batters."""

    def __init__(self, message: str = "Cannot compute aggregate stats for an empty population"):
        super().__init__(message)


class NonFiniteScoreError(RankingError):
    """Raised when a composite score is NaN or infinite at ranking time."""

    def __init__(self, player_id: str, score: float):
        super().__init__(f"Composite score for {player_id!r} is not finite: {score!r}")
        self.player_id = player_id
        self.score = score
