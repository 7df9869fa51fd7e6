"""CSV export helpers for batter rankings."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from batrank.models import METRIC_LABELS, TRACKED_METRICS, ScoredRecord


def _component_headers() -> list[str]:
    return [f"z_{METRIC_LABELS[metric]}" for metric in TRACKED_METRICS]


def export_ranking_to_csv(
    ranked: Sequence[ScoredRecord],
    *,
    include_components: bool = False,
) -> str:
    """Write ``ranked`` in its given order with 1-based rank positions."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    header = ["rank", "player_id", "name", "score"]
    if include_components:
        header.extend(_component_headers())
    writer.writerow(header)

    for position, record in enumerate(ranked, start=1):
        row: list[object] = [position, record.player_id, record.name, f"{record.score:.6f}"]
        if include_components:
            row.extend(f"{record.components.get(metric, 0.0):.6f}" for metric in TRACKED_METRICS)
        writer.writerow(row)

    return buffer.getvalue()


__all__ = ["export_ranking_to_csv"]
