"""REST API for batter rankings."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from batrank.api.schemas import (
    MetricSummaryResponse,
    RankedBatterResponse,
    RankingResponse,
    RankingRunResponse,
    StoredBatterResponse,
)
from batrank.export import export_ranking_to_csv
from batrank.ingest import BatterParseError, parse_batter_csv, rows_to_records
from batrank.models import METRIC_LABELS, ScoredRecord
from batrank.persistence import PersistReport, RankingRun, RankingStore, StoredBatter
from batrank.scoring import EmptyPopulationError, NonFiniteScoreError, RankingResult, rank_population


logger = logging.getLogger(__name__)


def _parse_column_mapping(raw: str | None) -> dict[str, str] | None:
    if not raw:
        return None
    try:
        mapping = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid column_mapping JSON: {exc}") from exc
    if not isinstance(mapping, dict):
        raise HTTPException(status_code=400, detail="column_mapping must be a JSON object")
    bad_keys = [key for key, value in mapping.items() if not isinstance(value, str) or not value]
    if bad_keys:
        raise HTTPException(
            status_code=400,
            detail=f"column_mapping values must be non-empty column names: {', '.join(sorted(bad_keys))}",
        )
    return dict(mapping)


def _result_to_response(result: RankingResult, persist_report: PersistReport | None) -> RankingResponse:
    return RankingResponse(
        run_id=persist_report.run_id if persist_report else None,
        ranked_at=result.ranked_at.isoformat(),
        population_size=result.stats.population_size,
        stats=[
            MetricSummaryResponse(
                metric=summary.metric,
                label=METRIC_LABELS[summary.metric],
                mean=summary.mean,
                stddev=summary.stddev,
                degenerate=summary.is_degenerate,
            )
            for summary in result.stats
        ],
        batters=[
            RankedBatterResponse(
                rank=position,
                player_id=record.player_id,
                name=record.name,
                score=record.score,
                components=dict(record.components),
            )
            for position, record in enumerate(result.ranked, start=1)
        ],
        inserted_ids=persist_report.inserted_ids if persist_report else [],
        skipped_ids=persist_report.skipped_ids if persist_report else [],
    )


def _stored_to_response(batter: StoredBatter) -> StoredBatterResponse:
    return StoredBatterResponse(player_id=batter.player_id, name=batter.name, score=batter.score)


def _run_to_response(run: RankingRun) -> RankingRunResponse:
    return RankingRunResponse(
        run_id=run.run_id,
        created_at=run.created_at.isoformat(),
        source=run.source,
        population_size=run.population_size,
        inserted=run.inserted,
        skipped=run.skipped,
    )


def create_app() -> FastAPI:
    app = FastAPI(title="batrank")
    store = RankingStore(Path.cwd() / "sqldb.db")
    app.state.ranking_store = store

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/rankings", response_model=RankingResponse)
    async def create_ranking(
        batters: UploadFile = File(...),
        column_mapping: str | None = Form(None),
        persist: bool = Form(True),
    ):
        mapping = _parse_column_mapping(column_mapping)
        contents = await batters.read()
        if not contents:
            raise HTTPException(status_code=400, detail="batters file is empty")
        try:
            rows = parse_batter_csv(contents.decode("utf-8-sig"), mapping=mapping)
            records = rows_to_records(rows)
        except (BatterParseError, KeyError) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise HTTPException(status_code=400, detail=f"batters file is not UTF-8: {exc}") from exc

        try:
            result = rank_population(records)
        except EmptyPopulationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except NonFiniteScoreError as exc:
            logger.error("Ranking aborted: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc

        persist_report = None
        if persist:
            persist_report = store.save_ranking(
                result.ranked,
                source=batters.filename or "upload",
                created_at=result.ranked_at,
            )
        return _result_to_response(result, persist_report)

    @app.get("/rankings", response_model=list[StoredBatterResponse])
    async def list_rankings(limit: int | None = None):
        return [_stored_to_response(batter) for batter in store.list_batters(limit=limit)]

    @app.get("/rankings/export.csv")
    async def export_csv():
        ranked = [
            ScoredRecord(player_id=batter.player_id, name=batter.name, score=batter.score)
            for batter in store.list_batters()
        ]
        return Response(
            content=export_ranking_to_csv(ranked),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=ranking.csv"},
        )

    @app.get("/rankings/{player_id}", response_model=StoredBatterResponse)
    async def get_ranking(player_id: str):
        batter = store.get_batter(player_id)
        if batter is None:
            raise HTTPException(status_code=404, detail="Batter not found")
        return _stored_to_response(batter)

    @app.get("/runs", response_model=list[RankingRunResponse])
    async def list_runs(limit: int = 50):
        return [_run_to_response(run) for run in store.list_runs(limit=limit)]

    return app


__all__ = ["create_app"]
