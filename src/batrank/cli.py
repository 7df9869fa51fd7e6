"""Command-line interface for ranking batters from a season stat CSV."""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Sequence

from batrank.config_loader import ColumnProfile
from batrank.export import export_ranking_to_csv
from batrank.ingest import BatterParseError, load_records_from_csv
from batrank.persistence import RankingStore
from batrank.scoring import RankingError, rank_population


logger = logging.getLogger(__name__)

_LOG_LEVEL_ENV = "BATRANK_LOG_LEVEL"
_LOG_LEVEL_DEFAULT = "INFO"


def _resolve_log_level(raw: str | None, source: str) -> str:
    if raw is None:
        return _LOG_LEVEL_DEFAULT
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Invalid log level for %s: %s; using default %s", source, raw, _LOG_LEVEL_DEFAULT)
        return _LOG_LEVEL_DEFAULT
    return level


def _env_log_level() -> str:
    return _resolve_log_level(os.getenv(_LOG_LEVEL_ENV), _LOG_LEVEL_ENV)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rank batters by summed z-scores of HR, R, RBI, SB and AVG")
    parser.add_argument("batters", type=Path, help="Path to batters CSV")
    parser.add_argument("--db", type=Path, default=Path("sqldb.db"), help="SQLite database to write the ranking to")
    parser.add_argument(
        "--column",
        action="append",
        default=[],
        help="Mapping for batter CSV columns (e.g., home_runs=HR)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load column mapping JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save column mapping JSON", default=None)
    parser.add_argument("--top", type=int, default=20, help="Number of ranked batters to print")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write the ranking CSV")
    parser.add_argument(
        "--components",
        action="store_true",
        help="Include per-metric z-score columns in the CSV output",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Optional path to write run summary JSON",
    )
    parser.add_argument("--dry-run", action="store_true", help="Rank without writing to the database")
    parser.add_argument("--log-level", default=None, help="Logging level (default from BATRANK_LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=_resolve_log_level(args.log_level, "--log-level") if args.log_level else _env_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        column_mapping = _parse_mapping(args.column)
        if args.load_profile:
            profile = ColumnProfile.load(args.load_profile)
            column_mapping = profile.column_mapping | column_mapping
        records = load_records_from_csv(args.batters, mapping=column_mapping or None)
        result = rank_population(records)
    except (BatterParseError, RankingError, KeyError, ValueError) as exc:
        raise SystemExit(f"{type(exc).__name__}: {exc}") from exc

    if args.save_profile:
        ColumnProfile(column_mapping).save(args.save_profile)
        print(f"Saved column profile to {args.save_profile}")

    ranked_at = result.ranked_at
    print(f"Ranked {len(result.ranked)} batters on {ranked_at.day}-{ranked_at.month}-{ranked_at.year}")
    for position, record in enumerate(result.top(args.top), start=1):
        print(f"{position:>4}. {record.name} ({record.player_id}) {record.score:+.4f}")

    persist_report = None
    if not args.dry_run:
        store = RankingStore(args.db)
        persist_report = store.save_ranking(
            result.ranked,
            source=str(args.batters),
            created_at=ranked_at,
        )
        print(
            f"Stored {persist_report.inserted} new batters; "
            f"kept {persist_report.skipped} existing scores in {store.db_path}"
        )

    if args.output:
        args.output.write_text(
            export_ranking_to_csv(result.ranked, include_components=args.components),
            encoding="utf-8",
        )
        print(f"Wrote ranking to {args.output}")

    if args.report:
        report_payload = {
            "ranked_at": ranked_at.isoformat(),
            "population_size": result.stats.population_size,
            "stats": result.stats.as_dict(),
            "run_id": persist_report.run_id if persist_report else None,
            "inserted_ids": persist_report.inserted_ids if persist_report else [],
            "skipped_ids": persist_report.skipped_ids if persist_report else [],
        }
        args.report.write_text(json.dumps(report_payload, indent=2), encoding="utf-8")
        print(f"Wrote run report to {args.report}")


if __name__ == "__main__":
    main()
