"""Helpers to load batter stat CSVs and emit canonical records."""

from __future__ import annotations

import csv
import logging
import re
from io import StringIO
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ValidationError

from batrank.models import BatterRecord, METRIC_LABELS


logger = logging.getLogger(__name__)

DEFAULT_BATTER_MAPPING = {
    "player_id": "playerid",
    "name": "Name",
    "home_runs": "HR",
    "runs": "R",
    "rbi": "RBI",
    "stolen_bases": "SB",
    "batting_average": "AVG",
}

_COUNT_FIELDS = ("home_runs", "runs", "rbi", "stolen_bases")


class BatterParseError(ValueError):
    """Raised when a CSV row cannot be turned into a batter record."""

    def __init__(self, message: str, *, row_number: int | None = None, column: str | None = None):
        prefix = f"row {row_number}: " if row_number is not None else ""
        super().__init__(f"{prefix}{message}")
        self.row_number = row_number
        self.column = column


class BatterRow(BaseModel):
    row_number: int
    raw_id: str
    raw_name: str
    raw_home_runs: str
    raw_runs: str
    raw_rbi: str
    raw_stolen_bases: str
    raw_batting_average: str

    @classmethod
    def from_mapping(cls, row: Mapping[str, Optional[str]], mapping: Mapping[str, str], *, row_number: int = 0) -> "BatterRow":
        def extract(key: str) -> str:
            column = mapping.get(key, DEFAULT_BATTER_MAPPING[key])
            value = row.get(column)
            return value.strip() if value is not None else ""

        return cls(
            row_number=row_number,
            raw_id=extract("player_id"),
            raw_name=extract("name"),
            raw_home_runs=extract("home_runs"),
            raw_runs=extract("runs"),
            raw_rbi=extract("rbi"),
            raw_stolen_bases=extract("stolen_bases"),
            raw_batting_average=extract("batting_average"),
        )


def resolve_mapping(mapping: Mapping[str, str] | None) -> dict[str, str]:
    resolved = dict(DEFAULT_BATTER_MAPPING)
    for key, column in (mapping or {}).items():
        if key not in DEFAULT_BATTER_MAPPING:
            raise KeyError(f"Unknown batter field {key!r}; expected one of {sorted(DEFAULT_BATTER_MAPPING)}")
        resolved[key] = column
    return resolved


def _missing_columns(fieldnames: Sequence[str] | None, mapping: Mapping[str, str]) -> list[str]:
    present = set(fieldnames or [])
    return [column for column in mapping.values() if column not in present]


def _read_rows(lines: Iterable[str], mapping: Mapping[str, str] | None) -> List[BatterRow]:
    resolved = resolve_mapping(mapping)
    reader = csv.DictReader(lines)
    missing = _missing_columns(reader.fieldnames, resolved)
    if missing:
        raise BatterParseError(f"missing columns: {', '.join(missing)}")
    return [
        BatterRow.from_mapping(row, resolved, row_number=index)
        for index, row in enumerate(reader, start=1)
    ]


def load_batter_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[BatterRow]:
    with path.open(newline="", encoding="utf-8-sig") as f:
        rows = _read_rows(f, mapping)
    logger.info("Loaded %s batter rows from %s", len(rows), path)
    return rows


def parse_batter_csv(text: str, *, mapping: Mapping[str, str] | None = None) -> List[BatterRow]:
    return _read_rows(StringIO(text.lstrip("\ufeff"), newline=""), mapping)


def _parse_count(raw: str, *, row_number: int, column: str) -> int:
    text = raw.replace(",", "").strip()
    if not text:
        raise BatterParseError(f"{column} is empty", row_number=row_number, column=column)
    if not re.fullmatch(r"\d+", text):
        raise BatterParseError(
            f"{column} '{raw}' is not a non-negative whole number",
            row_number=row_number,
            column=column,
        )
    return int(text)


def _parse_average(raw: str, *, row_number: int, column: str) -> float:
    text = raw.strip()
    if not text:
        raise BatterParseError(f"{column} is empty", row_number=row_number, column=column)
    try:
        value = float(text)
    except ValueError:
        raise BatterParseError(f"{column} '{raw}' is not numeric", row_number=row_number, column=column) from None
    if not 0.0 <= value <= 1.0:
        raise BatterParseError(f"{column} {value} is outside [0, 1]", row_number=row_number, column=column)
    return value


def rows_to_records(rows: Sequence[BatterRow]) -> List[BatterRecord]:
    records: List[BatterRecord] = []
    seen: dict[str, int] = {}
    for row in rows:
        if not row.raw_id:
            raise BatterParseError("player id is empty", row_number=row.row_number, column="player_id")
        if row.raw_id in seen:
            raise BatterParseError(
                f"duplicate player id {row.raw_id!r} (first seen on row {seen[row.raw_id]})",
                row_number=row.row_number,
                column="player_id",
            )
        seen[row.raw_id] = row.row_number

        counts = {
            field: _parse_count(getattr(row, f"raw_{field}"), row_number=row.row_number, column=METRIC_LABELS[field])
            for field in _COUNT_FIELDS
        }
        average = _parse_average(row.raw_batting_average, row_number=row.row_number, column="AVG")
        try:
            record = BatterRecord(
                player_id=row.raw_id,
                name=row.raw_name,
                batting_average=average,
                **counts,
            )
        except ValidationError as exc:
            raise BatterParseError(str(exc), row_number=row.row_number) from exc
        records.append(record)
    return records


def load_records_from_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[BatterRecord]:
    return rows_to_records(load_batter_csv(path, mapping=mapping))
