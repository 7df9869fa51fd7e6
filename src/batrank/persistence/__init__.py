"""Persistence layer for ranked batters and the runs that produced them."""

from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional
from uuid import uuid4

from batrank.models import ScoredRecord


DB_PATH_ENV = "BATRANK_DB_PATH"


@dataclass
class StoredBatter:
    player_id: str
    name: str
    score: float


@dataclass
class RankingRun:
    run_id: str
    created_at: datetime
    source: str
    population_size: int
    inserted: int
    skipped: int


@dataclass
class PersistReport:
    run_id: str
    inserted_ids: List[str] = field(default_factory=list)
    skipped_ids: List[str] = field(default_factory=list)

    @property
    def inserted(self) -> int:
        return len(self.inserted_ids)

    @property
    def skipped(self) -> int:
        return len(self.skipped_ids)


class RankingStore:
    """SQLite-backed store keeping the first score ever written for each batter.

    Writes are insert-if-absent: a batter id that is already stored keeps its
    original name and score no matter what later runs compute for it.
    """

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv(DB_PATH_ENV)
        if env_db:
            if env_db.startswith("file:"):
                self.db_path: Path | str = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS batters (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    score REAL NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS ranking_runs (
                    id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    source TEXT NOT NULL,
                    population_size INTEGER NOT NULL,
                    inserted INTEGER NOT NULL,
                    skipped INTEGER NOT NULL
                )
                """
            )
            conn.commit()

    def save_ranking(
        self,
        ranked: Iterable[ScoredRecord],
        *,
        source: str,
        run_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> PersistReport:
        run_id = run_id or uuid4().hex
        created_at = created_at or datetime.now(timezone.utc)
        report = PersistReport(run_id=run_id)
        population_size = 0
        with self._connect() as conn:
            for record in ranked:
                population_size += 1
                cursor = conn.execute(
                    "INSERT OR IGNORE INTO batters (id, name, score) VALUES (?, ?, ?)",
                    (record.player_id, record.name, record.score),
                )
                if cursor.rowcount == 1:
                    report.inserted_ids.append(record.player_id)
                else:
                    report.skipped_ids.append(record.player_id)
            conn.execute(
                """
                INSERT INTO ranking_runs (
                    id, created_at, source, population_size, inserted, skipped
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    run_id,
                    created_at.isoformat(),
                    source,
                    population_size,
                    report.inserted,
                    report.skipped,
                ),
            )
            conn.commit()
        return report

    def get_batter(self, player_id: str) -> Optional[StoredBatter]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM batters WHERE id = ?", (player_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_batter(row)

    def list_batters(self, limit: int | None = None) -> List[StoredBatter]:
        query = "SELECT * FROM batters ORDER BY score DESC, id ASC"
        params: tuple[int, ...] = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_batter(row) for row in rows]

    def get_run(self, run_id: str) -> Optional[RankingRun]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM ranking_runs WHERE id = ?", (run_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_run(row)

    def list_runs(self, limit: int = 50) -> List[RankingRun]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM ranking_runs ORDER BY datetime(created_at) DESC, id ASC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_run(row) for row in rows]

    def _row_to_batter(self, row: sqlite3.Row) -> StoredBatter:
        return StoredBatter(player_id=row["id"], name=row["name"], score=row["score"])

    def _row_to_run(self, row: sqlite3.Row) -> RankingRun:
        return RankingRun(
            run_id=row["id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            source=row["source"],
            population_size=row["population_size"],
            inserted=row["inserted"],
            skipped=row["skipped"],
        )


__all__ = [
    "DB_PATH_ENV",
    "PersistReport",
    "RankingRun",
    "RankingStore",
    "StoredBatter",
]
