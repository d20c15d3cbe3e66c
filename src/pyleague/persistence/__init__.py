"""Persistence layer for weight evolution, snapshots, tendencies and feedback."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple
from uuid import uuid4

from pyleague.config.league import LeagueClass
from pyleague.models import (
    ManagerTendency,
    SnapshotRecord,
    SnapshotType,
    TradeFeedback,
    TradeOutcome,
    WeightEvolutionRecord,
    WeightVector,
)


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def dump_json(value: Any, **kwargs: Any) -> str:
    """Encode a JSON column; values json cannot encode natively are stored as strings."""

    return json.dumps(value, default=str, **kwargs)


class EngineStore:
    """SQLite-backed store shared by the weight, snapshot and tendency layers.

    Weight evolution and snapshots are insert-only; "latest" is resolved by
    ordering on ``created_at`` (then insertion order) descending.
    """

    def __init__(self, db_path: Path | str, *, clock: Clock | None = None):
        self._use_uri = isinstance(db_path, str) and db_path.startswith("file:")
        self.db_path: Path | str = db_path if self._use_uri else Path(db_path)
        self._clock = clock or utc_now
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
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS weight_evolution (
                id TEXT PRIMARY KEY,
                league_class TEXT NOT NULL,
                season INTEGER NOT NULL,
                schema_version TEXT NOT NULL,
                weights_json TEXT NOT NULL,
                correlations_json TEXT NOT NULL,
                n_samples INTEGER NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS snapshots (
                id TEXT PRIMARY KEY,
                league_id TEXT NOT NULL,
                username TEXT NOT NULL,
                snapshot_type TEXT NOT NULL,
                context_key TEXT,
                season INTEGER,
                payload_json TEXT NOT NULL,
                fingerprint TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_snapshots_key
            ON snapshots (league_id, username, snapshot_type, context_key, created_at)
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS manager_tendencies (
                manager_id TEXT PRIMARY KEY,
                leagues_played INTEGER NOT NULL,
                trades_sent INTEGER NOT NULL,
                trades_accepted INTEGER NOT NULL,
                avg_overpay_ratio REAL NOT NULL,
                updated_at TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS trade_feedback (
                id TEXT PRIMARY KEY,
                league_class TEXT NOT NULL,
                season INTEGER NOT NULL,
                outcome TEXT NOT NULL,
                market REAL NOT NULL,
                impact REAL NOT NULL,
                scarcity REAL NOT NULL,
                demand REAL NOT NULL,
                observed_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS otb_listings (
                league_id TEXT NOT NULL,
                roster_id INTEGER NOT NULL,
                player_id TEXT NOT NULL,
                is_active INTEGER NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (league_id, roster_id, player_id)
            )
            """
        )
        conn.commit()

    # -- weight evolution ---------------------------------------------------

    def append_weight_record(
        self,
        *,
        league_class: LeagueClass,
        season: int,
        weights: WeightVector,
        n_samples: int,
        correlations: dict[str, float] | None = None,
        created_at: Optional[datetime] = None,
    ) -> WeightEvolutionRecord:
        record_id = uuid4().hex
        created_at = created_at or self._clock()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO weight_evolution (
                    id, league_class, season, schema_version, weights_json,
                    correlations_json, n_samples, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record_id,
                    league_class.value,
                    season,
                    weights.schema_version,
                    json.dumps(weights.as_dict()),
                    json.dumps(correlations or {}),
                    n_samples,
                    created_at.isoformat(),
                ),
            )
            conn.commit()
        return WeightEvolutionRecord(
            record_id=record_id,
            league_class=league_class,
            season=season,
            weights=weights,
            n_samples=n_samples,
            correlations=dict(correlations or {}),
            created_at=created_at,
        )

    def list_weight_records(self, league_class: LeagueClass) -> List[WeightEvolutionRecord]:
        """Every record for a class, oldest season first, then by creation."""

        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM weight_evolution
                WHERE league_class = ?
                ORDER BY season ASC, created_at ASC, rowid ASC
                """,
                (league_class.value,),
            ).fetchall()
        return [self._row_to_weight_record(row) for row in rows]

    # -- snapshots ----------------------------------------------------------

    def insert_snapshot(
        self,
        *,
        league_id: str,
        username: str,
        snapshot_type: SnapshotType,
        context_key: Optional[str],
        season: Optional[int],
        payload: Any,
        fingerprint: str,
        created_at: Optional[datetime] = None,
    ) -> SnapshotRecord:
        snapshot_id = uuid4().hex
        created_at = created_at or self._clock()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO snapshots (
                    id, league_id, username, snapshot_type, context_key,
                    season, payload_json, fingerprint, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    snapshot_id,
                    league_id,
                    username,
                    snapshot_type.value,
                    context_key,
                    season,
                    dump_json(payload),
                    fingerprint,
                    created_at.isoformat(),
                ),
            )
            conn.commit()
        return SnapshotRecord(
            snapshot_id=snapshot_id,
            league_id=league_id,
            username=username,
            snapshot_type=snapshot_type,
            context_key=context_key,
            season=season,
            payload=json.loads(dump_json(payload)),
            fingerprint=fingerprint,
            created_at=created_at,
        )

    def get_latest_snapshot(
        self,
        *,
        league_id: str,
        username: str,
        snapshot_type: SnapshotType,
        context_key: Optional[str],
    ) -> Optional[SnapshotRecord]:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT * FROM snapshots
                WHERE league_id = ? AND username = ? AND snapshot_type = ?
                  AND context_key IS ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
                """,
                (league_id, username, snapshot_type.value, context_key),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_snapshot(row)

    def list_snapshots_for_user(
        self,
        *,
        username: str,
        snapshot_type: SnapshotType,
        league_id: str | None = None,
        limit: int = 5,
    ) -> List[SnapshotRecord]:
        query = "SELECT * FROM snapshots WHERE username = ? AND snapshot_type = ?"
        params: list[str | int] = [username, snapshot_type.value]
        if league_id:
            query += " AND league_id = ?"
            params.append(league_id)
        query += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
        params.append(limit)
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_snapshot(row) for row in rows]

    # -- manager tendencies -------------------------------------------------

    def get_tendency(self, manager_id: str) -> Optional[ManagerTendency]:
        if not manager_id:
            return None
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM manager_tendencies WHERE manager_id = ?",
                (manager_id,),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_tendency(row)

    def save_tendency(self, tendency: ManagerTendency) -> ManagerTendency:
        updated_at = tendency.updated_at or self._clock()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO manager_tendencies (
                    manager_id, leagues_played, trades_sent, trades_accepted,
                    avg_overpay_ratio, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(manager_id) DO UPDATE SET
                    leagues_played = excluded.leagues_played,
                    trades_sent = excluded.trades_sent,
                    trades_accepted = excluded.trades_accepted,
                    avg_overpay_ratio = excluded.avg_overpay_ratio,
                    updated_at = excluded.updated_at
                """,
                (
                    tendency.manager_id,
                    tendency.leagues_played,
                    tendency.trades_sent,
                    tendency.trades_accepted,
                    tendency.avg_overpay_ratio,
                    updated_at.isoformat(),
                ),
            )
            conn.commit()
        saved = self.get_tendency(tendency.manager_id)
        if saved is None:  # pragma: no cover
            raise KeyError(f"Tendency {tendency.manager_id} not found after upsert")
        return saved

    def record_trade_outcome(
        self,
        manager_id: str,
        *,
        accepted: bool,
        overpay_ratio: float | None = None,
    ) -> ManagerTendency:
        current = self.get_tendency(manager_id) or ManagerTendency(manager_id=manager_id)
        updated = current.record_trade_outcome(
            accepted=accepted,
            overpay_ratio=overpay_ratio,
            observed_at=self._clock(),
        )
        return self.save_tendency(updated)

    # -- trade feedback -----------------------------------------------------

    def record_feedback(self, feedback: TradeFeedback) -> str:
        feedback_id = uuid4().hex
        observed_at = feedback.observed_at or self._clock()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO trade_feedback (
                    id, league_class, season, outcome, market, impact,
                    scarcity, demand, observed_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    feedback_id,
                    feedback.league_class.value,
                    feedback.season,
                    feedback.outcome.value,
                    feedback.market,
                    feedback.impact,
                    feedback.scarcity,
                    feedback.demand,
                    observed_at.isoformat(),
                ),
            )
            conn.commit()
        return feedback_id

    def list_feedback(self, *, season: int, league_class: LeagueClass) -> List[TradeFeedback]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM trade_feedback
                WHERE season = ? AND league_class = ?
                ORDER BY observed_at ASC, rowid ASC
                """,
                (season, league_class.value),
            ).fetchall()
        return [self._row_to_feedback(row) for row in rows]

    # -- on-the-block listings ---------------------------------------------

    def set_otb_listing(self, league_id: str, roster_id: int, player_id: str, *, active: bool = True) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO otb_listings (league_id, roster_id, player_id, is_active, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(league_id, roster_id, player_id) DO UPDATE SET
                    is_active = excluded.is_active,
                    updated_at = excluded.updated_at
                """,
                (league_id, roster_id, player_id, 1 if active else 0, self._clock().isoformat()),
            )
            conn.commit()

    def list_active_otb_listings(self, league_id: str) -> List[Tuple[int, str]]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT roster_id, player_id FROM otb_listings
                WHERE league_id = ? AND is_active = 1
                ORDER BY roster_id ASC, player_id ASC
                """,
                (league_id,),
            ).fetchall()
        return [(int(row["roster_id"]), str(row["player_id"])) for row in rows]

    # -- row mapping --------------------------------------------------------

    def _row_to_weight_record(self, row: sqlite3.Row) -> WeightEvolutionRecord:
        weights = WeightVector.from_mapping(json.loads(row["weights_json"]))
        return WeightEvolutionRecord(
            record_id=row["id"],
            league_class=LeagueClass(row["league_class"]),
            season=int(row["season"]),
            weights=weights,
            n_samples=int(row["n_samples"]),
            correlations=json.loads(row["correlations_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_snapshot(self, row: sqlite3.Row) -> SnapshotRecord:
        return SnapshotRecord(
            snapshot_id=row["id"],
            league_id=row["league_id"],
            username=row["username"],
            snapshot_type=SnapshotType(row["snapshot_type"]),
            context_key=row["context_key"],
            season=row["season"],
            payload=json.loads(row["payload_json"]),
            fingerprint=row["fingerprint"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_tendency(self, row: sqlite3.Row) -> ManagerTendency:
        return ManagerTendency(
            manager_id=row["manager_id"],
            leagues_played=int(row["leagues_played"]),
            trades_sent=int(row["trades_sent"]),
            trades_accepted=int(row["trades_accepted"]),
            avg_overpay_ratio=float(row["avg_overpay_ratio"]),
            updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
        )

    def _row_to_feedback(self, row: sqlite3.Row) -> TradeFeedback:
        return TradeFeedback(
            league_class=LeagueClass(row["league_class"]),
            season=int(row["season"]),
            outcome=TradeOutcome(row["outcome"]),
            market=float(row["market"]),
            impact=float(row["impact"]),
            scarcity=float(row["scarcity"]),
            demand=float(row["demand"]),
            observed_at=datetime.fromisoformat(row["observed_at"]),
        )
