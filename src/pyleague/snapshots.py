"""Content-fingerprinted cache of expensive analysis payloads."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from pyleague.models import SnapshotRecord, SnapshotType
from pyleague.persistence import EngineStore, dump_json


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotKey:
    league_id: str
    username: str
    snapshot_type: SnapshotType
    context_key: Optional[str]


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_key(
    league_id: Any,
    username: Any,
    snapshot_type: Any,
    context_key: Any = None,
) -> Optional[SnapshotKey]:
    """Build the cache key, or None when a required field is absent or invalid."""

    league = _clean(league_id)
    user = _clean(username).lower()
    if not league or not user or snapshot_type is None:
        return None
    try:
        kind = SnapshotType(snapshot_type)
    except ValueError:
        return None
    context = _clean(context_key) or None
    return SnapshotKey(league_id=league, username=user, snapshot_type=kind, context_key=context)


def snapshot_fingerprint(key: SnapshotKey, payload: Any) -> str:
    body = {
        "league_id": key.league_id,
        "username": key.username,
        "snapshot_type": key.snapshot_type.value,
        "context_key": key.context_key,
        "payload": payload,
    }
    encoded = dump_json(body, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class SnapshotCache:
    """Append-only snapshot log; reads return the newest exact-key match.

    ``context_key`` is part of the key: a read without one only matches
    snapshots written without one.
    """

    def __init__(self, store: EngineStore):
        self._store = store

    def read(
        self,
        league_id: Any,
        username: Any,
        snapshot_type: Any,
        context_key: Any = None,
    ) -> Optional[SnapshotRecord]:
        key = normalize_key(league_id, username, snapshot_type, context_key)
        if key is None:
            return None
        return self._store.get_latest_snapshot(
            league_id=key.league_id,
            username=key.username,
            snapshot_type=key.snapshot_type,
            context_key=key.context_key,
        )

    def write(
        self,
        league_id: Any,
        username: Any,
        snapshot_type: Any,
        payload: Any,
        *,
        context_key: Any = None,
        season: Optional[int] = None,
    ) -> SnapshotRecord:
        key = normalize_key(league_id, username, snapshot_type, context_key)
        if key is None:
            raise ValueError("Snapshot writes need league_id, username and a known snapshot_type")
        return self._store.insert_snapshot(
            league_id=key.league_id,
            username=key.username,
            snapshot_type=key.snapshot_type,
            context_key=key.context_key,
            season=season,
            payload=payload,
            fingerprint=snapshot_fingerprint(key, payload),
        )

    def get_or_compute(
        self,
        league_id: Any,
        username: Any,
        snapshot_type: Any,
        compute: Callable[[], Any],
        *,
        context_key: Any = None,
        season: Optional[int] = None,
    ) -> SnapshotRecord:
        cached = self.read(league_id, username, snapshot_type, context_key)
        if cached is not None:
            logger.debug("Snapshot hit for %s/%s/%s", cached.league_id, cached.username, cached.snapshot_type.value)
            return cached
        payload = compute()
        return self.write(
            league_id,
            username,
            snapshot_type,
            payload,
            context_key=context_key,
            season=season,
        )

    def list_for_user(
        self,
        username: Any,
        snapshot_type: Any,
        *,
        league_id: Any = None,
        limit: int = 5,
    ) -> List[SnapshotRecord]:
        user = _clean(username).lower()
        try:
            kind = SnapshotType(snapshot_type)
        except ValueError:
            return []
        if not user:
            return []
        return self._store.list_snapshots_for_user(
            username=user,
            snapshot_type=kind,
            league_id=_clean(league_id) or None,
            limit=limit,
        )
