"""Cached analysis snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class SnapshotType(str, Enum):
    LEAGUE_ANALYZE = "league_analyze"
    RANKINGS_ANALYZE = "rankings_analyze"
    OTB_PACKAGES = "otb_packages"


@dataclass(frozen=True)
class SnapshotRecord:
    snapshot_id: str
    league_id: str
    username: str
    snapshot_type: SnapshotType
    context_key: Optional[str]
    season: Optional[int]
    payload: Any
    fingerprint: str
    created_at: datetime
