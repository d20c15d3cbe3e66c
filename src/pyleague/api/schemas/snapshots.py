from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class SnapshotResponse(BaseModel):
    snapshot_id: str
    league_id: str
    username: str
    snapshot_type: str
    context_key: str | None = None
    season: int | None = None
    payload: Any = None
    fingerprint: str
    created_at: datetime
