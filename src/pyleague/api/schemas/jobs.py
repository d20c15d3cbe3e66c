from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RecalibrateRequest(BaseModel):
    season: int = Field(..., ge=1900)


class JobStatusResponse(BaseModel):
    job_id: str
    state: str
    season: int
    created_at: datetime
    updated_at: datetime
    message: str | None = None
    cancel_requested_at: datetime | None = None
    completed_at: datetime | None = None
    result: dict | None = None
