"""In-memory status tracking for recalibration runs."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from uuid import uuid4

from pyleague.persistence import Clock, utc_now


TERMINAL_STATES = frozenset({"completed", "failed", "canceled"})


@dataclass(frozen=True)
class JobStatus:
    job_id: str
    state: str
    season: int
    created_at: datetime
    updated_at: datetime
    message: Optional[str] = None
    cancel_requested_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    result: Optional[dict] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES


class JobStatusStore:
    """Job status map with an injected clock and an explicit eviction sweep.

    Nothing expires on its own: callers decide when :meth:`sweep_expired` runs.
    """

    def __init__(self, *, clock: Clock | None = None, retention: timedelta = timedelta(hours=24)):
        self._clock = clock or utc_now
        self._retention = retention
        self._jobs: Dict[str, JobStatus] = {}
        self._lock = threading.Lock()

    def create_job(self, season: int, *, job_id: str | None = None) -> JobStatus:
        now = self._clock()
        job = JobStatus(
            job_id=job_id or uuid4().hex,
            state="queued",
            season=season,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._jobs[job.job_id] = job
        return job

    def get_job(self, job_id: str) -> Optional[JobStatus]:
        with self._lock:
            return self._jobs.get(job_id)

    def list_jobs(self, limit: int = 50) -> List[JobStatus]:
        with self._lock:
            jobs = sorted(self._jobs.values(), key=lambda job: job.created_at, reverse=True)
        return jobs[:limit]

    def update_job_state(
        self,
        job_id: str,
        *,
        state: str,
        message: Optional[str] = None,
        result: Optional[dict] = None,
    ) -> JobStatus:
        now = self._clock()
        with self._lock:
            existing = self._jobs.get(job_id)
            if existing is None:
                raise KeyError(f"Job {job_id} not found")
            updated = replace(
                existing,
                state=state,
                updated_at=now,
                message=message if message is not None else existing.message,
                result=result if result is not None else existing.result,
                completed_at=now if state in TERMINAL_STATES else existing.completed_at,
            )
            self._jobs[job_id] = updated
        return updated

    def mark_job_cancel_requested(self, job_id: str, *, message: Optional[str] = None) -> JobStatus:
        now = self._clock()
        with self._lock:
            existing = self._jobs.get(job_id)
            if existing is None:
                raise KeyError(f"Job {job_id} not found")
            if existing.is_terminal:
                return existing
            updated = replace(
                existing,
                state="cancel_requested",
                updated_at=now,
                cancel_requested_at=now,
                message=message or existing.message or "Cancellation requested",
            )
            self._jobs[job_id] = updated
        return updated

    def is_cancel_requested(self, job_id: str) -> bool:
        job = self.get_job(job_id)
        return job is not None and job.cancel_requested_at is not None

    def sweep_expired(self) -> int:
        """Drop terminal jobs older than the retention window; return how many."""

        cutoff = self._clock() - self._retention
        with self._lock:
            expired = [
                job_id
                for job_id, job in self._jobs.items()
                if job.is_terminal and job.completed_at is not None and job.completed_at < cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]
        return len(expired)
