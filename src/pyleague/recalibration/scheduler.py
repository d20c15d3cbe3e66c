"""Weekly trigger for recalibration runs."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from pyleague.persistence import Clock, utc_now

from .job import RecalibrationJob, RecalibrationReport
from .status import JobStatusStore


logger = logging.getLogger(__name__)

WEEKLY = timedelta(days=7)


def _default_season(now: datetime) -> int:
    return now.year


class RecalibrationScheduler:
    """Runs ``RecalibrationJob`` at most once per interval.

    The clock is injected so due-ness can be driven from tests; the optional
    background thread only polls :meth:`run_if_due`.
    """

    def __init__(
        self,
        job: RecalibrationJob,
        *,
        clock: Clock | None = None,
        interval: timedelta = WEEKLY,
        season_for: Callable[[datetime], int] = _default_season,
        status_store: JobStatusStore | None = None,
    ):
        self._job = job
        self._clock = clock or utc_now
        self._interval = interval
        self._season_for = season_for
        self._status = status_store
        self._last_run: Optional[datetime] = None
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def last_run(self) -> Optional[datetime]:
        return self._last_run

    def due(self, now: datetime | None = None) -> bool:
        now = now or self._clock()
        return self._last_run is None or now - self._last_run >= self._interval

    def run_if_due(self) -> Optional[RecalibrationReport]:
        now = self._clock()
        with self._lock:
            if not self.due(now):
                return None
            self._last_run = now
        season = self._season_for(now)
        job_id = None
        if self._status is not None:
            job_id = self._status.create_job(season).job_id
        return self._job.run_recalibration(season, job_id=job_id)

    def _poll(self, poll_seconds: float) -> None:
        while not self._stop_event.is_set():
            try:
                self.run_if_due()
            except Exception as exc:
                logger.exception("Scheduled recalibration failed: %s", exc)
            self._stop_event.wait(poll_seconds)

    def start(self, poll_seconds: float = 3600.0) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll,
            args=(poll_seconds,),
            name="pyleague-recalibration",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
