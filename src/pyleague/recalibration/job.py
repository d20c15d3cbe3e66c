"""Batch recalibration of per-class weight vectors.

Each league class is an independent unit: a failure in one is logged and
recorded on the report while the remaining classes still run. Cancellation is
cooperative and only observed between classes.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass, field
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from pyleague.config import EngineSettings, LeagueClass, iter_league_classes
from pyleague.models import TradeFeedback, WeightEvolutionRecord, WeightVector
from pyleague.weights import WeightStore

from .learning import LearnedWeights, learn_weights
from .status import JobStatusStore


logger = logging.getLogger(__name__)

Learner = Callable[[Sequence[TradeFeedback], WeightVector], Optional[LearnedWeights]]


class FeedbackSource(Protocol):
    def list_feedback(self, *, season: int, league_class: LeagueClass) -> List[TradeFeedback]:
        ...


@dataclass
class RecalibrationReport:
    season: int
    classes_processed: int = 0
    classes_skipped: int = 0
    errors: List[str] = field(default_factory=list)
    records: List[str] = field(default_factory=list)
    cancelled: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


class RecalibrationJob:
    """Derive and append one evolution record per class with enough feedback."""

    def __init__(
        self,
        weight_store: WeightStore,
        feedback: FeedbackSource,
        *,
        settings: EngineSettings | None = None,
        classes: Iterable[LeagueClass] | None = None,
        learner: Learner | None = None,
        status_store: JobStatusStore | None = None,
    ):
        self._weights = weight_store
        self._feedback = feedback
        self._settings = settings or EngineSettings()
        self._classes = list(classes) if classes is not None else list(iter_league_classes())
        self._learner = learner or self._default_learner
        self._status = status_store
        self._cancel = threading.Event()
        self._in_flight: Set[Tuple[LeagueClass, int]] = set()
        self._lock = threading.Lock()

    def _default_learner(self, feedback: Sequence[TradeFeedback], baseline: WeightVector) -> Optional[LearnedWeights]:
        return learn_weights(
            feedback,
            baseline,
            min_samples=self._settings.recalibration_min_samples,
            smoothing=self._settings.recalibration_smoothing,
        )

    def cancel(self) -> None:
        self._cancel.set()

    def _cancel_requested(self, job_id: Optional[str]) -> bool:
        if self._cancel.is_set():
            return True
        return bool(job_id and self._status is not None and self._status.is_cancel_requested(job_id))

    def _claim(self, league_class: LeagueClass, season: int) -> bool:
        key = (league_class, season)
        with self._lock:
            if key in self._in_flight:
                return False
            self._in_flight.add(key)
            return True

    def _release(self, league_class: LeagueClass, season: int) -> None:
        with self._lock:
            self._in_flight.discard((league_class, season))

    def recalibrate_class(self, league_class: LeagueClass, season: int) -> Optional[WeightEvolutionRecord]:
        """Run a single unit; returns None when the class has too little data."""

        samples = self._feedback.list_feedback(season=season, league_class=league_class)
        baseline = self._weights.get_baseline_weights(league_class)
        learned = self._learner(samples, baseline)
        if learned is None:
            return None
        return self._weights.append_evolution(
            league_class,
            season,
            learned.weights,
            n_samples=learned.n_samples,
            correlations=learned.correlations,
        )

    def _record_error(self, report: RecalibrationReport, message: str) -> None:
        if len(report.errors) < self._settings.recalibration_max_errors:
            report.errors.append(message)

    def run_recalibration(self, season: int, *, job_id: str | None = None) -> RecalibrationReport:
        report = RecalibrationReport(season=season)
        if job_id and self._status is not None:
            self._status.update_job_state(job_id, state="running", message=f"Recalibrating season {season}")
        logger.info("Recalibration for season %d started over %d classes", season, len(self._classes))

        for league_class in self._classes:
            if self._cancel_requested(job_id):
                report.cancelled = True
                logger.warning("Recalibration for season %d cancelled before %s", season, league_class.value)
                break
            if not self._claim(league_class, season):
                logger.warning("Recalibration of %s/%d already in flight; skipping", league_class.value, season)
                report.classes_skipped += 1
                continue
            try:
                record = self.recalibrate_class(league_class, season)
            except Exception as exc:
                logger.exception("Recalibration failed for %s/%d", league_class.value, season)
                self._record_error(report, f"{league_class.value}: {exc}")
                continue
            finally:
                self._release(league_class, season)
            if record is None:
                logger.warning("Insufficient feedback for %s/%d; skipping", league_class.value, season)
                report.classes_skipped += 1
                continue
            report.classes_processed += 1
            report.records.append(record.record_id)

        logger.info(
            "Recalibration for season %d finished: processed=%d skipped=%d errors=%d cancelled=%s",
            season,
            report.classes_processed,
            report.classes_skipped,
            len(report.errors),
            report.cancelled,
        )
        if job_id and self._status is not None:
            self._status.update_job_state(
                job_id,
                state="canceled" if report.cancelled else "completed",
                message=f"Processed {report.classes_processed} classes",
                result=report.to_dict(),
            )
        return report
