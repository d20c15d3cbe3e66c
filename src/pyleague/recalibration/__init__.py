"""Periodic recalibration of class weights from observed trade outcomes."""

from .job import FeedbackSource, RecalibrationJob, RecalibrationReport
from .learning import LearnedWeights, correlation, learn_weights, smooth_weights
from .scheduler import WEEKLY, RecalibrationScheduler
from .status import TERMINAL_STATES, JobStatus, JobStatusStore

__all__ = [
    "FeedbackSource",
    "RecalibrationJob",
    "RecalibrationReport",
    "LearnedWeights",
    "correlation",
    "learn_weights",
    "smooth_weights",
    "WEEKLY",
    "RecalibrationScheduler",
    "TERMINAL_STATES",
    "JobStatus",
    "JobStatusStore",
]
