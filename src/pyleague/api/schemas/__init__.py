"""Pydantic models for API I/O."""

from .jobs import JobStatusResponse, RecalibrateRequest
from .market import LiquidityRequest, LiquidityResponse
from .snapshots import SnapshotResponse
from .weights import ClassifyRequest, ClassifyResponse, EvolutionEntryResponse, WeightsResponse

__all__ = [
    "ClassifyRequest",
    "ClassifyResponse",
    "EvolutionEntryResponse",
    "WeightsResponse",
    "LiquidityRequest",
    "LiquidityResponse",
    "RecalibrateRequest",
    "JobStatusResponse",
    "SnapshotResponse",
]
