"""Error types raised by the engine for invariant violations."""

from __future__ import annotations


class PyleagueError(Exception):
    """Base class for engine errors."""


class WeightVectorError(PyleagueError, ValueError):
    """A weight vector violated the factor schema or held non-finite values."""


class BlendingError(PyleagueError, ValueError):
    """Blending was invoked with inputs that can never yield a vector."""
