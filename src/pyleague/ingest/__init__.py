"""Input adapters that fetch league activity from upstream services."""

from .activity import ACTIVITY_WINDOW, DEFAULT_BASE_URL, LeagueActivityClient, summarize_transactions

__all__ = [
    "ACTIVITY_WINDOW",
    "DEFAULT_BASE_URL",
    "LeagueActivityClient",
    "summarize_transactions",
]
