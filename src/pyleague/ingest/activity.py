"""Thin fetch adapter that turns league transaction history into liquidity metrics."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

import httpx
from pydantic import ValidationError

from pyleague.models import LiquidityMetrics
from pyleague.persistence import Clock, utc_now


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.sleeper.app/v1"
ACTIVITY_WINDOW = timedelta(days=30)
DEFAULT_WEEKS: Sequence[int] = tuple(range(1, 19))


class FetchDeadlineExceeded(Exception):
    """The overall fetch budget ran out before every request was made."""


def _transaction_time(transaction: Mapping[str, Any]) -> Optional[datetime]:
    raw = transaction.get("status_updated") or transaction.get("created")
    if raw is None:
        return None
    try:
        return datetime.fromtimestamp(float(raw) / 1000.0, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def _asset_count(transaction: Mapping[str, Any]) -> int:
    adds = transaction.get("adds") or {}
    picks = transaction.get("draft_picks") or []
    budget = transaction.get("waiver_budget") or []
    return len(adds) + len(picks) + len(budget)


def summarize_transactions(
    transactions: Iterable[Mapping[str, Any]],
    total_managers: int,
    *,
    now: datetime,
    window: timedelta = ACTIVITY_WINDOW,
) -> LiquidityMetrics:
    """Count completed trades inside ``window`` and who took part in them."""

    cutoff = now - window
    trades: List[Mapping[str, Any]] = []
    for transaction in transactions:
        if not isinstance(transaction, Mapping):
            continue
        if transaction.get("type") != "trade" or transaction.get("status") != "complete":
            continue
        observed = _transaction_time(transaction)
        if observed is None or observed < cutoff:
            continue
        trades.append(transaction)

    active = {str(roster_id) for trade in trades for roster_id in trade.get("roster_ids") or []}
    avg_assets = sum(_asset_count(trade) for trade in trades) / len(trades) if trades else 0.0
    return LiquidityMetrics(
        trades_last_30=len(trades),
        active_managers=len(active),
        total_managers=max(0, total_managers),
        avg_assets_per_trade=avg_assets,
    )


class LeagueActivityClient:
    """Fetches users and transactions for a league over HTTP.

    ``timeout`` bounds the whole fetch, not each request. Every upstream
    problem (running out of time, HTTP status, malformed JSON) degrades to
    ``None`` so liquidity scoring falls back to its neutral result.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
        weeks: Sequence[int] = DEFAULT_WEEKS,
        transport: httpx.BaseTransport | None = None,
        clock: Clock | None = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._weeks = list(weeks)
        self._transport = transport
        self._clock = clock or utc_now
        self._timer = timer

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self._base_url, timeout=self._timeout, transport=self._transport)

    def _get_list(self, client: httpx.Client, path: str, deadline: float) -> List[Any]:
        remaining = deadline - self._timer()
        if remaining <= 0:
            raise FetchDeadlineExceeded(f"No time left before {path}")
        resp = client.get(path, timeout=remaining)
        resp.raise_for_status()
        data = resp.json()
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"Expected a list from {path}, got {type(data).__name__}")
        return data

    def fetch_metrics(self, league_id: str) -> Optional[LiquidityMetrics]:
        deadline = self._timer() + self._timeout
        try:
            with self._client() as client:
                users = self._get_list(client, f"/league/{league_id}/users", deadline)
                transactions: List[Any] = []
                for week in self._weeks:
                    transactions.extend(
                        self._get_list(client, f"/league/{league_id}/transactions/{week}", deadline)
                    )
            return summarize_transactions(transactions, len(users), now=self._clock())
        except FetchDeadlineExceeded as exc:
            logger.warning("League activity fetch for %s exceeded %.1fs: %s", league_id, self._timeout, exc)
            return None
        except httpx.HTTPError as exc:
            logger.warning("League activity fetch failed for %s: %s", league_id, exc)
            return None
        except (ValueError, ValidationError) as exc:
            logger.warning("Malformed league activity for %s: %s", league_id, exc)
            return None
