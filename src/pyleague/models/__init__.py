"""Canonical models shared across the valuation, learning, and storage layers."""

from .assets import Asset, FaabAsset, PickAsset, PlayerAsset, asset_key, parse_asset, parse_assets
from .feedback import TradeFeedback, TradeOutcome
from .market import Confidence, LiquidityMetrics, LiquidityResult, ManagerTendency, TendencyLevel
from .snapshot import SnapshotRecord, SnapshotType
from .trade import ACCEPTANCE_RANK, AcceptanceLabel, TradeCandidate, acceptance_rank
from .weights import WeightEvolutionRecord, WeightVector

__all__ = [
    "Asset",
    "FaabAsset",
    "PickAsset",
    "PlayerAsset",
    "asset_key",
    "parse_asset",
    "parse_assets",
    "TradeFeedback",
    "TradeOutcome",
    "Confidence",
    "LiquidityMetrics",
    "LiquidityResult",
    "ManagerTendency",
    "TendencyLevel",
    "SnapshotRecord",
    "SnapshotType",
    "ACCEPTANCE_RANK",
    "AcceptanceLabel",
    "TradeCandidate",
    "acceptance_rank",
    "WeightEvolutionRecord",
    "WeightVector",
]
