"""Tradeable asset variants, discriminated by ``kind``."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.config import ConfigDict


class PlayerAsset(BaseModel):
    kind: Literal["PLAYER"] = "PLAYER"
    player_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    position: Optional[str] = None
    market_value: float = Field(default=0.0, ge=0.0)
    factor_scores: Dict[str, float] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    @property
    def display_name(self) -> Optional[str]:
        name = (self.name or "").strip()
        return name or None


class PickAsset(BaseModel):
    kind: Literal["PICK"] = "PICK"
    season: int
    round: int = Field(..., ge=1)
    original_roster_id: Optional[int] = None
    market_value: float = Field(default=0.0, ge=0.0)
    factor_scores: Dict[str, float] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    @property
    def display_name(self) -> Optional[str]:
        return f"{self.season} Round {self.round}"


class FaabAsset(BaseModel):
    kind: Literal["FAAB"] = "FAAB"
    amount: int = Field(..., ge=0)
    market_value: float = Field(default=0.0, ge=0.0)
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    @property
    def display_name(self) -> Optional[str]:
        return f"${self.amount} FAAB"


Asset = Annotated[Union[PlayerAsset, PickAsset, FaabAsset], Field(discriminator="kind")]

_ASSET_ADAPTER: TypeAdapter[Any] = TypeAdapter(Asset)
_ASSET_LIST_ADAPTER: TypeAdapter[Any] = TypeAdapter(List[Asset])


def parse_asset(data: Any) -> Union[PlayerAsset, PickAsset, FaabAsset]:
    """Validate a raw payload into its asset variant.

    Raises ``pydantic.ValidationError`` for unknown kinds or malformed fields.
    """

    if isinstance(data, (PlayerAsset, PickAsset, FaabAsset)):
        return data
    return _ASSET_ADAPTER.validate_python(data)


def parse_assets(data: Any) -> List[Union[PlayerAsset, PickAsset, FaabAsset]]:
    return _ASSET_LIST_ADAPTER.validate_python(list(data or []))


def asset_key(asset: Union[PlayerAsset, PickAsset, FaabAsset]) -> str:
    """Stable identity string used for ordering and de-duplication."""

    if isinstance(asset, PlayerAsset):
        return f"PLAYER:{asset.player_id}"
    if isinstance(asset, PickAsset):
        origin = "" if asset.original_roster_id is None else str(asset.original_roster_id)
        return f"PICK:{asset.season}:{asset.round}:{origin}"
    return f"FAAB:{asset.amount}"
