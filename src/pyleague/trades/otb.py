"""On-the-block tagging of roster assets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Set, Tuple

from pyleague.models import Asset, PlayerAsset, parse_assets
from pyleague.persistence import EngineStore


OTB_TAG = "OTB"


@dataclass(frozen=True)
class OtbListing:
    league_id: str
    roster_id: int | str
    player_id: str
    active: bool = True


def _listing_keys(league_id: str, listings: Iterable[OtbListing]) -> Set[Tuple[str, str]]:
    return {
        (str(listing.roster_id), str(listing.player_id))
        for listing in listings
        if listing.active and listing.league_id == league_id
    }


def _with_tag(asset: PlayerAsset) -> PlayerAsset:
    if any(tag.upper() == OTB_TAG for tag in asset.tags):
        return asset
    return asset.model_copy(update={"tags": [*asset.tags, OTB_TAG]})


def apply_otb_tags(
    league_id: str,
    assets_by_roster: Mapping[Hashable, Iterable[Any]],
    listings: Iterable[OtbListing],
) -> Dict[Hashable, List[Asset]]:
    """Return a copy of ``assets_by_roster`` with listed players tagged ``OTB``.

    Raw asset payloads are validated into their variants first. Only
    ``PLAYER`` assets are eligible; an existing tag in any case is kept as-is.
    """

    listed = _listing_keys(league_id, listings)
    tagged: Dict[Hashable, List[Asset]] = {}
    for roster_id, assets in assets_by_roster.items():
        roster_key = str(roster_id)
        updated: List[Asset] = []
        for asset in parse_assets(assets):
            if isinstance(asset, PlayerAsset) and (roster_key, asset.player_id) in listed:
                asset = _with_tag(asset)
            updated.append(asset)
        tagged[roster_id] = updated
    return tagged


def apply_stored_otb_tags(
    store: EngineStore,
    league_id: str,
    assets_by_roster: Mapping[Hashable, Iterable[Any]],
) -> Dict[Hashable, List[Asset]]:
    listings = [
        OtbListing(league_id=league_id, roster_id=roster_id, player_id=player_id)
        for roster_id, player_id in store.list_active_otb_listings(league_id)
    ]
    return apply_otb_tags(league_id, assets_by_roster, listings)
