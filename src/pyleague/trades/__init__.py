"""Trade valuation, candidate selection and on-the-block tagging."""

from .otb import OTB_TAG, OtbListing, apply_otb_tags, apply_stored_otb_tags
from .valuation import (
    acceptance_label,
    acceptance_probability,
    asset_value,
    fairness_score,
    format_headline,
    rank_candidates,
    score_trade,
    select_top_candidate,
)

__all__ = [
    "OTB_TAG",
    "OtbListing",
    "apply_otb_tags",
    "apply_stored_otb_tags",
    "acceptance_label",
    "acceptance_probability",
    "asset_value",
    "fairness_score",
    "format_headline",
    "rank_candidates",
    "score_trade",
    "select_top_candidate",
]
