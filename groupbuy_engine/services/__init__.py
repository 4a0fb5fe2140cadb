"""Services: proposal summaries, order history, tier management."""

from groupbuy_engine.services.proposal_service import (
    build_proposal_summary,
    build_tier_displays,
    filter_proposals,
)
from groupbuy_engine.services.order_history import build_order_groups
from groupbuy_engine.services.tier_management import (
    TierFormRow,
    check_tier_rows,
    prepare_tier_changes,
)

__all__ = [
    "build_proposal_summary",
    "build_tier_displays",
    "filter_proposals",
    "build_order_groups",
    "TierFormRow",
    "check_tier_rows",
    "prepare_tier_changes",
]
