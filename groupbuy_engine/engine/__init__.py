"""
Discount tier engine: the only package with pricing math in it.

Callers import from here:
    from groupbuy_engine.engine import validate_tiers, resolve_current_tier
"""

from .errors import TierOverlapError, TierRangeError, TierValidationError
from .discount_tiers import (
    compute_discounted_price,
    compute_progress,
    display_progress,
    is_goal_reached,
    normalize_percentage,
    resolve_current_tier,
    round_money,
    tier_contains,
    to_stored_value,
    validate_tiers,
)

__all__ = [
    "TierValidationError",
    "TierRangeError",
    "TierOverlapError",
    "validate_tiers",
    "resolve_current_tier",
    "tier_contains",
    "normalize_percentage",
    "to_stored_value",
    "compute_progress",
    "display_progress",
    "is_goal_reached",
    "round_money",
    "compute_discounted_price",
]
