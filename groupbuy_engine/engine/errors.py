"""
Validation errors raised on the tier write path.
"""

from __future__ import annotations

from groupbuy_engine.models.schemas import DiscountTier


def _range_text(tier: DiscountTier) -> str:
    upper = "∞" if tier.max_quota is None else str(tier.max_quota)
    return f"[{tier.min_quota}-{upper}]"


class TierValidationError(ValueError):
    """Base class for discount tier configuration failures."""

    rule = "tier_invalid"

    def __init__(self, message: str, tiers: list[DiscountTier]):
        super().__init__(message)
        self.tiers = tiers


class TierRangeError(TierValidationError):
    """A single tier has min_quota greater than max_quota."""

    rule = "tier_range_invalid"

    def __init__(self, tier: DiscountTier):
        super().__init__(
            f"Min Quota ({tier.min_quota}) cannot be greater than "
            f"Max Quota ({tier.max_quota}).",
            [tier],
        )


class TierOverlapError(TierValidationError):
    """Two tiers' ranges share at least one quantity (boundaries inclusive)."""

    rule = "tier_overlap"

    def __init__(self, current: DiscountTier, following: DiscountTier):
        super().__init__(
            f"Quota range overlap: {_range_text(current)} and {_range_text(following)}",
            [current, following],
        )
