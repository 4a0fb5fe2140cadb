"""
Discount tier engine: tier validation, tier resolution, progress and price math.

Every function here is pure: inputs are plain values or schema objects,
nothing is cached or mutated, and booked quota is only ever read.

Write path (tier management) is strict and raises TierValidationError.
Read paths (resolution, progress, normalization) degrade to "no tier" / 0.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional

from groupbuy_engine.engine.errors import TierOverlapError, TierRangeError
from groupbuy_engine.models.enums import PercentConvention
from groupbuy_engine.models.schemas import DiscountTier, PriceQuote

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def _to_decimal(value) -> Decimal:
    if value is None:
        return _ZERO
    if isinstance(value, Decimal):
        return _ZERO if value.is_nan() else value
    try:
        value = Decimal(str(value))
    except InvalidOperation:
        return _ZERO
    return _ZERO if value.is_nan() else value


# ── Validation (write path) ──────────────────────────────


def validate_tiers(tiers: Iterable[DiscountTier]) -> list[DiscountTier]:
    """
    Check every tier range and the ranges against each other.

    Raises TierRangeError for a tier with min > max, TierOverlapError when
    two ranges are not strictly disjoint. A shared boundary counts as an
    overlap: [0-10] then [10-20] is rejected, [0-10] then [11-20] is not.
    An unbounded tier followed by any other tier always overlaps.

    Returns the tiers sorted ascending by min_quota.
    """
    tier_list = list(tiers)

    for tier in tier_list:
        if tier.max_quota is not None and tier.min_quota > tier.max_quota:
            logger.warning(f"Tier {tier.id or '<new>'} has inverted range")
            raise TierRangeError(tier)

    ordered = sorted(tier_list, key=lambda t: t.min_quota)
    for current, following in zip(ordered, ordered[1:]):
        if current.max_quota is None or current.max_quota >= following.min_quota:
            logger.warning(
                f"Tiers {current.id or '<new>'} and {following.id or '<new>'} overlap"
            )
            raise TierOverlapError(current, following)

    return ordered


# ── Resolution (read path) ───────────────────────────────


def resolve_current_tier(
    tiers: Iterable[DiscountTier], booked_quota: int
) -> Optional[DiscountTier]:
    """
    Return the tier with the highest min_quota not above booked_quota.

    Assumes the tiers were validated; with overlapping ranges the scan
    still returns a tier but not necessarily the intended one.
    """
    booked = booked_quota or 0
    for tier in sorted(tiers, key=lambda t: t.min_quota or 0, reverse=True):
        if (tier.min_quota or 0) <= booked:
            logger.debug(f"Booked quota {booked} resolves to tier {tier.id}")
            return tier
    return None


def tier_contains(tier: DiscountTier, quota: int) -> bool:
    """True when quota falls inside the tier's inclusive range."""
    if quota < tier.min_quota:
        return False
    return tier.max_quota is None or quota <= tier.max_quota


# ── Percentages ──────────────────────────────────────────


def normalize_percentage(
    raw, convention: PercentConvention | str = PercentConvention.FRACTION
) -> Decimal:
    """
    Convert a stored discount value into a fraction in [0, 1].

    FRACTION: 0.10 -> 0.10.  PERCENT: 10 -> 0.10.
    AUTO reads anything above 1 as a whole percent, so 1 means 100%.
    Missing, zero and negative values give 0; values past 100% give 1.
    """
    value = _to_decimal(raw)
    if value <= _ZERO:
        return _ZERO

    convention = PercentConvention(convention)
    if convention is PercentConvention.PERCENT:
        value = value / _HUNDRED
    elif convention is PercentConvention.AUTO and value > _ONE:
        value = value / _HUNDRED

    return min(value, _ONE)


def to_stored_value(
    percent_input, convention: PercentConvention | str = PercentConvention.FRACTION
) -> Decimal:
    """Convert a whole-number percent typed into a form into the stored convention."""
    value = _to_decimal(percent_input)
    if PercentConvention(convention) is PercentConvention.PERCENT:
        return value
    return value / _HUNDRED


# ── Progress ─────────────────────────────────────────────


def compute_progress(booked_quota: int, max_quota: int) -> float:
    """Booked quota as a percentage of max quota, uncapped; 0 without a goal."""
    if not max_quota or max_quota <= 0:
        return 0.0
    return (booked_quota or 0) / max_quota * 100


def display_progress(percent: float) -> float:
    """Clamp a progress percentage to [0, 100] for bar width."""
    return max(0.0, min(100.0, percent))


def is_goal_reached(percent: float) -> bool:
    return percent >= 100


# ── Pricing ──────────────────────────────────────────────


def round_money(value: Decimal, places: int = 2) -> Decimal:
    return value.quantize(_ONE.scaleb(-places), rounding=ROUND_HALF_UP)


def compute_discounted_price(
    base_price, discount_fraction, quantity: int, places: int = 2
) -> PriceQuote:
    """
    unit = base * (1 - discount), total = unit * quantity.

    The unrounded unit price feeds the total so that rounding happens once
    per figure, half-up, to the currency's minor unit.
    """
    base = _to_decimal(base_price)
    discount = min(max(_to_decimal(discount_fraction), _ZERO), _ONE)
    qty = max(quantity or 0, 0)

    unit = base * (_ONE - discount)
    total = unit * qty

    return PriceQuote(
        base_unit_price=round_money(base, places),
        discount_fraction=discount,
        quantity=qty,
        unit_price=round_money(unit, places),
        total_price=round_money(total, places),
        savings=round_money(base * qty - total, places),
    )
