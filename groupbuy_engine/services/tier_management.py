"""
Tier Management Service: the save path of the discount tier form.

Form rows carry the discount as a whole-number percent typed by the
proposal owner; rows are converted to the stored convention and the
full set is validated before anything is handed back for persisting.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from groupbuy_engine.config import get_settings
from groupbuy_engine.engine import TierValidationError, to_stored_value, validate_tiers
from groupbuy_engine.models.enums import PercentConvention, Severity
from groupbuy_engine.models.schemas import DiscountTier, TierChangeSet

logger = logging.getLogger(__name__)


class TierFormRow(BaseModel):
    """One editable row of the tier management form."""
    id: Optional[str] = None
    min_quota: int = Field(ge=0)
    max_quota: Optional[int] = Field(default=None, ge=0)
    discount_percent: Decimal = Field(ge=0, le=100)


def prepare_tier_changes(
    rows: Iterable[TierFormRow],
    deleted_ids: Iterable[str] = (),
    convention: PercentConvention | str | None = None,
) -> TierChangeSet:
    """
    Convert form rows to stored tiers and validate them as a set.
    TierRangeError / TierOverlapError propagate to the caller unchanged.
    """
    convention = convention or get_settings().discount_convention
    tiers = [
        DiscountTier(
            id=row.id or "",
            min_quota=row.min_quota,
            max_quota=row.max_quota,
            discount_value=to_stored_value(row.discount_percent, convention),
        )
        for row in rows
    ]
    ordered = validate_tiers(tiers)

    # Removed rows that were never saved have no id to delete
    deletes = [d for d in deleted_ids if d]
    logger.info(f"Tier changes ready: {len(ordered)} upsert(s), {len(deletes)} delete(s)")
    return TierChangeSet(upserts=ordered, deletes=deletes)


def check_tier_rows(
    rows: Iterable[TierFormRow],
    convention: PercentConvention | str | None = None,
) -> list[dict[str, Any]]:
    """Same checks as prepare_tier_changes, reported as form violations."""
    try:
        prepare_tier_changes(rows, convention=convention)
    except TierValidationError as e:
        return [{
            "rule": e.rule,
            "detail": str(e),
            "severity": Severity.HIGH.value,
            "tier_ids": [t.id for t in e.tiers],
        }]
    return []
