"""
Proposal Service: builds the read-side summary of a proposal.

Combines the proposal record, its discount tiers and the engine's
progress / tier math into the payload shown on proposal pages.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from groupbuy_engine.config import get_settings
from groupbuy_engine.engine import (
    compute_progress,
    display_progress,
    is_goal_reached,
    normalize_percentage,
    resolve_current_tier,
)
from groupbuy_engine.models.enums import PercentConvention, ProposalStatus
from groupbuy_engine.models.schemas import (
    DiscountTier,
    Proposal,
    ProposalSummary,
    TierDisplay,
)
from groupbuy_engine.rules.proposal_rules import ProposalRules
from groupbuy_engine.rules.rules_config import RulesConfigStore
from groupbuy_engine.utils.formatting import format_percent

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def build_tier_displays(
    tiers: Iterable[DiscountTier],
    current_tier_id: Optional[str],
    convention: PercentConvention | str,
    config_store: RulesConfigStore | None = None,
) -> list[TierDisplay]:
    """One display row per tier, ascending by min_quota."""
    pricing = (config_store or RulesConfigStore()).get_pricing_config()
    rows: list[TierDisplay] = []
    for tier in sorted(tiers, key=lambda t: t.min_quota):
        fraction = normalize_percentage(tier.discount_value, convention)
        upper = pricing.unbounded_label if tier.max_quota is None else str(tier.max_quota)
        rows.append(TierDisplay(
            tier_id=tier.id,
            min_quota=tier.min_quota,
            max_quota=tier.max_quota,
            discount_fraction=fraction,
            label=f"{format_percent(fraction, pricing.percent_display_places)} OFF",
            range_text=f"{tier.min_quota} - {upper}",
            is_current=current_tier_id is not None and tier.id == current_tier_id,
        ))
    return rows


def _unavailable_reason(
    account_id: Optional[str],
    is_expired: bool,
    is_active: bool,
    has_available_quota: bool,
) -> str:
    if not account_id:
        return "Please log in to join this group buy"
    if is_expired:
        return "This group buy has expired"
    if not is_active:
        return "This group buy is not currently active"
    if not has_available_quota:
        return "This group buy has reached its maximum capacity"
    return "Unable to join this group buy at this time"


def build_proposal_summary(
    proposal: Proposal,
    tiers: Iterable[DiscountTier],
    account_id: Optional[str] = None,
    now: Optional[datetime] = None,
    convention: PercentConvention | str | None = None,
    config_store: RulesConfigStore | None = None,
) -> ProposalSummary:
    """Quota, progress, discount and orderability figures for one proposal."""
    convention = convention or get_settings().discount_convention
    config_store = config_store or RulesConfigStore()
    now = _as_utc(now or datetime.now(timezone.utc))
    tier_list = list(tiers)

    quota = proposal.quota
    available = max(0, quota.max_quota - quota.booked_quota)
    progress = compute_progress(quota.booked_quota, quota.max_quota)

    is_expired = proposal.status == ProposalStatus.EXPIRED or (
        proposal.end_date is not None and _as_utc(proposal.end_date) < now
    )
    is_active = proposal.status == ProposalStatus.ACTIVE
    has_available = available > 0
    can_order = bool(account_id) and is_active and not is_expired and has_available

    current = resolve_current_tier(tier_list, quota.booked_quota)
    current_discount = (
        normalize_percentage(current.discount_value, convention) if current else Decimal("0")
    )
    max_discount = max(
        (normalize_percentage(t.discount_value, convention) for t in tier_list),
        default=Decimal("0"),
    )

    summary = ProposalSummary(
        proposal_id=proposal.id,
        name=proposal.name,
        status=proposal.status,
        quota=quota,
        available_quota=available,
        progress_percentage=progress,
        progress_display=display_progress(progress),
        goal_reached=is_goal_reached(progress),
        is_min_quota_reached=quota.booked_quota >= quota.min_quota,
        has_available_quota=has_available,
        is_expired=is_expired,
        is_active=is_active,
        can_order=can_order,
        unavailable_reason="" if can_order else _unavailable_reason(
            account_id, is_expired, is_active, has_available
        ),
        current_tier_id=current.id if current else None,
        current_discount=current_discount,
        max_discount=max_discount,
        tiers=build_tier_displays(
            tier_list, current.id if current else None, convention, config_store
        ),
        actions=ProposalRules(config_store).available_actions(proposal.status),
    )
    logger.debug(
        f"[{proposal.id}] booked={quota.booked_quota}/{quota.max_quota} "
        f"progress={progress:.1f}% tier={summary.current_tier_id}"
    )
    return summary


def filter_proposals(
    proposals: Iterable[Proposal], status: ProposalStatus | str | None = None
) -> list[Proposal]:
    """Keep proposals in the given status; None or "All" keeps everything."""
    if status is None or status == "All":
        return list(proposals)
    status = ProposalStatus(status)
    return [p for p in proposals if p.status == status]
