"""
Order History Service: groups an account's conditional orders by proposal
and prices each order at the proposal's current discount tier.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from groupbuy_engine.config import get_settings
from groupbuy_engine.engine import (
    compute_discounted_price,
    compute_progress,
    display_progress,
    normalize_percentage,
    resolve_current_tier,
)
from groupbuy_engine.models.enums import OrderStatus, PercentConvention
from groupbuy_engine.models.schemas import OrderGroup, OrderLine, ProposalOrders
from groupbuy_engine.rules.order_rules import OrderRules
from groupbuy_engine.rules.rules_config import RulesConfigStore
from groupbuy_engine.services.proposal_service import build_tier_displays

logger = logging.getLogger(__name__)


def build_order_groups(
    groups: Iterable[ProposalOrders],
    convention: PercentConvention | str | None = None,
    config_store: RulesConfigStore | None = None,
) -> list[OrderGroup]:
    """One OrderGroup per proposal, orders priced with and without the current discount."""
    settings = get_settings()
    convention = convention or settings.discount_convention
    config_store = config_store or RulesConfigStore()
    order_rules = OrderRules(config_store)

    result: list[OrderGroup] = []
    for group in groups:
        proposal = group.proposal
        current = resolve_current_tier(group.tiers, proposal.booked_quota)
        discount = (
            normalize_percentage(current.discount_value, convention)
            if current else Decimal("0")
        )
        tiers = build_tier_displays(
            group.tiers, current.id if current else None, convention, config_store
        )
        progress = compute_progress(proposal.booked_quota, proposal.max_quota)

        lines: list[OrderLine] = []
        for order in group.orders:
            line = OrderLine(order=order, **order_rules.order_actions(order.status))
            if proposal.base_price is not None:
                full = compute_discounted_price(
                    proposal.base_price, 0, order.quantity, settings.currency_places
                )
                line.unit_price = full.unit_price
                line.total_price = full.total_price
                if current is not None:
                    quote = compute_discounted_price(
                        proposal.base_price, discount, order.quantity, settings.currency_places
                    )
                    line.discounted_unit_price = quote.unit_price
                    line.discounted_total_price = quote.total_price
            lines.append(line)

        result.append(OrderGroup(
            proposal_id=proposal.id,
            proposal_name=proposal.name,
            status=proposal.status,
            booked_quota=proposal.booked_quota,
            progress_percentage=progress,
            progress_display=display_progress(progress),
            current_tier=next((t for t in tiers if t.is_current), None),
            tiers=tiers,
            orders=lines,
            total_quantity=sum(
                o.quantity for o in group.orders if o.status != OrderStatus.CANCELLED
            ),
            order_count=len(group.orders),
        ))

    logger.debug(f"Built {len(result)} order group(s)")
    return result
