"""
Tests: Proposal summary, order history and tier management services.

Run with:
    pytest groupbuy_engine/tests/test_services.py -v
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from groupbuy_engine.engine import TierOverlapError, TierRangeError
from groupbuy_engine.models.enums import OrderStatus, ProposalStatus
from groupbuy_engine.models.schemas import (
    ConditionalOrder,
    DiscountTier,
    Proposal,
    ProposalOrders,
)
from groupbuy_engine.services import (
    TierFormRow,
    build_order_groups,
    build_proposal_summary,
    check_tier_rows,
    filter_proposals,
    prepare_tier_changes,
)
from groupbuy_engine.utils.formatting import format_currency, format_percent

NOW = datetime(2026, 7, 15, 12, 0, tzinfo=timezone.utc)


def _proposal(**overrides) -> Proposal:
    data = dict(
        id="a0P1",
        name="Espresso Machines Q3",
        status=ProposalStatus.ACTIVE,
        min_quota=20,
        max_quota=100,
        booked_quota=35,
        base_price=Decimal("200.00"),
        start_date=NOW - timedelta(days=10),
        end_date=NOW + timedelta(days=10),
    )
    data.update(overrides)
    return Proposal(**data)


def _tiers() -> list[DiscountTier]:
    return [
        DiscountTier(id="t1", min_quota=10, max_quota=29, discount_value=Decimal("0.05")),
        DiscountTier(id="t2", min_quota=30, max_quota=59, discount_value=Decimal("0.10")),
        DiscountTier(id="t3", min_quota=60, max_quota=None, discount_value=Decimal("0.15")),
    ]


class TestProposalSummary:
    def test_active_proposal_with_capacity(self):
        s = build_proposal_summary(_proposal(), _tiers(), account_id="001A", now=NOW)
        assert s.available_quota == 65
        assert s.progress_percentage == 35
        assert s.is_min_quota_reached is True
        assert s.can_order is True
        assert s.unavailable_reason == ""
        assert s.current_tier_id == "t2"
        assert s.current_discount == Decimal("0.10")
        assert s.max_discount == Decimal("0.15")

    def test_tier_display_rows(self):
        s = build_proposal_summary(_proposal(), _tiers(), account_id="001A", now=NOW)
        labels = [(t.range_text, t.label, t.is_current) for t in s.tiers]
        assert labels == [
            ("10 - 29", "5% OFF", False),
            ("30 - 59", "10% OFF", True),
            ("60 - ∞", "15% OFF", False),
        ]

    def test_not_logged_in(self):
        s = build_proposal_summary(_proposal(), _tiers(), now=NOW)
        assert s.can_order is False
        assert s.unavailable_reason == "Please log in to join this group buy"

    def test_expired_by_end_date(self):
        s = build_proposal_summary(
            _proposal(end_date=NOW - timedelta(hours=1)), _tiers(), account_id="001A", now=NOW
        )
        assert s.is_expired is True
        assert s.unavailable_reason == "This group buy has expired"

    def test_not_active(self):
        s = build_proposal_summary(
            _proposal(status=ProposalStatus.APPROVED), _tiers(), account_id="001A", now=NOW
        )
        assert s.unavailable_reason == "This group buy is not currently active"
        assert s.actions["can_activate"] is True

    def test_full_capacity_over_goal(self):
        s = build_proposal_summary(
            _proposal(booked_quota=120), _tiers(), account_id="001A", now=NOW
        )
        assert s.available_quota == 0
        assert s.progress_percentage == 120
        assert s.progress_display == 100
        assert s.goal_reached is True
        assert s.unavailable_reason == "This group buy has reached its maximum capacity"

    def test_no_tiers(self):
        s = build_proposal_summary(_proposal(), [], account_id="001A", now=NOW)
        assert s.current_tier_id is None
        assert s.current_discount == Decimal("0")
        assert s.tiers == []

    def test_whole_percent_storage(self):
        tiers = [DiscountTier(id="t1", min_quota=0, max_quota=None, discount_value=Decimal("12"))]
        s = build_proposal_summary(_proposal(), tiers, now=NOW, convention="percent")
        assert s.current_discount == Decimal("0.12")
        assert s.tiers[0].label == "12% OFF"

    def test_filter_proposals(self):
        proposals = [_proposal(id="1"), _proposal(id="2", status=ProposalStatus.CLOSED)]
        assert [p.id for p in filter_proposals(proposals, "Closed")] == ["2"]
        assert len(filter_proposals(proposals, "All")) == 2
        assert len(filter_proposals(proposals)) == 2


class TestOrderHistory:
    def test_orders_priced_at_current_tier(self):
        group = ProposalOrders(
            proposal=_proposal(),
            tiers=_tiers(),
            orders=[
                ConditionalOrder(id="o1", quantity=3, status=OrderStatus.PENDING),
                ConditionalOrder(id="o2", quantity=2, status=OrderStatus.CANCELLED),
            ],
        )
        [result] = build_order_groups([group])
        assert result.current_tier.tier_id == "t2"
        assert result.order_count == 2
        assert result.total_quantity == 3

        first = result.orders[0]
        assert first.can_edit is True
        assert first.unit_price == Decimal("200.00")
        assert first.total_price == Decimal("600.00")
        assert first.discounted_unit_price == Decimal("180.00")
        assert first.discounted_total_price == Decimal("540.00")
        assert result.orders[1].can_cancel is False

    def test_no_current_tier_leaves_discount_empty(self):
        group = ProposalOrders(
            proposal=_proposal(booked_quota=5),
            tiers=_tiers(),
            orders=[ConditionalOrder(id="o1", quantity=1)],
        )
        [result] = build_order_groups([group])
        assert result.current_tier is None
        assert result.orders[0].total_price == Decimal("200.00")
        assert result.orders[0].discounted_total_price is None


class TestTierManagement:
    def test_percent_input_stored_as_fraction(self):
        changes = prepare_tier_changes(
            [
                TierFormRow(id="t2", min_quota=11, max_quota=20, discount_percent=Decimal("10")),
                TierFormRow(min_quota=0, max_quota=10, discount_percent=Decimal("5")),
            ],
            deleted_ids=["t9", ""],
            convention="fraction",
        )
        assert [t.min_quota for t in changes.upserts] == [0, 11]
        assert changes.upserts[1].discount_value == Decimal("0.1")
        assert changes.deletes == ["t9"]

    def test_overlap_propagates(self):
        with pytest.raises(TierOverlapError):
            prepare_tier_changes([
                TierFormRow(min_quota=0, max_quota=10, discount_percent=5),
                TierFormRow(min_quota=10, max_quota=20, discount_percent=10),
            ])

    def test_range_error_propagates(self):
        with pytest.raises(TierRangeError):
            prepare_tier_changes([TierFormRow(min_quota=9, max_quota=3, discount_percent=5)])

    def test_check_rows_reports_violation(self):
        violations = check_tier_rows([
            TierFormRow(id="x", min_quota=0, max_quota=10, discount_percent=5),
            TierFormRow(id="y", min_quota=5, max_quota=20, discount_percent=10),
        ])
        assert violations[0]["rule"] == "tier_overlap"
        assert violations[0]["tier_ids"] == ["x", "y"]
        assert "[0-10] and [5-20]" in violations[0]["detail"]


class TestFormatting:
    def test_currency(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(None) == "N/A"

    def test_percent(self):
        assert format_percent(Decimal("0.125")) == "12.5%"
        assert format_percent(Decimal("0.1")) == "10%"
