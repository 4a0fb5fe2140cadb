"""
Data schemas shared by the engine, the rule modules and the API layer.
Field names follow the proposal / discount / order records of the
commerce platform, translated to snake_case.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from .enums import OrderStatus, ProposalStatus


# ── Discount tiers ───────────────────────────────────────


class DiscountTier(BaseModel):
    """A discount rate applicable within a booked-quantity range."""
    id: str = ""
    min_quota: int = Field(default=0, ge=0)
    max_quota: Optional[int] = Field(default=None, ge=0)  # None = unbounded
    discount_value: Decimal = Decimal("0")  # stored per the configured convention


class TierDisplay(BaseModel):
    tier_id: str
    min_quota: int
    max_quota: Optional[int] = None
    discount_fraction: Decimal = Decimal("0")
    label: str = ""       # "10% OFF"
    range_text: str = ""  # "10 - 19" | "20+"
    is_current: bool = False


class TierChangeSet(BaseModel):
    """Validated output of the tier management form, ready to persist."""
    upserts: list[DiscountTier] = []
    deletes: list[str] = []


# ── Proposals ────────────────────────────────────────────


class ProposalQuota(BaseModel):
    min_quota: int = Field(default=0, ge=0)
    max_quota: int = Field(default=0, ge=0)
    booked_quota: int = Field(default=0, ge=0)


class Proposal(BaseModel):
    """A group-buy offer with a quantity goal and a time window."""
    id: str = ""
    name: str = ""
    status: ProposalStatus = ProposalStatus.CREATED
    type: str = ""
    product_id: str = ""
    product_name: str = ""
    description: str = ""
    min_quota: int = Field(default=0, ge=0)
    max_quota: int = Field(default=0, ge=0)
    booked_quota: int = Field(default=0, ge=0)
    base_price: Optional[Decimal] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    delivery_start_date: Optional[date] = None

    @property
    def quota(self) -> ProposalQuota:
        return ProposalQuota(
            min_quota=self.min_quota,
            max_quota=self.max_quota,
            booked_quota=self.booked_quota,
        )


class ProposalSummary(BaseModel):
    """Read-side view of a proposal for storefront and history pages."""
    proposal_id: str
    name: str = ""
    status: ProposalStatus = ProposalStatus.CREATED
    quota: ProposalQuota = Field(default_factory=ProposalQuota)
    available_quota: int = 0
    progress_percentage: float = 0.0  # uncapped
    progress_display: float = 0.0     # clamped to 100 for bar width
    goal_reached: bool = False
    is_min_quota_reached: bool = False
    has_available_quota: bool = False
    is_expired: bool = False
    is_active: bool = False
    can_order: bool = False
    unavailable_reason: str = ""
    current_tier_id: Optional[str] = None
    current_discount: Decimal = Decimal("0")  # fraction
    max_discount: Decimal = Decimal("0")      # fraction
    tiers: list[TierDisplay] = []
    actions: dict[str, bool] = {}


# ── Pricing ──────────────────────────────────────────────


class PriceQuote(BaseModel):
    base_unit_price: Decimal
    discount_fraction: Decimal = Decimal("0")
    quantity: int = 0
    unit_price: Decimal
    total_price: Decimal
    savings: Decimal = Decimal("0")


# ── Conditional orders ───────────────────────────────────


class ConditionalOrder(BaseModel):
    """A buyer's commitment to a proposal, counted toward booked quota."""
    id: str = ""
    name: str = ""
    proposal_id: str = ""
    account_id: str = ""
    quantity: int = Field(default=0, ge=0)
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[datetime] = None


class OrderLine(BaseModel):
    order: ConditionalOrder
    can_edit: bool = False
    can_cancel: bool = False
    unit_price: Optional[Decimal] = None
    total_price: Optional[Decimal] = None
    discounted_unit_price: Optional[Decimal] = None
    discounted_total_price: Optional[Decimal] = None


class OrderGroup(BaseModel):
    """All of one account's orders against a single proposal."""
    proposal_id: str
    proposal_name: str = ""
    status: ProposalStatus = ProposalStatus.CREATED
    booked_quota: int = 0
    progress_percentage: float = 0.0
    progress_display: float = 0.0
    current_tier: Optional[TierDisplay] = None
    tiers: list[TierDisplay] = []
    orders: list[OrderLine] = []
    total_quantity: int = 0
    order_count: int = 0


class ProposalOrders(BaseModel):
    """Input bundle for order history: a proposal with its orders and tiers."""
    proposal: Proposal
    orders: list[ConditionalOrder] = []
    tiers: list[DiscountTier] = []
