"""
API routes: thin HTTP layer that delegates to the engine and services.

Routes:
  GET  /health                   → API health check
  POST /api/tiers/validate       → Validate a tier set (422 on range/overlap)
  POST /api/tiers/resolve        → Resolve the tier for a booked quota
  POST /api/pricing/quote        → Price a quantity at the current tier
  POST /api/proposals/summary    → Proposal quota / progress / discount summary
  POST /api/proposals/validate   → Proposal form checks
  POST /api/proposals/transition → Guard a lifecycle action
  POST /api/orders/validate      → Check a new or modified order quantity
  POST /api/orders/history       → Orders grouped by proposal, priced
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from groupbuy_engine.config import get_settings
from groupbuy_engine.engine import (
    compute_discounted_price,
    normalize_percentage,
    resolve_current_tier,
    validate_tiers,
)
from groupbuy_engine.models.enums import ProposalAction, ProposalStatus
from groupbuy_engine.models.schemas import (
    DiscountTier,
    OrderGroup,
    PriceQuote,
    Proposal,
    ProposalOrders,
    ProposalSummary,
)
from groupbuy_engine.rules.order_rules import OrderRules
from groupbuy_engine.rules.proposal_rules import ProposalRules
from groupbuy_engine.services import build_order_groups, build_proposal_summary

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
tier_router = APIRouter()
pricing_router = APIRouter()
proposal_router = APIRouter()
order_router = APIRouter()


# ── Request / response schemas ───────────────────────────
class TierSetRequest(BaseModel):
    tiers: list[DiscountTier] = []


class TierSetResponse(BaseModel):
    valid: bool
    tiers: list[DiscountTier] = []


class ResolveRequest(BaseModel):
    tiers: list[DiscountTier] = []
    booked_quota: int = Field(default=0, ge=0)


class ResolveResponse(BaseModel):
    tier: Optional[DiscountTier] = None
    discount_fraction: Decimal = Decimal("0")


class QuoteRequest(BaseModel):
    base_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=0)
    booked_quota: int = Field(default=0, ge=0)
    tiers: list[DiscountTier] = []


class SummaryRequest(BaseModel):
    proposal: Proposal
    tiers: list[DiscountTier] = []
    account_id: Optional[str] = None


class TransitionRequest(BaseModel):
    status: ProposalStatus
    action: ProposalAction


class TransitionResponse(BaseModel):
    status: ProposalStatus
    action: ProposalAction
    new_status: ProposalStatus


class OrderCheckRequest(BaseModel):
    quantity: int
    available_quota: int = Field(ge=0)
    existing_quantity: Optional[int] = Field(default=None, ge=0)  # set when modifying
    account_id: Optional[str] = None


class ViolationsResponse(BaseModel):
    valid: bool
    violations: list[dict[str, Any]] = []


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.app_name,
        "discount_convention": settings.discount_convention,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Tiers ────────────────────────────────────────────────

@tier_router.post("/validate", response_model=TierSetResponse)
async def validate_tier_set(body: TierSetRequest):
    # TierValidationError is turned into a 422 by the app-level handler
    ordered = validate_tiers(body.tiers)
    return TierSetResponse(valid=True, tiers=ordered)


@tier_router.post("/resolve", response_model=ResolveResponse)
async def resolve_tier(body: ResolveRequest):
    tier = resolve_current_tier(body.tiers, body.booked_quota)
    if tier is None:
        return ResolveResponse()
    return ResolveResponse(
        tier=tier,
        discount_fraction=normalize_percentage(
            tier.discount_value, get_settings().discount_convention
        ),
    )


# ── Pricing ──────────────────────────────────────────────

@pricing_router.post("/quote", response_model=PriceQuote)
async def quote_price(body: QuoteRequest):
    settings = get_settings()
    tier = resolve_current_tier(body.tiers, body.booked_quota)
    discount = (
        normalize_percentage(tier.discount_value, settings.discount_convention)
        if tier else Decimal("0")
    )
    return compute_discounted_price(
        body.base_price, discount, body.quantity, settings.currency_places
    )


# ── Proposals ────────────────────────────────────────────

@proposal_router.post("/summary", response_model=ProposalSummary)
async def proposal_summary(body: SummaryRequest):
    return build_proposal_summary(body.proposal, body.tiers, account_id=body.account_id)


@proposal_router.post("/validate", response_model=ViolationsResponse)
async def validate_proposal(body: dict[str, Any]):
    violations = ProposalRules().validate_proposal(body)
    return ViolationsResponse(valid=not violations, violations=violations)


@proposal_router.post("/transition", response_model=TransitionResponse)
async def transition_proposal(body: TransitionRequest):
    # ProposalTransitionError is turned into a 422 by the app-level handler
    new_status = ProposalRules().check_transition(body.status, body.action)
    logger.info(f"Proposal {body.action.value}: {body.status.value} → {new_status.value}")
    return TransitionResponse(status=body.status, action=body.action, new_status=new_status)


# ── Orders ───────────────────────────────────────────────

@order_router.post("/validate", response_model=ViolationsResponse)
async def validate_order(body: OrderCheckRequest):
    rules = OrderRules()
    if body.existing_quantity is None:
        violations = rules.validate_new_order(
            body.quantity, body.available_quota, body.account_id
        )
    else:
        violations = rules.validate_modification(
            body.quantity, body.existing_quantity, body.available_quota
        )
    return ViolationsResponse(valid=not violations, violations=violations)


@order_router.post("/history", response_model=list[OrderGroup])
async def order_history(body: list[ProposalOrders]):
    return build_order_groups(body)
