"""
FastAPI application factory and API package.

Run with:
    uvicorn groupbuy_engine.api:app --reload --port 8000

Or via main.py:
    python -m groupbuy_engine --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from groupbuy_engine.config import get_settings
from groupbuy_engine.api.routes import (
    health_router,
    order_router,
    pricing_router,
    proposal_router,
    tier_router,
)
from groupbuy_engine.engine import TierValidationError
from groupbuy_engine.rules.proposal_rules import ProposalTransitionError

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory: create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title="Group Buy Engine API",
        description="Discount tier, progress and pricing services for group-buy proposals",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS: allow the storefront (adjust origins in production)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router, tags=["Health"])
    application.include_router(tier_router, prefix="/api/tiers", tags=["Tiers"])
    application.include_router(pricing_router, prefix="/api/pricing", tags=["Pricing"])
    application.include_router(proposal_router, prefix="/api/proposals", tags=["Proposals"])
    application.include_router(order_router, prefix="/api/orders", tags=["Orders"])

    @application.exception_handler(TierValidationError)
    async def tier_validation_handler(request: Request, exc: TierValidationError):
        logger.info(f"Rejected tier set on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=422,
            content={
                "rule": exc.rule,
                "detail": str(exc),
                "tier_ids": [t.id for t in exc.tiers],
            },
        )

    @application.exception_handler(ProposalTransitionError)
    async def transition_handler(request: Request, exc: ProposalTransitionError):
        return JSONResponse(
            status_code=422,
            content={"rule": "transition_not_allowed", "detail": str(exc)},
        )

    logger.info(f"Created {settings.app_name} API")
    return application


# Module-level instance for `uvicorn groupbuy_engine.api:app`
app = create_app()
