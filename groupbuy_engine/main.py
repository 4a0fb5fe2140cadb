"""
Group Buy Engine: Main Entry Point

Summarize a proposal from a JSON file (CLI):
    python -m groupbuy_engine path/to/proposal.json

Run as an API server:
    python -m groupbuy_engine --serve
    # or: uvicorn groupbuy_engine.api:app --reload --port 8000

Or import and run programmatically:
    from groupbuy_engine.main import run
    summary = run("path/to/proposal.json")

The JSON document holds {"proposal": {...}, "tiers": [...], "account_id": "..."}.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from groupbuy_engine.config import get_settings
from groupbuy_engine.engine import validate_tiers
from groupbuy_engine.models.schemas import DiscountTier, Proposal, ProposalSummary
from groupbuy_engine.services import build_proposal_summary
from groupbuy_engine.utils.formatting import format_percent
from groupbuy_engine.utils.logger import setup_logging


def run(file_path: str) -> ProposalSummary:
    """Validate the tiers in a proposal document and log its summary."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    if not file_path:
        raise ValueError("No proposal file path given")
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Proposal file not found: {file_path}")

    with path.open("r", encoding="utf-8") as f:
        doc = json.load(f)

    proposal = Proposal(**doc.get("proposal", {}))
    tiers = validate_tiers(DiscountTier(**t) for t in doc.get("tiers", []))
    summary = build_proposal_summary(proposal, tiers, account_id=doc.get("account_id"))

    _print_summary(summary)
    return summary


def _print_summary(summary: ProposalSummary) -> None:
    """Log a human-readable summary of the proposal."""
    logger = logging.getLogger(__name__)
    quota = summary.quota

    logger.info("-" * 60)
    logger.info("  PROPOSAL SUMMARY")
    logger.info("-" * 60)
    logger.info(f"  Proposal:       {summary.proposal_id} {summary.name}")
    logger.info(f"  Status:         {summary.status.value}")
    logger.info(f"  Booked:         {quota.booked_quota} / {quota.max_quota} (min {quota.min_quota})")
    logger.info(f"  Available:      {summary.available_quota}")
    logger.info(
        f"  Progress:       {round(summary.progress_percentage)}%"
        + ("  (goal reached)" if summary.goal_reached else "")
    )
    logger.info(f"  Current Tier:   {summary.current_tier_id or 'none'}")
    logger.info(f"  Discount:       {format_percent(summary.current_discount)}")
    logger.info(f"  Max Discount:   {format_percent(summary.max_discount)}")
    logger.info(f"  Can Order:      {summary.can_order}")
    if summary.unavailable_reason:
        logger.info(f"  Reason:         {summary.unavailable_reason}")
    for tier in summary.tiers:
        marker = "*" if tier.is_current else " "
        logger.info(f"   {marker} {tier.range_text:<14} {tier.label}")
    logger.info("-" * 60)


def serve(host: str | None = None, port: int | None = None) -> None:
    """Start the FastAPI server."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    host = host or settings.host
    port = port or settings.port
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("groupbuy_engine.api:app", host=host, port=port, reload=settings.debug)


if __name__ == "__main__":
    if "--serve" in sys.argv:
        serve()
    else:
        file_arg = sys.argv[1] if len(sys.argv) > 1 else ""
        run(file_arg)
