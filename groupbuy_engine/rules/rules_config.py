"""
Rules Config Store: loads/saves rule configurations from a JSON file.

Company-level setting: rules are configured once by admin and cached.
Falls back to sensible defaults when no file is configured (first run).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from groupbuy_engine.config import get_settings
from groupbuy_engine.models.enums import ProposalStatus

logger = logging.getLogger(__name__)


# ── Config models ────────────────────────────────────────

class ProposalConfig(BaseModel):
    """Proposal form and lifecycle configuration."""
    required_fields: dict[str, str] = {
        "name": "Proposal Name",
        "status": "Status",
        "type": "Type",
        "min_quota": "Min Quota",
        "max_quota": "Max Quota",
        "start_date": "Start Date",
        "end_date": "End Date",
        "delivery_start_date": "Delivery Start Date",
        "base_price": "Base Price",
        "product_id": "Product",
    }
    editable_statuses: list[ProposalStatus] = [
        ProposalStatus.CREATED,
        ProposalStatus.PENDING_APPROVAL,
        ProposalStatus.REJECTED,
    ]
    deletable_statuses: list[ProposalStatus] = [
        ProposalStatus.CREATED,
        ProposalStatus.REJECTED,
    ]
    submittable_statuses: list[ProposalStatus] = [
        ProposalStatus.CREATED,
        ProposalStatus.REJECTED,
    ]
    activatable_statuses: list[ProposalStatus] = [ProposalStatus.APPROVED]
    closable_statuses: list[ProposalStatus] = [
        ProposalStatus.ACTIVE,
        ProposalStatus.EXPIRED,
    ]


class OrderConfig(BaseModel):
    """Conditional order quantity configuration."""
    min_quantity: int = 1


class PricingConfig(BaseModel):
    """Discount display configuration."""
    percent_display_places: int = 1
    unbounded_label: str = "∞"


# ── Store class ──────────────────────────────────────────

class RulesConfigStore:
    """
    Loads rule configs from the JSON file named by settings.rules_config_path.
    Cached after first load for the lifetime of the store.
    """

    def __init__(self, path: str | None = None):
        self.settings = get_settings()
        self._path = Path(path) if path else (
            Path(self.settings.rules_config_path) if self.settings.rules_config_path else None
        )
        self._cache: dict[str, Any] = {}

    def _read_file(self) -> dict[str, Any]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Rules config at {self._path} unreadable, using defaults: {e}")
            return {}

    def _load_config(self, rule_type: str, model_cls: type[BaseModel]) -> BaseModel:
        """Load from the config file or return defaults."""
        if rule_type in self._cache:
            return self._cache[rule_type]

        doc = self._read_file().get(rule_type)
        config = None
        if doc:
            try:
                config = model_cls(**doc)
            except ValidationError as e:
                logger.warning(f"Invalid {rule_type} config, using defaults: {e}")

        if config is None:
            config = model_cls()
        self._cache[rule_type] = config
        return config

    def get_proposal_config(self) -> ProposalConfig:
        return self._load_config("proposal", ProposalConfig)  # type: ignore[return-value]

    def get_order_config(self) -> OrderConfig:
        return self._load_config("order", OrderConfig)  # type: ignore[return-value]

    def get_pricing_config(self) -> PricingConfig:
        return self._load_config("pricing", PricingConfig)  # type: ignore[return-value]

    def update_config(self, rule_type: str, config_dict: dict[str, Any]) -> bool:
        """Admin: save/update a rule config in the JSON file."""
        if self._path is None:
            logger.error("Cannot update config, no rules_config_path configured")
            return False

        data = self._read_file()
        data[rule_type] = config_dict
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        # Invalidate cache
        self._cache.pop(rule_type, None)
        logger.info(f"Updated {rule_type} config in {self._path}")
        return True
