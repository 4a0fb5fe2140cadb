"""
Order Rules: quantity checks for placing and modifying conditional orders.
Booked quota itself is never changed here; callers get a pass/fail answer
before they ask the platform to create, update or cancel the order.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from groupbuy_engine.models.enums import OrderStatus, Severity
from groupbuy_engine.rules.rules_config import RulesConfigStore

logger = logging.getLogger(__name__)

_FROZEN_STATUSES = (OrderStatus.CONFIRMED, OrderStatus.CANCELLED)


class OrderRules:
    """Conditional order placement and modification rules."""

    def __init__(self, config_store: RulesConfigStore | None = None):
        self._config_store = config_store or RulesConfigStore()

    def _check_quantity(
        self, quantity: int, upper: int
    ) -> list[dict[str, str]]:
        config = self._config_store.get_order_config()
        violations: list[dict[str, str]] = []

        if quantity < config.min_quantity:
            violations.append({
                "rule": "quantity_too_small",
                "detail": f"Quantity must be at least {config.min_quantity}",
                "severity": Severity.HIGH.value,
            })
        elif quantity > upper:
            violations.append({
                "rule": "quantity_exceeds_available",
                "detail": f"Quantity {quantity} exceeds available quota {max(upper, 0)}",
                "severity": Severity.HIGH.value,
            })
        return violations

    def validate_new_order(
        self,
        quantity: int,
        available_quota: int,
        account_id: str | None = None,
    ) -> list[dict[str, str]]:
        """
        Check a new order against the proposal's remaining capacity.
        Returns list of violations: {rule, detail, severity}.
        """
        violations: list[dict[str, str]] = []
        if not account_id:
            violations.append({
                "rule": "account_required",
                "detail": "Please log in to join this group buy",
                "severity": Severity.HIGH.value,
            })
        violations.extend(self._check_quantity(quantity, available_quota))
        return violations

    def validate_modification(
        self,
        new_quantity: int,
        existing_quantity: int,
        available_quota: int,
    ) -> list[dict[str, str]]:
        """The order's current quantity is freed up before the new one is checked."""
        return self._check_quantity(new_quantity, available_quota + existing_quantity)

    def clamp_quantity(self, raw: Any, upper: int) -> int:
        """Coerce stepper input: non-numeric or too small -> minimum, too big -> upper."""
        config = self._config_store.get_order_config()
        try:
            value = int(Decimal(str(raw)))
        except (InvalidOperation, TypeError, ValueError, OverflowError):
            value = config.min_quantity
        if value < config.min_quantity:
            value = config.min_quantity
        if value > upper:
            value = upper
        return value

    def order_actions(self, status: OrderStatus | str) -> dict[str, bool]:
        """Confirmed and cancelled orders can no longer be edited or cancelled."""
        open_order = OrderStatus(status) not in _FROZEN_STATUSES
        return {"can_edit": open_order, "can_cancel": open_order}
