"""
Proposal Rules: form validation and lifecycle action guards for proposals.
Applied by the proposal creator / editor before anything is saved.
Config loaded from the rules file via RulesConfigStore.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import TypeAdapter, ValidationError

from groupbuy_engine.models.enums import ProposalAction, ProposalStatus, Severity
from groupbuy_engine.rules.rules_config import RulesConfigStore

logger = logging.getLogger(__name__)

_datetime_adapter = TypeAdapter(datetime)

# Status a proposal moves to when the action succeeds
_ACTION_TARGETS = {
    ProposalAction.SUBMIT: ProposalStatus.PENDING_APPROVAL,
    ProposalAction.ACTIVATE: ProposalStatus.ACTIVE,
    ProposalAction.CLOSE: ProposalStatus.CLOSED,
}


class ProposalTransitionError(ValueError):
    """A lifecycle action is not allowed from the proposal's current status."""

    def __init__(self, status: ProposalStatus, action: ProposalAction):
        super().__init__(f"Cannot {action.value} a proposal in status '{status.value}'")
        self.status = status
        self.action = action


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return _datetime_adapter.validate_python(value)
    except ValidationError:
        return None


def _as_number(value: Any) -> Decimal | None:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


class ProposalRules:
    """Proposal form checks and status-based action permissions."""

    def __init__(self, config_store: RulesConfigStore | None = None):
        self._config_store = config_store or RulesConfigStore()

    def validate_proposal(self, data: dict[str, Any]) -> list[dict[str, str]]:
        """
        Check a proposal form payload.
        Returns list of violations: {rule, field, detail, severity}.
        """
        config = self._config_store.get_proposal_config()
        violations: list[dict[str, str]] = []

        # ── Required fields ──────────────────────────────
        missing = [
            (field, label)
            for field, label in config.required_fields.items()
            if _is_blank(data.get(field))
        ]
        for field, label in missing:
            violations.append({
                "rule": "required_field",
                "field": field,
                "detail": f"{label} is required",
                "severity": Severity.HIGH.value,
            })

        # ── Quota range ──────────────────────────────────
        min_quota = _as_number(data.get("min_quota"))
        max_quota = _as_number(data.get("max_quota"))
        if min_quota is not None and max_quota is not None:
            if min_quota < 0 or max_quota < 0:
                violations.append({
                    "rule": "negative_quota",
                    "field": "min_quota" if min_quota < 0 else "max_quota",
                    "detail": "Quota values cannot be negative",
                    "severity": Severity.HIGH.value,
                })
            elif min_quota > max_quota:
                violations.append({
                    "rule": "quota_range_invalid",
                    "field": "min_quota",
                    "detail": "Min Quota cannot be greater than Max Quota",
                    "severity": Severity.HIGH.value,
                })

        # ── Date window ──────────────────────────────────
        start = _as_datetime(data.get("start_date")) if not _is_blank(data.get("start_date")) else None
        end = _as_datetime(data.get("end_date")) if not _is_blank(data.get("end_date")) else None
        if start is not None and end is not None:
            if (start.tzinfo is None) != (end.tzinfo is None):
                start = start.replace(tzinfo=None)
                end = end.replace(tzinfo=None)
            if start >= end:
                violations.append({
                    "rule": "date_window_invalid",
                    "field": "end_date",
                    "detail": "End Date must be after Start Date",
                    "severity": Severity.HIGH.value,
                })

        # ── Base price ───────────────────────────────────
        if not _is_blank(data.get("base_price")):
            price = _as_number(data.get("base_price"))
            if price is None or price < 0:
                violations.append({
                    "rule": "base_price_invalid",
                    "field": "base_price",
                    "detail": "Base Price must be a non-negative amount",
                    "severity": Severity.MEDIUM.value,
                })

        if violations:
            logger.info(f"Proposal form rejected with {len(violations)} violation(s)")
        return violations

    def available_actions(self, status: ProposalStatus | str) -> dict[str, bool]:
        """Which lifecycle actions the proposal owner may take in this status."""
        config = self._config_store.get_proposal_config()
        status = ProposalStatus(status)
        return {
            "can_edit": status in config.editable_statuses,
            "can_delete": status in config.deletable_statuses,
            "can_submit": status in config.submittable_statuses,
            "can_activate": status in config.activatable_statuses,
            "can_close": status in config.closable_statuses,
        }

    def check_transition(
        self, status: ProposalStatus | str, action: ProposalAction | str
    ) -> ProposalStatus:
        """
        Guard a lifecycle action. Returns the status the proposal moves to
        (unchanged for edit/delete), or raises ProposalTransitionError.
        """
        status = ProposalStatus(status)
        action = ProposalAction(action)
        if not self.available_actions(status)[f"can_{action.value}"]:
            raise ProposalTransitionError(status, action)
        return _ACTION_TARGETS.get(action, status)
