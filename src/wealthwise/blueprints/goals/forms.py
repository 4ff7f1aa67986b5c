"""Goal payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants.choices import PRIORITIES, RECURRING_FREQUENCIES
from ..forms import PayloadForm


@dataclass(slots=True)
class GoalForm(PayloadForm):
    def clean(self) -> None:
        self._text("name", "name", "Goal name", required=True, max_length=100)
        self._text("description", "description", "Description", max_length=500)
        self._number(
            "targetAmount", "target_amount", "Target amount",
            required=True, minimum=0, exclusive_minimum=True,
        )
        self._number("currentAmount", "current_amount", "Current amount", minimum=0)
        self._text("category", "category", "Category", max_length=32)
        self._date("targetDate", "target_date", "Target date", required=True)
        self._choice("priority", "priority", "Priority", PRIORITIES)
        self._number("linkedAccountId", "linked_account_id", "Linked account", integer=True)
        if "linkedAccountId" in self.raw_data and self.raw_data["linkedAccountId"] is None:
            self.cleaned["linked_account_id"] = None
        self._text("color", "color", "Color", max_length=16)
        self._text("icon", "icon", "Icon", max_length=32)
        self._flag("isActive", "is_active", "Active")
        self._auto_contribute()

    def _auto_contribute(self) -> None:
        raw = self.raw_data.get("autoContribute")
        if raw is None:
            return
        if not isinstance(raw, dict):
            self._add_error("autoContribute", "Auto-contribute must be an object")
            return
        enabled = bool(raw.get("enabled", False))
        try:
            amount = float(raw.get("amount", 0) or 0)
        except (TypeError, ValueError):
            self._add_error("autoContribute.amount", "Amount must be a number")
            return
        frequency = raw.get("frequency", "monthly")
        if frequency not in RECURRING_FREQUENCIES:
            self._add_error(
                "autoContribute.frequency",
                f"Frequency must be one of: {', '.join(RECURRING_FREQUENCIES)}",
            )
            return
        self.cleaned["auto_contribute"] = {
            "enabled": enabled,
            "amount": amount,
            "frequency": frequency,
        }


@dataclass(slots=True)
class AmountForm(PayloadForm):
    def clean(self) -> None:
        self._number("amount", "amount", "Amount", required=True)
