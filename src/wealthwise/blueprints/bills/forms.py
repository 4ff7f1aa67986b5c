"""Bill payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants.categories import BILL_CATEGORIES
from ...constants.choices import BILL_FREQUENCIES
from ..forms import PayloadForm


@dataclass(slots=True)
class BillForm(PayloadForm):
    def clean(self) -> None:
        self._text("name", "name", "Bill name", required=True, max_length=100)
        self._number(
            "amount", "amount", "Amount", required=True, minimum=0, exclusive_minimum=True
        )
        self._choice("category", "category", "Category", BILL_CATEGORIES)
        self._date("dueDate", "due_date", "Due date", required=True)
        self._choice("frequency", "frequency", "Frequency", BILL_FREQUENCIES)
        self._number("linkedAccountId", "linked_account_id", "Linked account", integer=True)
        if "linkedAccountId" in self.raw_data and self.raw_data["linkedAccountId"] is None:
            self.cleaned["linked_account_id"] = None
        self._flag("autoPay", "auto_pay", "Auto-pay")
        self._number(
            "reminderDays", "reminder_days", "Reminder days", minimum=0, maximum=30, integer=True
        )
        self._text("notes", "notes", "Notes", max_length=500)
        self._text("color", "color", "Color", max_length=16)
        self._flag("isActive", "is_active", "Active")
