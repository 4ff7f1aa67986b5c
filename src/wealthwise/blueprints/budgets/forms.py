"""Budget payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants.choices import BUDGET_PERIODS
from ..forms import PayloadForm


@dataclass(slots=True)
class BudgetForm(PayloadForm):
    def clean(self) -> None:
        self._text("name", "name", "Budget name", required=True, max_length=100)
        self._text("category", "category", "Category", required=True, max_length=64)
        self._number(
            "amount", "amount", "Budget amount", required=True, minimum=0, exclusive_minimum=True
        )
        self._choice("period", "period", "Period", BUDGET_PERIODS)
        self._date("startDate", "start_date", "Start date")
        if "start_date" in self.cleaned and self.cleaned["start_date"] is None:
            del self.cleaned["start_date"]
        self._date("endDate", "end_date", "End date")
        self._flag("isRecurring", "is_recurring", "Recurring")
        self._number(
            "alertThreshold", "alert_threshold", "Alert threshold",
            minimum=0, maximum=100, integer=True,
        )
        self._text("color", "color", "Color", max_length=16)
        self._flag("isActive", "is_active", "Active")
