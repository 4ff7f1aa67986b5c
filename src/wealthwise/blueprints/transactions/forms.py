"""Transaction payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants.choices import RECURRING_FREQUENCIES, TRANSACTION_TYPES
from ..forms import PayloadForm


@dataclass(slots=True)
class TransactionForm(PayloadForm):
    def clean(self) -> None:
        self._number("accountId", "account_id", "Account", required=True, integer=True)
        self._choice("type", "type", "Transaction type", TRANSACTION_TYPES, required=True)
        self._number(
            "amount", "amount", "Amount", required=True, minimum=0, exclusive_minimum=True
        )
        self._text("category", "category", "Category", required=True, max_length=64)
        self._text("subcategory", "subcategory", "Subcategory", max_length=64, nullable=True)
        self._text("description", "description", "Description", max_length=500)
        self._text("merchant", "merchant", "Merchant", max_length=100)
        self._date("date", "date", "Date")
        if "date" in self.cleaned and self.cleaned["date"] is None:
            del self.cleaned["date"]
        self._text("notes", "notes", "Notes", max_length=1000)
        self._string_list("tags", "tags", "Tags")
        self._flag("isRecurring", "is_recurring", "Recurring")
        self._recurring_rule()

    def _recurring_rule(self) -> None:
        rule = self.raw_data.get("recurringRule")
        if rule is None:
            return
        if not isinstance(rule, dict):
            self._add_error("recurringRule", "Recurring rule must be an object")
            return
        frequency = rule.get("frequency")
        if frequency not in RECURRING_FREQUENCIES:
            self._add_error(
                "recurringRule.frequency",
                f"Frequency must be one of: {', '.join(RECURRING_FREQUENCIES)}",
            )
            return
        self.cleaned["recurring_frequency"] = frequency
        nested = _RuleForm.from_mapping(rule, partial=True)
        if not nested.validate():
            for key, messages in nested.errors.items():
                for message in messages:
                    self._add_error(f"recurringRule.{key}", message)
            return
        self.cleaned.update(nested.cleaned)


@dataclass(slots=True)
class _RuleForm(PayloadForm):
    def clean(self) -> None:
        self._date("nextDate", "recurring_next_date", "Next date")
        self._date("endDate", "recurring_end_date", "End date")
