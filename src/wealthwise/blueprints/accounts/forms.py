"""Account payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants.choices import ACCOUNT_TYPES, CURRENCIES
from ..forms import PayloadForm


@dataclass(slots=True)
class AccountForm(PayloadForm):
    def clean(self) -> None:
        self._text("name", "name", "Account name", required=True, max_length=100)
        self._choice("type", "type", "Account type", ACCOUNT_TYPES, required=True)
        self._number("balance", "balance", "Balance")
        self._choice("currency", "currency", "Currency", CURRENCIES)
        self._text("institution", "institution", "Institution", max_length=100, nullable=True)
        self._text("color", "color", "Color", max_length=16)
        self._text("icon", "icon", "Icon", max_length=32)
        self._flag("isActive", "is_active", "Active")
        self._flag("includeInTotal", "include_in_total", "Include in total")


@dataclass(slots=True)
class BalanceForm(PayloadForm):
    def clean(self) -> None:
        self._number("balance", "balance", "Balance", required=True)
