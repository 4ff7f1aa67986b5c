"""Investment payload validation."""

from __future__ import annotations

from dataclasses import dataclass

from ...constants.choices import INVESTMENT_TYPES
from ..forms import PayloadForm


@dataclass(slots=True)
class InvestmentForm(PayloadForm):
    def clean(self) -> None:
        self._text("name", "name", "Investment name", required=True, max_length=100)
        self._text("symbol", "symbol", "Symbol", max_length=10)
        if self.cleaned.get("symbol"):
            self.cleaned["symbol"] = self.cleaned["symbol"].upper()
        self._choice("type", "type", "Investment type", INVESTMENT_TYPES, required=True)
        self._number("shares", "shares", "Shares", required=True, minimum=0)
        self._number(
            "purchasePrice", "purchase_price", "Purchase price", required=True, minimum=0
        )
        self._number("currentPrice", "current_price", "Current price", minimum=0)
        self._date("purchaseDate", "purchase_date", "Purchase date")
        if "purchase_date" in self.cleaned and self.cleaned["purchase_date"] is None:
            del self.cleaned["purchase_date"]
        self._text("notes", "notes", "Notes", max_length=500)
        self._flag("isActive", "is_active", "Active")
