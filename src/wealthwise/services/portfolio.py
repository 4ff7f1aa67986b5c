"""Portfolio valuation helpers."""

from __future__ import annotations

from typing import Any, Iterable

from ..models.investment import Investment


def gain_loss(investment: Investment) -> float:
    return investment.current_value - investment.total_invested


def gain_loss_percent(invested: float, gain: float) -> float:
    if invested <= 0:
        return 0.0
    return round(gain / invested * 100, 2)


def holding_metrics(investment: Investment) -> dict[str, float]:
    gain = gain_loss(investment)
    return {
        "totalInvested": round(investment.total_invested, 2),
        "currentValue": round(investment.current_value, 2),
        "gainLoss": round(gain, 2),
        "gainLossPercent": gain_loss_percent(investment.total_invested, gain),
    }


def portfolio_summary(investments: Iterable[Investment]) -> dict[str, Any]:
    """Totals across active holdings, plus a breakdown by asset type."""

    holdings = [i for i in investments if i.is_active]
    total_invested = sum(i.total_invested for i in holdings)
    current_value = sum(i.current_value for i in holdings)
    by_type: dict[str, dict[str, Any]] = {}
    for holding in holdings:
        bucket = by_type.setdefault(holding.type, {"invested": 0.0, "current": 0.0, "count": 0})
        bucket["invested"] = round(bucket["invested"] + holding.total_invested, 2)
        bucket["current"] = round(bucket["current"] + holding.current_value, 2)
        bucket["count"] += 1

    total_gain = current_value - total_invested
    return {
        "totalInvestments": len(holdings),
        "totalInvested": round(total_invested, 2),
        "currentValue": round(current_value, 2),
        "totalGainLoss": round(total_gain, 2),
        "totalGainLossPercent": gain_loss_percent(total_invested, total_gain),
        "byType": by_type,
    }
