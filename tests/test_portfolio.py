from __future__ import annotations

from wealthwise.models import Investment
from wealthwise.services.portfolio import holding_metrics, portfolio_summary


def _holding(**overrides) -> Investment:
    fields = {
        "name": "Index Fund",
        "symbol": "VTI",
        "type": "etf",
        "shares": 10.0,
        "purchase_price": 100.0,
        "current_price": 120.0,
    }
    fields.update(overrides)
    return Investment(**fields)


def test_holding_metrics():
    metrics = holding_metrics(_holding())

    assert metrics == {
        "totalInvested": 1000.0,
        "currentValue": 1200.0,
        "gainLoss": 200.0,
        "gainLossPercent": 20.0,
    }


def test_summary_groups_by_type_and_skips_inactive():
    holdings = [
        _holding(),
        _holding(name="Coin", symbol="BTC", type="crypto", shares=1.0, purchase_price=500.0,
                 current_price=250.0),
        _holding(name="Old", is_active=False),
    ]

    summary = portfolio_summary(holdings)

    assert summary["totalInvestments"] == 2
    assert summary["totalInvested"] == 1500.0
    assert summary["currentValue"] == 1450.0
    assert summary["totalGainLoss"] == -50.0
    assert summary["totalGainLossPercent"] == -3.33
    assert summary["byType"]["crypto"] == {"invested": 500.0, "current": 250.0, "count": 1}


def test_empty_portfolio_has_zero_percent():
    summary = portfolio_summary([])

    assert summary["totalInvested"] == 0
    assert summary["totalGainLossPercent"] == 0.0
