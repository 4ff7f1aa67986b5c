"""PDF financial report rendered with matplotlib."""

from __future__ import annotations

import io
from typing import Any, Iterable, Mapping

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.backends.backend_pdf import PdfPages  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from ..models.transaction import Transaction  # noqa: E402

RECENT_LIMIT = 15
_PAGE_SIZE = (8.27, 11.69)  # A4 portrait, inches


def budget_flag(percent_used: float) -> str:
    if percent_used > 100:
        return "OVER"
    if percent_used > 80:
        return "WARNING"
    return "OK"


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _table(ax, rows: list[list[str]], columns: list[str], title: str) -> None:
    ax.axis("off")
    ax.set_title(title, loc="left", fontsize=12, fontweight="bold")
    if not rows:
        ax.text(0.0, 0.5, "No data", fontsize=10, color="#666")
        return
    table = ax.table(cellText=rows, colLabels=columns, loc="upper left", cellLoc="left")
    table.auto_set_font_size(False)
    table.set_fontsize(8)
    table.scale(1, 1.3)


def _overview_page(summary: Mapping[str, Any]) -> Figure:
    fig = plt.figure(figsize=_PAGE_SIZE)
    fig.suptitle("WealthWise Financial Report", fontsize=18, fontweight="bold")
    overview = summary["overview"]
    period = summary["period"]

    header = fig.add_axes([0.08, 0.78, 0.84, 0.12])
    header.axis("off")
    lines = [
        f"Period: {period['start']} to {period['end']}",
        f"Total balance: {_money(overview['totalBalance'])}",
        f"Income: {_money(overview['totalIncome'])}    "
        f"Expenses: {_money(overview['totalExpenses'])}",
        f"Net savings: {_money(overview['netSavings'])}    "
        f"Savings rate: {overview['savingsRate']}%",
    ]
    header.text(0.0, 1.0, "\n".join(lines), va="top", fontsize=10, linespacing=1.8)

    accounts_ax = fig.add_axes([0.08, 0.45, 0.84, 0.28])
    _table(
        accounts_ax,
        [[a["name"], a["type"], _money(a["balance"])] for a in summary["accounts"]],
        ["Account", "Type", "Balance"],
        "Accounts",
    )

    budgets_ax = fig.add_axes([0.08, 0.08, 0.84, 0.32])
    _table(
        budgets_ax,
        [
            [
                b["name"],
                _money(b["amount"]),
                _money(b["spent"]),
                f"{b['percentUsed']}%",
                budget_flag(b["percentUsed"]),
            ]
            for b in summary["budgets"]
        ],
        ["Budget", "Amount", "Spent", "Used", "Status"],
        "Budget Status",
    )
    return fig


def _spending_page(summary: Mapping[str, Any], recent: list[Transaction]) -> Figure:
    fig = plt.figure(figsize=_PAGE_SIZE)
    pie_ax = fig.add_axes([0.1, 0.52, 0.8, 0.4])
    spending = summary["spendingByCategory"]
    if spending:
        pie_ax.pie(
            [row["amount"] for row in spending],
            labels=[row["category"] for row in spending],
            autopct=lambda pct: f"{pct:.1f}%" if pct > 4 else "",
            startangle=90,
            colors=[plt.get_cmap("tab20")(i % 20) for i in range(len(spending))],
            wedgeprops=dict(edgecolor="white", linewidth=1),
        )
        pie_ax.axis("equal")
    else:
        pie_ax.axis("off")
        pie_ax.text(0.5, 0.5, "No expense data", ha="center", va="center", color="#666")
    pie_ax.set_title("Spending by Category", fontsize=14, fontweight="bold")

    recent_ax = fig.add_axes([0.08, 0.05, 0.84, 0.42])
    _table(
        recent_ax,
        [
            [
                t.date.strftime("%Y-%m-%d"),
                (t.description or t.category)[:30],
                t.type,
                _money(t.amount),
            ]
            for t in recent[:RECENT_LIMIT]
        ],
        ["Date", "Description", "Type", "Amount"],
        "Recent Transactions",
    )
    return fig


def render_pdf(*, summary: Mapping[str, Any], recent: Iterable[Transaction]) -> bytes:
    """Return the two-page report as PDF bytes."""

    buffer = io.BytesIO()
    figures = [_overview_page(summary), _spending_page(summary, list(recent))]
    with PdfPages(buffer) as pdf:
        for fig in figures:
            pdf.savefig(fig)
            plt.close(fig)
    return buffer.getvalue()
