"""CSV and JSON exports of a user's ledger."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..models.account import Account
from ..models.budget import Budget
from ..models.transaction import Transaction
from .periods import percent

TRANSACTION_HEADERS = [
    "Date",
    "Type",
    "Amount",
    "Category",
    "Description",
    "Merchant",
    "Account",
    "Notes",
]
ACCOUNT_HEADERS = ["Name", "Type", "Balance", "Currency", "Institution"]


def _write(headers: list[str], rows: Iterable[Mapping[str, Any]]) -> str:
    buffer = io.StringIO(newline="")
    writer = csv.DictWriter(
        buffer, fieldnames=headers, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
    )
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def transactions_csv(
    *, transactions: Iterable[Transaction], accounts: Mapping[int, Account]
) -> str:
    """Render transactions (already filtered and ordered) as CSV text."""

    def rows():
        for txn in transactions:
            account = accounts.get(txn.account_id)
            yield {
                "Date": txn.date.strftime("%Y-%m-%d"),
                "Type": txn.type,
                "Amount": f"{txn.amount:.2f}",
                "Category": txn.category,
                "Description": txn.description or "",
                "Merchant": txn.merchant or "",
                "Account": account.name if account else "",
                "Notes": txn.notes or "",
            }

    return _write(TRANSACTION_HEADERS, rows())


def accounts_csv(*, accounts: Iterable[Account]) -> str:
    return _write(
        ACCOUNT_HEADERS,
        (
            {
                "Name": a.name,
                "Type": a.type,
                "Balance": f"{a.balance:.2f}",
                "Currency": a.currency,
                "Institution": a.institution or "",
            }
            for a in accounts
            if a.is_active
        ),
    )


def build_summary(
    *,
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    budgets: Iterable[tuple[Budget, float]],
    start: Optional[datetime],
    end: Optional[datetime],
    now: datetime,
) -> dict[str, Any]:
    """Financial summary for a period; ``budgets`` pairs each budget with its spend."""

    accounts = [a for a in accounts if a.is_active]
    transactions = list(transactions)

    income = sum(t.amount for t in transactions if t.type == "income")
    expenses = sum(t.amount for t in transactions if t.type == "expense")
    net = income - expenses

    by_category: dict[str, float] = {}
    for txn in transactions:
        if txn.type == "expense":
            by_category[txn.category] = by_category.get(txn.category, 0.0) + txn.amount

    return {
        "generatedAt": now.isoformat(),
        "period": {
            "start": start.isoformat() if start else "All time",
            "end": end.isoformat() if end else "Present",
        },
        "overview": {
            "totalBalance": round(sum(a.balance for a in accounts), 2),
            "totalIncome": round(income, 2),
            "totalExpenses": round(expenses, 2),
            "netSavings": round(net, 2),
            "savingsRate": percent(net, income) if income > 0 else 0,
        },
        "accounts": [
            {"name": a.name, "type": a.type, "balance": round(a.balance, 2)} for a in accounts
        ],
        "spendingByCategory": [
            {"category": category, "amount": round(amount, 2)}
            for category, amount in sorted(by_category.items(), key=lambda kv: kv[1], reverse=True)
        ],
        "budgets": [
            {
                "name": budget.name,
                "category": budget.category,
                "amount": round(budget.amount, 2),
                "spent": round(spent, 2),
                "remaining": round(max(0.0, budget.amount - spent), 2),
                "percentUsed": percent(spent, budget.amount),
            }
            for budget, spent in budgets
        ],
        "transactionCount": len(transactions),
    }
