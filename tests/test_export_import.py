"""CSV export, CSV import and the PDF report."""

from __future__ import annotations

import csv
import io
from datetime import datetime

import pytest

from wealthwise.errors import ApiError
from wealthwise.models import utcnow
from wealthwise.services.export_csv import (
    ACCOUNT_HEADERS,
    TRANSACTION_HEADERS,
    accounts_csv,
    build_summary,
    transactions_csv,
)
from wealthwise.services.import_csv import TEMPLATE_CSV, import_transactions
from wealthwise.services.reports import budget_flag, render_pdf


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def test_transactions_csv_quotes_commas(account_factory, transaction_factory):
    account = account_factory(name="Main", balance=100)
    txn = transaction_factory(
        account,
        12.5,
        description="Coffee, beans",
        date=datetime(2024, 3, 5, 9, 30),
    )

    text = transactions_csv(transactions=[txn], accounts={account.id: account})

    rows = _rows(text)
    assert rows[0] == TRANSACTION_HEADERS
    assert rows[1] == [
        "2024-03-05",
        "expense",
        "12.50",
        "Food & Dining",
        "Coffee, beans",
        "",
        "Main",
        "",
    ]
    assert '"Coffee, beans"' in text


def test_accounts_csv_skips_inactive(account_factory):
    active = account_factory(name="Savings", type="savings", balance=250)
    closed = account_factory(name="Closed", is_active=False)

    rows = _rows(accounts_csv(accounts=[active, closed]))

    assert rows[0] == ACCOUNT_HEADERS
    assert rows[1] == ["Savings", "savings", "250.00", "USD", ""]


def test_build_summary_totals(account_factory, transaction_factory, budget_factory):
    account = account_factory(balance=1000)
    income = transaction_factory(account, 2000, type="income", category="Salary")
    rent = transaction_factory(account, 500, category="Housing")
    food = transaction_factory(account, 100)
    budget = budget_factory(amount=80)

    summary = build_summary(
        accounts=[account],
        transactions=[income, rent, food],
        budgets=[(budget, 100.0)],
        start=None,
        end=None,
        now=utcnow(),
    )

    assert summary["period"] == {"start": "All time", "end": "Present"}
    assert summary["overview"]["totalIncome"] == 2000
    assert summary["overview"]["totalExpenses"] == 600
    assert summary["overview"]["netSavings"] == 1400
    assert summary["overview"]["savingsRate"] == 70
    assert [row["category"] for row in summary["spendingByCategory"]] == [
        "Housing",
        "Food & Dining",
    ]
    assert summary["budgets"][0]["remaining"] == 0
    assert summary["budgets"][0]["percentUsed"] == 125


def test_budget_flag_thresholds():
    assert budget_flag(50) == "OK"
    assert budget_flag(80) == "OK"
    assert budget_flag(81) == "WARNING"
    assert budget_flag(101) == "OVER"


def test_render_pdf_produces_pdf(account_factory, transaction_factory):
    account = account_factory(balance=500)
    txn = transaction_factory(account, 42)
    summary = build_summary(
        accounts=[account], transactions=[txn], budgets=[], start=None, end=None, now=utcnow()
    )

    data = render_pdf(summary=summary, recent=[txn])

    assert data.startswith(b"%PDF")


def test_import_books_valid_rows_and_reports_bad_ones(ctx, user, account_factory):
    account = account_factory(balance=0)
    data = (
        "Date,Type,Amount,Category,Description\n"
        "2024-01-15,expense,50.00,Food & Dining,Lunch\n"
        "2024-01-16,income,3000,Salary,Pay\n"
        "not-a-date,expense,10,Other,Broken\n"
        "2024-01-17,refund,-20,,Odd type\n"
    ).encode()

    result = import_transactions(
        data=data, account_id=account.id, repository=ctx.transaction_repo, user_id=user.id
    )

    assert result.as_dict() == {
        "imported": 3,
        "failed": 1,
        "errors": [{"row": 3, "error": "Invalid date"}],
    }
    assert result.message == "Imported 3 transactions, 1 failed"
    odd = result.imported[-1]
    assert (odd.type, odd.amount, odd.category) == ("expense", 20.0, "Other")
    refreshed = ctx.account_repo.get_by_id(account.id, user_id=user.id)
    assert refreshed.balance == 3000 - 50 - 20


def test_template_is_importable(ctx, user, account_factory):
    account = account_factory()

    result = import_transactions(
        data=TEMPLATE_CSV.encode(),
        account_id=account.id,
        repository=ctx.transaction_repo,
        user_id=user.id,
    )

    assert len(result.imported) == 2
    assert result.errors == []


def test_export_endpoints(client, auth_headers):
    created = client.post(
        "/api/accounts",
        json={"name": "Main", "type": "checking", "balance": 100},
        headers=auth_headers,
    ).get_json()["data"]
    client.post(
        "/api/transactions",
        json={"accountId": created["id"], "type": "expense", "amount": 25, "category": "Food"},
        headers=auth_headers,
    )

    response = client.get("/api/export/transactions", headers=auth_headers)
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    disposition = response.headers["Content-Disposition"]
    assert disposition.startswith("attachment; filename=wealthwise_transactions_")
    assert disposition.endswith(".csv")
    assert _rows(response.get_data(as_text=True))[1][2] == "25.00"

    summary = client.get("/api/export/summary", headers=auth_headers).get_json()["data"]
    assert summary["overview"]["totalExpenses"] == 25

    pdf = client.get("/api/export/pdf", headers=auth_headers)
    assert pdf.mimetype == "application/pdf"
    assert pdf.data.startswith(b"%PDF")


def test_import_endpoint(client, auth_headers):
    account = client.post(
        "/api/accounts",
        json={"name": "Main", "type": "checking"},
        headers=auth_headers,
    ).get_json()["data"]

    response = client.post(
        "/api/transactions/import",
        data={"accountId": str(account["id"]), "file": (io.BytesIO(TEMPLATE_CSV.encode()), "t.csv")},
        headers=auth_headers,
        content_type="multipart/form-data",
    )

    assert response.status_code == 200
    assert response.get_json()["data"]["imported"] == 2

    missing = client.post(
        "/api/transactions/import",
        data={"accountId": str(account["id"])},
        headers=auth_headers,
        content_type="multipart/form-data",
    )
    assert missing.status_code == 400


@pytest.mark.parametrize(
    "data",
    [b"", "date,amount,description\n2024-01-05,12.00,Caf\xe9\n".encode("latin-1")],
    ids=["empty", "latin-1"],
)
def test_unreadable_csv_is_rejected(ctx, user, account_factory, data):
    account = account_factory()

    with pytest.raises(ApiError) as excinfo:
        import_transactions(
            data=data,
            account_id=account.id,
            repository=ctx.transaction_repo,
            user_id=user.id,
        )

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "Invalid CSV file"
    assert ctx.transaction_repo.list_recent(10, user_id=user.id) == []


@pytest.mark.parametrize(
    "data",
    [b"", "date,amount,description\n2024-01-05,12.00,Caf\xe9\n".encode("latin-1")],
    ids=["empty", "latin-1"],
)
def test_import_endpoint_rejects_unreadable_csv(client, auth_headers, data):
    account = client.post(
        "/api/accounts",
        json={"name": "Main", "type": "checking"},
        headers=auth_headers,
    ).get_json()["data"]

    response = client.post(
        "/api/transactions/import",
        data={"accountId": str(account["id"]), "file": (io.BytesIO(data), "t.csv")},
        headers=auth_headers,
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert body["message"] == "Invalid CSV file"
