"""CSV ingestion of transactions into an account."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, Optional

import pandas as pd

from ..constants.choices import TRANSACTION_TYPES
from ..domain.repositories import TransactionRepository
from ..errors import ApiError
from ..logging_config import get_logger
from ..models.transaction import Transaction

logger = get_logger("services.import_csv")

MAX_REPORTED_ERRORS = 10
TEMPLATE_CSV = (
    "date,type,amount,category,description,merchant\n"
    "2024-01-15,expense,50.00,Food & Dining,Lunch at restaurant,Restaurant ABC\n"
    "2024-01-16,income,3000.00,Salary,Monthly salary,Employer Inc\n"
)
TEMPLATE_FILENAME = "transaction_import_template.csv"


class RowError(ValueError):
    """A CSV row that cannot become a transaction."""


@dataclass(slots=True)
class ImportResult:
    imported: list[Transaction] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def message(self) -> str:
        text = f"Imported {len(self.imported)} transactions"
        if self.errors:
            text += f", {len(self.errors)} failed"
        return text

    def as_dict(self) -> dict[str, Any]:
        return {
            "imported": len(self.imported),
            "failed": len(self.errors),
            "errors": self.errors[:MAX_REPORTED_ERRORS],
        }


def normalize_frame(data: bytes, *, encoding: str = "utf-8") -> pd.DataFrame:
    """Load CSV bytes as strings with lower-cased, stripped headers.

    Raises :class:`ApiError` (400) when the bytes are empty, undecodable or
    not CSV at all.
    """

    try:
        frame = pd.read_csv(
            io.BytesIO(data),
            encoding=encoding,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        logger.warning("Rejected CSV upload", extra={"error": str(exc)})
        raise ApiError.bad_request("Invalid CSV file") from exc
    frame.columns = [str(c).strip().lower() for c in frame.columns]
    return frame


def _cell(row: pd.Series, name: str, default: str = "") -> str:
    value = row.get(name, default)
    if value is None:
        return default
    return str(value).strip() or default


def row_to_transaction(row: pd.Series, *, account_id: int) -> Transaction:
    """Convert one CSV row; raises :class:`RowError` for bad dates or amounts."""

    date = pd.to_datetime(_cell(row, "date"), errors="coerce")
    if pd.isna(date):
        raise RowError("Invalid date")
    amount = pd.to_numeric(_cell(row, "amount", "0"), errors="coerce")
    if pd.isna(amount) or abs(float(amount)) <= 0:
        raise RowError("Invalid amount")

    kind = _cell(row, "type", "expense").lower()
    if kind not in TRANSACTION_TYPES:
        kind = "expense"

    return Transaction(
        account_id=account_id,
        type=kind,
        amount=abs(float(amount)),
        category=_cell(row, "category", "Other"),
        description=_cell(row, "description"),
        merchant=_cell(row, "merchant"),
        date=date.to_pydatetime().replace(tzinfo=None),
    )


def import_transactions(
    *,
    data: bytes,
    account_id: int,
    repository: TransactionRepository,
    user_id: int,
    encoding: Optional[str] = None,
) -> ImportResult:
    """Parse ``data`` and book every valid row against ``account_id``.

    Rows are numbered from 1 for the first data line below the header.
    """

    result = ImportResult()
    frame = normalize_frame(data, encoding=encoding or "utf-8")
    for index, (_, row) in enumerate(frame.iterrows(), start=1):
        try:
            transaction = row_to_transaction(row, account_id=account_id)
        except RowError as exc:
            result.errors.append({"row": index, "error": str(exc)})
            continue
        result.imported.append(repository.create(transaction, user_id=user_id))

    logger.info(
        "CSV import finished",
        extra={
            "user_id": user_id,
            "account_id": account_id,
            "imported": len(result.imported),
            "failed": len(result.errors),
        },
    )
    return result
