"""
CSV Export

Produces the file offered by the home screen's "Export CSV" button:

    ID,Date,Type,Category,Amount,Note
    3f2a...,2024-05-02,expense,Food,12.5,"Lunch with ""Sam"" and Jo"

Only the note is quoted (it is the only free-text column), with
embedded double quotes doubled. Rows follow the order of the list
passed in, normally the store's newest-first order.
"""

from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Union

from src.export.formatting import format_amount
from src.models.transaction import Transaction


CSV_HEADERS = ["ID", "Date", "Type", "Category", "Amount", "Note"]


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _row(transaction: Transaction) -> str:
    return ",".join([
        transaction.id,
        transaction.date.isoformat(),
        transaction.type.value,
        transaction.category.value,
        format_amount(transaction.amount),
        _quote(transaction.note),
    ])


def to_csv(transactions: Iterable[Transaction]) -> str:
    """Render transactions as CSV text, header first, rows joined by newlines."""
    lines = [",".join(CSV_HEADERS)]
    lines.extend(_row(t) for t in transactions)
    return "\n".join(lines)


def export_filename(on_date: Optional[date] = None) -> str:
    """transactions_<YYYY-MM-DD>.csv for the export date (today by default)."""
    on_date = on_date or date.today()
    return f"transactions_{on_date.isoformat()}.csv"


def write_csv(
    transactions: Iterable[Transaction],
    directory: Union[str, Path],
    on_date: Optional[date] = None,
) -> Path:
    """
    Write the export into a directory and return the file path.

    An export from the same day overwrites the earlier one.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(on_date)
    path.write_text(to_csv(transactions), encoding="utf-8", newline="")
    return path
