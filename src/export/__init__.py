"""CSV export and display formatting."""

from src.export.csv_export import (
    CSV_HEADERS,
    export_filename,
    to_csv,
    write_csv,
)
from src.export.formatting import escape_markdown, format_amount, format_currency

__all__ = [
    "CSV_HEADERS",
    "escape_markdown",
    "export_filename",
    "format_amount",
    "format_currency",
    "to_csv",
    "write_csv",
]
