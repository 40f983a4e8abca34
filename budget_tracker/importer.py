"""Bulk transaction import from CSV and Excel files.

An import is all-or-nothing: the whole file is parsed and validated before
anything is appended, and the first problem found aborts the import with a
message naming the offending row.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .errors import TransactionImportError, ValidationError
from .models import EXPENSE, INCOME, Category, clean_text, parse_amount, parse_date, parse_type

REQUIRED_COLUMNS = ('Date', 'Description', 'Amount', 'Category', 'Type')
EXCEL_SUFFIXES = ('.xlsx', '.xls')
TEMPLATE_FILENAME = 'budget_tracker_import_template.xlsx'
TRANSACTIONS_SHEET = 'Transactions'


@dataclass
class ImportResult:
    success: bool
    count: int = 0
    error: Optional[str] = None

    @property
    def message(self) -> str:
        if self.success:
            return f"Successfully imported {self.count} transactions."
        return f"Error: {self.error}"


def _read_workbook(source) -> pd.DataFrame:
    """Read the "Transactions" sheet of a workbook, or its first sheet if there is none."""
    sheets = pd.read_excel(source, sheet_name=None)
    if not sheets:
        raise ValueError("The workbook has no sheets")
    if TRANSACTIONS_SHEET in sheets:
        return sheets[TRANSACTIONS_SHEET]
    return next(iter(sheets.values()))


def read_table(path_or_buffer) -> pd.DataFrame:
    """Load a CSV file or an Excel workbook sheet into a DataFrame.

    CSV cells are read as text so amounts such as ``(12.50)`` or ``$1,200``
    reach :func:`parse_amount` untouched.
    """
    csv_kwargs = {"index_col": False, "dtype": str, "keep_default_na": False, "encoding": "utf-8-sig"}

    if hasattr(path_or_buffer, "read"):
        name = getattr(path_or_buffer, "name", "uploaded_file.csv").lower()
        if name.endswith(EXCEL_SUFFIXES):
            return _read_workbook(path_or_buffer)
        return pd.read_csv(path_or_buffer, **csv_kwargs)

    path = Path(path_or_buffer)
    ext = path.suffix.lower()
    if ext in {".csv", ""}:
        return pd.read_csv(path, **csv_kwargs)
    if ext in EXCEL_SUFFIXES:
        return _read_workbook(path)
    raise ValueError(f"Unsupported file extension '{ext}'.")


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    renamed = df.rename(columns=lambda c: str(c).strip())
    missing = [column for column in REQUIRED_COLUMNS if column not in renamed.columns]
    if missing:
        raise TransactionImportError(
            "Missing required columns: " + ", ".join(missing)
            + f". Expected columns: {', '.join(REQUIRED_COLUMNS)}"
        )
    return renamed


def parse_import_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Validate every row and return the parsed transaction fields.

    Raises:
        TransactionImportError: On the first missing column or invalid row.
    """
    df = _normalize_columns(df)
    rows: List[Dict[str, Any]] = []
    for position, (_, row) in enumerate(df.iterrows()):
        # Spreadsheet row numbers: the header is row 1.
        row_number = position + 2
        try:
            rows.append({
                'date': parse_date(row['Date']),
                'description': clean_text(row['Description']),
                'amount': parse_amount(row['Amount']),
                'category': clean_text(row['Category']),
                'type': parse_type(row['Type']),
            })
        except ValidationError as exc:
            raise TransactionImportError(f"Row {row_number}: {exc}") from exc
    return rows


def read_import(source) -> List[Dict[str, Any]]:
    """Read and validate an import file.

    Raises:
        TransactionImportError: If the file cannot be read or any row is invalid.
    """
    try:
        df = read_table(source)
    except pd.errors.EmptyDataError as exc:
        raise TransactionImportError("The file is empty") from exc
    except Exception as exc:
        # Excel engines raise their own exception types for corrupt workbooks.
        raise TransactionImportError(f"Could not read file: {exc}") from exc
    return parse_import_frame(df)


def build_import_template(categories: Iterable[Category], today: Optional[date] = None) -> bytes:
    """Build an Excel workbook with import instructions and two example rows."""
    today = today or date.today()
    categories = list(categories)
    example = pd.DataFrame([
        {'Date': today.isoformat(), 'Description': 'Example Transaction', 'Amount': 100.00,
         'Category': 'Food', 'Type': EXPENSE},
        {'Date': today.isoformat(), 'Description': 'Example Income', 'Amount': 1000.00,
         'Category': 'Salary', 'Type': INCOME},
    ], columns=list(REQUIRED_COLUMNS))

    lines = [
        'Budget Tracker Import Template',
        '',
        'Instructions:',
        '1. Enter your transactions in the Transactions sheet',
        '2. Ensure all columns are filled correctly',
        '3. Dates should be in YYYY-MM-DD format',
        '4. Amount should be a number (no currency symbols)',
        '5. Type must be either "Income" or "Expense"',
        '6. Category should match one of your existing categories',
        '',
        'Available Categories:',
        '',
        'Income Categories:',
    ]
    lines.extend(c.name for c in categories if c.type == INCOME)
    lines.extend(['', 'Expense Categories:'])
    lines.extend(c.name for c in categories if c.type == EXPENSE)
    instructions = pd.DataFrame({'Instructions': lines})

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        instructions.to_excel(writer, sheet_name='Instructions', index=False, header=False)
        example.to_excel(writer, sheet_name=TRANSACTIONS_SHEET, index=False)
    return buffer.getvalue()
