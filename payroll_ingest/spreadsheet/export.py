from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import pandas as pd

from ..models.config_models import DEFAULT_OUTPUT_SUFFIX
from ..models.row_data import FailedRow, NormalizedRow

"""Export helpers: write result sets back out as workbooks.

Thin I/O wrapper around pandas.DataFrame.to_excel. Nothing here feeds back
into extraction.
"""

__all__ = [
    "TRANSFORMED_SHEET",
    "FAILED_SHEET",
    "output_filename",
    "timestamped_filename",
    "export_rows",
    "export_failed_rows",
]

TRANSFORMED_SHEET = "Transformed Data"
FAILED_SHEET = "Failed Rows"


def output_filename(source_name: str, suffix: str = DEFAULT_OUTPUT_SUFFIX) -> str:
    """``payroll_march.csv`` -> ``payroll_march_transformed.xlsx``.

    The base name is everything before the first dot, so ``a.b.csv`` becomes
    ``a_transformed.xlsx``.
    """
    base = Path(source_name).name.split(".")[0]
    return f"{base}{suffix}"


def timestamped_filename(file_name: str, now: datetime) -> str:
    """Insert an ISO timestamp before ``.xlsx`` (``:`` and ``.`` become ``-``)."""
    stamp = now.isoformat().replace(":", "-").replace(".", "-")
    if file_name.endswith(".xlsx"):
        return f"{file_name[:-len('.xlsx')]}_{stamp}.xlsx"
    return f"{file_name}_{stamp}"


def export_rows(rows: Sequence[NormalizedRow], path: Path) -> Path:
    """Write normalized rows to ``path`` (single sheet, one column per key).

    Columns appear in first-seen order across all rows.
    """
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    df = pd.DataFrame(list(rows), columns=columns)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=TRANSFORMED_SHEET, index=False)
    return path


def export_failed_rows(failed: Sequence[FailedRow], path: Path) -> Path:
    """Write failed rows with their reasons, for manual remediation."""
    records = []
    for f in failed:
        record = {"Row": f.row_index, "Reason": f.reason}
        for label, value in f.row.items():
            record.setdefault(label, value)
        records.append(record)
    df = pd.DataFrame(records)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=FAILED_SHEET, index=False)
    return path
