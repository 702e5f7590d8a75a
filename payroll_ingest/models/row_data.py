from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Row-level models for payroll spreadsheet ingestion.

RawRow is what a decoder produces: an ordered mapping of column label to
raw cell value. NormalizedRow is what the pipeline produces: canonical field
key to extracted value. FailedRow keeps a rejected RawRow together with the
reason it was rejected.
"""

__all__ = [
    "RawRow",
    "NormalizedRow",
    "FailedRow",
    "PLACEHOLDER_PREFIXES",
    "is_blank",
    "is_placeholder_label",
    "cell_text",
]

RawRow = dict[str, Any]
NormalizedRow = dict[str, Any]

# Synthetic labels for header cells that had no text
PLACEHOLDER_PREFIXES = ("Unnamed:", "__EMPTY")


@dataclass(frozen=True)
class FailedRow:
    """A data row excluded from normalized output for a named reason."""
    row: RawRow  # Original decoded row (never modified)
    reason: str  # Human readable reason shown for manual remediation
    row_index: int = -1  # 0-based position among decoded data rows; -1 if unknown
    kind: str = "unmapped"  # "unmapped" (header mapping) or "unrecognized" (pattern fallback)


def is_blank(value: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and value != value:  # NaN
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def is_placeholder_label(label: Any) -> bool:
    if not isinstance(label, str) or label.strip() == "":
        return True
    return label.startswith(PLACEHOLDER_PREFIXES)


def cell_text(value: Any) -> str:
    """Render a cell value as text the way it appeared in the sheet.

    Whole floats lose their trailing ``.0`` so that an ID read as
    ``12345678.0`` from a workbook compares like ``"12345678"`` from CSV.
    """
    if is_blank(value):
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
