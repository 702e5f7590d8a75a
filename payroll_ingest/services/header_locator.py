from __future__ import annotations

from collections.abc import Sequence

from ..models.fields import CanonicalField
from ..models.row_data import RawRow, cell_text
from ..spreadsheet.reader import make_labels

"""Header locator: find the real header row below title/decoration rows.

Only the cell *values* of the first few rows are inspected. A row is taken as
the header as soon as one of its cells contains (or is contained in) a known
field name or alias, case-insensitively.
"""

__all__ = [
    "looks_like_header_cell",
    "locate",
    "relabel",
]


def looks_like_header_cell(value: object, fields: Sequence[CanonicalField]) -> bool:
    text = cell_text(value).lower()
    if not text:
        return False
    for f in fields:
        for name in f.names():
            name = name.lower()
            if name in text or text in name:
                return True
    return False


def locate(
    rows: Sequence[RawRow],
    fields: Sequence[CanonicalField],
    scan_rows: int = 10,
) -> int | None:
    """Index of the first row among ``rows[:scan_rows]`` that looks like a header."""
    for idx, row in enumerate(rows[:scan_rows]):
        if any(looks_like_header_cell(v, fields) for v in row.values()):
            return idx
    return None


def relabel(rows: Sequence[RawRow], header_index: int) -> tuple[list[str], list[RawRow]]:
    """New labels from row ``header_index`` and the rows after it keyed by them.

    The original rows are left untouched; new dicts are built.
    """
    labels = make_labels(list(rows[header_index].values()))
    data = [dict(zip(labels, row.values(), strict=False)) for row in rows[header_index + 1:]]
    return labels, data
