from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models.fields import FIRST_NAME_KEY, LAST_NAME_KEY
from ..models.row_data import FailedRow, NormalizedRow, RawRow, cell_text, is_blank
from .cancellation import check_cancelled
from .column_matcher import HeaderMapping

"""Row transformer: map decoded rows onto canonical fields.

Per row, in order:
1. every cell blank -> dropped silently
2. stray row (title, subtotal, decoration) -> dropped silently
3. mapped cells copied under their canonical key; the full-name field also
   yields First Name / Last Name
4. fewer than ``min_fields`` mapped -> FailedRow, else NormalizedRow

Silent drops and FailedRows are separate on purpose: FailedRows are shown to
the user as rows needing attention, silent drops carry no information.
"""

__all__ = [
    "TransformOutcome",
    "is_empty_row",
    "is_stray_row",
    "split_full_name",
    "unmapped_reason",
    "transform",
]


@dataclass
class TransformOutcome:
    """Accepted rows, failed rows and the silently dropped row count."""
    normalized: list[NormalizedRow] = field(default_factory=list)
    failed: list[FailedRow] = field(default_factory=list)
    dropped: int = 0


def _filled_count(row: RawRow) -> int:
    return sum(1 for v in row.values() if not is_blank(v))


def is_empty_row(row: RawRow) -> bool:
    return _filled_count(row) == 0


def is_stray_row(row: RawRow) -> bool:
    """Exactly one filled cell, or fewer than 3 filled in a row wider than 4."""
    filled = _filled_count(row)
    return filled == 1 or (filled < 3 and len(row) > 4)


def split_full_name(full_name: str) -> tuple[str, str]:
    """First token is the first name, everything after it the last name."""
    parts = full_name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def unmapped_reason(count: int) -> str:
    return f"Only {count} fields could be mapped to known columns"


def _map_row(row: RawRow, mapping: HeaderMapping) -> tuple[NormalizedRow, int]:
    out: NormalizedRow = {}
    mapped = 0
    for label, value in row.items():
        f = mapping.get(label)
        if f is None:
            continue
        if f.is_full_name:
            full_name = cell_text(value)
            first, last = split_full_name(full_name)
            out[FIRST_NAME_KEY] = first
            out[LAST_NAME_KEY] = last
            out[f.key] = full_name
        else:
            out[f.key] = value
        mapped += 1
    return out, mapped


def transform(
    rows: Sequence[RawRow],
    mapping: HeaderMapping,
    min_fields: int = 3,
    *,
    index_offset: int = 0,
    cancel: threading.Event | None = None,
) -> TransformOutcome:
    """Classify each row as normalized, failed or silently dropped.

    Args:
        rows: Decoded rows, in input order
        mapping: Source label -> canonical field
        min_fields: Minimum mapped fields for a row to be accepted
        index_offset: Added to each row's position for FailedRow.row_index
        cancel: Checked before each row; raises ExtractionCancelled when set
    """
    outcome = TransformOutcome()
    for idx, row in enumerate(rows):
        check_cancelled(cancel)
        if is_empty_row(row) or is_stray_row(row):
            outcome.dropped += 1
            continue
        normalized, mapped = _map_row(row, mapping)
        if mapped < min_fields:
            outcome.failed.append(
                FailedRow(row=row, reason=unmapped_reason(mapped), row_index=idx + index_offset)
            )
            continue
        outcome.normalized.append(normalized)
    return outcome
