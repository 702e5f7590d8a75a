from __future__ import annotations

import re
import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..models.fields import DEFAULT_FALLBACK_KEYS, FIRST_NAME_KEY, LAST_NAME_KEY
from ..models.row_data import FailedRow, NormalizedRow, RawRow, cell_text, is_blank
from .cancellation import check_cancelled
from .row_transformer import TransformOutcome, split_full_name

"""Fallback extractor: recognise employee data by cell value patterns.

Used only when no header-based mapping produced a row. Column labels are
ignored; every cell of every row is offered to ``PATTERN_EXTRACTORS`` in
order and the first extractor that accepts the cell consumes it. Each
extractor fills its field at most once per row, so a later cell matching an
already-filled pattern falls through to the next extractor (e.g. a second
5+ digit number becomes Gross Pay rather than overwriting National ID).

Output keys come from the configured field set (``IngestConfig.fallback_keys``):
an extractor whose role has no configured field is skipped.
"""

__all__ = [
    "PatternExtractor",
    "PATTERN_EXTRACTORS",
    "NO_PATTERN_REASON",
    "too_few_reason",
    "extract_row",
    "extract",
]

NO_PATTERN_REASON = "Row does not contain recognizable employee data pattern"

_NAME = re.compile(r"[A-Za-z]{2,}\s+[A-Za-z]{2,}")
_LONG_ID = re.compile(r"\d{5,}")
_TAX_PIN = re.compile(r"[A-Z]\d{9}[A-Z]")
_SHORT_ID = re.compile(r"\d{4,6}")
_NUMERIC_TEXT = re.compile(r"\d+(?:\.\d+)?")


@dataclass(frozen=True)
class _Cell:
    value: Any
    text: str


@dataclass(frozen=True)
class PatternExtractor:
    role: str  # Key into the fallback key map
    accepts: Callable[[_Cell, set[str], float], bool]  # (cell, roles filled so far, threshold)
    apply: Callable[[_Cell, NormalizedRow, str], None]  # (cell, output row, output key)


def too_few_reason(count: int, minimum: int) -> str:
    return f"Could only identify {count} fields (minimum {minimum} required)"


def _numeric_value(cell: _Cell) -> float | None:
    if isinstance(cell.value, bool):
        return None
    if isinstance(cell.value, (int, float)):
        return float(cell.value)
    if isinstance(cell.value, str) and _NUMERIC_TEXT.fullmatch(cell.text):
        return float(cell.text)
    return None


def _is_name(cell: _Cell, _filled: set[str], _threshold: float) -> bool:
    return isinstance(cell.value, str) and len(cell.text) > 3 and _NAME.search(cell.text) is not None


def _set_name(cell: _Cell, out: NormalizedRow, key: str) -> None:
    first, last = split_full_name(cell.text)
    out[FIRST_NAME_KEY] = first
    out[LAST_NAME_KEY] = last
    out[key] = cell.text


def _is_national_id(cell: _Cell, _filled: set[str], _threshold: float) -> bool:
    return _LONG_ID.fullmatch(cell.text) is not None


def _is_tax_pin(cell: _Cell, _filled: set[str], _threshold: float) -> bool:
    return _TAX_PIN.fullmatch(cell.text) is not None


def _is_social_security(cell: _Cell, filled: set[str], _threshold: float) -> bool:
    return _SHORT_ID.fullmatch(cell.text) is not None and "national_id" not in filled


def _is_gross_pay(cell: _Cell, _filled: set[str], threshold: float) -> bool:
    number = _numeric_value(cell)
    return number is not None and number > threshold


def _set_value(cell: _Cell, out: NormalizedRow, key: str) -> None:
    out[key] = cell.value


PATTERN_EXTRACTORS: list[PatternExtractor] = [
    PatternExtractor("full_name", _is_name, _set_name),
    PatternExtractor("national_id", _is_national_id, _set_value),
    PatternExtractor("tax_pin", _is_tax_pin, _set_value),
    PatternExtractor("social_security", _is_social_security, _set_value),
    PatternExtractor("gross_pay", _is_gross_pay, _set_value),
]


def extract_row(
    row: RawRow,
    gross_pay_threshold: float = 1000.0,
    keys: Mapping[str, str] = DEFAULT_FALLBACK_KEYS,
) -> tuple[NormalizedRow, int]:
    """Apply the pattern chain to every cell of ``row``.

    Returns the extracted row and the number of fields identified (a person
    name counts once even though it fills three keys).
    """
    out: NormalizedRow = {}
    filled: set[str] = set()
    for value in row.values():
        if is_blank(value):
            continue
        cell = _Cell(value=value, text=cell_text(value))
        for extractor in PATTERN_EXTRACTORS:
            key = keys.get(extractor.role)
            if key is None or extractor.role in filled:
                continue
            if extractor.accepts(cell, filled, gross_pay_threshold):
                extractor.apply(cell, out, key)
                filled.add(extractor.role)
                break
    return out, len(filled)


def extract(
    rows: Sequence[RawRow],
    min_fields: int = 3,
    gross_pay_threshold: float = 1000.0,
    *,
    keys: Mapping[str, str] = DEFAULT_FALLBACK_KEYS,
    cancel: threading.Event | None = None,
) -> TransformOutcome:
    """Pattern-based extraction over every row.

    Rows with no values at all are dropped silently. Rows with values but
    no recognised pattern, or fewer than ``min_fields`` recognised fields,
    become FailedRows.
    """
    outcome = TransformOutcome()
    for idx, row in enumerate(rows):
        check_cancelled(cancel)
        if all(is_blank(v) for v in row.values()):
            outcome.dropped += 1
            continue
        extracted, found = extract_row(row, gross_pay_threshold, keys)
        if found == 0:
            outcome.failed.append(
                FailedRow(row=row, reason=NO_PATTERN_REASON, row_index=idx, kind="unrecognized")
            )
        elif found < min_fields:
            outcome.failed.append(
                FailedRow(
                    row=row,
                    reason=too_few_reason(found, min_fields),
                    row_index=idx,
                    kind="unrecognized",
                )
            )
        else:
            outcome.normalized.append(extracted)
    return outcome
