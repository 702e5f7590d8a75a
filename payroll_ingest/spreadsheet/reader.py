from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.row_data import RawRow, cell_text

"""Spreadsheet decoders: raw bytes -> list of RawRow.

The file extension picks the decoder; there is no content sniffing between
formats. Both decoders first build a raw grid (no header applied, every blank
cell as ``""``) and then apply the first grid row as the header. Whether that
first row really is the header is decided later by the pipeline.

- Delimited text (.csv, .tsv): every cell is kept as text
- Workbook (.xlsx, .xlsm): first sheet only, numbers keep their type
"""

__all__ = [
    "DecodeError",
    "UnsupportedFormatError",
    "DELIMITED_EXTENSIONS",
    "WORKBOOK_EXTENSIONS",
    "SUPPORTED_EXTENSIONS",
    "read_grid",
    "grid_to_rows",
    "make_labels",
    "decode_rows",
]

DELIMITED_EXTENSIONS = {".csv": ",", ".tsv": "\t"}
WORKBOOK_EXTENSIONS = {".xlsx", ".xlsm"}
SUPPORTED_EXTENSIONS = set(DELIMITED_EXTENSIONS) | WORKBOOK_EXTENSIONS

# Tried in order; latin-1 accepts any byte sequence
TEXT_ENCODINGS = ("utf-8-sig", "latin-1")


class DecodeError(Exception):
    """Raised when bytes cannot be parsed as the format the file name claims."""


class UnsupportedFormatError(DecodeError):
    """Raised when the file extension maps to no decoder."""


def _decode_text(content: bytes, filename: str) -> str:
    for encoding in TEXT_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise DecodeError(f"{filename}: unable to decode text")  # pragma: no cover (latin-1 never fails)


def _read_delimited(content: bytes, filename: str, sep: str) -> pd.DataFrame:
    text = _decode_text(content, filename)
    if not text.strip():
        return pd.DataFrame()
    # Rows above the real header are often shorter than the data rows, so the
    # grid width is the widest row rather than the first one.
    try:
        width = max((len(r) for r in csv.reader(io.StringIO(text), delimiter=sep, strict=True)), default=0)
        df = pd.read_csv(
            io.StringIO(text),
            sep=sep,
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            engine="python",
        )
    except (csv.Error, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DecodeError(f"{filename}: malformed delimited text: {e}") from e
    return df


def _read_workbook(content: bytes, filename: str) -> pd.DataFrame:
    try:
        df = pd.read_excel(
            io.BytesIO(content),
            sheet_name=0,
            header=None,
            dtype=object,
            engine="openpyxl",
        )
    except Exception as e:  # zipfile / openpyxl / pandas raise a variety of types
        raise DecodeError(f"{filename}: unreadable workbook: {e}") from e
    return df


def read_grid(content: bytes, filename: str) -> pd.DataFrame:
    """Parse raw bytes into a header-less grid, blanks as ``""``.

    Raises:
        UnsupportedFormatError: unknown extension
        DecodeError: bytes are not valid for the claimed format
    """
    suffix = Path(filename).suffix.lower()
    if suffix in DELIMITED_EXTENSIONS:
        df = _read_delimited(content, filename, DELIMITED_EXTENSIONS[suffix])
    elif suffix in WORKBOOK_EXTENSIONS:
        df = _read_workbook(content, filename)
    else:
        raise UnsupportedFormatError(f"{filename}: unsupported file type '{suffix or '<none>'}'")
    return df.astype(object).where(df.notna(), "")


def make_labels(header_values: list[Any]) -> list[str]:
    """Turn header cell values into unique column labels.

    Blank cells become ``"Unnamed: {index}"``; repeated labels get ``.1``,
    ``.2`` ... suffixes, the same conventions pandas uses.
    """
    labels: list[str] = []
    seen: dict[str, int] = {}
    for idx, value in enumerate(header_values):
        label = cell_text(value) or f"Unnamed: {idx}"
        if label in seen:
            seen[label] += 1
            candidate = f"{label}.{seen[label]}"
            while candidate in seen:
                seen[label] += 1
                candidate = f"{label}.{seen[label]}"
            label = candidate
        seen.setdefault(label, 0)
        labels.append(label)
    return labels


def grid_to_rows(df: pd.DataFrame) -> list[RawRow]:
    """Apply the first grid row as header; remaining rows become RawRows."""
    if df.shape[0] == 0:
        return []
    labels = make_labels(df.iloc[0].tolist())
    rows: list[RawRow] = []
    for values in df.iloc[1:].itertuples(index=False, name=None):
        rows.append(dict(zip(labels, values, strict=False)))
    return rows


def decode_rows(content: bytes, filename: str) -> list[RawRow]:
    """Decode file bytes into RawRows using the first row as header."""
    return grid_to_rows(read_grid(content, filename))
