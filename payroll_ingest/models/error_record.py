from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the failed-row error log.

Each FailedRow surfaced by a CLI run (and each file that could not be decoded
or produced nothing) becomes one ErrorRecord, written as one JSON line. The
key set is fixed: consumers parse these files and extra keys are not allowed.
"""

__all__ = [
    "ErrorRecord",
    "UNMAPPED_ROW",
    "UNRECOGNIZED_ROW",
    "DECODE_ERROR",
    "EMPTY_RESULT",
]

UNMAPPED_ROW = "UNMAPPED_ROW"  # Too few columns matched a canonical field
UNRECOGNIZED_ROW = "UNRECOGNIZED_ROW"  # Fallback patterns found too little
DECODE_ERROR = "DECODE_ERROR"  # File could not be parsed at all
EMPTY_RESULT = "EMPTY_RESULT"  # File parsed but produced no normalized rows


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Spreadsheet file name being processed
        row: 0-based data row index. Use -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Failure reason shown to the user
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int  # -1 when the error is not tied to a row
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False)
