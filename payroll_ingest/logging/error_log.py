from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import (
    DECODE_ERROR,
    EMPTY_RESULT,
    UNMAPPED_ROW,
    UNRECOGNIZED_ROW,
    ErrorRecord,
)
from ..models.extraction_result import ExtractionResult, Stage

"""Failed-row error log (JSON Lines).

Records are buffered for the whole CLI run and written once to
``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC). The file is created on first
flush with records; runs without failures leave no file behind.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer of ErrorRecords; ``flush`` appends them as JSON Lines.

    Single-threaded use only.
    """

    def __init__(self, logs_dir: Path = LOGS_DIR) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def record_result(self, file: str, result: ExtractionResult) -> None:
        """One record per FailedRow, plus a file-level record for empty results."""
        for failed in result.failed_rows:
            error_type = UNRECOGNIZED_ROW if failed.kind == "unrecognized" else UNMAPPED_ROW
            self.append(ErrorRecord.create(file, failed.row_index, error_type, failed.reason))
        if result.stage is Stage.DONE:
            self.append(ErrorRecord.create(file, -1, EMPTY_RESULT, "no normalized rows could be extracted"))

    def record_decode_error(self, file: str, message: str) -> None:
        self.append(ErrorRecord.create(file, -1, DECODE_ERROR, message))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file; None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
