from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from .extraction_result import ExtractionResult

"""SourceFile model and FileStatus enum.

A SourceFile is the processing context of one input spreadsheet in a CLI
run: where it came from, how it ended and the ExtractionResult (if decoding
succeeded).
"""


class FileStatus(Enum):
    """Lifecycle of one input file: pending → processing → (success | failed).

    - SUCCESS: at least one normalized row was produced
    - FAILED: the file could not be decoded, or produced no normalized rows
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceFile:
    path: Path
    name: str
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: FileStatus = FileStatus.PENDING
    result: ExtractionResult | None = None  # None when decoding failed
    export_path: Path | None = None  # Written workbook, when exporting
    error: str | None = None  # Failure summary

    @property
    def normalized_count(self) -> int:
        return len(self.result.normalized_rows) if self.result else 0

    @property
    def failed_count(self) -> int:
        return len(self.result.failed_rows) if self.result else 0
