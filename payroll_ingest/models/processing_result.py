from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Aggregated results of a CLI run over several spreadsheets."""


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics."""
    file_name: str
    status: str  # success/failed
    normalized_rows: int  # Rows ready for import
    failed_rows: int  # Rows needing attention
    stage: str | None  # Stage value that produced the result; None if undecodable
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Everything the SUMMARY line and the exit code are derived from."""
    success_files: int
    failed_files: int
    total_normalized_rows: int
    total_failed_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # normalized rows / elapsed
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
