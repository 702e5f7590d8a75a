from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .row_data import FailedRow, NormalizedRow

"""ExtractionResult model and Stage enum.

ExtractionResult is the terminal value of one pipeline run. It is created once,
never updated, and has no relation to earlier or later runs.

State transitions of the pipeline that produces it:
STRUCTURED_MATCH → HEADER_RELOCATE → FALLBACK_EXTRACT → DONE
"""

__all__ = [
    "Stage",
    "ExtractionResult",
]


class Stage(Enum):
    """Pipeline stage that produced (or last attempted) a result.

    - STRUCTURED_MATCH: first row used as header, columns matched by name
    - HEADER_RELOCATE: real header found further down, columns matched by name
    - FALLBACK_EXTRACT: no usable header, cells matched by value pattern
    - DONE: every stage ran and none produced a normalized row
    """
    STRUCTURED_MATCH = "structured_match"
    HEADER_RELOCATE = "header_relocate"
    FALLBACK_EXTRACT = "fallback_extract"
    DONE = "done"


@dataclass(frozen=True)
class ExtractionResult:
    """Normalized rows plus diagnostics for a single spreadsheet."""
    normalized_rows: tuple[NormalizedRow, ...]  # Input order preserved
    failed_rows: tuple[FailedRow, ...]  # Input order preserved (stage order when stages are merged)
    stage: Stage = Stage.STRUCTURED_MATCH
    dropped_rows: int = 0  # Rows dropped without a FailedRow by the producing stage; for DONE, by the fallback stage only
    output_filename: str | None = None  # Used only by the export helper

    @property
    def is_empty(self) -> bool:
        return not self.normalized_rows

    def failure_reasons(self) -> list[str]:
        return [f.reason for f in self.failed_rows]
