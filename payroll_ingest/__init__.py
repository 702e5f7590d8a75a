"""payroll_ingest: normalize employee/payroll spreadsheets of unknown shape.

Typical use::

    from pathlib import Path
    from payroll_ingest import extract_file, load_config

    result = extract_file(Path("march.xlsx"), load_config())
    for row in result.normalized_rows:
        ...
    for failed in result.failed_rows:
        print(failed.reason)
"""

from .config.loader import ConfigError, load_config
from .models.extraction_result import ExtractionResult, Stage
from .models.row_data import FailedRow
from .services.cancellation import ExtractionCancelled
from .services.diagnostics import DiagnosticSink
from .services.pipeline import extract_bytes, extract_file, extract_file_async, run_pipeline
from .spreadsheet.reader import DecodeError, UnsupportedFormatError

__all__ = [
    "ConfigError",
    "DecodeError",
    "DiagnosticSink",
    "ExtractionCancelled",
    "ExtractionResult",
    "FailedRow",
    "Stage",
    "UnsupportedFormatError",
    "extract_bytes",
    "extract_file",
    "extract_file_async",
    "load_config",
    "run_pipeline",
]

__version__ = "0.1.0"
