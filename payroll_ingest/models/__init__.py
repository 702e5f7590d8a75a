"""Domain models for payroll spreadsheet ingestion.

This package contains the data model shared by the decoders, the pipeline
services and the CLI.
"""

from .config_models import IngestConfig
from .error_record import ErrorRecord
from .extraction_result import ExtractionResult, Stage
from .fields import FIRST_NAME_KEY, LAST_NAME_KEY, CanonicalField
from .row_data import FailedRow, NormalizedRow, RawRow

__all__ = [
    # Configuration models
    "CanonicalField",
    "IngestConfig",
    # Row models
    "RawRow",
    "NormalizedRow",
    "FailedRow",
    "FIRST_NAME_KEY",
    "LAST_NAME_KEY",
    # Results
    "ExtractionResult",
    "Stage",
    "ErrorRecord",
]
