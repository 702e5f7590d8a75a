from __future__ import annotations

from dataclasses import dataclass

from .fields import CanonicalField

"""Config dataclasses for payroll spreadsheet ingestion.

These are the typed domain models; YAML loading and schema validation live in
payroll_ingest/config/loader.py.
"""

DEFAULT_MIN_FIELDS = 3
DEFAULT_GROSS_PAY_THRESHOLD = 1000.0
DEFAULT_HEADER_SCAN_ROWS = 10
DEFAULT_OUTPUT_SUFFIX = "_transformed.xlsx"


@dataclass(frozen=True)
class IngestConfig:
    """Root configuration object for one or more pipeline runs.

    The field tuple doubles as the alias table: each CanonicalField carries
    its own ordered alias list. Field order matters: when two fields could
    claim the same column, the earlier one wins.
    """
    fields: tuple[CanonicalField, ...]  # Canonical field set with aliases
    min_fields: int = DEFAULT_MIN_FIELDS  # Minimum mapped fields for a NormalizedRow
    gross_pay_threshold: float = DEFAULT_GROSS_PAY_THRESHOLD  # Fallback: numbers above this become Gross Pay
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS  # Rows inspected when relocating the header
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX  # Appended to the input base name for exports

    @property
    def full_name_field(self) -> CanonicalField | None:
        for f in self.fields:
            if f.is_full_name:
                return f
        return None

    @property
    def fallback_keys(self) -> dict[str, str]:
        """Fallback role -> output key; roles without a configured field are absent."""
        keys = {f.role: f.key for f in self.fields if f.role}
        full_name = self.full_name_field
        if full_name is not None:
            keys["full_name"] = full_name.key
        return keys

    def field_for(self, key: str) -> CanonicalField | None:
        for f in self.fields:
            if f.key == key:
                return f
        return None
