from __future__ import annotations

from dataclasses import dataclass, field

"""Canonical field definitions for payroll spreadsheet ingestion.

A CanonicalField couples the header name a payroll provider is most likely to
use (``source_name``) with the output column name downstream consumers rely on
(``key``). The alias list holds additional known header spellings and is the
only thing that should change when a new provider's conventions show up.

The default field set lives in ``config/default_fields.yml``; see
``payroll_ingest.config.loader`` for how it is loaded and overridden.
"""

__all__ = [
    "CanonicalField",
    "FIRST_NAME_KEY",
    "LAST_NAME_KEY",
    "FULL_NAME_KEY",
    "NATIONAL_ID_KEY",
    "TAX_PIN_KEY",
    "SOCIAL_SECURITY_KEY",
    "GROSS_PAY_KEY",
    "FALLBACK_ROLES",
    "DEFAULT_FALLBACK_KEYS",
]

FIRST_NAME_KEY = "First Name"
LAST_NAME_KEY = "Last Name"

# Output keys of the packaged default field set
FULL_NAME_KEY = "Full Name"
NATIONAL_ID_KEY = "National ID"
TAX_PIN_KEY = "Tax PIN"
SOCIAL_SECURITY_KEY = "Social-Security Number"
GROSS_PAY_KEY = "Gross Pay"

# Value patterns the fallback extractor knows; a field opts in with `role:`.
# The full-name field takes part through `full_name: true` instead.
FALLBACK_ROLES = ("national_id", "tax_pin", "social_security", "gross_pay")

DEFAULT_FALLBACK_KEYS = {
    "full_name": FULL_NAME_KEY,
    "national_id": NATIONAL_ID_KEY,
    "tax_pin": TAX_PIN_KEY,
    "social_security": SOCIAL_SECURITY_KEY,
    "gross_pay": GROSS_PAY_KEY,
}


@dataclass(frozen=True)
class CanonicalField:
    """One member of the target schema every input is normalized into."""
    key: str  # Output column name (e.g. "Employee Number")
    source_name: str  # Header name matched first (e.g. "EMPLO NO.")
    aliases: tuple[str, ...] = field(default_factory=tuple)  # Case-insensitive synonyms, ordered
    is_full_name: bool = False  # Split into First Name / Last Name on output
    role: str | None = None  # Fallback pattern that fills this field (one of FALLBACK_ROLES)

    def names(self) -> tuple[str, ...]:
        """Source name followed by every alias."""
        return (self.source_name, *self.aliases)


