from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_GROSS_PAY_THRESHOLD,
    DEFAULT_HEADER_SCAN_ROWS,
    DEFAULT_MIN_FIELDS,
    DEFAULT_OUTPUT_SUFFIX,
    IngestConfig,
)
from ..models.fields import CanonicalField

"""Config loader for the canonical field set and pipeline thresholds.

Responsibilities:
- Load the packaged default field set (config/default_fields.yml)
- Load an optional user YAML file and validate it against config_schema.json
- Merge: user ``fields`` replace the defaults wholesale, ``extra_aliases``
  append header spellings to existing fields, scalar keys override
"""

_config_dir = Path(__file__).parent
SCHEMA_PATH = _config_dir / "config_schema.json"
DEFAULTS_PATH = _config_dir / "default_fields.yml"


class ConfigError(Exception):
    pass


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    return data


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the packaged JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or if
            the config data violates the schema.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _build_fields(raw_fields: list[dict[str, Any]]) -> list[CanonicalField]:
    fields: list[CanonicalField] = []
    seen: set[str] = set()
    for raw in raw_fields:
        key = raw["key"]
        if key in seen:
            raise ConfigError(f"duplicate field key: {key}")
        seen.add(key)
        fields.append(
            CanonicalField(
                key=key,
                source_name=raw["source_name"],
                aliases=tuple(raw.get("aliases") or ()),
                is_full_name=bool(raw.get("full_name", False)),
                role=raw.get("role"),
            )
        )
    if sum(1 for f in fields if f.is_full_name) > 1:
        raise ConfigError("at most one field may set full_name: true")
    roles = [f.role for f in fields if f.role]
    for role in roles:
        if roles.count(role) > 1:
            raise ConfigError(f"role {role} is set on more than one field")
    return fields


def _apply_extra_aliases(
    fields: list[CanonicalField], extra: dict[str, list[str]]
) -> list[CanonicalField]:
    by_key = {f.key: i for i, f in enumerate(fields)}
    for key, aliases in extra.items():
        if key not in by_key:
            raise ConfigError(f"extra_aliases refers to unknown field: {key}")
        idx = by_key[key]
        current = fields[idx]
        known = {a.lower() for a in current.names()}
        added = tuple(a for a in aliases if a.lower() not in known)
        fields[idx] = CanonicalField(
            key=current.key,
            source_name=current.source_name,
            aliases=current.aliases + added,
            is_full_name=current.is_full_name,
            role=current.role,
        )
    return fields


def load_config(path: Path | None = None) -> IngestConfig:
    """Load the field configuration.

    ``path=None`` returns the packaged defaults. Otherwise the user file is
    validated and merged over the defaults.
    """
    defaults = _read_yaml(DEFAULTS_PATH)
    _validate_config_schema(defaults)

    data: dict[str, Any] = dict(defaults)
    if path is not None:
        user = _read_yaml(path)
        _validate_config_schema(user)
        data.update({k: v for k, v in user.items() if k != "extra_aliases"})
        data["extra_aliases"] = user.get("extra_aliases") or {}

    fields = _build_fields(data["fields"])
    fields = _apply_extra_aliases(fields, data.get("extra_aliases") or {})

    return IngestConfig(
        fields=tuple(fields),
        min_fields=int(data.get("min_fields", DEFAULT_MIN_FIELDS)),
        gross_pay_threshold=float(data.get("gross_pay_threshold", DEFAULT_GROSS_PAY_THRESHOLD)),
        header_scan_rows=int(data.get("header_scan_rows", DEFAULT_HEADER_SCAN_ROWS)),
        output_suffix=data.get("output_suffix", DEFAULT_OUTPUT_SUFFIX),
    )
