from __future__ import annotations

from pathlib import Path

import pytest

from payroll_ingest.config.loader import ConfigError, load_config


def _write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "fields.yml"
    p.write_text(text, encoding="utf-8")
    return p


def test_defaults_load():
    cfg = load_config()
    assert cfg.min_fields == 3
    assert cfg.gross_pay_threshold == 1000.0
    assert cfg.header_scan_rows == 10
    assert cfg.output_suffix == "_transformed.xlsx"
    assert [f.key for f in cfg.fields][:3] == ["Employee Number", "Full Name", "National ID"]
    assert cfg.full_name_field.source_name == "EMPLOYEES' FULL NAMES"
    assert "EMP NO" in cfg.field_for("Employee Number").aliases


def test_user_file_merges_over_defaults(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.min_fields == 3
    assert cfg.field_for("Employee Number").aliases[-1] == "WORKER ID"
    assert cfg.field_for("Gross Pay").aliases[-1] == "PAY"
    assert len(cfg.fields) == 13


def test_scalar_overrides(tmp_path: Path):
    cfg = load_config(_write(tmp_path, "min_fields: 2\ngross_pay_threshold: 500\nheader_scan_rows: 4\n"))
    assert (cfg.min_fields, cfg.gross_pay_threshold, cfg.header_scan_rows) == (2, 500.0, 4)


def test_user_fields_replace_defaults(tmp_path: Path):
    cfg = load_config(_write(tmp_path, """fields:
  - key: Staff Code
    source_name: CODE
  - key: Name
    source_name: STAFF NAME
    full_name: true
"""))
    assert [f.key for f in cfg.fields] == ["Staff Code", "Name"]
    assert cfg.full_name_field.key == "Name"


def test_extra_aliases_skip_known_names(tmp_path: Path):
    cfg = load_config(_write(tmp_path, "extra_aliases:\n  Employee Number: [emp no, WORKER ID]\n"))
    aliases = cfg.field_for("Employee Number").aliases
    assert aliases.count("EMP NO") == 1
    assert "emp no" not in aliases
    assert aliases[-1] == "WORKER ID"


@pytest.mark.parametrize(
    "text, message",
    [
        ("min_fields: 0\n", "config validation failed"),
        ("unknown_key: 1\n", "config validation failed"),
        ("fields:\n  - key: A1\n", "config validation failed"),
        ("- just\n- a list\n", "config root must be a mapping"),
        ("min_fields: [1\n", "invalid yaml"),
        ("extra_aliases:\n  Bonus: [BONUS]\n", "extra_aliases refers to unknown field: Bonus"),
        (
            "fields:\n  - {key: A1, source_name: X1}\n  - {key: A1, source_name: X2}\n",
            "duplicate field key: A1",
        ),
        (
            "fields:\n  - {key: A1, source_name: X1, full_name: true}\n"
            "  - {key: A2, source_name: X2, full_name: true}\n",
            "at most one field may set full_name: true",
        ),
    ],
)
def test_invalid_config(tmp_path: Path, text: str, message: str):
    with pytest.raises(ConfigError, match=message):
        load_config(_write(tmp_path, text))


def test_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(tmp_path / "nope.yml")


def test_default_fallback_keys():
    assert load_config().fallback_keys == {
        "full_name": "Full Name",
        "national_id": "National ID",
        "tax_pin": "Tax PIN",
        "social_security": "Social-Security Number",
        "gross_pay": "Gross Pay",
    }


def test_user_fields_carry_roles(tmp_path: Path):
    cfg = load_config(_write(tmp_path, """fields:
  - {key: ID Number, source_name: ID NO, role: national_id}
  - {key: Basic Pay, source_name: BASIC SALARY, role: gross_pay}
"""))
    assert cfg.fallback_keys == {"national_id": "ID Number", "gross_pay": "Basic Pay"}


def test_extra_aliases_keep_role(tmp_path: Path):
    cfg = load_config(_write(tmp_path, "extra_aliases:\n  Gross Pay: [PAY]\n"))
    assert cfg.field_for("Gross Pay").role == "gross_pay"


@pytest.mark.parametrize(
    "text, message",
    [
        (
            "fields:\n  - {key: A1, source_name: X1, role: gross_pay}\n"
            "  - {key: A2, source_name: X2, role: gross_pay}\n",
            "role gross_pay is set on more than one field",
        ),
        ("fields:\n  - {key: A1, source_name: X1, role: bonus}\n", "config validation failed"),
    ],
)
def test_invalid_roles(tmp_path: Path, text: str, message: str):
    with pytest.raises(ConfigError, match=message):
        load_config(_write(tmp_path, text))
