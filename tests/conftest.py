# Shared pytest fixtures
from __future__ import annotations

import os
from pathlib import Path

import pandas as pd
import pytest

from payroll_ingest.config.loader import load_config
from payroll_ingest.logging.init import reset_logging
from payroll_ingest.models.config_models import IngestConfig


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    """Isolated working directory with config/, data/ and logs/."""
    for name in ("config", "data", "logs"):
        (tmp_path / name).mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def default_config() -> IngestConfig:
    return load_config()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """min_fields: 3
gross_pay_threshold: 1000
extra_aliases:
  Employee Number: [WORKER ID]
  Gross Pay: [PAY]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "fields.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(autouse=True)
def _restore_environ():
    """Undo os.environ changes (e.g. from load_dotenv) so tests stay isolated."""
    saved = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


def write_csv(path: Path, grid: list[list[object]]) -> Path:
    """Write a header-less grid as CSV (every row as given, ragged allowed)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [",".join("" if v is None else str(v) for v in row) for row in grid]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_xlsx(path: Path, grid: list[list[object]], sheet: str = "Sheet1") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(grid).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def make_csv():
    return write_csv


@pytest.fixture()
def make_xlsx():
    return write_xlsx
