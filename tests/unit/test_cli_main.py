from __future__ import annotations

from pathlib import Path

from payroll_ingest.cli import main as cli_main

CLEAN = [
    ["EMPLO NO.", "EMPLOYEES' FULL NAMES", "BASIC SALARY"],
    ["E1", "Jane Doe", "50000"],
]


def test_cli_success(temp_workdir: Path, capsys, make_csv):
    make_csv(temp_workdir / "data" / "march.csv", CLEAN)
    code = cli_main(["data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO Processing 1 file(s)" in out
    assert "SUMMARY files=1/1 success=1 failed=0 rows=1 failed_rows=0" in out


def test_cli_no_input_files(temp_workdir: Path, capsys):
    code = cli_main([])
    assert code == 1
    assert "ERROR no input files" in capsys.readouterr().out


def test_cli_missing_path(temp_workdir: Path, capsys):
    code = cli_main(["nowhere.csv"])
    assert code == 1
    assert "ERROR input: Path not found: nowhere.csv" in capsys.readouterr().out


def test_cli_bad_config(temp_workdir: Path, capsys, make_csv):
    make_csv(temp_workdir / "data" / "march.csv", CLEAN)
    bad = temp_workdir / "config" / "bad.yml"
    bad.write_text("min_fields: 0\n", encoding="utf-8")
    code = cli_main(["data", "--config", str(bad)])
    assert code == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_cli_config_from_dotenv(temp_workdir: Path, capsys, monkeypatch, make_csv):
    monkeypatch.delenv("PAYROLL_INGEST_CONFIG", raising=False)
    (temp_workdir / ".env").write_text("PAYROLL_INGEST_CONFIG=config/missing.yml\n", encoding="utf-8")
    make_csv(temp_workdir / "data" / "march.csv", CLEAN)
    code = cli_main(["data"])
    assert code == 1
    assert "ERROR config: config file not found" in capsys.readouterr().out


def test_cli_debug_shows_diagnostics(temp_workdir: Path, capsys, make_csv):
    make_csv(temp_workdir / "data" / "march.csv", CLEAN)
    code = cli_main(["data", "--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG header_mapping" in out


def test_cli_inspect_data(temp_workdir: Path, capsys, make_csv):
    make_csv(temp_workdir / "data" / "march.csv", CLEAN)
    code = cli_main(["data", "--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: march.csv" in out
    assert "labels=['EMPLO NO.', \"EMPLOYEES' FULL NAMES\", 'BASIC SALARY'] rows=1" in out
    assert "SUMMARY" not in out
