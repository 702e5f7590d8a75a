from __future__ import annotations

from pathlib import Path

from payroll_ingest.cli import main as cli_main
from payroll_ingest.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL

"""Exit codes: 0 all files produced rows, 2 some file failed, 1 fatal."""

CLEAN = [["EMPLO NO.", "EMPLOYEES' FULL NAMES", "BASIC SALARY"], ["E1", "Jane Doe", "50000"]]


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PARTIAL_FAILURE) == (0, 1, 2)


def test_exit_success(temp_workdir: Path, make_csv):
    make_csv(temp_workdir / "data" / "march.csv", CLEAN)
    assert cli_main(["data"]) == EXIT_SUCCESS_ALL


def test_exit_partial_failure(temp_workdir: Path, make_csv):
    make_csv(temp_workdir / "data" / "march.csv", CLEAN)
    make_csv(temp_workdir / "data" / "noise.csv", [["", "", ""], ["zzz", "qqq", "***"]])
    assert cli_main(["data"]) == EXIT_PARTIAL_FAILURE


def test_exit_fatal_on_missing_input(temp_workdir: Path):
    assert cli_main(["missing_dir"]) == EXIT_FATAL
