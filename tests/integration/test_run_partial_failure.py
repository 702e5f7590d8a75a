from __future__ import annotations

import json
from pathlib import Path

from payroll_ingest.cli import main as cli_main

"""End-to-end: a run where one file produces nothing and one is not a workbook."""


def test_partial_failure_exit_code_and_error_log(temp_workdir: Path, make_csv, capsys):
    make_csv(temp_workdir / "data" / "good.csv", [
        ["", "", ""],
        ["Mary Achieng", "12345678", "45000"],
        ["Peter Otieno", "zzz", "qqq"],
    ])
    make_csv(temp_workdir / "data" / "noise.csv", [
        ["", "", ""],
        ["zzz", "qqq", "***"],
    ])
    (temp_workdir / "data" / "fake.xlsx").write_text("plain text", encoding="utf-8")

    code = cli_main(["data"])
    out = capsys.readouterr().out

    assert code == 2
    assert "SUMMARY files=3/3 success=1 failed=2 rows=1 failed_rows=3" in out
    assert "ERROR fake.xlsx:" in out
    assert "WARN noise.csv: no rows could be extracted" in out

    (log_file,) = (temp_workdir / "logs").iterdir()
    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [(r["file"], r["error_type"]) for r in records] == [
        ("fake.xlsx", "DECODE_ERROR"),
        ("good.csv", "UNRECOGNIZED_ROW"),
        ("noise.csv", "UNMAPPED_ROW"),
        ("noise.csv", "UNRECOGNIZED_ROW"),
        ("noise.csv", "EMPTY_RESULT"),
    ]
    good = records[1]
    assert good["row"] == 1
    assert good["message"] == "Could only identify 1 fields (minimum 3 required)"
