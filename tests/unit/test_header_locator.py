from __future__ import annotations

from payroll_ingest.services.header_locator import locate, looks_like_header_cell, relabel


def _rows(grid, width=3):
    labels = [f"Unnamed: {i}" for i in range(width)]
    return [dict(zip(labels, r)) for r in grid]


def test_header_cell_matches_source_name_and_alias(default_config):
    fields = default_config.fields
    assert looks_like_header_cell("EMPLO NO.", fields)
    assert looks_like_header_cell("Designation", fields)
    # contained in a longer header cell
    assert looks_like_header_cell("Basic Salary (KES)", fields)
    assert not looks_like_header_cell("", fields)
    assert not looks_like_header_cell("Payroll for March", fields)


def test_locate_skips_title_rows(default_config):
    rows = _rows([
        ["Payroll for March", "", ""],
        ["EMP NO", "EMPLOYEE NAME", "SALARY"],
        ["E1", "Jane Doe", "50000"],
    ])
    assert locate(rows, default_config.fields) == 1


def test_locate_respects_scan_limit(default_config):
    rows = _rows([["Payroll for March", "", ""]] * 3 + [["EMP NO", "EMPLOYEE NAME", "SALARY"]])
    assert locate(rows, default_config.fields, scan_rows=3) is None
    assert locate(rows, default_config.fields, scan_rows=4) == 3


def test_locate_returns_none_without_header(default_config):
    rows = _rows([["Mary Achieng", "12345678", "45000"]])
    assert locate(rows, default_config.fields) is None


def test_relabel_builds_new_rows_from_header():
    rows = _rows([
        ["Payroll for March", "", ""],
        ["EMP NO", "", "EMP NO"],
        ["E1", "Jane Doe", "50000"],
    ])
    original = [dict(r) for r in rows]
    labels, data = relabel(rows, 1)
    assert labels == ["EMP NO", "Unnamed: 1", "EMP NO.1"]
    assert data == [{"EMP NO": "E1", "Unnamed: 1": "Jane Doe", "EMP NO.1": "50000"}]
    assert rows == original
