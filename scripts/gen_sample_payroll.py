#!/usr/bin/env python3
"""Generate synthetic payroll spreadsheets in the shapes seen in the wild.

Layouts:
- clean:  canonical headers on the first row
- titled: company/period title rows above a header that uses aliases
- dump:   no header at all, just employee values

Output format follows the file extension (.csv or .xlsx).
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

FIRST_NAMES = ["Jane", "John", "Mary", "Peter", "Grace", "Brian", "Faith", "Kevin", "Ann", "Moses"]
LAST_NAMES = ["Doe", "Smith", "Achieng", "Otieno", "Wanjiku", "Mwangi", "Kamau", "Njeri", "Ouma", "Chebet"]
POSITIONS = ["Accountant", "Driver", "Cashier", "Supervisor", "Clerk", "Storekeeper"]

CLEAN_HEADERS = ["EMPLO NO.", "EMPLOYEES' FULL NAMES", "ID NO", "KRA PIN NO.", "JOB TITTLE", "BASIC SALARY"]
ALIAS_HEADERS = ["STAFF NO", "EMPLOYEE NAME", "NATIONAL ID", "TAX PIN", "DESIGNATION", "GROSS PAY"]
LAYOUTS = ("clean", "titled", "dump")


def generate_employees(rows: int, seed: int = 42) -> pd.DataFrame:
    """Employee records with the six columns used by every layout."""
    rng = np.random.default_rng(seed)
    letters = np.array(list("ABCDEFGHJKLMNPQRSTUVWXYZ"))
    return pd.DataFrame(
        {
            "emp_no": [f"E{i:04d}" for i in range(1, rows + 1)],
            "name": [
                f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}" for _ in range(rows)
            ],
            "national_id": rng.integers(10_000_000, 39_999_999, rows).astype(str),
            "tax_pin": [
                f"{rng.choice(letters)}{rng.integers(0, 999_999_999):09d}{rng.choice(letters)}"
                for _ in range(rows)
            ],
            "position": rng.choice(POSITIONS, rows),
            "salary": rng.integers(15, 250, rows) * 1000,
        }
    )


def build_grid(df: pd.DataFrame, layout: str, title: str = "ACME LTD") -> list[list[object]]:
    """Lay the records out as a raw grid (list of rows) in the given layout."""
    body = df.values.tolist()
    if layout == "clean":
        return [CLEAN_HEADERS, *body]
    if layout == "titled":
        width = len(ALIAS_HEADERS)
        return [
            [title] + [""] * (width - 1),
            ["Monthly payroll"] + [""] * (width - 1),
            ALIAS_HEADERS,
            *body,
        ]
    if layout == "dump":
        # name, national id, salary only
        return [["", "", ""], *[[r[1], r[2], r[5]] for r in body]]
    raise ValueError(f"unknown layout: {layout}")


def write_grid(grid: list[list[object]], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    frame = pd.DataFrame(grid)
    if output_path.suffix.lower() == ".csv":
        frame.to_csv(output_path, header=False, index=False)
    else:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name="Payroll", header=False, index=False)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate synthetic payroll spreadsheets")
    parser.add_argument("output", type=Path, help="Output file (.csv or .xlsx)")
    parser.add_argument("--rows", type=int, default=1000, help="Employee rows (default: 1000)")
    parser.add_argument("--layout", choices=LAYOUTS, default="titled")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args(argv)

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.output.suffix.lower() not in {".csv", ".xlsx"}:
        print("Error: output must end with .csv or .xlsx", file=sys.stderr)
        return 1

    grid = build_grid(generate_employees(args.rows, args.seed), args.layout)
    write_grid(grid, args.output)
    print(f"Created {args.layout} payroll file: {args.output} ({args.rows} employees)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
