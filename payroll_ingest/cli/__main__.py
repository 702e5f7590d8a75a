from __future__ import annotations

import argparse
import os
import sys
from datetime import UTC, datetime
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, load_config
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import enable_debug, log_summary, setup_logging
from ..services.orchestrator import ProcessingError, process_all, scan_input_files
from ..services.summary import render_summary_line
from ..spreadsheet.reader import DecodeError, decode_rows

"""CLI entrypoint.

    python -m payroll_ingest.cli FILE_OR_DIR... [--config PATH] [--output-dir DIR]

Flow:
- Load .env (python-dotenv), resolve the field config
- Extract every input file, exporting results when --output-dir is given
- Flush the failed-row error log and print the SUMMARY line

Exit codes: 0 every file produced rows, 2 at least one file failed or
produced nothing, 1 fatal (bad config, missing paths, no input files).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

CONFIG_ENV_VAR = "PAYROLL_INGEST_CONFIG"


def _load_env_file(path: Path) -> None:
    """Load ``.env`` without overriding variables already set in the process."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="payroll-ingest",
        description="Normalize employee/payroll spreadsheets into canonical rows",
    )
    p.add_argument("paths", nargs="*", type=Path, help="Spreadsheet files or directories (.csv, .tsv, .xlsx, .xlsm)")
    p.add_argument("--config", type=Path, default=None, help=f"Field config YAML (default: ${CONFIG_ENV_VAR} or built-in)")
    p.add_argument("--output-dir", type=Path, default=None, help="Write <name>_transformed.xlsx / <name>_failed.xlsx here")
    p.add_argument("--timestamp", action="store_true", help="Add a timestamp to exported file names")
    p.add_argument("--logs-dir", type=Path, default=Path("./logs"), help="Directory for the failed-row error log")
    p.add_argument("--debug", action="store_true", help="Enable debug logging (pipeline diagnostics)")
    p.add_argument("--inspect-data", action="store_true", help="Print decoded labels & first rows then exit")
    return p.parse_args(argv)


def _resolve_config_path(args: argparse.Namespace) -> Path | None:
    if args.config is not None:
        return args.config
    env_value = os.getenv(CONFIG_ENV_VAR)
    return Path(env_value) if env_value else None


def _inspect_data(files: list[Path]) -> int:
    for f in files:
        print(f"FILE: {f.name}")
        try:
            rows = decode_rows(f.read_bytes(), f.name)
        except (DecodeError, OSError) as e:
            print(f"  read_error: {e}")
            continue
        labels = list(rows[0].keys()) if rows else []
        print(f"  labels={labels} rows={len(rows)}")
        safe_rows = []
        for r in rows[:3]:
            # datetimes are not printable as plain values in every locale
            safe_rows.append({k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.items()})
        print("    sample_rows=", safe_rows)
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no explicit list is given; an empty list means "no args"
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    config_path = _resolve_config_path(args)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        files = scan_input_files(list(args.paths))
    except ProcessingError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL
    if not files:
        logger.error("no input files")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(files)

    logger.info(f"Processing {len(files)} file(s)")
    timestamp = datetime.now(UTC) if args.timestamp else None
    try:
        result = process_all(
            files,
            cfg,
            output_dir=args.output_dir,
            error_log=ErrorLogBuffer(args.logs_dir),
            timestamp=timestamp,
        )
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
