from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import IngestConfig
from ..models.extraction_result import ExtractionResult
from ..models.processing_result import FileStat, ProcessingResult
from ..models.source_file import FileStatus, SourceFile
from ..spreadsheet.export import export_failed_rows, export_rows, output_filename, timestamped_filename
from ..spreadsheet.reader import SUPPORTED_EXTENSIONS, DecodeError
from .diagnostics import DiagnosticSink
from .pipeline import extract_file
from .progress import ProgressTracker

"""Multi-file orchestration for the CLI.

Each input file runs through the single-file pipeline independently; one
file failing to decode never stops the others. Failed rows of every file are
buffered in an ErrorLogBuffer and written once at the end of the run.
"""

logger = logging.getLogger(__name__)

FAILED_SUFFIX = "_failed.xlsx"


class ProcessingError(Exception):
    """Fatal error that prevents a run from starting (bad input paths)."""


def scan_input_files(paths: list[Path]) -> list[Path]:
    """Expand directories (non-recursive) and keep supported spreadsheet files.

    Explicitly named files are kept regardless of extension, so an
    unsupported file is reported per file instead of silently skipped.

    Raises:
        ProcessingError: If a path does not exist or a directory can't be read
    """
    files: list[Path] = []
    for path in paths:
        if not path.exists():
            raise ProcessingError(f"Path not found: {path}")
        if path.is_dir():
            try:
                found = sorted(
                    p for p in path.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
                )
            except OSError as e:
                raise ProcessingError(f"Error reading directory {path}: {e}") from e
            files.extend(found)
        else:
            files.append(path)
    return files


def _export(
    source: Path,
    result: ExtractionResult,
    config: IngestConfig,
    output_dir: Path,
    timestamp: datetime | None,
) -> Path | None:
    written: Path | None = None
    if result.normalized_rows:
        name = result.output_filename or output_filename(source.name, config.output_suffix)
        if timestamp is not None:
            name = timestamped_filename(name, timestamp)
        written = export_rows(result.normalized_rows, output_dir / name)
        logger.info(f"{source.name}: wrote {len(result.normalized_rows)} rows to {written}")
    if result.failed_rows:
        name = output_filename(source.name, FAILED_SUFFIX)
        if timestamp is not None:
            name = timestamped_filename(name, timestamp)
        failed_path = export_failed_rows(result.failed_rows, output_dir / name)
        logger.info(f"{source.name}: wrote {len(result.failed_rows)} failed rows to {failed_path}")
    return written


def _process_single_file(
    path: Path,
    config: IngestConfig,
    error_log: ErrorLogBuffer,
    output_dir: Path | None,
    timestamp: datetime | None,
) -> SourceFile:
    start_time = datetime.now(UTC)
    sink = DiagnosticSink(logger)
    try:
        result = extract_file(path, config, sink=sink)
    except (DecodeError, OSError) as e:
        logger.error(f"{path.name}: {e}")
        error_log.record_decode_error(path.name, str(e))
        return SourceFile(
            path=path,
            name=path.name,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.FAILED,
            error=str(e),
        )

    error_log.record_result(path.name, result)
    if result.is_empty:
        status = FileStatus.FAILED
        logger.warning(f"{path.name}: no rows could be extracted ({len(result.failed_rows)} rows need attention)")
    else:
        status = FileStatus.SUCCESS
        logger.info(
            f"{path.name}: {len(result.normalized_rows)} rows via {result.stage.value}, "
            f"{len(result.failed_rows)} rows need attention"
        )

    export_path = _export(path, result, config, output_dir, timestamp) if output_dir is not None else None
    return SourceFile(
        path=path,
        name=path.name,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=status,
        result=result,
        export_path=export_path,
        error=None if status is FileStatus.SUCCESS else "no normalized rows",
    )


def process_all(
    paths: list[Path],
    config: IngestConfig,
    *,
    output_dir: Path | None = None,
    error_log: ErrorLogBuffer | None = None,
    timestamp: datetime | None = None,
) -> ProcessingResult:
    """Extract every input file and aggregate the results.

    Args:
        paths: Files and/or directories to process
        config: Field set and thresholds
        output_dir: When given, normalized and failed rows are exported here
        error_log: Receives failed rows; a fresh buffer is used when None
        timestamp: When given, export file names carry this timestamp

    Raises:
        ProcessingError: For input paths that don't exist
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    files = scan_input_files(paths)

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    total_failed_rows = 0

    with ProgressTracker(len(files)) as progress:
        for path in files:
            progress.start_file(path)
            file_result = _process_single_file(path, config, error_log, output_dir, timestamp)

            if file_result.status is FileStatus.SUCCESS:
                success_count += 1
            else:
                failed_count += 1
            total_rows += file_result.normalized_count
            total_failed_rows += file_result.failed_count

            progress.set_postfix(success=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file()

            elapsed = 0.0
            if file_result.start_time and file_result.end_time:
                elapsed = (file_result.end_time - file_result.start_time).total_seconds()
            file_stats.append(
                FileStat(
                    file_name=file_result.name,
                    status=file_result.status.value,
                    normalized_rows=file_result.normalized_count,
                    failed_rows=file_result.failed_count,
                    stage=file_result.result.stage.value if file_result.result else None,
                    elapsed_seconds=elapsed,
                )
            )

    try:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")
    except OSError as e:
        logger.warning(f"failed to write error log: {e}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_normalized_rows=total_rows,
        total_failed_rows=total_failed_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput,
        file_stats=file_stats,
    )
