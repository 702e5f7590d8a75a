from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for CLI runs."""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Avoid scientific notation for very small values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a run.

    Format:
    SUMMARY files={n}/{n} success={s} failed={f} rows={rows}
    failed_rows={failed_rows} elapsed_sec={elapsed} throughput_rps={rps}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 3, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=1, total_normalized_rows=40,
        ...     total_failed_rows=3, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=20.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=2/2 success=1 failed=1 rows=40 failed_rows=3 elapsed_sec=2 throughput_rps=20'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_normalized_rows} "
        f"failed_rows={result.total_failed_rows} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)}"
    )
