from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from ..models.config_models import IngestConfig
from ..models.extraction_result import ExtractionResult, Stage
from ..models.row_data import FailedRow, RawRow
from ..spreadsheet.export import output_filename
from ..spreadsheet.reader import decode_rows
from . import fallback_extractor, header_locator, row_transformer
from .column_matcher import build_header_mapping
from .diagnostics import DiagnosticSink
from .row_transformer import TransformOutcome

"""Pipeline orchestrator for a single spreadsheet.

State machine:

    STRUCTURED_MATCH --(no normalized rows)--> HEADER_RELOCATE
    HEADER_RELOCATE --(still none / no header found)--> FALLBACK_EXTRACT
    FALLBACK_EXTRACT --> DONE

The first stage that yields at least one normalized row ends the run and its
own failed rows are returned with it. When no stage succeeds, the result is
empty and carries the failed rows of every attempted stage, in stage order.

Decoding errors (DecodeError) propagate before any stage runs. After a
successful decode the pipeline never raises for data quality reasons.
"""

__all__ = [
    "run_pipeline",
    "extract_bytes",
    "extract_file",
    "extract_file_async",
]

logger = logging.getLogger(__name__)


def _stage_result(
    stage: Stage,
    outcome: TransformOutcome,
    dropped_before: int,
    filename: str | None,
    sink: DiagnosticSink,
) -> ExtractionResult:
    sink.emit(
        "stage_result",
        stage=stage.value,
        normalized=len(outcome.normalized),
        failed=len(outcome.failed),
        dropped=outcome.dropped + dropped_before,
    )
    return ExtractionResult(
        normalized_rows=tuple(outcome.normalized),
        failed_rows=tuple(outcome.failed),
        stage=stage,
        dropped_rows=outcome.dropped + dropped_before,
        output_filename=filename,
    )


def run_pipeline(
    rows: Sequence[RawRow],
    config: IngestConfig,
    *,
    source_name: str | None = None,
    sink: DiagnosticSink | None = None,
    cancel: threading.Event | None = None,
) -> ExtractionResult:
    """Run matching, header relocation and fallback extraction over ``rows``.

    Args:
        rows: Decoded rows (first file row already applied as labels)
        config: Field set and thresholds
        source_name: Original file name, used for the export file name
        sink: Receives diagnostic events; a private sink is used when None
        cancel: Checked between rows; raises ExtractionCancelled when set
    """
    sink = sink or DiagnosticSink(logger)
    filename = output_filename(source_name, config.output_suffix) if source_name else None
    fields = config.fields
    collected: list[FailedRow] = []

    # STRUCTURED_MATCH
    labels = list(rows[0].keys()) if rows else []
    mapping = build_header_mapping(labels, fields, sink)
    sink.emit("header_mapping", stage=Stage.STRUCTURED_MATCH.value, mapping={k: f.key for k, f in mapping.items()})
    outcome = row_transformer.transform(rows, mapping, config.min_fields, cancel=cancel)
    if outcome.normalized:
        return _stage_result(Stage.STRUCTURED_MATCH, outcome, 0, filename, sink)
    collected.extend(outcome.failed)

    # HEADER_RELOCATE: only when no column label matched at all
    if not mapping:
        header_index = header_locator.locate(rows, fields, config.header_scan_rows)
        if header_index is not None:
            relocated_labels, relocated = header_locator.relabel(rows, header_index)
            mapping = build_header_mapping(relocated_labels, fields, sink)
            sink.emit(
                "header_relocated",
                header_index=header_index,
                mapping={k: f.key for k, f in mapping.items()},
            )
            outcome = row_transformer.transform(
                relocated,
                mapping,
                config.min_fields,
                index_offset=header_index + 1,
                cancel=cancel,
            )
            # Failed rows carry the row as decoded; row_index already counts from rows[0]
            outcome.failed = [replace(f, row=rows[f.row_index]) for f in outcome.failed]
            if outcome.normalized:
                return _stage_result(Stage.HEADER_RELOCATE, outcome, header_index + 1, filename, sink)
            collected.extend(outcome.failed)
        else:
            sink.emit("header_not_found", scanned=min(len(rows), config.header_scan_rows))

    # FALLBACK_EXTRACT over the rows as originally decoded
    sink.emit("fallback_started", rows=len(rows))
    outcome = fallback_extractor.extract(
        rows,
        config.min_fields,
        config.gross_pay_threshold,
        keys=config.fallback_keys,
        cancel=cancel,
    )
    if outcome.normalized:
        return _stage_result(Stage.FALLBACK_EXTRACT, outcome, 0, filename, sink)
    collected.extend(outcome.failed)

    sink.emit("stage_result", stage=Stage.DONE.value, normalized=0, failed=len(collected))
    return ExtractionResult(
        normalized_rows=(),
        failed_rows=tuple(collected),
        stage=Stage.DONE,
        dropped_rows=outcome.dropped,  # fallback stage only
        output_filename=filename,
    )


def extract_bytes(
    content: bytes,
    filename: str,
    config: IngestConfig,
    *,
    sink: DiagnosticSink | None = None,
    cancel: threading.Event | None = None,
) -> ExtractionResult:
    """Decode ``content`` according to ``filename``'s extension and run the pipeline.

    Raises:
        DecodeError: the bytes are not a readable file of the claimed format
    """
    rows = decode_rows(content, filename)
    return run_pipeline(rows, config, source_name=filename, sink=sink, cancel=cancel)


def extract_file(
    path: Path,
    config: IngestConfig,
    *,
    sink: DiagnosticSink | None = None,
    cancel: threading.Event | None = None,
) -> ExtractionResult:
    return extract_bytes(path.read_bytes(), path.name, config, sink=sink, cancel=cancel)


async def extract_file_async(
    path: Path,
    config: IngestConfig,
    *,
    sink: DiagnosticSink | None = None,
    cancel: threading.Event | None = None,
) -> ExtractionResult:
    """Read the file without blocking the event loop, then run synchronously.

    Reading the bytes is the only suspension point.
    """
    content = await asyncio.to_thread(path.read_bytes)
    return extract_bytes(content, path.name, config, sink=sink, cancel=cancel)
