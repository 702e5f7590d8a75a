from __future__ import annotations

import threading

"""Cooperative cancellation checked at row boundaries.

A cancelled run raises ExtractionCancelled; callers never receive a partial
ExtractionResult.
"""

__all__ = [
    "ExtractionCancelled",
    "check_cancelled",
]


class ExtractionCancelled(Exception):
    """Raised when a run is cancelled between rows."""


def check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise ExtractionCancelled("extraction cancelled")
