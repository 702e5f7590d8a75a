from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

"""Injectable diagnostic sink for pipeline runs.

Each pipeline run gets its own sink (nothing is shared between runs). Events
are kept in order so callers and tests can inspect how a result was reached,
and are also forwarded to the module logger at DEBUG.
"""

__all__ = [
    "DiagnosticEvent",
    "DiagnosticSink",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticEvent:
    name: str  # e.g. "header_mapping", "header_relocated", "stage_result"
    data: dict[str, Any] = field(default_factory=dict)


class DiagnosticSink:
    """Ordered list of diagnostic events for a single run."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.events: list[DiagnosticEvent] = []
        self._log = log or logger

    def emit(self, name: str, **data: Any) -> None:
        self.events.append(DiagnosticEvent(name=name, data=data))
        self._log.debug("%s %s", name, data)

    def named(self, name: str) -> list[DiagnosticEvent]:
        return [e for e in self.events if e.name == name]

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self.events)
