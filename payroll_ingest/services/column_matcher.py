from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from ..models.fields import CanonicalField
from ..models.row_data import is_placeholder_label
from .diagnostics import DiagnosticSink

"""Column matcher: resolve source column labels to canonical fields.

Tiers are tried in strict priority order and the first hit is returned; a
weaker tier is never consulted once a stronger one has matched, even if the
weaker match would come earlier in the label list.

1. exact   - label equals the field's source name (case-insensitive)
2. alias   - label equals one of the field's aliases (alias order)
3. substring - label contains the source name or vice versa
4. token   - label shares a token longer than 2 chars with the source name

Each tier is a plain function in ``MATCH_TIERS``; adding a tier means adding a
function to that list.
"""

__all__ = [
    "HeaderMapping",
    "MATCH_TIERS",
    "candidate_labels",
    "tokens",
    "match",
    "match_with_tier",
    "build_header_mapping",
]

HeaderMapping = dict[str, CanonicalField]

_TOKEN_SPLIT = re.compile(r"[^0-9a-z]+")
MIN_TOKEN_LENGTH = 3


def _norm(text: str) -> str:
    return text.strip().lower()


def tokens(text: str) -> set[str]:
    """Lowercased tokens split on whitespace/punctuation, shorter than 3 dropped."""
    return {t for t in _TOKEN_SPLIT.split(text.lower()) if len(t) >= MIN_TOKEN_LENGTH}


def _exact(field: CanonicalField, labels: Sequence[str]) -> str | None:
    target = _norm(field.source_name)
    for label in labels:
        if _norm(label) == target:
            return label
    return None


def _alias(field: CanonicalField, labels: Sequence[str]) -> str | None:
    for alias in field.aliases:
        target = _norm(alias)
        for label in labels:
            if _norm(label) == target:
                return label
    return None


def _substring(field: CanonicalField, labels: Sequence[str]) -> str | None:
    target = _norm(field.source_name)
    for label in labels:
        text = _norm(label)
        if text and (target in text or text in target):
            return label
    return None


def _token(field: CanonicalField, labels: Sequence[str]) -> str | None:
    target = tokens(field.source_name)
    if not target:
        return None
    for label in labels:
        if target & tokens(label):
            return label
    return None


MATCH_TIERS: list[tuple[str, Callable[[CanonicalField, Sequence[str]], str | None]]] = [
    ("exact", _exact),
    ("alias", _alias),
    ("substring", _substring),
    ("token", _token),
]


def candidate_labels(labels: Sequence[str]) -> list[str]:
    """Drop placeholder labels (unnamed columns) before matching."""
    return [label for label in labels if not is_placeholder_label(label)]


def match_with_tier(field: CanonicalField, labels: Sequence[str]) -> tuple[str, str] | None:
    """Return ``(label, tier_name)`` for the best match, or None."""
    candidates = candidate_labels(labels)
    if not candidates:
        return None
    for tier_name, tier in MATCH_TIERS:
        label = tier(field, candidates)
        if label is not None:
            return label, tier_name
    return None


def match(field: CanonicalField, labels: Sequence[str]) -> str | None:
    """Best-matching label for ``field`` or None."""
    hit = match_with_tier(field, labels)
    return hit[0] if hit else None


def build_header_mapping(
    labels: Sequence[str],
    fields: Sequence[CanonicalField],
    sink: DiagnosticSink | None = None,
) -> HeaderMapping:
    """Resolve every field against ``labels``.

    Fields are resolved in configured order. A label claimed by an earlier
    field is no longer a candidate for later ones, so each field maps to at
    most one label and each label to at most one field.
    """
    mapping: HeaderMapping = {}
    remaining = candidate_labels(labels)
    for f in fields:
        hit = match_with_tier(f, remaining)
        if hit is None:
            continue
        label, tier_name = hit
        mapping[label] = f
        remaining.remove(label)
        if sink is not None:
            sink.emit("column_matched", field=f.key, label=label, tier=tier_name)
    return mapping
