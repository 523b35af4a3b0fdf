"""Merge normalized sources into one ordered collection.

Sources are concatenated in the order supplied and each keeps its own row
order. Records appearing in more than one source are kept as-is; nothing here
deduplicates.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from .logging_setup import get_logger
from .normalizers import RecordNormalizer, SourceProfile, SourceRowMapping
from .records import CanonicalRecord

logger = get_logger(__name__)


def merge(collections: Iterable[Iterable[CanonicalRecord]]) -> list[CanonicalRecord]:
    merged: list[CanonicalRecord] = []
    for records in collections:
        merged.extend(records)
    return merged


def merge_sources(
    sources: Sequence[tuple[str, Iterable[SourceRowMapping]]],
    *,
    profiles: Mapping[str, SourceProfile] | None = None,
) -> list[CanonicalRecord]:
    """Normalize each ``(source_id, rows)`` pair and merge the results in order."""

    normalizer = RecordNormalizer(profiles)
    per_source: list[list[CanonicalRecord]] = []
    for source_id, rows in sources:
        records = list(normalizer.normalize_rows(source_id, rows))
        logger.info("normalized %d record(s) from %s", len(records), source_id)
        per_source.append(records)
    merged = merge(per_source)
    logger.info("merged %d record(s) from %d source(s)", len(merged), len(per_source))
    return merged


__all__ = ["merge", "merge_sources"]
