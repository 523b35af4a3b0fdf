"""Donation totals per party bucket."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from .amounts import fmt_money, parse_amount, to_cents
from .classifier import (
    AGGREGATED_BUCKETS,
    BUCKET_LABELS,
    DEFAULT_RULES,
    CategoryBucket,
    ClassifierRule,
    classify,
)
from .records import CanonicalRecord


def aggregate(
    records: Iterable[CanonicalRecord],
    *,
    rules: Sequence[ClassifierRule] = DEFAULT_RULES,
) -> dict[CategoryBucket, Decimal]:
    """Sum ``donation`` per aggregated bucket, rounded to cents.

    Every aggregated bucket is present in the result, zero when nothing was
    given. Unparseable amounts count as 0. Unclassified and display-only
    parties (Green, Atlantica) contribute to no total.
    """

    totals: dict[CategoryBucket, Decimal] = {b: Decimal(0) for b in AGGREGATED_BUCKETS}
    for rec in records:
        bucket = classify(rec.party, rules=rules)
        if bucket in totals:
            totals[bucket] += parse_amount(rec.donation)
    return {b: to_cents(total) for b, total in totals.items()}


def format_totals(totals: dict[CategoryBucket, Decimal]) -> list[tuple[str, str]]:
    """``[("PC", "$150.00"), ...]`` in summary display order."""

    return [(BUCKET_LABELS[b], fmt_money(totals[b])) for b in AGGREGATED_BUCKETS if b in totals]


__all__ = ["aggregate", "format_totals"]
