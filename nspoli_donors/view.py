"""Browser state and the derived view it produces.

The loaded records are written once. Everything the user changes (the search
text and the sort selection) lives in a small immutable ``ViewState``; every
change produces a new state and the whole view is recomputed from scratch.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from decimal import Decimal

from .aggregate import aggregate
from .classifier import DEFAULT_RULES, CategoryBucket, ClassifierRule, color_hint
from .records import DISPLAY_HEADERS, FIELD_NAMES, CanonicalRecord
from .search import search
from .sorting import SortConfig


@dataclass(frozen=True, slots=True)
class ViewState:
    query: str = ""
    sort: SortConfig = field(default_factory=SortConfig)

    def with_query(self, text: str) -> ViewState:
        return replace(self, query=text)

    def click_header(self, column: str) -> ViewState:
        return replace(self, sort=self.sort.click(column))

    @property
    def active(self) -> bool:
        # Nothing is shown until the user types something
        return bool(self.query.strip())


@dataclass(frozen=True, slots=True)
class DonorView:
    """Everything the presentation layer needs for one render."""

    rows: tuple[CanonicalRecord, ...]
    totals: dict[CategoryBucket, Decimal]
    hints: tuple[str, ...]
    headers: tuple[str, ...] = tuple(DISPLAY_HEADERS[n] for n in FIELD_NAMES)


def compute_view(
    records: Sequence[CanonicalRecord],
    state: ViewState,
    *,
    rules: Sequence[ClassifierRule] = DEFAULT_RULES,
) -> DonorView:
    """Search, sort, total and color ``records`` for ``state``.

    Totals cover the rows that matched the search, as shown on screen.
    """

    rows = state.sort.apply(search(records, state.query))
    return DonorView(
        rows=tuple(rows),
        totals=aggregate(rows, rules=rules),
        hints=tuple(color_hint(r.party, rules=rules) for r in rows),
    )


__all__ = ["DonorView", "ViewState", "compute_view"]
