"""Column sorting with mixed numeric/lexical comparison.

For every compared pair both values are tested for being numbers (after
stripping ``$`` and ``,``). When both are, they compare numerically; otherwise
the original strings compare lower-cased, by code point. Ties compare equal and
Python's stable sort keeps their input order, in either direction.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Literal

from .amounts import parse_number
from .records import CanonicalRecord, resolve_column

type Direction = Literal["asc", "desc"]

_DIRECTIONS: frozenset[str] = frozenset({"asc", "desc"})


def compare_values(a: object, b: object) -> int:
    """Ascending three-way comparison of two cell values."""

    a_s = "" if a is None else str(a)
    b_s = "" if b is None else str(b)
    a_num = parse_number(a_s)
    b_num = parse_number(b_s)
    if a_num is not None and b_num is not None:
        return (a_num > b_num) - (a_num < b_num)
    a_low = a_s.lower()
    b_low = b_s.lower()
    return (a_low > b_low) - (a_low < b_low)


def sort_records(
    records: Iterable[CanonicalRecord],
    column_key: str | None,
    direction: Direction = "asc",
) -> list[CanonicalRecord]:
    """Return a new list of ``records`` ordered by ``column_key``.

    ``column_key=None`` returns the input order unchanged. An unknown column or
    direction raises ``ValueError``.
    """

    if direction not in _DIRECTIONS:
        raise ValueError(f"invalid sort direction: {direction!r}. Allowed: asc, desc")
    items = list(records)
    if column_key is None:
        return items
    name = resolve_column(column_key)
    sign = 1 if direction == "asc" else -1

    def _cmp(x: CanonicalRecord, y: CanonicalRecord) -> int:
        return sign * compare_values(getattr(x, name), getattr(y, name))

    return sorted(items, key=cmp_to_key(_cmp))


@dataclass(frozen=True, slots=True)
class SortConfig:
    """Active sort column (``None`` for input order) and its direction."""

    key: str | None = None
    direction: Direction = "asc"

    def __post_init__(self) -> None:
        if self.direction not in _DIRECTIONS:
            raise ValueError(f"invalid sort direction: {self.direction!r}. Allowed: asc, desc")
        if self.key is not None:
            object.__setattr__(self, "key", resolve_column(self.key))

    def click(self, column: str) -> SortConfig:
        """Header click: the active column flips, another column starts ascending."""

        name = resolve_column(column)
        if self.key == name:
            return replace(self, direction="desc" if self.direction == "asc" else "asc")
        return SortConfig(key=name, direction="asc")

    def apply(self, records: Iterable[CanonicalRecord]) -> list[CanonicalRecord]:
        return sort_records(records, self.key, self.direction)


__all__ = ["Direction", "SortConfig", "compare_values", "sort_records"]
