"""Money and number parsing shared by the sorter and the aggregator.

Donation values arrive as text such as ``"$1,200.50"``. Both helpers strip the
currency symbol and thousands separators and then parse what is left. Neither
raises: callers get ``None`` (sorter) or ``Decimal(0)`` (aggregator) for text
that is not a finite number.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CENTS = Decimal("0.01")

# Largest accepted donation is below 10**15. Bigger values are data errors and
# would push cent totals past the default 28-digit decimal context.
_MAX_ADJUSTED = 14


def _strip_money(value: object) -> str:
    return str(value).replace("$", "").replace(",", "").strip()


def parse_number(value: object) -> float | None:
    """Return ``value`` as a finite float, or ``None`` when it is not numeric.

    The whole stripped string must parse; ``"12 donors"`` is not a number.
    """

    # Unlike JavaScript parseFloat, a numeric prefix is not enough: "$100 CAD"
    # and "2023-05-01" sort as text and total as 0, not as 100 and 2023.
    s = _strip_money(value)
    if not s:
        return None
    try:
        n = float(s)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def parse_amount(value: object) -> Decimal:
    """Parse a donation amount into a ``Decimal``; anything unparseable is 0.

    Non-finite values and amounts of 10**15 or more also count as 0.
    """

    s = _strip_money(value)
    if not s:
        return Decimal(0)
    try:
        d = Decimal(s)
    except InvalidOperation:
        return Decimal(0)
    if not d.is_finite() or d.adjusted() > _MAX_ADJUSTED:
        return Decimal(0)
    return d


def to_cents(d: Decimal) -> Decimal:
    return d.quantize(_CENTS, rounding=ROUND_HALF_UP)


def fmt_money(d: Decimal) -> str:
    # "$1,234.50"; negatives keep a leading minus before the symbol.
    q = to_cents(d)
    sign = "-" if q < 0 else ""
    return f"{sign}${abs(q):,.2f}"


__all__ = ["fmt_money", "parse_amount", "parse_number", "to_cents"]
