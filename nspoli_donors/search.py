"""Name search over merged records.

The query is read as ``"<last name> <first name>"``. Both parts are
case-insensitive substring tests, so ``"ith"`` finds ``"Smith"``. An empty
query finds nothing: results only appear once the user has typed something.
"""

from __future__ import annotations

from collections.abc import Iterable

from .records import CanonicalRecord


def parse_query(query: str | None) -> tuple[str, str | None] | None:
    """Split ``query`` into ``(last_token, first_token)``.

    Returns ``None`` for an empty or whitespace-only query. Tokens beyond the
    second are ignored.
    """

    tokens = (query or "").lower().split()
    if not tokens:
        return None
    return tokens[0], (tokens[1] if len(tokens) > 1 else None)


def search(records: Iterable[CanonicalRecord], query: str | None) -> list[CanonicalRecord]:
    parsed = parse_query(query)
    if parsed is None:
        return []
    last_token, first_token = parsed
    if first_token is None:
        return [r for r in records if last_token in r.last_name.lower()]
    return [
        r
        for r in records
        if last_token in r.last_name.lower() and first_token in r.first_name.lower()
    ]


__all__ = ["parse_query", "search"]
