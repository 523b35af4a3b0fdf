"""Canonical donation record models and helpers.

This module defines the canonical record as a frozen ``dataclass`` with an
explicit field order. Every source is normalized into this one shape.

Field order (exact, also the display order):
    - last_name
    - first_name
    - postal_code: empty string when the source has no postal code column
    - city
    - party: source-normalized party label (may already be abbreviated)
    - specific_campaign: the campaign or recipient organization
    - date: opaque text (a year or a date); never reparsed
    - donation: money as text, may carry ``$`` and thousands separators
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields


@dataclass(frozen=True, slots=True)
class CanonicalRecord:
    """A single donation line item in the merged schema.

    All fields are plain strings. Missing values are ``""`` and never ``None``
    so that search, sort and display never need to special-case absence.
    """

    last_name: str = ""
    first_name: str = ""
    postal_code: str = ""
    city: str = ""
    party: str = ""
    specific_campaign: str = ""
    date: str = ""
    donation: str = ""

    def as_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in FIELD_NAMES}

    def display_row(self) -> tuple[str, ...]:
        return astuple(self)


FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in fields(CanonicalRecord))

DISPLAY_HEADERS: dict[str, str] = {
    "last_name": "Last Name",
    "first_name": "First Name",
    "postal_code": "Postal Code",
    "city": "City",
    "party": "Party",
    "specific_campaign": "Specific Campaign",
    "date": "Date",
    "donation": "Donation",
}

# camelCase names used by exported data files and older front ends
_CAMEL_NAMES: dict[str, str] = {
    "lastname": "last_name",
    "firstname": "first_name",
    "postalcode": "postal_code",
    "specificcampaign": "specific_campaign",
}


def _column_lookup() -> dict[str, str]:
    table: dict[str, str] = {}
    for name in FIELD_NAMES:
        table[name] = name
        table[DISPLAY_HEADERS[name].lower()] = name
    table.update(_CAMEL_NAMES)
    return table


_COLUMN_LOOKUP = _column_lookup()


def resolve_column(key: str) -> str:
    """Return the record field name for ``key``.

    Accepts the field name (``"postal_code"``), the camelCase name
    (``"postalCode"``) or the display header (``"Postal Code"``), matched
    case-insensitively. Anything else is a caller bug and raises ``ValueError``.
    """

    if isinstance(key, str):
        name = _COLUMN_LOOKUP.get(key.strip().lower())
        if name is not None:
            return name
    raise ValueError(f"unknown column: {key!r}. Expected one of {list(FIELD_NAMES)}")


__all__ = ["CanonicalRecord", "DISPLAY_HEADERS", "FIELD_NAMES", "resolve_column"]
