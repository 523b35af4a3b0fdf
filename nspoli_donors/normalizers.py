"""Source row -> canonical record normalizers.

Each donation source exports its own columns and party vocabulary. A
``SourceProfile`` describes one source declaratively:

- ``renames``: source column -> canonical field. Several source columns may
  feed the same field; the first one (in declaration order) with a non-empty
  value wins.
- ``rewrites``: canonical field -> ordered containment rules. A value that
  contains a rule's text (case-insensitive) is replaced wholesale by the rule's
  abbreviation. The first matching rule wins and later rules are not consulted
  for that field, which matters for labels naming two parties at once.

Normalization never raises for messy rows: absent columns become ``""``,
``None`` becomes ``""`` and any other type is coerced with ``str()``. The only
error is an unknown source id, which is a caller bug.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from os import PathLike
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .logging_setup import get_logger
from .records import FIELD_NAMES, CanonicalRecord

logger = get_logger(__name__)

# One parsed CSV row keyed by the header exactly as exported
type SourceRowMapping = Mapping[str, object]


class ProfileError(ValueError):
    """A source profile definition is malformed."""


# ---------------------------------------------------------------------------
# Declarative profile models
# ---------------------------------------------------------------------------


class RewriteRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    contains: str = Field(min_length=1)
    replace_with: str

    def applies_to(self, value: str) -> bool:
        return self.contains.lower() in value.lower()


class SourceProfile(BaseModel):
    """Column-rename table plus field rewrite rules for one source."""

    model_config = ConfigDict(frozen=True)

    source_id: str = Field(min_length=1)
    label: str = ""
    description: str = ""
    renames: dict[str, str]
    rewrites: dict[str, tuple[RewriteRule, ...]] = Field(default_factory=dict)

    @field_validator("renames")
    @classmethod
    def _renames_target_known_fields(cls, v: dict[str, str]) -> dict[str, str]:
        bad = sorted({target for target in v.values() if target not in FIELD_NAMES})
        if bad:
            raise ValueError(f"renames target unknown fields {bad}; allowed: {list(FIELD_NAMES)}")
        return v

    @field_validator("rewrites")
    @classmethod
    def _rewrites_target_known_fields(
        cls, v: dict[str, tuple[RewriteRule, ...]]
    ) -> dict[str, tuple[RewriteRule, ...]]:
        bad = sorted(name for name in v if name not in FIELD_NAMES)
        if bad:
            raise ValueError(f"rewrites target unknown fields {bad}; allowed: {list(FIELD_NAMES)}")
        return v

    def columns_for(self, field_name: str) -> list[str]:
        return [col for col, target in self.renames.items() if target == field_name]


# ---------------------------------------------------------------------------
# Built-in sources
# ---------------------------------------------------------------------------

# Full federal party names collapsed to the abbreviations the classifier knows.
# Order matters: a joint label like "Liberal Party of Canada / New Democratic
# Party" takes the first configured match.
FEDERAL_PARTY_REWRITES: tuple[RewriteRule, ...] = (
    RewriteRule(contains="Conservative Party of Canada", replace_with="CPC"),
    RewriteRule(contains="Liberal Party of Canada", replace_with="LPC"),
    RewriteRule(contains="New Democratic Party", replace_with="NDP-CA"),
    RewriteRule(contains="Green Party of Canada", replace_with="Green"),
    RewriteRule(contains="People's Party of Canada", replace_with="PPC"),
    RewriteRule(contains="Bloc Québécois", replace_with="BQ"),
)

NS_PROVINCIAL = SourceProfile(
    source_id="ns_provincial",
    label="Elections Nova Scotia",
    description="Provincial contributions, 2005 onward. No postal codes; dates are years.",
    renames={
        "Last Name": "last_name",
        "First Name": "first_name",
        "Town": "city",
        "Party": "party",
        "Campaign": "specific_campaign",
        "Year": "date",
        "Amount": "donation",
        # older exports label the amount column "Donation"
        "Donation": "donation",
    },
)

CA_FEDERAL = SourceProfile(
    source_id="ca_federal",
    label="Elections Canada",
    description="Federal contributions from Nova Scotia donors.",
    renames={
        "Last Name": "last_name",
        "First Name": "first_name",
        "postalCode": "postal_code",
        "city": "city",
        "Party": "party",
        "Recipient": "specific_campaign",
        "Date_received": "date",
        "Monetary": "donation",
    },
    rewrites={
        "party": FEDERAL_PARTY_REWRITES,
        "specific_campaign": FEDERAL_PARTY_REWRITES,
    },
)

BUILTIN_PROFILES: dict[str, SourceProfile] = {
    p.source_id: p for p in (NS_PROVINCIAL, CA_FEDERAL)
}


def load_profiles(path: str | PathLike[str]) -> dict[str, SourceProfile]:
    """Load source profiles from a JSON file.

    The file holds either a list of profile objects or ``{"profiles": [...]}``.
    Profiles are returned keyed by ``source_id``; duplicate ids are rejected.
    """

    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ProfileError(f"{p}: invalid JSON: {exc}") from exc
    if isinstance(data, Mapping):
        data = data.get("profiles")
    try:
        profiles = TypeAdapter(list[SourceProfile]).validate_python(data)
    except ValidationError as exc:
        raise ProfileError(f"{p}: invalid source profile: {exc}") from exc

    out: dict[str, SourceProfile] = {}
    for prof in profiles:
        if prof.source_id in out:
            raise ProfileError(f"{p}: duplicate source_id {prof.source_id!r}")
        out[prof.source_id] = prof
    logger.debug("loaded %d source profile(s) from %s", len(out), p)
    return out


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def _coerce(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").strip()
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _header_key(name: object) -> str:
    # Tolerate BOM-prefixed, padded or differently-cased headers
    return " ".join(str(name).lstrip("\ufeff").split()).lower()


def _is_blank_row(row: SourceRowMapping) -> bool:
    return all(_coerce(v) == "" for v in row.values())


def _rewrite(value: str, rules: Iterable[RewriteRule]) -> str:
    for rule in rules:
        if rule.applies_to(value):
            return rule.replace_with
    return value


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


class RecordNormalizer:
    """Normalize raw source rows into :class:`CanonicalRecord` instances.

    Usage
    -----
    normalizer = RecordNormalizer()             # built-in profiles
    rec = normalizer.normalize("ns_provincial", {"Last Name": "Smith", ...})
    """

    def __init__(self, profiles: Mapping[str, SourceProfile] | None = None) -> None:
        self._profiles: dict[str, SourceProfile] = dict(
            BUILTIN_PROFILES if profiles is None else profiles
        )

    @property
    def profiles(self) -> Mapping[str, SourceProfile]:
        return self._profiles

    def profile(self, source_id: str) -> SourceProfile:
        try:
            return self._profiles[source_id]
        except KeyError:
            raise ValueError(
                f"unknown source: {source_id!r}. Known: {sorted(self._profiles)}"
            ) from None

    def normalize(self, source_id: str, raw_row: SourceRowMapping) -> CanonicalRecord:
        return _apply_profile(self.profile(source_id), raw_row)

    def normalize_rows(
        self, source_id: str, rows: Iterable[SourceRowMapping]
    ) -> Iterator[CanonicalRecord]:
        """Normalize a whole source, skipping rows whose cells are all empty."""

        prof = self.profile(source_id)
        skipped = 0
        unmapped_reported = False
        for row in rows:
            if _is_blank_row(row):
                skipped += 1
                continue
            if not unmapped_reported:
                unmapped_reported = True
                known = {_header_key(c) for c in prof.renames}
                unmapped = [c for c in row if c is not None and _header_key(c) not in known]
                if unmapped:
                    logger.debug("%s: ignoring unmapped columns %s", source_id, unmapped)
            yield _apply_profile(prof, row)
        if skipped:
            logger.debug("%s: skipped %d blank row(s)", source_id, skipped)


def _apply_profile(prof: SourceProfile, raw_row: SourceRowMapping) -> CanonicalRecord:
    folded: dict[str, object] | None = None
    values: dict[str, str] = {}
    for field_name in FIELD_NAMES:
        value = ""
        for col in prof.columns_for(field_name):
            if col in raw_row:
                value = _coerce(raw_row[col])
            else:
                if folded is None:
                    folded = {_header_key(k): v for k, v in raw_row.items() if k is not None}
                value = _coerce(folded.get(_header_key(col)))
            if value:
                break
        rules = prof.rewrites.get(field_name)
        if rules and value:
            value = _rewrite(value, rules)
        values[field_name] = value
    return CanonicalRecord(**values)


_DEFAULT = RecordNormalizer()


def normalize(
    source_id: str,
    raw_row: SourceRowMapping,
    *,
    profiles: Mapping[str, SourceProfile] | None = None,
) -> CanonicalRecord:
    """Normalize one raw row from ``source_id`` into a canonical record."""

    normalizer = _DEFAULT if profiles is None else RecordNormalizer(profiles)
    return normalizer.normalize(source_id, raw_row)


def normalize_rows(
    source_id: str,
    rows: Iterable[SourceRowMapping],
    *,
    profiles: Mapping[str, SourceProfile] | None = None,
) -> list[CanonicalRecord]:
    normalizer = _DEFAULT if profiles is None else RecordNormalizer(profiles)
    return list(normalizer.normalize_rows(source_id, rows))


__all__ = [
    "BUILTIN_PROFILES",
    "CA_FEDERAL",
    "NS_PROVINCIAL",
    "ProfileError",
    "RecordNormalizer",
    "RewriteRule",
    "SourceProfile",
    "SourceRowMapping",
    "load_profiles",
    "normalize",
    "normalize_rows",
]
