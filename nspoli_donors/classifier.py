"""Party label classification shared by totals and row color hints.

One ordered rule table decides which bucket a party label belongs to. The
aggregator and the presentation color hints both go through :func:`classify`
so the two can never disagree.

Rule order is load-bearing:

- Exact abbreviations are checked before any substring rule. ``"NSNDP"`` and
  ``"NDP-CA"`` both contain ``"ndp"``, so the specific exact forms must fail
  before the bare ``"ndp"`` forms get a chance.
- The first rule that fires wins; there is no fallthrough.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Literal


class CategoryBucket(StrEnum):
    PC = "pc"
    CPC = "cpc"
    LPC = "lpc"
    NDP = "ndp"
    NSNDP = "nsndp"
    NDPCA = "ndpca"
    LIBERAL = "liberal"
    GREEN = "green"
    ATLANTICA = "atlantica"


# Buckets with money totals, in summary display order
AGGREGATED_BUCKETS: tuple[CategoryBucket, ...] = (
    CategoryBucket.PC,
    CategoryBucket.NDP,
    CategoryBucket.NSNDP,
    CategoryBucket.LIBERAL,
    CategoryBucket.CPC,
    CategoryBucket.NDPCA,
    CategoryBucket.LPC,
)

# Colored in the table but never totaled
DISPLAY_ONLY_BUCKETS: frozenset[CategoryBucket] = frozenset(
    {CategoryBucket.GREEN, CategoryBucket.ATLANTICA}
)

BUCKET_LABELS: dict[CategoryBucket, str] = {
    CategoryBucket.PC: "PC",
    CategoryBucket.CPC: "CPC",
    CategoryBucket.LPC: "LPC",
    CategoryBucket.NDP: "NDP",
    CategoryBucket.NSNDP: "NSNDP",
    CategoryBucket.NDPCA: "NDPCA",
    CategoryBucket.LIBERAL: "Liberal",
    CategoryBucket.GREEN: "Green",
    CategoryBucket.ATLANTICA: "Atlantica",
}


@dataclass(frozen=True, slots=True)
class ClassifierRule:
    """Match the lower-cased label exactly or by substring containment."""

    match: Literal["exact", "contains"]
    pattern: str
    bucket: CategoryBucket

    def matches(self, label: str) -> bool:
        if self.match == "exact":
            return label == self.pattern
        return self.pattern in label


_EXACT_RULES: tuple[ClassifierRule, ...] = (
    ClassifierRule("exact", "pc", CategoryBucket.PC),
    ClassifierRule("exact", "cpc", CategoryBucket.CPC),
    ClassifierRule("exact", "lpc", CategoryBucket.LPC),
    ClassifierRule("exact", "nsndp", CategoryBucket.NSNDP),
    ClassifierRule("exact", "ndp-ca", CategoryBucket.NDPCA),
    ClassifierRule("exact", "ndp", CategoryBucket.NDP),
)

_NDP_CONTAINS = ClassifierRule("contains", "ndp", CategoryBucket.NDP)

DEFAULT_RULES: tuple[ClassifierRule, ...] = (
    *_EXACT_RULES,
    ClassifierRule("contains", "liberal", CategoryBucket.LIBERAL),
    ClassifierRule("contains", "lpc", CategoryBucket.LPC),
    _NDP_CONTAINS,
    ClassifierRule("contains", "green", CategoryBucket.GREEN),
    ClassifierRule("contains", "atlantica", CategoryBucket.ATLANTICA),
)

# Same as the default table minus the loose "contains ndp" rule, for data
# where only the exact NDP abbreviations should count.
STRICT_RULES: tuple[ClassifierRule, ...] = tuple(r for r in DEFAULT_RULES if r != _NDP_CONTAINS)

CLASSIFIER_PROFILES: Mapping[str, tuple[ClassifierRule, ...]] = {
    "default": DEFAULT_RULES,
    "strict": STRICT_RULES,
}


def rules_for_profile(name: str) -> tuple[ClassifierRule, ...]:
    try:
        return CLASSIFIER_PROFILES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"unknown classifier profile: {name!r}. Allowed: {sorted(CLASSIFIER_PROFILES)}"
        ) from None


def classify(
    raw_label: object, *, rules: Sequence[ClassifierRule] = DEFAULT_RULES
) -> CategoryBucket | None:
    """Return the bucket for ``raw_label`` or ``None`` when no rule matches.

    Matching is case-insensitive on the stripped label. ``None`` means
    unclassified: the record is still displayed but contributes to no total.
    """

    if raw_label is None:
        return None
    label = str(raw_label).strip().lower()
    if not label:
        return None
    for rule in rules:
        if rule.matches(label):
            return rule.bucket
    return None


# ---------------------------------------------------------------------------
# Presentation hints
# ---------------------------------------------------------------------------

BUCKET_COLORS: dict[CategoryBucket, str] = {
    CategoryBucket.PC: "#639ee0",
    CategoryBucket.CPC: "#639ee0",
    CategoryBucket.LIBERAL: "red",
    CategoryBucket.LPC: "red",
    CategoryBucket.NDP: "orange",
    CategoryBucket.NSNDP: "orange",
    CategoryBucket.NDPCA: "orange",
    CategoryBucket.GREEN: "green",
    CategoryBucket.ATLANTICA: "purple",
}


def color_hint(raw_label: object, *, rules: Sequence[ClassifierRule] = DEFAULT_RULES) -> str:
    """Row color for a party label; ``""`` for unclassified labels."""

    bucket = classify(raw_label, rules=rules)
    return BUCKET_COLORS[bucket] if bucket is not None else ""


__all__ = [
    "AGGREGATED_BUCKETS",
    "BUCKET_COLORS",
    "BUCKET_LABELS",
    "CLASSIFIER_PROFILES",
    "CategoryBucket",
    "ClassifierRule",
    "DEFAULT_RULES",
    "DISPLAY_ONLY_BUCKETS",
    "STRICT_RULES",
    "classify",
    "color_hint",
    "rules_for_profile",
]
