"""Public interface for the ``nspoli_donors`` package.

Re-exports the engine functions and models as the stable import surface. There
is no runtime logic here, only symbol re-exports.
"""

from .aggregate import aggregate, format_totals
from .classifier import (
    AGGREGATED_BUCKETS,
    DEFAULT_RULES,
    STRICT_RULES,
    CategoryBucket,
    ClassifierRule,
    classify,
    color_hint,
)
from .loader import SourceSpec, load_sources, read_csv_rows
from .merge import merge, merge_sources
from .normalizers import (
    BUILTIN_PROFILES,
    RecordNormalizer,
    RewriteRule,
    SourceProfile,
    normalize,
    normalize_rows,
)
from .records import DISPLAY_HEADERS, FIELD_NAMES, CanonicalRecord
from .search import search
from .sorting import SortConfig, sort_records
from .view import DonorView, ViewState, compute_view

__all__ = [
    # Engine
    "aggregate",
    "classify",
    "color_hint",
    "compute_view",
    "format_totals",
    "load_sources",
    "merge",
    "merge_sources",
    "normalize",
    "normalize_rows",
    "read_csv_rows",
    "search",
    "sort_records",
    # Models / types
    "AGGREGATED_BUCKETS",
    "BUILTIN_PROFILES",
    "CanonicalRecord",
    "CategoryBucket",
    "ClassifierRule",
    "DEFAULT_RULES",
    "DISPLAY_HEADERS",
    "DonorView",
    "FIELD_NAMES",
    "RecordNormalizer",
    "RewriteRule",
    "STRICT_RULES",
    "SortConfig",
    "SourceProfile",
    "SourceSpec",
    "ViewState",
]
