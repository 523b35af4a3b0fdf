"""Read donation CSV exports and load configured sources.

Parsing follows RFC 4180 rules via the stdlib :mod:`csv` module (UTF-8, with a
leading byte-order mark tolerated, quoted fields with embedded commas and
newlines). Each data row becomes a ``dict[str, str]`` keyed by the header
exactly as exported; the normalizers take it from there.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from io import StringIO
from os import PathLike
from pathlib import Path

from .logging_setup import get_logger
from .merge import merge_sources
from .normalizers import SourceProfile
from .records import CanonicalRecord

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SourceSpec:
    """One source to load: which profile applies and where its CSV lives."""

    source_id: str
    path: Path

    @classmethod
    def parse(cls, text: str) -> SourceSpec:
        """Parse ``"source_id=path/to/file.csv"``."""

        source_id, sep, path = text.partition("=")
        source_id = source_id.strip()
        path = path.strip()
        if not sep or not source_id or not path:
            raise ValueError(f"invalid source spec {text!r}; expected SOURCE_ID=PATH")
        return cls(source_id=source_id, path=Path(path))


def _rows_from_reader(reader: csv.DictReader) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for row in reader:
        # DictReader puts surplus cells under a None key and fills short rows
        # with None; keep the declared dict[str, str] shape.
        rows.append({k: (v if v is not None else "") for k, v in row.items() if k is not None})
    return rows


def read_csv_text(csv_text: str, *, origin: str = "<text>") -> list[dict[str, str]]:
    """Parse CSV text into header-keyed rows. A missing header is a ``csv.Error``."""

    with StringIO(csv_text.removeprefix("\ufeff"), newline="") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise csv.Error(f"CSV appears to have no header row: {origin}")
        return _rows_from_reader(reader)


def read_csv_rows(path: str | PathLike[str]) -> list[dict[str, str]]:
    """Read one CSV file into header-keyed rows.

    Raises ``FileNotFoundError``/``PermissionError`` from opening the file and
    ``csv.Error`` when the file has no header row.
    """

    p = Path(path)
    with p.open(encoding="utf-8-sig", newline="") as f:
        rows = read_csv_text(f.read(), origin=str(p))
    logger.debug("read %d row(s) from %s", len(rows), p)
    return rows


def load_sources(
    specs: Iterable[SourceSpec],
    *,
    profiles: Mapping[str, SourceProfile] | None = None,
) -> list[CanonicalRecord]:
    """Read every source in order and return the merged canonical records."""

    loaded = [(spec.source_id, read_csv_rows(spec.path)) for spec in specs]
    return merge_sources(loaded, profiles=profiles)


__all__ = ["SourceSpec", "load_sources", "read_csv_rows", "read_csv_text"]
