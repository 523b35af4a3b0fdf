"""Typer-based console interface for ``nspoli_donors``.

Environment variables are loaded from a local ``.env`` with ``python-dotenv``
(without overriding variables already set) before any command runs. Business
logic lives in the engine modules; commands only load sources, call the
engine and print.

Sources come from repeated ``--source SOURCE_ID=PATH`` options or, when none
are given, from ``NSPOLI_DONORS_SOURCES``.
"""

from __future__ import annotations

import csv
from decimal import Decimal
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from .aggregate import aggregate, format_totals
from .classifier import CategoryBucket
from .config import ConfigError, Settings, load_settings
from .loader import SourceSpec, load_sources
from .logging_setup import configure_logging, get_logger, level_for_verbosity
from .normalizers import ProfileError
from .records import DISPLAY_HEADERS, FIELD_NAMES, CanonicalRecord
from .search import search
from .sorting import sort_records

logger = get_logger(__name__)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Search, sort and total Nova Scotia political donation records.",
)

_SOURCE_HELP = "SOURCE_ID=PATH of a CSV export; repeat to merge several sources in order."


# ---- Helpers -----------------------------------------------------------------


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _settings() -> Settings:
    try:
        return load_settings()
    except ConfigError as e:
        raise _fail(str(e)) from e


def _load(settings: Settings, source: list[str] | None) -> list[CanonicalRecord]:
    try:
        specs = [SourceSpec.parse(s) for s in source] if source else list(settings.sources)
    except ValueError as e:
        raise _fail(str(e)) from e
    if not specs:
        raise _fail("no sources given. Use --source SOURCE_ID=PATH or set NSPOLI_DONORS_SOURCES.")
    logger.debug("loading %d source(s)", len(specs))

    try:
        return load_sources(specs, profiles=settings.source_profiles())
    except FileNotFoundError as e:
        raise _fail(f"File not found: {e.filename}") from e
    except PermissionError as e:
        raise _fail(f"Permission denied: {e.filename}") from e
    except OSError as e:
        raise _fail(f"Cannot read {e.filename or e}: {e.strerror or e}") from e
    except csv.Error as e:
        raise _fail(f"Failed to parse CSV: {e}") from e
    except ValueError as e:  # unknown source id or ProfileError
        raise _fail(str(e)) from e


def _echo_totals(totals: dict[CategoryBucket, Decimal]) -> None:
    typer.echo("Total Amount Donated")
    for label, amount in format_totals(totals):
        typer.echo(f"{label}\t{amount}")


# ---- Commands ----------------------------------------------------------------


@app.command("search")
def search_cmd(
    query: Annotated[str, typer.Argument(help="'LastName [FirstName]' (substring match).")],
    source: Annotated[list[str] | None, typer.Option("--source", "-s", help=_SOURCE_HELP)] = None,
    sort: Annotated[
        str | None, typer.Option(help="Column to sort by (e.g. donation, 'Last Name', postalCode).")
    ] = None,
    desc: Annotated[bool, typer.Option("--desc", help="Sort descending.")] = False,
) -> None:
    """Print donors matching QUERY as tab-separated rows, then party totals."""

    settings = _settings()
    records = _load(settings, source)
    try:
        rows = sort_records(search(records, query), sort, "desc" if desc else "asc")
    except ValueError as e:
        raise _fail(str(e)) from e

    typer.echo("\t".join(DISPLAY_HEADERS[n] for n in FIELD_NAMES))
    for rec in rows:
        typer.echo("\t".join(rec.display_row()))
    typer.echo(f"{len(rows)} matching record(s)")
    typer.echo("")
    _echo_totals(aggregate(rows, rules=settings.classifier_rules))


@app.command("totals")
def totals_cmd(
    query: Annotated[
        str | None, typer.Argument(help="Optional name query; totals all records when omitted.")
    ] = None,
    source: Annotated[list[str] | None, typer.Option("--source", "-s", help=_SOURCE_HELP)] = None,
) -> None:
    """Print donation totals per party."""

    settings = _settings()
    records = _load(settings, source)
    if query is not None:
        records = search(records, query)
    _echo_totals(aggregate(records, rules=settings.classifier_rules))


@app.command("browse")
def browse_cmd(
    source: Annotated[list[str] | None, typer.Option("--source", "-s", help=_SOURCE_HELP)] = None,
) -> None:  # pragma: no cover - interactive
    """Open the interactive terminal browser."""

    from .term_ui import DonorBrowser, run_browser

    settings = _settings()
    records = _load(settings, source)
    browser = DonorBrowser(
        records,
        rules=settings.classifier_rules,
        debounce_delay=settings.debounce_seconds,
    )
    run_browser(browser)


@app.command("sources")
def sources_cmd() -> None:
    """List the known source profiles and their column mappings."""

    settings = _settings()
    try:
        profiles = settings.source_profiles()
    except (ProfileError, OSError) as e:
        raise _fail(str(e)) from e
    for prof in profiles.values():
        title = f"{prof.source_id} ({prof.label})" if prof.label else prof.source_id
        typer.echo(title)
        for column, target in prof.renames.items():
            typer.echo(f"  {column} -> {target}")
        for target, rules in prof.rewrites.items():
            typer.echo(f"  rewrite {target}: {len(rules)} rule(s)")


@app.callback()
def _root(
    verbose: Annotated[
        int, typer.Option("--verbose", "-v", count=True, help="-v for load counts, -vv for row details.")
    ] = 0,
) -> None:
    """Load ``.env`` from the current directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(level_for_verbosity(verbose))


def main() -> None:  # pragma: no cover - console script
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
