"""Logging for ``nspoli_donors``.

Every module logs through ``get_logger(__name__)``. What gets reported:

- INFO: per-source and merged record counts (``merge``).
- DEBUG: rows read per file, skipped blank rows, columns no profile maps,
  view recomputations in the browser.

Output appears only after an entrypoint calls ``configure_logging``, which
gives the ``"nspoli_donors"`` logger one stderr handler. Until then a
``NullHandler`` keeps library use quiet. The level comes from the caller (the
CLI's ``-v``), then ``NSPOLI_DONORS_LOG_LEVEL``, then WARNING.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "nspoli_donors"
_LEVEL_ENV = "NSPOLI_DONORS_LOG_LEVEL"
_DEFAULT_FORMAT = "%(levelname)s %(name)s: %(message)s"
_CONFIGURED = False


def _level_from_text(text: str) -> int | None:
    text = text.strip().upper()
    if text.isdigit():
        return int(text)
    return logging.getLevelNamesMapping().get(text)


def level_for_verbosity(verbose: int) -> int | None:
    """``-v`` shows load counts, ``-vv`` also per-row diagnostics.

    ``0`` returns ``None`` so the environment or the default decides.
    """

    if verbose <= 0:
        return None
    return logging.INFO if verbose == 1 else logging.DEBUG


def _parse_level(level: int | str | None) -> int:
    candidates: list[int | str | None] = [level, os.getenv(_LEVEL_ENV)]
    for candidate in candidates:
        if isinstance(candidate, int):
            return candidate
        if candidate:
            parsed = _level_from_text(candidate)
            if parsed is not None:
                return parsed
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Attach the package handler. Later calls are no-ops.

    ``level`` may be an int or a level name; ``None`` reads
    ``NSPOLI_DONORS_LOG_LEVEL`` and falls back to WARNING so command output
    stays clean. ``stream`` defaults to ``sys.stderr`` at call time.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in [h for h in pkg_logger.handlers if isinstance(h, logging.NullHandler)]:
        pkg_logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(resolved)
    # stderr only once, even if the host app configured the root logger
    pkg_logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """``logging.getLogger(name)``, silenced until logging is configured."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "level_for_verbosity"]
