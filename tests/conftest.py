"""Pytest configuration for test isolation.

Settings are read from ``NSPOLI_DONORS_*`` environment variables, and the CLI
loads a ``.env`` from the working directory. Each test starts with those
variables cleared and runs from its own temporary directory; anything a
``.env`` put into the environment is removed afterwards.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest


def _ours() -> list[str]:
    return [name for name in os.environ if name.startswith("NSPOLI_DONORS_")]


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ours():
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    for name in _ours():
        os.environ.pop(name, None)
