"""Runtime settings read from the environment.

Entrypoints call ``load_dotenv(override=False)`` first, so a local ``.env`` can
supply any of these without overriding variables already set:

- ``NSPOLI_DONORS_SOURCES``: ``;``-separated ``source_id=path`` pairs, loaded
  and merged in that order.
- ``NSPOLI_DONORS_PROFILES``: optional JSON file with extra source profiles.
- ``NSPOLI_DONORS_CLASSIFIER_PROFILE``: ``default`` or ``strict``.
- ``NSPOLI_DONORS_DEBOUNCE_MS``: quiet period for the interactive search.
- ``NSPOLI_DONORS_LOG_LEVEL``: read by :mod:`nspoli_donors.logging_setup`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .classifier import CLASSIFIER_PROFILES, ClassifierRule, rules_for_profile
from .loader import SourceSpec
from .normalizers import BUILTIN_PROFILES, SourceProfile, load_profiles

ENV_SOURCES = "NSPOLI_DONORS_SOURCES"
ENV_PROFILES = "NSPOLI_DONORS_PROFILES"
ENV_CLASSIFIER = "NSPOLI_DONORS_CLASSIFIER_PROFILE"
ENV_DEBOUNCE = "NSPOLI_DONORS_DEBOUNCE_MS"


class ConfigError(ValueError):
    """An environment setting is missing or malformed."""


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    sources: tuple[SourceSpec, ...] = ()
    profiles_path: Path | None = None
    classifier_profile: str = "default"
    debounce_ms: int = Field(default=300, ge=0)

    @field_validator("classifier_profile")
    @classmethod
    def _known_classifier_profile(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in CLASSIFIER_PROFILES:
            raise ValueError(f"must be one of {sorted(CLASSIFIER_PROFILES)}")
        return v

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @property
    def classifier_rules(self) -> tuple[ClassifierRule, ...]:
        return rules_for_profile(self.classifier_profile)

    def source_profiles(self) -> dict[str, SourceProfile]:
        """Built-in profiles, extended or overridden by ``profiles_path``."""

        profiles = dict(BUILTIN_PROFILES)
        if self.profiles_path is not None:
            profiles.update(load_profiles(self.profiles_path))
        return profiles


def parse_sources(text: str) -> tuple[SourceSpec, ...]:
    return tuple(SourceSpec.parse(part) for part in text.split(";") if part.strip())


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``)."""

    env = os.environ if environ is None else environ
    values: dict[str, object] = {}

    raw_sources = env.get(ENV_SOURCES, "").strip()
    if raw_sources:
        try:
            values["sources"] = parse_sources(raw_sources)
        except ValueError as exc:
            raise ConfigError(f"{ENV_SOURCES}: {exc}") from exc

    raw_profiles = env.get(ENV_PROFILES, "").strip()
    if raw_profiles:
        values["profiles_path"] = Path(raw_profiles)

    raw_classifier = env.get(ENV_CLASSIFIER, "").strip()
    if raw_classifier:
        values["classifier_profile"] = raw_classifier

    raw_debounce = env.get(ENV_DEBOUNCE, "").strip()
    if raw_debounce:
        values["debounce_ms"] = raw_debounce

    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        names = {
            "classifier_profile": ENV_CLASSIFIER,
            "debounce_ms": ENV_DEBOUNCE,
            "profiles_path": ENV_PROFILES,
        }
        first = exc.errors()[0]
        loc = str(first["loc"][0]) if first["loc"] else ""
        raise ConfigError(f"{names.get(loc, loc)}: {first['msg']}") from exc


__all__ = ["ConfigError", "Settings", "load_settings", "parse_sources"]
