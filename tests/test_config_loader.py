import csv
import json
from pathlib import Path

import pytest

from nspoli_donors import SourceSpec, load_sources, read_csv_rows
from nspoli_donors.classifier import STRICT_RULES
from nspoli_donors.config import ConfigError, Settings, load_settings, parse_sources
from nspoli_donors.loader import read_csv_text


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


# ---- Loader ------------------------------------------------------------------


def test_read_csv_rows_handles_bom_quotes_and_ragged_rows(tmp_path):
    path = _write(
        tmp_path / "ns.csv",
        '\ufeffLast Name,First Name,Amount\n'
        'Smith,"John, Jr.","$1,000"\n'
        "Short\n"
        "Long,Row,1,extra\n",
    )
    rows = read_csv_rows(path)
    assert rows == [
        {"Last Name": "Smith", "First Name": "John, Jr.", "Amount": "$1,000"},
        {"Last Name": "Short", "First Name": "", "Amount": ""},
        {"Last Name": "Long", "First Name": "Row", "Amount": "1"},
    ]


def test_read_csv_rows_without_header_is_a_parse_error(tmp_path):
    path = _write(tmp_path / "empty.csv", "")
    with pytest.raises(csv.Error, match="no header row"):
        read_csv_rows(path)


def test_read_csv_text_shares_the_file_rules():
    assert read_csv_text("\ufeffLast Name,Amount\r\nLee,\"1,5\"\r\n") == [
        {"Last Name": "Lee", "Amount": "1,5"}
    ]
    with pytest.raises(csv.Error, match="no header row: <text>"):
        read_csv_text("")


def test_read_csv_rows_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_csv_rows(tmp_path / "nope.csv")


def test_load_sources_merges_in_spec_order(tmp_path):
    ns = _write(tmp_path / "ns.csv", "Last Name,First Name,Party,Amount\nSmith,Al,PC,$10\n")
    fed = _write(
        tmp_path / "fed.csv",
        "Last Name,First Name,Party,Recipient,Monetary\n"
        "Smith,Bo,Liberal Party of Canada,Liberal Party of Canada,20\n",
    )
    records = load_sources(
        [SourceSpec("ca_federal", fed), SourceSpec.parse(f"ns_provincial={ns}")]
    )
    assert [(r.first_name, r.party) for r in records] == [("Bo", "LPC"), ("Al", "PC")]


@pytest.mark.parametrize("text", ["", "ns_provincial", "=x.csv", "ns_provincial= "])
def test_source_spec_parse_rejects_malformed(text):
    with pytest.raises(ValueError, match="invalid source spec"):
        SourceSpec.parse(text)


# ---- Settings ----------------------------------------------------------------


def test_settings_defaults():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.sources == ()
    assert settings.debounce_seconds == 0.3
    assert set(settings.source_profiles()) == {"ns_provincial", "ca_federal"}


def test_settings_from_environment(tmp_path):
    profiles = _write(
        tmp_path / "profiles.json",
        json.dumps([{"source_id": "municipal", "renames": {"Surname": "last_name"}}]),
    )
    settings = load_settings(
        {
            "NSPOLI_DONORS_SOURCES": "ns_provincial=a.csv; ca_federal=b.csv;",
            "NSPOLI_DONORS_PROFILES": str(profiles),
            "NSPOLI_DONORS_CLASSIFIER_PROFILE": " Strict ",
            "NSPOLI_DONORS_DEBOUNCE_MS": "0",
        }
    )
    assert [s.source_id for s in settings.sources] == ["ns_provincial", "ca_federal"]
    assert settings.sources[1].path == Path("b.csv")
    assert settings.classifier_profile == "strict"
    assert settings.classifier_rules == STRICT_RULES
    assert settings.debounce_seconds == 0
    assert "municipal" in settings.source_profiles()


def test_settings_read_os_environ(monkeypatch):
    monkeypatch.setenv("NSPOLI_DONORS_DEBOUNCE_MS", "150")
    assert load_settings().debounce_ms == 150


@pytest.mark.parametrize(
    "env, name",
    [
        ({"NSPOLI_DONORS_CLASSIFIER_PROFILE": "loose"}, "NSPOLI_DONORS_CLASSIFIER_PROFILE"),
        ({"NSPOLI_DONORS_DEBOUNCE_MS": "-5"}, "NSPOLI_DONORS_DEBOUNCE_MS"),
        ({"NSPOLI_DONORS_DEBOUNCE_MS": "soon"}, "NSPOLI_DONORS_DEBOUNCE_MS"),
        ({"NSPOLI_DONORS_SOURCES": "just-a-path.csv"}, "NSPOLI_DONORS_SOURCES"),
    ],
)
def test_bad_settings_name_the_variable(env, name):
    with pytest.raises(ConfigError, match=name):
        load_settings(env)


def test_parse_sources_skips_empty_parts():
    assert parse_sources(";;ns_provincial=x.csv;") == (SourceSpec("ns_provincial", Path("x.csv")),)
