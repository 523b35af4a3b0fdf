from decimal import Decimal

import pytest

from nspoli_donors import CategoryBucket, ViewState, compute_view
from nspoli_donors.debounce import Debouncer
from nspoli_donors.term_ui import DonorBrowser
from tests.helpers.records import rec

RECORDS = [
    rec("Smith", "John", party="PC", donation="$100"),
    rec("Smith", "Jane", party="Liberal", donation="$40"),
    rec("Jones", "Ann", party="NDP", donation="$5"),
]


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


# ---- Debouncer ---------------------------------------------------------------


def test_debouncer_delivers_only_last_value_after_quiet_period():
    clock = FakeClock()
    fired: list[str] = []
    d: Debouncer[str] = Debouncer(fired.append, delay=0.3, clock=clock)

    d.push("S")
    clock.now = 0.1
    d.push("Sm")
    clock.now = 0.35
    assert d.poll() is False  # only 0.25s since the last push
    assert d.pending
    clock.now = 0.41
    assert d.poll() is True
    assert fired == ["Sm"]
    assert not d.pending
    assert d.poll() is False


def test_debouncer_flush_and_cancel():
    clock = FakeClock()
    fired: list[str] = []
    d: Debouncer[str] = Debouncer(fired.append, delay=10, clock=clock)
    d.push("a")
    assert d.flush() is True
    d.push("b")
    d.cancel()
    clock.now = 100
    assert d.poll() is False
    assert d.flush() is False
    assert fired == ["a"]


def test_debouncer_rejects_negative_delay():
    with pytest.raises(ValueError):
        Debouncer(print, delay=-1)


# ---- View --------------------------------------------------------------------


def test_inactive_state_shows_nothing():
    view = compute_view(RECORDS, ViewState())
    assert view.rows == ()
    assert view.totals[CategoryBucket.PC] == Decimal("0.00")
    assert view.headers[0] == "Last Name"
    assert len(view.headers) == 8


def test_view_filters_sorts_totals_and_colors():
    state = ViewState().with_query("smith").click_header("Donation")
    view = compute_view(RECORDS, state)
    assert [r.first_name for r in view.rows] == ["Jane", "John"]
    assert view.hints == ("red", "#639ee0")
    assert view.totals[CategoryBucket.PC] == Decimal("100.00")
    assert view.totals[CategoryBucket.LIBERAL] == Decimal("40.00")
    assert view.totals[CategoryBucket.NDP] == Decimal("0.00")

    flipped = compute_view(RECORDS, state.click_header("donation"))
    assert [r.first_name for r in flipped.rows] == ["John", "Jane"]


def test_state_changes_return_new_states():
    s0 = ViewState()
    s1 = s0.with_query("x")
    assert s0.query == "" and s1.query == "x"
    assert not s0.active and s1.active
    assert not ViewState(query="   ").active


# ---- Browser controller ------------------------------------------------------


def test_browser_debounces_typing_and_applies_clicks_immediately():
    clock = FakeClock()
    browser = DonorBrowser(RECORDS, debounce_delay=0.3, clock=clock)
    assert browser.record_count == 3

    browser.type_text("j")
    browser.type_text("jo")
    assert browser.view.rows == ()
    assert browser.tick() is False

    clock.now = 0.5
    assert browser.tick() is True
    assert browser.state.query == "jo"
    assert [r.last_name for r in browser.view.rows] == ["Jones"]

    browser.type_text("smith")
    clock.now = 1.0
    browser.tick()
    browser.click_column(1)  # First Name
    assert browser.state.sort.key == "first_name"
    assert [r.first_name for r in browser.view.rows] == ["Jane", "John"]
    browser.click_column("first_name")
    assert [r.first_name for r in browser.view.rows] == ["John", "Jane"]
