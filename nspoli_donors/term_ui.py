"""Interactive terminal donor browser (prompt_toolkit-based).

Layout: a one-line search box, the results table, and the party totals. The
search text goes through a :class:`~nspoli_donors.debounce.Debouncer` so the
table is recomputed only after typing pauses. ``F1``..``F8`` act as clicks on
the matching column header; ``Ctrl-C``/``Ctrl-Q`` quit.

The pieces with real behavior (``DonorBrowser`` and ``render_table``) have no
terminal dependency and are tested headlessly; ``build_application`` only wires
them into prompt_toolkit.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence

from prompt_toolkit.application import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.styles import Style

from .aggregate import format_totals
from .classifier import DEFAULT_RULES, ClassifierRule
from .debounce import DEFAULT_DELAY, Debouncer
from .logging_setup import get_logger
from .records import FIELD_NAMES, CanonicalRecord
from .view import DonorView, ViewState, compute_view

logger = get_logger(__name__)

_MAX_COL_WIDTH = 28
_POLL_INTERVAL = 0.05

STYLE = Style.from_dict(
    {
        "header": "bold",
        "header.active": "bold underline",
        "hint": "fg:#888888",
        "totals": "bold",
        "prompt": "bold",
    }
)


class DonorBrowser:
    """State holder behind the terminal UI.

    Keeps the loaded records (written once), the current :class:`ViewState`
    and the derived :class:`DonorView`. Keystrokes are debounced; header
    clicks apply immediately.
    """

    def __init__(
        self,
        records: Sequence[CanonicalRecord],
        *,
        rules: Sequence[ClassifierRule] = DEFAULT_RULES,
        debounce_delay: float = DEFAULT_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._records = tuple(records)
        self._rules = tuple(rules)
        self._debouncer: Debouncer[str] = Debouncer(
            self._apply_query, delay=debounce_delay, clock=clock
        )
        self.state = ViewState()
        self.view = compute_view(self._records, self.state, rules=self._rules)

    @property
    def record_count(self) -> int:
        return len(self._records)

    def type_text(self, text: str) -> None:
        self._debouncer.push(text)

    def tick(self) -> bool:
        """Apply a settled query. Returns whether the view changed."""

        return self._debouncer.poll()

    def click_column(self, column: int | str) -> None:
        name = FIELD_NAMES[column] if isinstance(column, int) else column
        self._recompute(self.state.click_header(name))

    def _apply_query(self, text: str) -> None:
        self._recompute(self.state.with_query(text))

    def _recompute(self, state: ViewState) -> None:
        self.state = state
        self.view = compute_view(self._records, state, rules=self._rules)
        logger.debug(
            "view: query=%r sort=%s/%s rows=%d",
            state.query,
            state.sort.key,
            state.sort.direction,
            len(self.view.rows),
        )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _clip(text: str, width: int) -> str:
    if len(text) <= width:
        return text.ljust(width)
    return text[: width - 1] + "…"


def _row_style(hint: str) -> str:
    return f"bg:{hint} fg:black" if hint else ""


def render_table(view: DonorView, state: ViewState) -> StyleAndTextTuples:
    """Formatted text for the results table and the totals footer."""

    if not state.active:
        return [("class:hint", "Type 'LastName FirstName' to search. F1-F8 sort by column.\n")]

    arrows = {"asc": " ▲", "desc": " ▼"}
    headers = []
    for i, (name, title) in enumerate(zip(FIELD_NAMES, view.headers, strict=True)):
        label = f"F{i + 1} {title}"
        if state.sort.key == name:
            label += arrows[state.sort.direction]
        headers.append(label)

    widths = [min(_MAX_COL_WIDTH, len(h)) for h in headers]
    for rec in view.rows:
        for i, cell in enumerate(rec.display_row()):
            widths[i] = min(_MAX_COL_WIDTH, max(widths[i], len(cell)))

    out: StyleAndTextTuples = []
    for i, (name, label) in enumerate(zip(FIELD_NAMES, headers, strict=True)):
        style = "class:header.active" if state.sort.key == name else "class:header"
        out.append((style, _clip(label, widths[i])))
        out.append(("", "  "))
    out.append(("", "\n"))

    if not view.rows:
        out.append(("class:hint", "No matching donors.\n"))
    for rec, hint in zip(view.rows, view.hints, strict=True):
        line = "  ".join(_clip(cell, widths[i]) for i, cell in enumerate(rec.display_row()))
        out.append((_row_style(hint), line))
        out.append(("", "\n"))

    out.append(("", "\n"))
    out.append(("class:totals", "Total Amount Donated\n"))
    for label, amount in format_totals(view.totals):
        out.append(("", f"  {label + ':':<8} {amount}\n"))
    return out


# ---------------------------------------------------------------------------
# prompt_toolkit wiring
# ---------------------------------------------------------------------------


def build_application(browser: DonorBrowser) -> Application[None]:  # pragma: no cover - integration path
    kb = KeyBindings()

    for i in range(len(FIELD_NAMES)):

        @kb.add(f"f{i + 1}")
        def _(event, _col: int = i) -> None:
            browser.click_column(_col)

    @kb.add("c-c")
    @kb.add("c-q")
    def _(event) -> None:
        event.app.exit()

    search_buffer = Buffer(
        multiline=False,
        on_text_changed=lambda buf: browser.type_text(buf.text),
    )
    body = FormattedTextControl(lambda: render_table(browser.view, browser.state), focusable=False)
    layout = Layout(
        HSplit(
            [
                Window(
                    FormattedTextControl([("class:prompt", "Search (LastName FirstName): ")]),
                    height=1,
                ),
                Window(BufferControl(buffer=search_buffer), height=1),
                Window(height=1, char="─"),
                Window(body, wrap_lines=False),
            ]
        ),
        focused_element=search_buffer,
    )
    return Application(layout=layout, key_bindings=kb, style=STYLE, full_screen=True)


def run_browser(browser: DonorBrowser) -> None:  # pragma: no cover - integration path
    """Run the full-screen browser until the user quits."""

    app = build_application(browser)

    async def _poll() -> None:
        while True:
            await asyncio.sleep(_POLL_INTERVAL)
            if browser.tick():
                app.invalidate()

    app.run(pre_run=lambda: app.create_background_task(_poll()))


__all__ = ["DonorBrowser", "build_application", "render_table", "run_browser"]
