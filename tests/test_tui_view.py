"""Unit tests for the view renderer."""
from __future__ import annotations

import copy

from rich.console import Console

from stackq.tui.events import BACK, ENTER, MOUSE_TOGGLE, Resized
from stackq.tui.state import Notification, Session, Severity, State
from stackq.tui.view import ERROR_HINT, render, render_table


def _text(renderable, width: int = 80) -> str:
    console = Console(width=width, color_system=None, force_terminal=False)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def test_awaiting_input_shows_placeholder():
    out = _text(render(Session()))
    assert "❯" in out
    assert "What is your question?" in out


def test_awaiting_input_shows_typed_text():
    s = Session()
    s.input.insert("how to exit vim")
    out = _text(render(s))
    assert "how to exit vim" in out
    assert "What is your question?" not in out


def test_pending_shows_spinner_and_caption(harness):
    harness.type("python")
    harness.press(ENTER)
    out = _text(render(harness.session))
    assert "Searching..." in out
    assert harness.session.spinner.view() in out


def test_result_list_shows_table(harness):
    harness.handle(Resized(124, 30))
    harness.search("python")
    out = _text(render(harness.session), width=130)
    assert "ID" in out and "Title" in out and "Score" in out and "Views" in out
    assert "Alpha" in out
    assert "Search > Results" in out


def test_detail_shows_viewport(harness):
    harness.search("python")
    harness.press(ENTER)
    out = _text(render(harness.session), width=120)
    assert "Alpha question" in out
    assert "Search > Results > Question" in out


def test_error_overrides_every_state(harness):
    harness.search("python")
    harness.session.error = "Search failed: boom"
    out = _text(render(harness.session))
    assert "Search failed: boom" in out
    assert ERROR_HINT in out
    assert "Alpha" not in out


def test_notification_toast_below_view():
    s = Session()
    s.notification = Notification("No results found", Severity.WARNING, 1)
    out = _text(render(s))
    assert out.index("What is your question?") < out.index("No results found")


def test_render_does_not_mutate_session(harness):
    harness.search("python")
    harness.press(MOUSE_TOGGLE)
    s = harness.session
    before = (
        s.state,
        list(s.history.stack),
        copy.deepcopy((s.input, s.table, s.viewport, s.spinner)),
        s.notification,
        s.error,
    )
    render(s)
    render(s)
    after = (s.state, list(s.history.stack), (s.input, s.table, s.viewport, s.spinner), s.notification, s.error)
    assert after == before


def test_each_state_renders(harness):
    harness.search("python")
    harness.press(ENTER)
    harness.press("f1")
    assert harness.session.state is State.DISPLAYING_HELP_SCREEN
    assert "Help" in _text(render(harness.session))
    harness.press(BACK)
    assert harness.session.state is State.SHOWING_RESULT_DETAIL


def test_table_columns_drawn_at_their_computed_widths(harness):
    harness.handle(Resized(74, 30))
    harness.search("python")
    table = harness.session.table
    assert table.width == 70
    assert [c.width for c in table.columns] == [7, 49, 7, 14]

    header, first, _ = [line.plain for line in render_table(table).renderables]
    assert header.index("Title") == 7
    assert header.index("Score") == 56
    assert header.index("Views") == 63
    # The views column overflows the table edge and is cropped there.
    assert len(header) == 70
    assert first.startswith("1")
    assert first.index("Alpha question") == 7
    assert len(first) == 70
