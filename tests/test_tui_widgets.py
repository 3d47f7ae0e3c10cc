"""Unit tests for the passive sub-widgets."""
from __future__ import annotations

from stackq.tui.widgets import DocumentViewport, ResultsTable, Spinner, TextInput, column_widths


def test_text_input_editing():
    w = TextInput()
    w.insert("helo")
    w.handle_key("left")
    w.handle_key("char", "l")
    assert w.value == "hello"
    assert w.cursor == 4

    w.handle_key("home")
    w.handle_key("delete")
    assert w.value == "ello"
    w.handle_key("end")
    w.handle_key("backspace")
    assert w.value == "ell"

    w.reset()
    assert (w.value, w.cursor) == ("", 0)


def test_text_input_char_limit_and_control_chars():
    w = TextInput(char_limit=5)
    w.insert("ab\ncdefg")
    assert w.value == "abcde"
    w.insert("z")
    assert w.value == "abcde"


def test_text_input_unhandled_key():
    assert TextInput().handle_key("pagedown") is False


def test_column_widths_floor():
    assert column_widths(100) == [10, 70, 10, 20]
    assert column_widths(9) == [0, 6, 0, 1]
    assert column_widths(-5) == [0, 0, 0, 0]


def test_table_default_columns():
    t = ResultsTable()
    assert [c.title for c in t.columns] == ["ID", "Title", "Score", "Views"]
    assert [c.width for c in t.columns] == [3, 21, 3, 6]


def test_table_cursor_and_window():
    t = ResultsTable(height=4)
    t.set_rows([(str(i), f"q{i}", "0", "0") for i in range(10)])
    assert t.body_height == 3
    assert t.selected_row()[0] == "0"

    t.handle_key("end")
    assert t.cursor == 9
    assert [i for i, _ in t.visible_rows()] == [7, 8, 9]

    t.handle_key("char", "k")
    t.handle_key("pageup")
    assert t.cursor == 5
    t.handle_key("char", "g")
    assert t.cursor == 0
    assert t.offset == 0

    t.move(-5)
    assert t.cursor == 0


def test_table_set_rows_resets_cursor():
    t = ResultsTable()
    t.set_rows([("1", "a", "0", "0"), ("2", "b", "0", "0")])
    t.move(1)
    t.set_rows([("3", "c", "0", "0")])
    assert t.cursor == 0
    assert t.selected_row() == ("3", "c", "0", "0")


def test_empty_table_has_no_selection():
    t = ResultsTable()
    t.move(1)
    assert t.selected_row() is None


def test_viewport_scrolling():
    v = DocumentViewport(height=3)
    v.set_content("\n".join(f"line {i}" for i in range(10)))
    assert v.max_offset == 7
    assert v.visible_lines() == ["line 0", "line 1", "line 2"]

    v.handle_key("pagedown")
    assert v.y_offset == 3
    v.handle_key("char", "G")
    assert v.y_offset == 7
    v.scroll(100)
    assert v.y_offset == 7
    v.goto_top()
    assert v.y_offset == 0
    v.handle_key("up")
    assert v.y_offset == 0


def test_viewport_shorter_content_clamps_offset():
    v = DocumentViewport(height=3)
    v.set_content("\n".join(str(i) for i in range(10)))
    v.goto_bottom()
    v.set_content("one\ntwo")
    assert v.y_offset == 0


def test_spinner_cycles():
    s = Spinner()
    first = s.view()
    for _ in range(len(s.frames)):
        s.tick()
    assert s.view() == first
    s.tick()
    s.reset()
    assert s.frame == 0
