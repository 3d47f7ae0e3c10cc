"""Passive sub-widgets: plain state plus default key handling.

Widgets never know about the session state; the state machine decides
which one receives a key.
"""
from __future__ import annotations

from dataclasses import dataclass, field

PAGE_KEYS = {"pageup", "pagedown", "space"}


@dataclass
class TextInput:
    """Single-line question box."""

    placeholder: str = "What is your question?"
    prompt: str = "❯ "
    char_limit: int = 200
    width: int = 30
    value: str = ""
    cursor: int = 0
    focused: bool = True

    def insert(self, text: str) -> None:
        text = "".join(ch for ch in text if ch.isprintable())
        room = self.char_limit - len(self.value)
        if room <= 0 or not text:
            return
        text = text[:room]
        self.value = self.value[: self.cursor] + text + self.value[self.cursor :]
        self.cursor += len(text)

    def reset(self) -> None:
        self.value = ""
        self.cursor = 0

    def handle_key(self, key: str, data: str = "") -> bool:
        if key == "backspace":
            if self.cursor > 0:
                self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
                self.cursor -= 1
        elif key == "delete":
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
        elif key == "left":
            self.cursor = max(0, self.cursor - 1)
        elif key == "right":
            self.cursor = min(len(self.value), self.cursor + 1)
        elif key == "home":
            self.cursor = 0
        elif key == "end":
            self.cursor = len(self.value)
        elif data:
            self.insert(data)
        else:
            return False
        return True


@dataclass
class Column:
    title: str
    width: int


# (title, numerator, denominator) of the table width
COLUMN_LAYOUT = (
    ("ID", 1, 10),
    ("Title", 7, 10),
    ("Score", 1, 10),
    ("Views", 2, 10),
)


def column_widths(table_width: int) -> list[int]:
    """Floor of each column's fraction of `table_width`."""
    return [max(0, table_width) * num // den for _, num, den in COLUMN_LAYOUT]


@dataclass
class ResultsTable:
    width: int = 30
    height: int = 10
    rows: list[tuple[str, ...]] = field(default_factory=list)
    cursor: int = 0
    offset: int = 0
    focused: bool = False
    columns: list[Column] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.set_columns()

    def set_columns(self) -> None:
        self.columns = [
            Column(title, width)
            for (title, _, _), width in zip(COLUMN_LAYOUT, column_widths(self.width))
        ]

    def set_size(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(2, height)
        self.set_columns()
        self._scroll_to_cursor()

    def set_rows(self, rows: list[tuple[str, ...]]) -> None:
        self.rows = list(rows)
        self.cursor = 0
        self.offset = 0

    @property
    def body_height(self) -> int:
        # One line is taken by the header.
        return max(1, self.height - 1)

    def selected_row(self) -> tuple[str, ...] | None:
        if not self.rows:
            return None
        return self.rows[self.cursor]

    def move(self, delta: int) -> None:
        if not self.rows:
            return
        self.cursor = min(max(0, self.cursor + delta), len(self.rows) - 1)
        self._scroll_to_cursor()

    def _scroll_to_cursor(self) -> None:
        if self.cursor < self.offset:
            self.offset = self.cursor
        elif self.cursor >= self.offset + self.body_height:
            self.offset = self.cursor - self.body_height + 1
        self.offset = max(0, min(self.offset, max(0, len(self.rows) - self.body_height)))

    def visible_rows(self) -> list[tuple[int, tuple[str, ...]]]:
        end = self.offset + self.body_height
        return list(enumerate(self.rows[self.offset : end], start=self.offset))

    def handle_key(self, key: str, data: str = "") -> bool:
        if key == "up" or data == "k":
            self.move(-1)
        elif key == "down" or data == "j":
            self.move(1)
        elif key == "pageup":
            self.move(-self.body_height)
        elif key in ("pagedown", "space"):
            self.move(self.body_height)
        elif key == "home" or data == "g":
            self.move(-len(self.rows))
        elif key == "end" or data == "G":
            self.move(len(self.rows))
        else:
            return False
        return True


@dataclass
class DocumentViewport:
    """Scrollable block of pre-rendered (ANSI) lines."""

    width: int = 30
    height: int = 3
    lines: list[str] = field(default_factory=list)
    y_offset: int = 0
    focused: bool = False

    def set_content(self, text: str) -> None:
        self.lines = text.splitlines()
        self.y_offset = min(self.y_offset, self.max_offset)

    def set_size(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(1, height)
        self.y_offset = min(self.y_offset, self.max_offset)

    @property
    def max_offset(self) -> int:
        return max(0, len(self.lines) - self.height)

    def goto_top(self) -> None:
        self.y_offset = 0

    def goto_bottom(self) -> None:
        self.y_offset = self.max_offset

    def scroll(self, delta: int) -> None:
        self.y_offset = min(max(0, self.y_offset + delta), self.max_offset)

    def visible_lines(self) -> list[str]:
        return self.lines[self.y_offset : self.y_offset + self.height]

    def handle_key(self, key: str, data: str = "") -> bool:
        if key == "up" or data == "k":
            self.scroll(-1)
        elif key == "down" or data == "j":
            self.scroll(1)
        elif key == "pageup" or data == "b":
            self.scroll(-self.height)
        elif key in PAGE_KEYS or data == "f":
            self.scroll(self.height)
        elif key == "home" or data == "g":
            self.goto_top()
        elif key == "end" or data == "G":
            self.goto_bottom()
        else:
            return False
        return True


@dataclass
class Spinner:
    frames: tuple[str, ...] = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")
    frame: int = 0

    def tick(self) -> None:
        self.frame = (self.frame + 1) % len(self.frames)

    def reset(self) -> None:
        self.frame = 0

    def view(self) -> str:
        return self.frames[self.frame]
