"""View renderer: Session -> rich renderable. Never mutates the session."""
from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text

from .components import (
    ACCENT_STYLE,
    ERROR_STYLE,
    FADED_STYLE,
    HEADER_STYLE,
    SEARCHING_CAPTION,
    SELECTED_STYLE,
    notification_text,
)
from .state import Session, State
from .widgets import DocumentViewport, ResultsTable, Spinner, TextInput

ERROR_HINT = "Enter/Backspace: start over · Esc: quit"


def render_input(widget: TextInput) -> Text:
    text = Text(widget.prompt, style=ACCENT_STYLE)
    if not widget.value:
        if widget.focused:
            text.append(" ", style="reverse")
        text.append(widget.placeholder, style=FADED_STYLE)
        return text
    text.append(widget.value[: widget.cursor])
    if widget.focused:
        under = widget.value[widget.cursor : widget.cursor + 1] or " "
        text.append(under, style="reverse")
        text.append(widget.value[widget.cursor + 1 :])
    else:
        text.append(widget.value[widget.cursor :])
    return text


def render_spinner(spinner: Spinner) -> Text:
    return Text.assemble((spinner.view(), ACCENT_STYLE), " ", SEARCHING_CAPTION)


def _cell(value: str, width: int) -> Text:
    cell = Text(value, no_wrap=True)
    cell.truncate(width, overflow="ellipsis", pad=True)
    return cell


def _table_line(cells: list[str], widget: ResultsTable, style: str | None = None) -> Text:
    # Columns keep their exact widths; whatever passes the table edge is cropped.
    line = Text(no_wrap=True, style=style or "")
    for value, column in zip(cells, widget.columns):
        if column.width > 0:
            line.append_text(_cell(value, column.width))
    line.truncate(max(1, widget.width), overflow="crop")
    return line


def render_table(widget: ResultsTable) -> Group:
    lines = [_table_line([c.title for c in widget.columns], widget, HEADER_STYLE)]
    for index, row in widget.visible_rows():
        style = SELECTED_STYLE if index == widget.cursor and widget.focused else None
        lines.append(_table_line(list(row), widget, style))
    return Group(*lines)


def render_viewport(widget: DocumentViewport) -> Text:
    return Text.from_ansi("\n".join(widget.visible_lines()))


def render(session: Session) -> RenderableType:
    """The frame for the current session."""
    if session.error is not None:
        body: RenderableType = Group(
            Text(session.error, style=ERROR_STYLE),
            Text(ERROR_HINT, style=FADED_STYLE),
        )
    else:
        state = session.state
        if state is State.AWAITING_INPUT:
            body = render_input(session.input)
        elif state is State.SEARCH_PENDING:
            body = render_spinner(session.spinner)
        elif state is State.SHOWING_RESULT_LIST:
            body = Group(_breadcrumbs(session), render_table(session.table))
        else:
            body = Group(_breadcrumbs(session), render_viewport(session.viewport))

    if session.notification is None or not session.notification.message:
        return body
    return Group(
        body,
        notification_text(session.notification.message, session.notification.severity),
    )


def _breadcrumbs(session: Session) -> Text:
    return Text(session.history.breadcrumbs(), style=FADED_STYLE)
