"""Session state for the running TUI."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field

from ..models import ResultItem, SearchResult
from .navigator import Navigator
from .widgets import DocumentViewport, ResultsTable, Spinner, TextInput


class State(enum.Enum):
    AWAITING_INPUT = "awaiting_input"
    SEARCH_PENDING = "search_pending"
    SHOWING_RESULT_LIST = "showing_result_list"
    SHOWING_RESULT_DETAIL = "showing_result_detail"
    DISPLAYING_ALL_COMMENTS = "displaying_all_comments"
    DISPLAYING_HELP_SCREEN = "displaying_help_screen"


class Severity(enum.Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Focus(enum.Enum):
    NONE = "none"
    INPUT = "input"
    TABLE = "table"
    VIEWPORT = "viewport"


FOCUS_BY_STATE = {
    State.AWAITING_INPUT: Focus.INPUT,
    State.SEARCH_PENDING: Focus.NONE,
    State.SHOWING_RESULT_LIST: Focus.TABLE,
    State.SHOWING_RESULT_DETAIL: Focus.VIEWPORT,
    State.DISPLAYING_ALL_COMMENTS: Focus.VIEWPORT,
    State.DISPLAYING_HELP_SCREEN: Focus.VIEWPORT,
}


def focus_for(state: State) -> Focus:
    """Which sub-widget receives input in `state`."""
    return FOCUS_BY_STATE[state]


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity = Severity.INFO
    # Identifies this emission so a stale expiry cannot clear a newer toast.
    occurrence: int = 0


@dataclass
class Session:
    """Root state of the TUI.

    Only the navigation state machine mutates it; the view reads it.
    """

    input: TextInput = field(default_factory=TextInput)
    table: ResultsTable = field(default_factory=ResultsTable)
    viewport: DocumentViewport = field(default_factory=DocumentViewport)
    spinner: Spinner = field(default_factory=Spinner)
    history: Navigator = field(default_factory=lambda: Navigator(State.AWAITING_INPUT))

    mouse_enabled: bool = True
    result: SearchResult | None = None
    error: str | None = None
    # Item shown by the detail and comments views.
    detail_item: ResultItem | None = None
    notification: Notification | None = None
    running: bool = True
    width: int = 80
    height: int = 24

    @property
    def state(self) -> State:
        return self.history.current()

    @property
    def focus(self) -> Focus:
        return focus_for(self.state)

    def apply_focus(self) -> None:
        """Sync widget focus flags with the current state."""
        focus = self.focus
        self.input.focused = focus is Focus.INPUT
        self.table.focused = focus is Focus.TABLE
        self.viewport.focused = focus is Focus.VIEWPORT
