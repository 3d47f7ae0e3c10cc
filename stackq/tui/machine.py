"""Navigation state machine: the only code that mutates the Session."""
from __future__ import annotations

import logging
from typing import Optional

from ..markdown import render as render_markdown
from ..models import ResultItem
from .events import (
    BACK,
    ENTER,
    HELP,
    MOUSE_TOGGLE,
    QUIT_KEYS,
    Event,
    KeyPressed,
    MouseScrolled,
    NotificationEvent,
    Resized,
    SearchCompleted,
    SearchFailed,
    Tick,
)
from .projection import (
    MarkdownRenderer,
    help_document,
    resolve_item,
    to_comments_document,
    to_document,
    to_rows,
)
from .services import NotificationTimer, SearchDispatcher, SearchParams
from .state import Focus, Session, Severity, State

logger = logging.getLogger(__name__)

NO_RESULTS = "No results found"
MOUSE_ENABLED = "Enabled mouse scroll/clicks"
MOUSE_DISABLED = "Disabled mouse scroll/clicks"
COMMENTS_KEY = "c"
HELP_CHAR = "?"

# Horizontal / vertical space around the table, viewport and input.
MARGIN_X = 4
MARGIN_Y = 2

VIEWPORT_STATES = frozenset(
    {
        State.SHOWING_RESULT_DETAIL,
        State.DISPLAYING_ALL_COMMENTS,
        State.DISPLAYING_HELP_SCREEN,
    }
)

LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class NavigationStateMachine:
    """Interprets one event at a time and performs every state transition.

    Widget focus is derived from the state after each event, never set
    by individual transitions.
    """

    def __init__(
        self,
        session: Session,
        dispatcher: SearchDispatcher,
        timer: NotificationTimer,
        *,
        params: SearchParams = SearchParams(),
        render: MarkdownRenderer = render_markdown,
    ):
        self.session = session
        self.dispatcher = dispatcher
        self.timer = timer
        self.params = params
        self.render = render
        self._pending_request: Optional[int] = None
        # Scroll position of viewport states we navigated away from.
        self._offsets: dict[State, int] = {}
        session.apply_focus()

    def handle(self, event: Event) -> None:
        before = self.session.state
        if isinstance(event, KeyPressed):
            self._on_key(event)
        elif isinstance(event, MouseScrolled):
            self._on_scroll(event)
        elif isinstance(event, Resized):
            self._on_resize(event)
        elif isinstance(event, Tick):
            if self.session.state is State.SEARCH_PENDING:
                self.session.spinner.tick()
        elif isinstance(event, SearchCompleted):
            self._on_search_completed(event)
        elif isinstance(event, SearchFailed):
            self._on_search_failed(event)
        elif isinstance(event, NotificationEvent):
            self._on_notification(event)
        else:
            logger.warning("Ignoring unknown event %r", event)

        after = self.session.state
        if after is not before:
            logger.debug("State %s -> %s (%s)", before.value, after.value, self.session.history.breadcrumbs())
        self.session.apply_focus()

    # ── input ────────────────────────────────────────────────────────────

    def _on_key(self, event: KeyPressed) -> None:
        s = self.session
        key = event.key

        if key in QUIT_KEYS:
            logger.info("Quit requested")
            s.running = False
            return
        if key == MOUSE_TOGGLE:
            s.mouse_enabled = not s.mouse_enabled
            self.notify(MOUSE_ENABLED if s.mouse_enabled else MOUSE_DISABLED, Severity.INFO)
            return

        if s.error is not None:
            if key in (ENTER, BACK):
                self._dismiss_error()
            return

        state = s.state
        if key == HELP or (event.data == HELP_CHAR and s.focus is not Focus.INPUT):
            self._open_help()
            return
        if key == ENTER:
            if state is State.AWAITING_INPUT:
                self._submit()
            elif state is State.SHOWING_RESULT_LIST:
                self._open_detail()
            return
        if key == BACK and state is not State.AWAITING_INPUT:
            self._back()
            return
        if event.data == COMMENTS_KEY and state is State.SHOWING_RESULT_DETAIL:
            self._open_comments()
            return

        self._forward(event)

    def _forward(self, event: KeyPressed) -> None:
        focus = self.session.focus
        if focus is Focus.INPUT:
            self.session.input.handle_key(event.key, event.data)
        elif focus is Focus.TABLE:
            self.session.table.handle_key(event.key, event.data)
        elif focus is Focus.VIEWPORT:
            self.session.viewport.handle_key(event.key, event.data)

    def _on_scroll(self, event: MouseScrolled) -> None:
        if not self.session.mouse_enabled or self.session.error is not None:
            return
        focus = self.session.focus
        if focus is Focus.TABLE:
            self.session.table.move(event.delta)
        elif focus is Focus.VIEWPORT:
            self.session.viewport.scroll(event.delta)

    def _on_resize(self, event: Resized) -> None:
        s = self.session
        s.width, s.height = event.width, event.height
        inner_w = max(1, event.width - MARGIN_X)
        inner_h = max(1, event.height - MARGIN_Y)
        s.input.width = inner_w
        s.table.set_size(inner_w, inner_h)
        offset = s.viewport.y_offset
        s.viewport.set_size(inner_w, inner_h)
        if s.state in VIEWPORT_STATES:
            self._render_document(s.state)
            s.viewport.y_offset = min(offset, s.viewport.max_offset)

    # ── transitions ──────────────────────────────────────────────────────

    def _submit(self) -> None:
        s = self.session
        query = s.input.value.strip()
        if not query:
            return
        request_id = self.dispatcher.submit(query, self.params)
        if request_id is None:
            return
        self._pending_request = request_id
        s.input.reset()
        s.spinner.reset()
        s.history.push(State.SEARCH_PENDING)

    def _is_outstanding(self, request_id: int) -> bool:
        return self.session.state is State.SEARCH_PENDING and request_id == self._pending_request

    def _on_search_completed(self, event: SearchCompleted) -> None:
        if not self._is_outstanding(event.request_id):
            logger.debug("Discarding late result for request %d", event.request_id)
            return
        s = self.session
        self._pending_request = None

        if event.result.is_empty:
            s.history.pop()
            s.input.reset()
            self.notify(NO_RESULTS, Severity.WARNING)
            return

        s.result = event.result
        s.table.set_rows(to_rows(event.result))
        s.history.replace(State.SHOWING_RESULT_LIST)

    def _on_search_failed(self, event: SearchFailed) -> None:
        if not self._is_outstanding(event.request_id):
            logger.debug("Discarding late failure for request %d: %s", event.request_id, event.error)
            return
        self._pending_request = None
        logger.error("Search failed: %s", event.error)
        self.session.error = f"Search failed: {event.error}"

    def _dismiss_error(self) -> None:
        s = self.session
        s.error = None
        self._pending_request = None
        self._offsets.clear()
        s.input.reset()
        s.history.home()

    def _open_detail(self) -> None:
        s = self.session
        item = resolve_item(s.result, s.table.selected_row())
        if item.is_placeholder:
            logger.warning("Selected row %r not found in current result", s.table.selected_row())
        s.detail_item = item
        self._push_viewport_state(State.SHOWING_RESULT_DETAIL)

    def _open_comments(self) -> None:
        self._push_viewport_state(State.DISPLAYING_ALL_COMMENTS)

    def _open_help(self) -> None:
        state = self.session.state
        if state in (State.SEARCH_PENDING, State.DISPLAYING_HELP_SCREEN):
            return
        self._push_viewport_state(State.DISPLAYING_HELP_SCREEN)

    def _push_viewport_state(self, state: State) -> None:
        s = self.session
        if s.state in VIEWPORT_STATES:
            self._offsets[s.state] = s.viewport.y_offset
        s.history.push(state)
        self._render_document(state)
        s.viewport.goto_top()

    def _back(self) -> None:
        s = self.session
        if s.state is State.SEARCH_PENDING:
            return
        left = s.history.pop()
        if left is None:
            return
        self._offsets.pop(left, None)
        if s.state in VIEWPORT_STATES:
            self._render_document(s.state)
            s.viewport.y_offset = min(self._offsets.pop(s.state, 0), s.viewport.max_offset)

    def _render_document(self, state: State) -> None:
        s = self.session
        width = s.viewport.width
        item = s.detail_item or ResultItem.placeholder()
        if state is State.SHOWING_RESULT_DETAIL:
            content = to_document(item, width, self.render)
        elif state is State.DISPLAYING_ALL_COMMENTS:
            content = to_comments_document(item, width, self.render)
        else:
            content = help_document(width, self.render)
        s.viewport.set_content(content)

    # ── notifications ────────────────────────────────────────────────────

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        """Show a toast, replacing any live one."""
        logger.log(LOG_LEVELS[severity], "Notification: %s", message)
        self.session.notification = self.timer.submit(message, severity)

    def _on_notification(self, event: NotificationEvent) -> None:
        if event.message:
            self.notify(event.message, event.severity)
            return
        current = self.session.notification
        if current is not None and current.occurrence == event.occurrence:
            self.session.notification = None
