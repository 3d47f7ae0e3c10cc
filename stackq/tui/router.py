"""Main event loop: one queue, one consumer, one full-screen application."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.mouse_events import MouseEvent, MouseEventType

from .components import render_ansi
from .events import CHAR, Event, KeyPressed, MouseScrolled, QueueSink, Resized, Tick
from .machine import NavigationStateMachine
from .services import NotificationTimer, SearchDispatcher, SearchFn, SearchParams
from .state import Session, State
from .view import render

if TYPE_CHECKING:
    from ..settings import Settings

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.1

# prompt_toolkit key -> key name understood by the state machine
KEY_NAMES = {
    "enter": "enter",
    "backspace": "backspace",
    "escape": "escape",
    "c-c": "c-c",
    "c-s": "c-s",
    "f1": "f1",
    "up": "up",
    "down": "down",
    "left": "left",
    "right": "right",
    "home": "home",
    "end": "end",
    "pageup": "pageup",
    "pagedown": "pagedown",
    "delete": "delete",
    " ": "space",
}


class FrameControl(FormattedTextControl):
    """Shows the current frame and turns wheel events into scroll events."""

    def __init__(self, router: Router):
        super().__init__(text=router.frame, focusable=True, show_cursor=False)
        self._router = router

    def mouse_handler(self, mouse_event: MouseEvent):
        if mouse_event.event_type == MouseEventType.SCROLL_UP:
            self._router.post(MouseScrolled(-1))
            return None
        if mouse_event.event_type == MouseEventType.SCROLL_DOWN:
            self._router.post(MouseScrolled(1))
            return None
        return NotImplemented


class Router:
    """Runs the TUI.

    Key bindings, the mouse handler, the resize hook, the spinner ticker
    and the background services all post into one QueueSink. `pump`
    drains it on the loop thread, so the state machine sees one event at
    a time.
    """

    def __init__(
        self,
        search_fn: SearchFn,
        *,
        params: SearchParams = SearchParams(),
        notification_seconds: float = 3.0,
        mouse: bool = True,
        session: Optional[Session] = None,
    ):
        self.session = session or Session(mouse_enabled=mouse)
        self.sink = QueueSink(wakeup=self._wakeup)
        self.dispatcher = SearchDispatcher(search_fn, self.sink)
        self.timer = NotificationTimer(self.sink, delay=notification_seconds)
        self.machine = NavigationStateMachine(
            self.session,
            self.dispatcher,
            self.timer,
            params=params,
        )
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._app: Optional[Application] = None
        self._exiting = False
        self._size: Optional[tuple[int, int]] = None

    @classmethod
    def from_settings(cls, settings: Settings, search_fn: SearchFn, params: SearchParams) -> Router:
        return cls(
            search_fn,
            params=params,
            notification_seconds=settings.STACKQ_NOTIFICATION_SECONDS,
            mouse=settings.STACKQ_MOUSE,
        )

    # ── event channel ────────────────────────────────────────────────────

    def post(self, event: Event) -> None:
        self.sink.post(event)

    def _wakeup(self) -> None:
        loop = self._loop
        if loop is not None and not loop.is_closed():
            loop.call_soon_threadsafe(self.pump)

    def drain(self) -> None:
        """Feed every queued event to the state machine, in order."""
        for event in self.sink.drain():
            self.machine.handle(event)
            if not self.session.running:
                break

    def pump(self) -> None:
        self.drain()
        app = self._app
        if app is None:
            return
        if not self.session.running:
            if app.is_running and not self._exiting:
                self._exiting = True
                app.exit()
            return
        app.invalidate()

    # ── rendering ────────────────────────────────────────────────────────

    def frame(self) -> ANSI:
        return ANSI(render_ansi(render(self.session), self.session.width))

    def _before_render(self, app: Application) -> None:
        size = app.output.get_size()
        current = (size.columns, size.rows)
        if current != self._size:
            self._size = current
            self.post(Resized(size.columns, size.rows))
            self.drain()

    # ── application ──────────────────────────────────────────────────────

    def _key_handler(self, name: str) -> Callable:
        def handler(event) -> None:
            self.post(KeyPressed(name, event.data if name == "space" else ""))

        return handler

    def build_app(self) -> Application:
        kb = KeyBindings()
        for pt_key, name in KEY_NAMES.items():
            kb.add(pt_key, eager=True)(self._key_handler(name))

        @kb.add(Keys.Any)
        def _any(event) -> None:
            data = event.data
            if data and data.isprintable():
                self.post(KeyPressed(CHAR, data))

        app: Application = Application(
            layout=Layout(Window(content=FrameControl(self), wrap_lines=False)),
            key_bindings=kb,
            full_screen=True,
            mouse_support=Condition(lambda: self.session.mouse_enabled),
        )
        app.before_render += self._before_render
        return app

    async def _ticker(self) -> None:
        while True:
            await asyncio.sleep(TICK_SECONDS)
            if self.session.state is State.SEARCH_PENDING:
                self.post(Tick())

    async def run_async(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._app = self.build_app()
        self.drain()
        if not self.session.running:
            return
        ticker = asyncio.ensure_future(self._ticker())
        logger.info("TUI started")
        try:
            await self._app.run_async()
        finally:
            ticker.cancel()
            self._loop = None
            logger.info("TUI stopped")

    def run(self) -> None:
        """Run until the user quits."""
        asyncio.run(self.run_async())
