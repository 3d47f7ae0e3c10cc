"""Events flowing through the single inbound channel, and the sink that carries them."""
from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Union

from ..models import SearchResult
from .state import Severity

# Key names understood by the state machine and the widgets.
ENTER = "enter"
BACK = "backspace"
QUIT_KEYS = frozenset({"c-c", "escape"})
MOUSE_TOGGLE = "c-s"
HELP = "f1"
CHAR = "char"


@dataclass(frozen=True)
class KeyPressed:
    key: str
    data: str = ""


@dataclass(frozen=True)
class MouseScrolled:
    delta: int


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class SearchCompleted:
    request_id: int
    result: SearchResult


@dataclass(frozen=True)
class SearchFailed:
    request_id: int
    error: str


@dataclass(frozen=True)
class NotificationEvent:
    """A toast to show; an empty message is the expiry of `occurrence`."""

    message: str
    severity: Severity = Severity.INFO
    occurrence: int = 0


Event = Union[
    KeyPressed,
    MouseScrolled,
    Resized,
    Tick,
    SearchCompleted,
    SearchFailed,
    NotificationEvent,
]


class EventSink(Protocol):
    def post(self, event: Event) -> None: ...


class QueueSink:
    """Thread-safe sink backed by a FIFO queue.

    `wakeup` is called after every post so the loop owning the queue can
    drain it; it must be safe to call from any thread.
    """

    def __init__(self, wakeup: Optional[Callable[[], None]] = None):
        self.queue: "queue.Queue[Event]" = queue.Queue()
        self.wakeup = wakeup

    def post(self, event: Event) -> None:
        self.queue.put(event)
        if self.wakeup is not None:
            self.wakeup()

    def drain(self) -> list[Event]:
        events: list[Event] = []
        while True:
            try:
                events.append(self.queue.get_nowait())
            except queue.Empty:
                return events
