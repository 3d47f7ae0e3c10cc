"""Background services: the search dispatcher and the notification timer.

Both own their threads and report back only through an event sink.
"""
from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..models import SearchResult
from .events import EventSink, NotificationEvent, SearchCompleted, SearchFailed
from .state import Notification, Severity

logger = logging.getLogger(__name__)

SearchFn = Callable[[str, str, str, str, str], SearchResult]


@dataclass(frozen=True)
class SearchParams:
    """Filter parameters; empty strings mean backend defaults."""

    tags: str = ""
    site: str = ""
    sort: str = ""
    order: str = ""


def _start_thread(target: Callable[[], None], name: str) -> None:
    threading.Thread(target=target, name=name, daemon=True).start()


class SearchDispatcher:
    """Runs at most one search at a time off the loop thread.

    Every accepted submission produces exactly one SearchCompleted or
    SearchFailed event carrying the request id returned by `submit`.
    """

    def __init__(
        self,
        search_fn: SearchFn,
        sink: EventSink,
        *,
        spawn: Callable[[Callable[[], None], str], None] = _start_thread,
    ):
        self._search_fn = search_fn
        self._sink = sink
        self._spawn = spawn
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._in_flight: Optional[int] = None

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._in_flight is not None

    @property
    def in_flight(self) -> Optional[int]:
        with self._lock:
            return self._in_flight

    def submit(self, query: str, params: SearchParams = SearchParams()) -> Optional[int]:
        """Start a search; returns its request id, or None if one is already running."""
        with self._lock:
            if self._in_flight is not None:
                logger.warning("Search already in flight (request %s); ignoring %r", self._in_flight, query)
                return None
            request_id = next(self._ids)
            self._in_flight = request_id

        logger.info("Dispatching search %d: %r (%s)", request_id, query, params)
        self._spawn(lambda: self._run(request_id, query, params), f"stackq-search-{request_id}")
        return request_id

    def _run(self, request_id: int, query: str, params: SearchParams) -> None:
        try:
            result = self._search_fn(query, params.tags, params.site, params.sort, params.order)
        except Exception as e:
            logger.exception("Search %d failed", request_id)
            event = SearchFailed(request_id, str(e) or e.__class__.__name__)
        else:
            event = SearchCompleted(request_id, result)
        finally:
            with self._lock:
                self._in_flight = None
        self._sink.post(event)


def _timer(delay: float, callback: Callable[[], None]) -> None:
    t = threading.Timer(delay, callback)
    t.daemon = True
    t.start()


class NotificationTimer:
    """Numbers notifications and schedules their expiry.

    The expiry is an empty NotificationEvent for the same occurrence, so
    the state machine can ignore it once a newer toast has replaced it.
    """

    def __init__(
        self,
        sink: EventSink,
        delay: float = 3.0,
        *,
        schedule: Callable[[float, Callable[[], None]], None] = _timer,
    ):
        self._sink = sink
        self.delay = delay
        self._schedule = schedule
        self._occurrences = itertools.count(1)

    def submit(self, message: str, severity: Severity = Severity.INFO) -> Notification:
        notification = Notification(message, severity, next(self._occurrences))
        if message:
            self._schedule(self.delay, lambda: self._expire(notification.occurrence))
        return notification

    def _expire(self, occurrence: int) -> None:
        self._sink.post(NotificationEvent("", Severity.INFO, occurrence))
