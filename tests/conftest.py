from __future__ import annotations

import os
import sys

import pytest


def _ensure_project_root_on_path() -> None:
    # When running via the venv's pytest entrypoint, the CWD is not guaranteed to
    # be on sys.path. Ensure the repository root (containing `stackq/`) is importable.
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_path()

from stackq.models import Answer, ResultItem, SearchResult  # noqa: E402
from stackq.tui.events import CHAR, ENTER, KeyPressed  # noqa: E402
from stackq.tui.machine import NavigationStateMachine  # noqa: E402
from stackq.tui.services import NotificationTimer, SearchDispatcher, SearchParams  # noqa: E402
from stackq.tui.state import Session  # noqa: E402


def plain_render(source: str, width: int = 80) -> str:
    """Markdown renderer stand-in: returns the source unchanged."""
    return source + "\n"


class ListSink:
    def __init__(self):
        self.events = []

    def post(self, event) -> None:
        self.events.append(event)

    def take(self) -> list:
        events, self.events = self.events, []
        return events


class ManualSpawn:
    """Captures worker targets instead of starting threads."""

    def __init__(self):
        self.pending = []

    def __call__(self, target, name) -> None:
        self.pending.append((target, name))

    def run_all(self) -> None:
        pending, self.pending = self.pending, []
        for target, _ in pending:
            target()


class ManualScheduler:
    """Captures delayed callbacks; tests fire them explicitly."""

    def __init__(self):
        self.calls = []

    def __call__(self, delay, callback) -> None:
        self.calls.append((delay, callback))

    def fire(self, index: int) -> None:
        self.calls[index][1]()


class Harness:
    """A state machine wired to fakes so every step is deterministic."""

    def __init__(self, result: SearchResult | None = None, error: Exception | None = None):
        self.sink = ListSink()
        self.spawner = ManualSpawn()
        self.scheduler = ManualScheduler()
        self.result = result if result is not None else SearchResult()
        self.error = error
        self.calls = []
        self.session = Session()
        self.dispatcher = SearchDispatcher(self._search, self.sink, spawn=self.spawner)
        self.timer = NotificationTimer(self.sink, delay=3.0, schedule=self.scheduler)
        self.machine = NavigationStateMachine(
            self.session,
            self.dispatcher,
            self.timer,
            params=SearchParams(site="stackoverflow", sort="votes"),
            render=plain_render,
        )

    def _search(self, query, tags, site, sort, order):
        self.calls.append((query, tags, site, sort, order))
        if self.error is not None:
            raise self.error
        return self.result

    def handle(self, event) -> None:
        self.machine.handle(event)

    def press(self, key: str, data: str = "") -> None:
        self.machine.handle(KeyPressed(key, data))

    def type(self, text: str) -> None:
        for ch in text:
            self.press(CHAR, ch)

    def feed(self) -> None:
        for event in self.sink.take():
            self.machine.handle(event)

    def complete_searches(self) -> None:
        self.spawner.run_all()
        self.feed()

    def search(self, text: str) -> None:
        self.type(text)
        self.press(ENTER)
        self.complete_searches()


def make_result() -> SearchResult:
    return SearchResult(
        items=(
            ResultItem(
                question_id=1,
                title="Alpha question",
                body_markdown="alpha body",
                score=5,
                view_count=100,
                answers=(Answer(answer_id=11, body_markdown="alpha answer"),),
            ),
            ResultItem(
                question_id=2,
                title="Beta question",
                body_markdown="beta body",
                score=7,
                view_count=2000,
                answers=(
                    Answer(answer_id=21, body_markdown="first beta answer"),
                    Answer(answer_id=22, body_markdown="second beta answer"),
                ),
            ),
        )
    )


@pytest.fixture
def result() -> SearchResult:
    return make_result()


@pytest.fixture
def harness(result) -> Harness:
    return Harness(result=result)


@pytest.fixture
def empty_harness() -> Harness:
    return Harness(result=SearchResult())
