from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from conftest import make_result

import stackq.cli as cli
from stackq.models import SearchResult
from stackq.search import SearchError

runner = CliRunner()


class FakeClient:
    result = SearchResult()
    error: Exception | None = None
    calls: list = []

    @classmethod
    def from_settings(cls, settings):
        return cls()

    def search(self, query, tags="", site="", sort="", order=""):
        FakeClient.calls.append((query, tags, site, sort, order))
        if FakeClient.error is not None:
            raise FakeClient.error
        return FakeClient.result

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STACKQ_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setattr(cli, "setup_logging", lambda *a, **k: tmp_path / "logs" / "stackq.log")
    monkeypatch.setattr(cli, "SearchClient", FakeClient)
    FakeClient.result = SearchResult()
    FakeClient.error = None
    FakeClient.calls = []


def test_find_prints_table():
    FakeClient.result = make_result()
    res = runner.invoke(cli.app, ["find", "python", "--site", "superuser"])
    assert res.exit_code == 0, res.output
    assert "Alpha question" in res.output
    assert "Beta question" in res.output
    assert "2,000" in res.output
    assert FakeClient.calls == [("python", "", "superuser", "relevance", "desc")]


def test_find_json_output():
    FakeClient.result = make_result()
    res = runner.invoke(cli.app, ["find", "python", "--json"])
    assert res.exit_code == 0, res.output
    data = json.loads(res.output)
    assert [i["question_id"] for i in data["items"]] == [1, 2]


def test_find_no_results():
    res = runner.invoke(cli.app, ["find", "zzz"])
    assert res.exit_code == 0
    assert "No results found" in res.output


def test_find_failure_exits_non_zero():
    FakeClient.error = SearchError("connection_error", "Could not reach the API")
    res = runner.invoke(cli.app, ["find", "python"])
    assert res.exit_code == 1
    assert "Search failed" in res.output


def test_root_launches_tui(monkeypatch):
    launched = {}

    class FakeRouter:
        @classmethod
        def from_settings(cls, settings, search_fn, params):
            launched["params"] = params
            launched["mouse"] = settings.STACKQ_MOUSE
            return cls()

        def run(self):
            launched["ran"] = True

    monkeypatch.setattr(cli, "Router", FakeRouter)
    res = runner.invoke(cli.app, ["--site", "unix", "--tags", "bash", "--no-mouse"])
    assert res.exit_code == 0, res.output
    assert launched["ran"] is True
    assert launched["mouse"] is False
    assert launched["params"].site == "unix"
    assert launched["params"].tags == "bash"
    assert launched["params"].sort == "relevance"


def test_root_terminal_failure_exits_non_zero(monkeypatch):
    class BrokenRouter:
        @classmethod
        def from_settings(cls, *args):
            return cls()

        def run(self):
            raise OSError("not a terminal")

    monkeypatch.setattr(cli, "Router", BrokenRouter)
    res = runner.invoke(cli.app, [])
    assert res.exit_code == 1
    assert "Cannot start the interface" in res.output


def test_invalid_configuration_exits_non_zero(monkeypatch):
    monkeypatch.setenv("STACKQ_TIMEOUT", "-1")
    res = runner.invoke(cli.app, ["find", "python"])
    assert res.exit_code == 1
    assert "Invalid configuration" in res.output
