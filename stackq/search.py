"""
Stack Exchange search client.

Two calls per search: /search/advanced for the questions, then one
/questions/{ids}/answers call for all of their answers. Without a configured
filter, one returning markdown bodies and comments is created on first use
via /filters/create.
"""
from __future__ import annotations

import html
import logging
from typing import Any, Optional

import httpx

from .models import Answer, Comment, ResultItem, SearchResult

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.stackexchange.com/2.3"
DEFAULT_SITE = "stackoverflow"

# Fields added to the default filter when no named filter is configured.
FILTER_INCLUDE = (
    "question.body_markdown",
    "question.comments",
    "answer.body_markdown",
    "answer.comments",
    "comment.body_markdown",
)


class SearchError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


def _body(raw: dict[str, Any]) -> str:
    body = raw.get("body_markdown")
    if body is None:
        body = raw.get("body", "")
    return html.unescape(str(body or ""))


def _comments(raw: dict[str, Any]) -> tuple[Comment, ...]:
    return tuple(
        Comment(
            author=html.unescape(str((c.get("owner") or {}).get("display_name") or "")),
            score=int(c.get("score") or 0),
            body_markdown=_body(c),
        )
        for c in raw.get("comments") or []
    )


def parse_answer(raw: dict[str, Any]) -> Answer:
    return Answer(
        answer_id=int(raw.get("answer_id") or 0),
        score=int(raw.get("score") or 0),
        is_accepted=bool(raw.get("is_accepted")),
        body_markdown=_body(raw),
        comments=_comments(raw),
    )


def parse_question(raw: dict[str, Any], answers: list[Answer] | None = None) -> ResultItem:
    return ResultItem(
        question_id=int(raw.get("question_id") or 0),
        title=html.unescape(str(raw.get("title") or "")),
        body_markdown=_body(raw),
        score=int(raw.get("score") or 0),
        view_count=int(raw.get("view_count") or 0),
        link=str(raw.get("link") or ""),
        tags=tuple(str(t) for t in raw.get("tags") or []),
        answers=tuple(answers or []),
        comments=_comments(raw),
    )


class SearchClient:
    """Synchronous client; the TUI calls it from a worker thread."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        key: Optional[str] = None,
        filter: str = "",
        page_size: int = 30,
        timeout: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._key = key
        self._filter = filter
        self._page_size = page_size
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"User-Agent": "stackq/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: object) -> SearchClient:
        return cls(
            getattr(settings, "STACKQ_API_URL", DEFAULT_API_URL),
            key=getattr(settings, "STACKQ_API_KEY", None),
            filter=getattr(settings, "STACKQ_FILTER", ""),
            page_size=getattr(settings, "STACKQ_PAGE_SIZE", 30),
            timeout=getattr(settings, "STACKQ_TIMEOUT", 20.0),
        )

    def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if self._key:
            params = {**params, "key": self._key}
        try:
            resp = self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise SearchError("connection_error", f"Could not reach the API: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            if resp.status_code >= 400:
                raise SearchError("http_error", f"HTTP {resp.status_code}: {resp.text[:200]}") from e
            raise SearchError("decode_error", f"Invalid JSON from {path}") from e

        if not isinstance(data, dict):
            raise SearchError("decode_error", f"Unexpected payload from {path}")
        if "error_id" in data:
            raise SearchError(
                "api_error",
                f"{data.get('error_name', 'error')}: {data.get('error_message', '')}".strip(),
                details=data,
            )
        if resp.status_code >= 400:
            raise SearchError("http_error", f"HTTP {resp.status_code}: {resp.text[:200]}")

        if data.get("quota_remaining") is not None:
            logger.debug("API quota remaining: %s", data["quota_remaining"])
        return data

    def _resolve_filter(self) -> str:
        """Named filter for every call, created once when none is configured.

        The built-in filters return HTML `body` only; the created one adds
        `body_markdown` and comments for questions and answers.
        """
        if self._filter:
            return self._filter
        data = self._get(
            "/filters/create",
            {"include": ";".join(FILTER_INCLUDE), "base": "default", "unsafe": "false"},
        )
        items = data.get("items") or []
        name = items[0].get("filter") if items and isinstance(items[0], dict) else None
        if not name:
            raise SearchError("decode_error", "Filter creation returned no filter", details=data)
        self._filter = str(name)
        logger.info("Created API filter %s", self._filter)
        return self._filter

    def _answers(self, question_ids: list[int], site: str) -> dict[int, list[Answer]]:
        ids = ";".join(str(i) for i in question_ids)
        data = self._get(
            f"/questions/{ids}/answers",
            {
                "site": site,
                "filter": self._resolve_filter(),
                "sort": "votes",
                "order": "desc",
                "pagesize": 100,
            },
        )
        grouped: dict[int, list[Answer]] = {}
        for raw in data.get("items") or []:
            grouped.setdefault(int(raw.get("question_id") or 0), []).append(parse_answer(raw))
        for answers in grouped.values():
            answers.sort(key=lambda a: (not a.is_accepted, -a.score))
        return grouped

    def search(
        self,
        query: str,
        tags: str = "",
        site: str = "",
        sort: str = "",
        order: str = "",
    ) -> SearchResult:
        """Search questions matching `query`.

        Empty parameters fall back to the API defaults (site: stackoverflow).
        """
        site = site or DEFAULT_SITE
        params: dict[str, Any] = {
            "q": query,
            "site": site,
            "filter": self._resolve_filter(),
            "pagesize": self._page_size,
        }
        if tags:
            params["tagged"] = tags
        if sort:
            params["sort"] = sort
        if order:
            params["order"] = order

        data = self._get("/search/advanced", params)
        raw_items = [r for r in data.get("items") or [] if isinstance(r, dict)]
        if not raw_items:
            logger.info("No results for %r on %s", query, site)
            return SearchResult(quota_remaining=data.get("quota_remaining"))

        question_ids = [int(r.get("question_id") or 0) for r in raw_items]
        answers = self._answers(question_ids, site)

        items = tuple(parse_question(r, answers.get(qid)) for r, qid in zip(raw_items, question_ids))
        logger.info("Search %r on %s returned %d items", query, site, len(items))
        return SearchResult(items=items, quota_remaining=data.get("quota_remaining"))

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SearchClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
