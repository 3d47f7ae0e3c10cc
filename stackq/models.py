"""Search result models shared by the client, the CLI and the TUI."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Comment(BaseModel):
    model_config = ConfigDict(frozen=True)

    author: str = ""
    score: int = 0
    body_markdown: str = ""


class Answer(BaseModel):
    model_config = ConfigDict(frozen=True)

    answer_id: int = 0
    score: int = 0
    is_accepted: bool = False
    body_markdown: str = ""
    comments: tuple[Comment, ...] = ()


class ResultItem(BaseModel):
    """One question with its answers, as returned by the search backend."""

    model_config = ConfigDict(frozen=True)

    question_id: int = 0
    title: str = ""
    body_markdown: str = ""
    score: int = 0
    view_count: int = 0
    link: str = ""
    tags: tuple[str, ...] = ()
    answers: tuple[Answer, ...] = ()
    comments: tuple[Comment, ...] = ()

    @classmethod
    def placeholder(cls) -> ResultItem:
        """Empty item used when a table selection cannot be resolved."""
        return cls()

    @property
    def is_placeholder(self) -> bool:
        return self.question_id == 0 and not self.title


class SearchResult(BaseModel):
    """Ordered result set; an empty one means "no matches"."""

    model_config = ConfigDict(frozen=True)

    items: tuple[ResultItem, ...] = Field(default=())
    quota_remaining: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, question_id: int) -> ResultItem | None:
        for item in self.items:
            if item.question_id == question_id:
                return item
        return None
