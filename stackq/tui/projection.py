"""Pure projections of search results into table rows and documents."""
from __future__ import annotations

from typing import Callable

from ..markdown import render as render_markdown
from ..models import ResultItem, SearchResult
from .components import HELP_MARKDOWN, bordered, horizontal_rule

MarkdownRenderer = Callable[[str, int], str]

# Border plus padding on each side of an answer block.
BLOCK_INSET = 4


def to_rows(result: SearchResult | None) -> list[tuple[str, str, str, str]]:
    """One (id, title, score, views) row per item, in result order."""
    if result is None:
        return []
    return [
        (str(item.question_id), item.title, str(item.score), str(item.view_count))
        for item in result.items
    ]


def resolve_item(result: SearchResult | None, row: tuple[str, ...] | None) -> ResultItem:
    """Item for a table row, or the empty placeholder."""
    if result is None or not row:
        return ResultItem.placeholder()
    try:
        question_id = int(row[0])
    except (TypeError, ValueError):
        return ResultItem.placeholder()
    return result.find(question_id) or ResultItem.placeholder()


def to_document(
    item: ResultItem,
    width: int,
    render: MarkdownRenderer = render_markdown,
) -> str:
    question = render(f"# {item.title}\n\n{item.body_markdown}", width)
    heading = render("# Answers", width)
    answers = "".join(
        bordered(render(answer.body_markdown, max(1, width - BLOCK_INSET)), width)
        for answer in item.answers
    )
    return question + horizontal_rule(width) + "\n" + heading + answers


def to_comments_document(
    item: ResultItem,
    width: int,
    render: MarkdownRenderer = render_markdown,
) -> str:
    sections: list[str] = []
    if item.comments:
        sections.append(_comments_markdown("Question", item.comments))
    for number, answer in enumerate(item.answers, start=1):
        if answer.comments:
            sections.append(_comments_markdown(f"Answer {number}", answer.comments))

    if not sections:
        return render("# Comments\n\nNo comments", width)
    return render("# Comments\n\n" + "\n\n".join(sections), width)


def _comments_markdown(title: str, comments) -> str:
    lines = [f"## {title}"]
    for c in comments:
        lines.append(f"- **{c.author or 'anonymous'}** ({c.score}): {c.body_markdown}")
    return "\n".join(lines)


def help_document(width: int, render: MarkdownRenderer = render_markdown) -> str:
    return render(HELP_MARKDOWN, width)
