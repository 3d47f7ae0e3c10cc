from __future__ import annotations

import json
import logging

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .logging import setup_logging
from .search import SearchClient, SearchError
from .settings import Settings, load_settings
from .tui.components import render_error
from .tui.router import Router
from .tui.services import SearchParams

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    help="stackq: search Stack Exchange from the terminal",
    rich_markup_mode="rich",
)
console = Console()


def _settings_or_exit(log_level: str | None, *, console_logging: bool = False) -> Settings:
    try:
        s = load_settings()
    except ValidationError as e:
        render_error(console, "Invalid configuration", str(e), "Check your STACKQ_* environment variables or .env file")
        raise typer.Exit(code=1)
    if log_level:
        s.STACKQ_LOG_LEVEL = log_level
    try:
        setup_logging(s, console=console_logging)
    except OSError as e:
        render_error(console, "Cannot write logs", str(e), "Set STACKQ_LOG_DIR to a writable directory")
        raise typer.Exit(code=1)
    return s


def _params(s: Settings, site: str | None, tags: str | None, sort: str | None, order: str | None) -> SearchParams:
    return SearchParams(
        tags=s.STACKQ_TAGS if tags is None else tags,
        site=s.STACKQ_SITE if site is None else site,
        sort=s.STACKQ_SORT if sort is None else sort,
        order=s.STACKQ_ORDER if order is None else order,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN CALLBACK
# ═══════════════════════════════════════════════════════════════════════════════

@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    site: str = typer.Option(None, "--site", "-s", help="Stack Exchange site (default: stackoverflow)"),
    tags: str = typer.Option(None, "--tags", "-t", help="Semicolon-separated tags to filter on"),
    sort: str = typer.Option(None, "--sort", help="activity | votes | creation | relevance"),
    order: str = typer.Option(None, "--order", help="desc | asc"),
    no_mouse: bool = typer.Option(False, "--no-mouse", help="Start with mouse scroll/clicks disabled"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ..."),
):
    """
    [bold]stackq[/bold]: ask a question, browse the answers.

    [dim]Run without arguments to launch the interactive search.[/dim]

    [bold]Examples:[/bold]
      stackq                             # Interactive search
      stackq --site superuser            # Search Super User
      stackq find "python decorators"    # One-shot results table
    """
    if ctx.invoked_subcommand is not None:
        return

    s = _settings_or_exit(log_level)
    if no_mouse:
        s.STACKQ_MOUSE = False

    with SearchClient.from_settings(s) as client:
        router = Router.from_settings(s, client.search, _params(s, site, tags, sort, order))
        try:
            router.run()
        except OSError as e:
            logger.exception("Terminal unavailable")
            render_error(console, "Cannot start the interface", str(e), "Run stackq from an interactive terminal")
            raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════════════

@app.command("find", help="[bold cyan]F[/bold cyan]ind questions without the interactive view")
@app.command("search", hidden=True)  # Alias
def find(
    query: str = typer.Argument(..., help="The question to search for"),
    site: str = typer.Option(None, "--site", "-s", help="Stack Exchange site"),
    tags: str = typer.Option(None, "--tags", "-t", help="Semicolon-separated tags"),
    sort: str = typer.Option(None, "--sort", help="activity | votes | creation | relevance"),
    order: str = typer.Option(None, "--order", help="desc | asc"),
    json_out: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Run one search and print the results."""
    s = _settings_or_exit(None)
    p = _params(s, site, tags, sort, order)

    try:
        with SearchClient.from_settings(s) as client:
            result = client.search(query, p.tags, p.site, p.sort, p.order)
    except SearchError as e:
        render_error(console, "Search failed", str(e), "Check your network connection and API settings")
        raise typer.Exit(code=1)

    if json_out:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return

    if result.is_empty:
        console.print(f"[yellow]No results found for:[/yellow] {query!r}")
        return

    t = Table(title=f"[bold]Results for: [cyan]{query}[/cyan][/bold]")
    t.add_column("ID", style="cyan", no_wrap=True)
    t.add_column("Title", max_width=70)
    t.add_column("Score", justify="right")
    t.add_column("Views", justify="right")

    for item in result.items:
        t.add_row(str(item.question_id), item.title, str(item.score), f"{item.view_count:,}")

    console.print(t)
    console.print(f"[dim]Showing {len(result.items)} results. Run [bold]stackq[/bold] to read the answers.[/dim]")


def main():
    app()
