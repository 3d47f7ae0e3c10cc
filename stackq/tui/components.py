"""Styling constants and small rendering helpers for the TUI."""
from __future__ import annotations

import io

from rich import box
from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from .state import Severity

# ═══════════════════════════════════════════════════════════════════════════════
# BRAND STYLING
# ═══════════════════════════════════════════════════════════════════════════════

ACCENT = "#c6a0f6"
ACCENT_STYLE = Style(color=ACCENT)
FADED_STYLE = Style(color="#999999")
HR_STYLE = Style(color="#a6da95")
HEADER_STYLE = Style(bgcolor=ACCENT, color="#000000", bold=True)
SELECTED_STYLE = Style(color=ACCENT, bold=True)
ERROR_STYLE = Style(color="#ed8796", bold=True)

NOTIFICATION_STYLES = {
    Severity.INFO: Style(color="#ffffff", bgcolor="#a6da95"),
    Severity.WARNING: Style(color="#000000", bgcolor="#eed49f"),
    Severity.ERROR: Style(color="#ffffff", bgcolor="#ed8796"),
}

SEARCHING_CAPTION = "Searching..."

HELP_MARKDOWN = """\
# Help

| Key | Action |
|---|---|
| `Enter` | Search / open the selected question |
| `Backspace` | Go back one level |
| `↑` `↓` `j` `k` | Move / scroll |
| `PgUp` `PgDn` `Space` | Page |
| `Home` `End` `g` `G` | Jump to top / bottom |
| `c` | Show comments of the open question |
| `F1` `?` | This help |
| `Ctrl+S` | Toggle mouse scroll/clicks |
| `Esc` `Ctrl+C` | Quit |
"""


def render_ansi(renderable: RenderableType, width: int) -> str:
    """Render any rich renderable to ANSI text `width` columns wide."""
    console = Console(
        file=io.StringIO(),
        width=max(1, width),
        force_terminal=True,
        color_system="truecolor",
    )
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def horizontal_rule(width: int) -> str:
    return render_ansi(Text("-" * max(0, width), style=HR_STYLE), max(1, width))


def bordered(content: str, width: int) -> str:
    """Wrap pre-rendered ANSI `content` in the rounded accent border."""
    panel = Panel(
        Text.from_ansi(content),
        box=box.ROUNDED,
        border_style=ACCENT_STYLE,
        padding=1,
    )
    return render_ansi(panel, width)


def notification_text(message: str, severity: Severity) -> Text:
    return Text(f" {message} ", style=NOTIFICATION_STYLES[severity])


def render_error(
    console: Console,
    title: str,
    cause: str,
    action: str | None = None,
) -> None:
    """Render a friendly error panel with 3-part structure.

    Args:
        console: Rich Console for output
        title: Error title
        cause: What caused the error
        action: Suggested action to resolve
    """
    content = f"[bold red]✗ {title}[/bold red]\n\n"
    content += f"[yellow]Cause:[/yellow] {cause}\n"

    if action:
        content += f"\n[dim]→ {action}[/dim]"

    console.print(Panel.fit(content, border_style="red", title="Error"))
    console.print()
