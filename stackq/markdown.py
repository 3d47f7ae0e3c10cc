from __future__ import annotations

import io
import logging

from rich.console import Console
from rich.markdown import Markdown

logger = logging.getLogger(__name__)


def render(source: str, width: int = 80) -> str:
    """Render markdown to ANSI-styled text at `width` columns.

    Never raises: on a rendering failure the plain source is returned.
    """

    console = Console(
        file=io.StringIO(),
        width=max(1, width),
        force_terminal=True,
        color_system="truecolor",
        record=False,
    )
    try:
        with console.capture() as capture:
            console.print(Markdown(source or "", code_theme="monokai"))
    except Exception:
        logger.exception("Markdown rendering failed; showing plain text")
        return source or ""
    return capture.get()
