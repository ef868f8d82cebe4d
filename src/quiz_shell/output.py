"""Console rendering helpers built on Rich."""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

__all__ = ["Renderer"]


class Renderer:
    """Thin wrapper giving the command handlers a small output surface."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def colorize(self, text: object, color: str | None = None) -> str:
        """Return ``text`` as escaped Rich markup, optionally colored."""

        value = escape(str(text))
        if not color:
            return value
        return f"[{color}]{value}[/{color}]"

    def log(self, markup: str, color: str | None = None) -> None:
        """Print a line of Rich markup; ``color`` wraps the whole line."""

        if color:
            markup = f"[{color}]{markup}[/{color}]"
        self.console.print(markup, highlight=False)

    def biglog(self, text: object, color: str | None = None) -> None:
        style = f"bold {color}" if color else "bold"
        self.console.print(
            Panel(
                Align.center(Text(str(text), style=style)),
                border_style=color or "white",
                expand=False,
                padding=(1, 4),
            )
        )

    def errorlog(self, message: str) -> None:
        self.console.print(
            f"[bold red]Error:[/] [red]{escape(message)}[/red]",
            highlight=False,
        )
