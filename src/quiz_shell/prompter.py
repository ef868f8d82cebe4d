"""Asynchronous line input for the shell and its interactive commands."""

from __future__ import annotations

import asyncio
import sys
from typing import Callable

from rich.console import Console
from rich.markup import escape

try:  # readline is unavailable on some platforms (e.g. Windows).
    import readline
except ImportError:  # pragma: no cover - platform dependent
    readline = None  # type: ignore[assignment]

__all__ = ["Prompter"]


class Prompter:
    """Ask questions on the console without blocking the event loop.

    ``ask`` returns the trimmed answer. When ``prefill`` is given and the
    session runs on a terminal, the input buffer starts out holding that
    text so the user can edit it in place.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        is_tty: Callable[[], bool] | None = None,
    ) -> None:
        self._console = console or Console()
        self._is_tty = is_tty or sys.stdout.isatty

    async def ask(self, text: str, prefill: str | None = None) -> str:
        answer = await asyncio.to_thread(
            self._input, f"[red]{escape(text)}[/red]", prefill
        )
        return answer.strip()

    async def read_line(self, prompt: str) -> str:
        """Read a raw command line; raises ``EOFError`` when input ends."""

        return await asyncio.to_thread(self._input, prompt, None)

    def _input(self, markup: str, prefill: str | None) -> str:
        if prefill and readline is not None and self._is_tty():
            readline.set_startup_hook(lambda: readline.insert_text(prefill))
            try:
                return self._console.input(markup)
            finally:
                readline.set_startup_hook()
        return self._console.input(markup)
