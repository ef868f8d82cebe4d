"""The interactive read-dispatch loop."""

from __future__ import annotations

import logging
import random
from typing import Awaitable, Callable, Mapping, Sequence

from . import commands
from .commands import CommandContext
from .output import Renderer
from .play import play_cmd
from .prompter import Prompter
from .store import QuizRepository

__all__ = ["QuizShell", "VERBS", "parse_line"]

logger = logging.getLogger(__name__)

Handler = Callable[
    [CommandContext, str | None, random.Random], Awaitable[object]
]


def _no_arg(
    func: Callable[[CommandContext], Awaitable[object]],
) -> Handler:
    return lambda ctx, arg, rng: func(ctx)


def _with_id(
    func: Callable[[CommandContext, object], Awaitable[object]],
) -> Handler:
    return lambda ctx, arg, rng: func(ctx, arg)


VERBS: Mapping[str, Handler] = {
    "h": _no_arg(commands.help_cmd),
    "help": _no_arg(commands.help_cmd),
    "list": _no_arg(commands.list_cmd),
    "show": _with_id(commands.show_cmd),
    "add": _no_arg(commands.add_cmd),
    "delete": _with_id(commands.delete_cmd),
    "edit": _with_id(commands.edit_cmd),
    "test": _with_id(commands.test_cmd),
    "p": lambda ctx, arg, rng: play_cmd(ctx, rng),
    "play": lambda ctx, arg, rng: play_cmd(ctx, rng),
    "credits": _no_arg(commands.credits_cmd),
    "q": _no_arg(commands.quit_cmd),
    "quit": _no_arg(commands.quit_cmd),
}


def parse_line(line: str) -> tuple[str, str | None] | None:
    """Split a command line into its verb and optional single argument."""

    tokens = line.split()
    if not tokens:
        return None
    return tokens[0], (tokens[1] if len(tokens) > 1 else None)


class QuizShell:
    """Read command lines and run one handler at a time until quit."""

    def __init__(
        self,
        *,
        repository: QuizRepository,
        prompter: Prompter,
        renderer: Renderer,
        prompt_text: str = "quiz > ",
        authors: Sequence[str] = (),
        rng: random.Random | None = None,
    ) -> None:
        self._prompter = prompter
        self._renderer = renderer
        self._prompt_text = prompt_text
        self._rng = rng or random.Random()
        self._prompt_pending = False
        self._closed = False
        self.context = CommandContext(
            repository=repository,
            prompter=prompter,
            renderer=renderer,
            shell=self,
            authors=tuple(authors),
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def prompt(self) -> None:
        self._prompt_pending = True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._renderer.log("Bye!", "green")

    async def dispatch(self, line: str) -> None:
        parsed = parse_line(line)
        if parsed is None:
            self.prompt()
            return
        verb, arg = parsed
        handler = VERBS.get(verb)
        if handler is None:
            self._renderer.log(
                f"Unknown command: '{self._renderer.colorize(verb, 'red')}'"
            )
            self._renderer.log(
                f"Use {self._renderer.colorize('help', 'green')} to see "
                "every available command."
            )
            self.prompt()
            return
        logger.debug("Dispatching %s", verb, extra={"argument": arg})
        await handler(self.context, arg, self._rng)

    async def run(self) -> None:
        self.prompt()
        while not self._closed:
            if not self._prompt_pending:
                logger.warning("Command finished without re-prompting")
            self._prompt_pending = False
            try:
                line = await self._prompter.read_line(self._prompt_text)
            except (EOFError, KeyboardInterrupt):
                self._renderer.log("")
                self.close()
                break
            await self.dispatch(line)
