"""Command handlers for the interactive quiz shell.

Each handler is a coroutine that runs one pipeline: validate the argument,
talk to the repository and the user, render the outcome, and hand control
back to the shell by re-issuing the prompt exactly once. Errors never
escape a handler; they are rendered and the prompt comes back.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, Protocol, Sequence

from .errors import NotFoundError, QuizShellError, ValidationFailedError
from .output import Renderer
from .prompter import Prompter
from .store import Quiz, QuizRepository
from .validation import validate_id

__all__ = [
    "CommandContext",
    "ShellControl",
    "HELP_LINES",
    "answers_match",
    "command_pipeline",
    "help_cmd",
    "list_cmd",
    "show_cmd",
    "add_cmd",
    "delete_cmd",
    "edit_cmd",
    "test_cmd",
    "credits_cmd",
    "quit_cmd",
]

logger = logging.getLogger(__name__)

HELP_LINES: Sequence[str] = (
    "  h|help - Show this help.",
    "  list - List the stored quizzes.",
    "  show <id> - Show the question and answer of a quiz.",
    "  add - Add a new quiz interactively.",
    "  delete <id> - Delete a quiz.",
    "  edit <id> - Edit a quiz.",
    "  test <id> - Test yourself on a quiz.",
    "  p|play - Play every quiz in random order.",
    "  credits - Show the authors.",
    "  q|quit - Exit the program.",
)


class ShellControl(Protocol):
    """What a handler may do to the interactive session."""

    def prompt(self) -> None:
        ...

    def close(self) -> None:
        ...


@dataclass(frozen=True)
class CommandContext:
    repository: QuizRepository
    prompter: Prompter
    renderer: Renderer
    shell: ShellControl
    authors: Sequence[str] = ()


def answers_match(given: str | None, expected: str) -> bool:
    """Case- and surrounding-whitespace-insensitive answer comparison."""

    return (given or "").strip().lower() == expected.strip().lower()


@contextmanager
def command_pipeline(ctx: CommandContext, name: str) -> Iterator[None]:
    """Render any pipeline error, then re-issue the prompt once."""

    try:
        yield
    except ValidationFailedError as exc:
        ctx.renderer.errorlog("The quiz is invalid:")
        for message in exc.messages:
            ctx.renderer.errorlog(message)
    except QuizShellError as exc:
        logger.debug("Command %s failed: %s", name, exc)
        ctx.renderer.errorlog(str(exc))
    except Exception as exc:
        logger.exception("Unexpected failure in %s", name)
        ctx.renderer.errorlog(str(exc) or type(exc).__name__)
    finally:
        ctx.shell.prompt()


async def _require_quiz(ctx: CommandContext, raw_id: object) -> Quiz:
    quiz_id = validate_id(raw_id)
    quiz = await ctx.repository.find_by_id(quiz_id)
    if quiz is None:
        raise NotFoundError(quiz_id)
    return quiz


def _describe(ctx: CommandContext, quiz: Quiz) -> str:
    arrow = ctx.renderer.colorize("=>", "magenta")
    return (
        f"{ctx.renderer.colorize(quiz.question)} {arrow} "
        f"{ctx.renderer.colorize(quiz.answer)}"
    )


async def help_cmd(ctx: CommandContext) -> None:
    with command_pipeline(ctx, "help"):
        ctx.renderer.log("Commands:")
        for line in HELP_LINES:
            ctx.renderer.log(ctx.renderer.colorize(line))


async def list_cmd(ctx: CommandContext) -> None:
    with command_pipeline(ctx, "list"):
        for quiz in await ctx.repository.find_all():
            ctx.renderer.log(
                f"{ctx.renderer.colorize(quiz.id, 'magenta')}: "
                f"{ctx.renderer.colorize(quiz.question)}"
            )


async def show_cmd(ctx: CommandContext, raw_id: object = None) -> None:
    with command_pipeline(ctx, "show"):
        quiz = await _require_quiz(ctx, raw_id)
        ctx.renderer.log(
            f" [{ctx.renderer.colorize(quiz.id, 'magenta')}]:  "
            f"{_describe(ctx, quiz)}"
        )


async def add_cmd(ctx: CommandContext) -> None:
    with command_pipeline(ctx, "add"):
        question = await ctx.prompter.ask("Enter a question: ")
        answer = await ctx.prompter.ask("Enter the answer: ")
        quiz = await ctx.repository.create(question, answer)
        logger.info("Quiz added", extra={"quiz_id": quiz.id})
        ctx.renderer.log(
            f" {ctx.renderer.colorize('Added', 'magenta')}: "
            f"{_describe(ctx, quiz)}"
        )


async def delete_cmd(ctx: CommandContext, raw_id: object = None) -> None:
    with command_pipeline(ctx, "delete"):
        quiz = await _require_quiz(ctx, raw_id)
        await ctx.repository.destroy(quiz.id)
        logger.info("Quiz deleted", extra={"quiz_id": quiz.id})
        ctx.renderer.log(
            f" Deleted quiz [{ctx.renderer.colorize(quiz.id, 'magenta')}]."
        )


async def edit_cmd(ctx: CommandContext, raw_id: object = None) -> None:
    with command_pipeline(ctx, "edit"):
        quiz = await _require_quiz(ctx, raw_id)
        question = await ctx.prompter.ask(
            "Enter the question: ", prefill=quiz.question
        )
        answer = await ctx.prompter.ask(
            "Enter the answer: ", prefill=quiz.answer
        )
        saved = await ctx.repository.save(
            replace(quiz, question=question, answer=answer)
        )
        logger.info("Quiz edited", extra={"quiz_id": saved.id})
        ctx.renderer.log(
            f" Quiz {ctx.renderer.colorize(saved.id, 'magenta')} changed "
            f"to: {_describe(ctx, saved)}"
        )


async def test_cmd(ctx: CommandContext, raw_id: object = None) -> None:
    with command_pipeline(ctx, "test"):
        quiz = await _require_quiz(ctx, raw_id)
        answer = await ctx.prompter.ask(f"{quiz.question}? ")
        if answers_match(answer, quiz.answer):
            ctx.renderer.biglog("CORRECT", "green")
        else:
            ctx.renderer.biglog("INCORRECT", "red")


async def credits_cmd(ctx: CommandContext) -> None:
    with command_pipeline(ctx, "credits"):
        ctx.renderer.log("Authors:")
        for author in ctx.authors:
            ctx.renderer.log(ctx.renderer.colorize(author), "green")


async def quit_cmd(ctx: CommandContext) -> None:
    ctx.shell.close()
