"""Process entry point: build the collaborators and run the shell."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Sequence

from rich.console import Console

from .config import ShellConfig, load_config
from .core import configure_logger, ensure_workspace
from .errors import QuizShellError
from .output import Renderer
from .prompter import Prompter
from .shell import QuizShell
from .store import QuizStore

logger = logging.getLogger("quiz_shell")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="quiz-shell",
        description="Interactive shell to manage and play trivia quizzes",
    )
    p.add_argument(
        "--config",
        type=Path,
        help="TOML config file (default: <data home>/config/quiz-shell.toml)",
    )
    p.add_argument("--store", type=Path, help="Quiz store JSON file")
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror debug logs to stderr",
    )
    return p


def _resolve_config(args: argparse.Namespace, default: Path) -> ShellConfig:
    if args.config is not None:
        return load_config(args.config)
    return load_config(default if default.is_file() else None)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    console = Console()
    try:
        layout = ensure_workspace()
        cfg = _resolve_config(args, layout.default_config)
        configure_logger(
            "quiz_shell",
            log_dir=layout.path_for("logs"),
            level=cfg.logging.level,
            verbose=args.verbose or cfg.logging.verbose,
        )
        store_path = args.store or cfg.store_path(layout.default_store)
        store = QuizStore(store_path, seed=cfg.storage.seed)
        store.initialize()
    except (QuizShellError, OSError) as exc:
        console.print(f"[bold red]Error:[/] {exc}", highlight=False)
        return 2

    logger.info("Starting quiz shell", extra={"store": store_path})
    shell = QuizShell(
        repository=store,
        prompter=Prompter(console),
        renderer=Renderer(console),
        prompt_text=cfg.shell.prompt,
        authors=cfg.shell.authors,
    )
    try:
        asyncio.run(shell.run())
    except KeyboardInterrupt:
        console.print()
        shell.close()
    return 0
