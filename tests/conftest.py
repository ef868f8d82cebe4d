from __future__ import annotations

import sys
from pathlib import Path

import pytest
from rich.console import Console

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import (  # noqa: E402
    MemoryRepository,
    RecordingShell,
    ScriptedPrompter,
)
from quiz_shell.commands import CommandContext  # noqa: E402
from quiz_shell.output import Renderer  # noqa: E402
from quiz_shell.store import QuizStore  # noqa: E402


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=100, color_system=None)


@pytest.fixture
def renderer(console: Console) -> Renderer:
    return Renderer(console)


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def shell() -> RecordingShell:
    return RecordingShell()


@pytest.fixture
def store(tmp_path: Path) -> QuizStore:
    """A fresh, unseeded JSON store under the test's tmp directory."""

    quiz_store = QuizStore(tmp_path / "quizzes.json", seed=False)
    quiz_store.initialize()
    return quiz_store


@pytest.fixture
def make_ctx(prompter, renderer, shell):
    """Build a :class:`CommandContext` around a given repository."""

    def _make(repository, authors=("Ada Lovelace",)) -> CommandContext:
        return CommandContext(
            repository=repository,
            prompter=prompter,
            renderer=renderer,
            shell=shell,
            authors=authors,
        )

    return _make


@pytest.fixture
def memory_repo() -> MemoryRepository:
    return MemoryRepository(
        [
            ("Capital of Spain", "Madrid"),
            ("2+2", "4"),
            ("Largest planet", "Jupiter"),
        ]
    )
