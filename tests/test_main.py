from __future__ import annotations

import json
import logging

import pytest

from quiz_shell import _main
from quiz_shell.core import WORKSPACE_ENV
from quiz_shell.prompter import Prompter


@pytest.fixture(autouse=True)
def _reset_shell_logger():
    yield
    logger = logging.getLogger("quiz_shell")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def _script(monkeypatch, lines):
    pending = list(lines)

    async def read_line(self, prompt):
        if not pending:
            raise EOFError
        return pending.pop(0)

    async def ask(self, text, prefill=None):
        return pending.pop(0).strip()

    monkeypatch.setattr(Prompter, "read_line", read_line)
    monkeypatch.setattr(Prompter, "ask", ask)


def test_main_runs_session_against_store(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv(WORKSPACE_ENV, str(tmp_path / "home"))
    store_path = tmp_path / "quizzes.json"
    _script(monkeypatch, ["add", "2+2?", "4", "list", "quit"])

    code = _main.main(["--store", str(store_path)])

    assert code == 0
    payload = json.loads(store_path.read_text(encoding="utf-8"))
    questions = [row["question"] for row in payload["quizzes"]]
    assert questions[-1] == "2+2?"
    assert len(questions) == 5
    out = capsys.readouterr().out
    assert "Capital of Italy" in out
    assert "Bye!" in out
    assert (tmp_path / "home" / "logs" / "quiz_shell.log").exists()


def test_main_reads_config_from_data_home(tmp_path, monkeypatch, capsys):
    home = tmp_path / "home"
    monkeypatch.setenv(WORKSPACE_ENV, str(home))
    (home / "config").mkdir(parents=True)
    store_path = tmp_path / "custom.json"
    (home / "config" / "quiz-shell.toml").write_text(
        f'[storage]\npath = "{store_path.as_posix()}"\nseed = false\n\n'
        '[shell]\nauthors = ["Grace Hopper"]\n',
        encoding="utf-8",
    )
    _script(monkeypatch, ["credits"])

    code = _main.main([])

    assert code == 0
    payload = json.loads(store_path.read_text(encoding="utf-8"))
    assert payload["quizzes"] == []
    assert "Grace Hopper" in capsys.readouterr().out


def test_main_reports_bad_config(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv(WORKSPACE_ENV, str(tmp_path / "home"))
    bad = tmp_path / "bad.toml"
    bad.write_text("[nope]\n", encoding="utf-8")

    code = _main.main(["--config", str(bad)])

    assert code == 2
    assert "Unknown configuration key 'nope'" in capsys.readouterr().out
