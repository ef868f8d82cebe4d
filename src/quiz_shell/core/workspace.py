"""Data home resolution for the quiz shell."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, MutableMapping

from ..errors import WorkspaceError

WORKSPACE_ENV = "QUIZ_SHELL_DATA_HOME"
DEFAULT_WORKSPACE = Path.home() / ".quiz-shell-data"

_SUBDIRS = {
    "config": "config",
    "data": "data",
    "logs": "logs",
}


@dataclass(frozen=True)
class WorkspaceLayout:
    """Resolved data home and its managed sub-directories."""

    home: Path
    directories: Mapping[str, Path]

    def path_for(self, key: str) -> Path:
        try:
            return self.directories[key]
        except KeyError as exc:
            raise KeyError(f"Unknown workspace directory '{key}'.") from exc

    @property
    def default_store(self) -> Path:
        return self.path_for("data") / "quizzes.json"

    @property
    def default_config(self) -> Path:
        return self.path_for("config") / "quiz-shell.toml"


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Return the workspace layout, creating directories when ``create``.

    Without an explicit override an unwritable home falls back to a
    directory under the system temp dir.
    """

    env_map = os.environ if env is None else env
    base, has_override = _resolve_base(env_map, override=path)

    candidates = [base]
    if create and not has_override:
        fallback = Path(tempfile.gettempdir()) / "quiz-shell-data"
        if fallback != base:
            candidates.append(fallback)

    last_error: Exception | None = None
    for candidate in candidates:
        try:
            return _materialize(candidate, create=create)
        except PermissionError as exc:
            last_error = exc
    raise WorkspaceError(
        f"Unable to prepare workspace at {base}"
    ) from last_error


def _resolve_base(
    env: Mapping[str, str], *, override: Path | None
) -> tuple[Path, bool]:
    if override is not None:
        return override.expanduser().absolute(), True
    custom = (env.get(WORKSPACE_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser().absolute(), True
    return DEFAULT_WORKSPACE, False


def _materialize(base: Path, *, create: bool) -> WorkspaceLayout:
    if base.exists() and not base.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {base}"
        )
    directories: MutableMapping[str, Path] = {}
    for key, relative in _SUBDIRS.items():
        candidate = base / relative
        if create:
            candidate.mkdir(parents=True, exist_ok=True)
            _chmod_safe(candidate, 0o700)
        elif candidate.exists() and not candidate.is_dir():
            raise WorkspaceError(
                f"Expected workspace directory for '{key}' but found a "
                f"file: {candidate}"
            )
        directories[key] = candidate
    return WorkspaceLayout(
        home=base,
        directories=MappingProxyType(dict(directories)),
    )


def _chmod_safe(path: Path, mode: int) -> None:
    try:
        path.chmod(mode)
    except (PermissionError, NotImplementedError):
        return
