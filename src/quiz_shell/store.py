"""Single-table quiz store persisted as a JSON document.

Every public operation is a coroutine; the file IO runs in a worker thread
so the shell's event loop keeps the sequential, one-pipeline-at-a-time
behaviour without blocking.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Protocol, Sequence

from .errors import RepositoryError, ValidationFailedError

__all__ = [
    "Quiz",
    "QuizRepository",
    "QuizStore",
    "SEED_QUIZZES",
]

logger = logging.getLogger(__name__)

_LOCK_SUFFIX = ".lock"
_LOCK_TIMEOUT_SECONDS = 5.0

SEED_QUIZZES: tuple[tuple[str, str], ...] = (
    ("Capital of Italy", "Rome"),
    ("Capital of France", "Paris"),
    ("Capital of Spain", "Madrid"),
    ("Capital of Portugal", "Lisbon"),
)


@dataclass(frozen=True)
class Quiz:
    """A question/answer pair identified by a store-assigned id."""

    id: int
    question: str
    answer: str
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> MutableMapping[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Quiz":
        try:
            return cls(
                id=int(payload["id"]),
                question=str(payload["question"]),
                answer=str(payload["answer"]),
                created_at=str(payload.get("created_at", "")),
                updated_at=str(payload.get("updated_at", "")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RepositoryError(f"Malformed quiz record: {exc}") from exc


class QuizRepository(Protocol):
    """Persistence operations the command handlers rely on."""

    async def create(self, question: str, answer: str) -> Quiz:
        ...

    async def find_by_id(self, quiz_id: int) -> Quiz | None:
        ...

    async def find_all(self) -> list[Quiz]:
        ...

    async def count(self) -> int:
        ...

    async def destroy(self, quiz_id: int) -> None:
        ...

    async def save(self, quiz: Quiz) -> Quiz:
        ...


class QuizStore:
    """JSON-backed :class:`QuizRepository` implementation."""

    def __init__(self, path: Path, *, seed: bool = True) -> None:
        self._path = path
        self._seed = seed

    @property
    def path(self) -> Path:
        return self._path

    async def create(self, question: str, answer: str) -> Quiz:
        return await asyncio.to_thread(self._create, question, answer)

    async def find_by_id(self, quiz_id: int) -> Quiz | None:
        return await asyncio.to_thread(self._find_by_id, quiz_id)

    async def find_all(self) -> list[Quiz]:
        return await asyncio.to_thread(self._find_all)

    async def count(self) -> int:
        return len(await self.find_all())

    async def destroy(self, quiz_id: int) -> None:
        await asyncio.to_thread(self._destroy, quiz_id)

    async def save(self, quiz: Quiz) -> Quiz:
        return await asyncio.to_thread(self._save, quiz)

    def initialize(self) -> None:
        """Create the store file, seeding it when configured to."""

        if self._path.exists():
            return
        with _StoreLock(self._lock_path()):
            if self._path.exists():
                return
            table: MutableMapping[str, Any] = {"next_id": 1, "quizzes": []}
            if self._seed:
                for question, answer in SEED_QUIZZES:
                    _insert(table, question, answer)
            _atomic_write_json(self._path, table)
        logger.info(
            "Initialized quiz store",
            extra={"path": self._path, "seeded": self._seed},
        )

    def _create(self, question: str, answer: str) -> Quiz:
        self.initialize()
        with _StoreLock(self._lock_path()):
            table = self._read_table()
            _validate(table, question, answer)
            quiz = _insert(table, question, answer)
            _atomic_write_json(self._path, table)
        logger.debug("Created quiz", extra={"quiz_id": quiz.id})
        return quiz

    def _find_by_id(self, quiz_id: int) -> Quiz | None:
        for quiz in self._find_all():
            if quiz.id == quiz_id:
                return quiz
        return None

    def _find_all(self) -> list[Quiz]:
        self.initialize()
        rows = [Quiz.from_dict(item) for item in self._read_table()["quizzes"]]
        rows.sort(key=lambda quiz: quiz.id)
        return rows

    def _destroy(self, quiz_id: int) -> None:
        self.initialize()
        with _StoreLock(self._lock_path()):
            table = self._read_table()
            table["quizzes"] = [
                item
                for item in table["quizzes"]
                if int(item.get("id", -1)) != quiz_id
            ]
            _atomic_write_json(self._path, table)
        logger.debug("Destroyed quiz", extra={"quiz_id": quiz_id})

    def _save(self, quiz: Quiz) -> Quiz:
        self.initialize()
        with _StoreLock(self._lock_path()):
            table = self._read_table()
            _validate(table, quiz.question, quiz.answer, exclude_id=quiz.id)
            for index, item in enumerate(table["quizzes"]):
                if int(item.get("id", -1)) == quiz.id:
                    saved = replace(quiz, updated_at=_timestamp())
                    table["quizzes"][index] = saved.to_dict()
                    break
            else:
                raise RepositoryError(
                    f"Cannot save quiz {quiz.id}: it no longer exists."
                )
            _atomic_write_json(self._path, table)
        logger.debug("Saved quiz", extra={"quiz_id": quiz.id})
        return saved

    def _read_table(self) -> MutableMapping[str, Any]:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise RepositoryError(
                f"Failed to parse quiz store: {self._path}"
            ) from exc
        except OSError as exc:
            raise RepositoryError(
                f"Failed to read quiz store: {self._path}"
            ) from exc
        if not isinstance(payload, dict) or not isinstance(
            payload.get("quizzes"), list
        ):
            raise RepositoryError(
                f"Unexpected quiz store structure in {self._path}."
            )
        payload.setdefault("next_id", _next_id(payload["quizzes"]))
        return payload

    def _lock_path(self) -> Path:
        return self._path.with_name(self._path.name + _LOCK_SUFFIX)


def _validate(
    table: Mapping[str, Any],
    question: str,
    answer: str,
    *,
    exclude_id: int | None = None,
) -> None:
    messages: list[str] = []
    if not question.strip():
        messages.append("question must not be empty.")
    elif any(
        item.get("question") == question
        and int(item.get("id", -1)) != exclude_id
        for item in table["quizzes"]
    ):
        messages.append("question must be unique.")
    if not answer.strip():
        messages.append("answer must not be empty.")
    if messages:
        raise ValidationFailedError(messages)


def _insert(
    table: MutableMapping[str, Any], question: str, answer: str
) -> Quiz:
    quiz_id = max(int(table["next_id"]), _next_id(table["quizzes"]))
    stamp = _timestamp()
    quiz = Quiz(
        id=quiz_id,
        question=question,
        answer=answer,
        created_at=stamp,
        updated_at=stamp,
    )
    table["quizzes"].append(quiz.to_dict())
    table["next_id"] = quiz_id + 1
    return quiz


def _next_id(rows: Sequence[Mapping[str, Any]]) -> int:
    return max((int(item.get("id", 0)) for item in rows), default=0) + 1


class _StoreLock:
    """Filesystem lock using exclusive file creation."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def __enter__(self) -> "_StoreLock":
        self._path.parent.mkdir(parents=True, exist_ok=True)
        deadline = time.monotonic() + _LOCK_TIMEOUT_SECONDS
        while True:
            try:
                fd = os.open(
                    self._path,
                    os.O_CREAT | os.O_EXCL | os.O_WRONLY,
                )
                os.close(fd)
                return self
            except FileExistsError:
                if time.monotonic() > deadline:
                    raise RepositoryError(
                        f"Timed out waiting for store lock: {self._path}"
                    )
                time.sleep(0.05)

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self._path.unlink(missing_ok=True)


def _atomic_write_json(path: Path, payload: Mapping[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        "w",
        delete=False,
        encoding="utf-8",
        dir=str(path.parent),
    )
    try:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
        handle.flush()
        os.fsync(handle.fileno())
    finally:
        handle.close()
    os.replace(handle.name, path)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
