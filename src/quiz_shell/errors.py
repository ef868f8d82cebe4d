"""Exception hierarchy shared by the quiz shell modules."""

from __future__ import annotations

from typing import Sequence

__all__ = [
    "QuizShellError",
    "MissingParameterError",
    "NotANumberError",
    "NotFoundError",
    "ValidationFailedError",
    "RepositoryError",
    "ConfigError",
    "WorkspaceError",
]


class QuizShellError(RuntimeError):
    """Base class for errors reported to the user as a single line."""


class MissingParameterError(QuizShellError):
    """Raised when a command needs an ``<id>`` argument and got none."""


class NotANumberError(QuizShellError):
    """Raised when the ``<id>`` argument does not parse as an integer."""


class NotFoundError(QuizShellError):
    """Raised when an id does not resolve to a stored quiz."""

    def __init__(self, quiz_id: int) -> None:
        super().__init__(f"No quiz exists with id={quiz_id}.")
        self.quiz_id = quiz_id


class ValidationFailedError(QuizShellError):
    """Raised when one or more quiz fields violate a store constraint."""

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = tuple(messages)
        super().__init__("; ".join(self.messages) or "Validation failed.")


class RepositoryError(QuizShellError):
    """Raised when reading or writing the quiz store fails."""


class ConfigError(QuizShellError):
    """Raised when configuration parsing or validation fails."""


class WorkspaceError(QuizShellError):
    """Raised when the data home cannot be prepared."""
