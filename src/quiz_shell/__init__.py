"""Interactive command-line shell to manage and play trivia quizzes."""

from __future__ import annotations

from .errors import (
    MissingParameterError,
    NotANumberError,
    NotFoundError,
    QuizShellError,
    RepositoryError,
    ValidationFailedError,
)
from .store import Quiz, QuizStore
from .validation import validate_id

__all__ = [
    "MissingParameterError",
    "NotANumberError",
    "NotFoundError",
    "QuizShellError",
    "RepositoryError",
    "ValidationFailedError",
    "Quiz",
    "QuizStore",
    "validate_id",
]
