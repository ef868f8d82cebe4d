"""Shared fakes for the quiz_shell test suite."""

from .repository import MemoryRepository  # noqa: F401
from .session import RecordingShell, ScriptedPrompter  # noqa: F401

__all__ = [
    "MemoryRepository",
    "RecordingShell",
    "ScriptedPrompter",
]
