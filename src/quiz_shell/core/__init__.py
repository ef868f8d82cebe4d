"""Workspace and logging plumbing for the quiz shell."""

from __future__ import annotations

from .logging import JsonLogFormatter, configure_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "configure_logger",
    "JsonLogFormatter",
    "ensure_workspace",
    "WorkspaceLayout",
    "WORKSPACE_ENV",
]
