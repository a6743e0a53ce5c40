"""CLI command groups for scopekit.

This package contains individual command groups that are registered
with the main Typer app. Each module provides a set of related commands.

Command groups:
- project: Folder management (list, create, rename, pin, delete)
- task: Scope trees (add, sub, status, move, promote, show, ...)
- ai: Outline ingestion and generation (ingest, generate, expand, alternative)
- history: Undo and redo

Each command group is a Typer app that gets registered
with the main app using app.add_typer().
"""

from scopekit.interfaces.cli.commands import ai, history, project, task

__all__ = ["project", "task", "ai", "history"]
