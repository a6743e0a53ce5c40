"""Shared utilities for scopekit CLI commands.

This module provides common utilities used across CLI commands:
- Store construction from the user settings
- Id prefix resolution for folders and scopes
- Formatted output helpers (error, success, info, warning)
- Scope tree rendering
"""

import logging
import sys
from typing import Annotated, Optional

import typer

from scopekit.application import ScopeStore
from scopekit.config import Settings, load_settings
from scopekit.domain.project import Project
from scopekit.domain.task import Task, TaskStatus, calculate_task_progress, iter_tasks
from scopekit.infrastructure.storage import FileBlobStorage, WorkspaceRepository

# Number of id characters shown in listings
SHORT_ID_LENGTH = 8

STATUS_MARKERS = {
    TaskStatus.TODO: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.DONE: "[x]",
}

# Reusable folder option for CLI commands
# Usage: def my_command(project: ProjectOption = None) -> None:
ProjectOption = Annotated[Optional[str], typer.Option(
    "--project", "-p",
    help="Folder id, id prefix or name (or set SCOPEKIT_PROJECT env var)",
    envvar="SCOPEKIT_PROJECT",
)]

_log_handler: logging.Handler | None = None


# =============================================================================
# Setup
# =============================================================================


def setup_logging(verbose: bool = False) -> None:
    """Send ``scopekit`` log records to stderr.

    Args:
        verbose: Log at DEBUG instead of WARNING
    """
    global _log_handler
    logger = logging.getLogger("scopekit")
    if _log_handler is not None:
        logger.removeHandler(_log_handler)
    _log_handler = logging.StreamHandler(sys.stderr)
    _log_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(_log_handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def open_store(settings: Settings | None = None) -> ScopeStore:
    """Load the user's workspace into a store and report load repairs."""
    settings = settings or load_settings()
    repository = WorkspaceRepository(
        FileBlobStorage(settings.resolved_data_dir()),
        user=settings.user,
    )
    store = ScopeStore(
        repository,
        history_limit=settings.history_limit,
        heading_words=settings.heading_words,
    )
    for warning in store.load_warnings:
        print_warning(warning)
    return store


def report_save(store: ScopeStore) -> None:
    """Print the store's save warning, if the last save failed."""
    if store.save_warning:
        print_warning(store.save_warning)


# =============================================================================
# Id resolution
# =============================================================================


def resolve_project(store: ScopeStore, ref: str | None) -> Project:
    """Find a folder by id, unique id prefix or name.

    ``None`` means the active folder, or Unassigned if there is none.

    Raises:
        typer.Exit: If nothing or more than one folder matches.
    """
    projects = store.projects
    if ref is None:
        active = store.active_item.project_id
        project = store.find_project(active) if active else None
        return project or projects[0]

    exact = [p for p in projects if p.id == ref or p.name.casefold() == ref.casefold()]
    matches = exact or [p for p in projects if p.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        print_error(f"Folder not found: {ref}")
    else:
        print_error(f"'{ref}' matches {len(matches)} folders, use a longer id")
    raise typer.Exit(1)


def resolve_task(store: ScopeStore, ref: str) -> Task:
    """Find a scope anywhere in the forest by id or unique id prefix.

    Raises:
        typer.Exit: If nothing or more than one scope matches.
    """
    tasks = [task for project in store.projects for task in iter_tasks(project.tasks)]
    exact = [task for task in tasks if task.id == ref]
    matches = exact or [task for task in tasks if task.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        print_error(f"Scope not found: {ref}")
    else:
        print_error(f"'{ref}' matches {len(matches)} scopes, use a longer id")
    raise typer.Exit(1)


# =============================================================================
# Output
# =============================================================================


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    """Print a formatted success message.

    Args:
        msg: Success message to display
    """
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    """Print a formatted info message."""
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    """Print a formatted warning message."""
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


def short_id(item_id: str) -> str:
    return item_id[:SHORT_ID_LENGTH]


def format_task_line(task: Task) -> str:
    """One display line: status marker, text, progress for branches, short id."""
    line = f"{STATUS_MARKERS[task.status]} {task.text}"
    if task.subtasks:
        line += f" ({calculate_task_progress(task):.0f}%)"
    return f"{line}  [{short_id(task.id)}]"


def print_tree_recursive(tasks: list[Task], indent: int = 0) -> None:
    """Recursively print a scope tree."""
    prefix = "  " * indent
    for task in tasks:
        typer.echo(f"{prefix}- {format_task_line(task)}")
        if task.subtasks:
            print_tree_recursive(task.subtasks, indent + 1)


__all__ = [
    "ProjectOption",
    "setup_logging",
    "open_store",
    "report_save",
    "resolve_project",
    "resolve_task",
    "print_error",
    "print_success",
    "print_info",
    "print_warning",
    "print_separator",
    "print_header",
    "short_id",
    "format_task_line",
    "print_tree_recursive",
]
