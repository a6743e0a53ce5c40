"""Undo/redo CLI commands.

History is saved with the workspace, so undo works across invocations.
"""

from datetime import datetime

import typer

from scopekit.interfaces.cli.common import (
    open_store,
    print_error,
    print_header,
    print_success,
    report_save,
)


def undo() -> None:
    """Undo the last change."""
    store = open_store()
    label = store.history.past[-1].label if store.history.can_undo() else ""
    if not store.undo():
        print_error("Nothing to undo")
        raise typer.Exit(1)
    print_success(f"Undid: {label}")
    report_save(store)


def redo() -> None:
    """Redo the last undone change."""
    store = open_store()
    label = store.history.future[-1].label if store.history.can_redo() else ""
    if not store.redo():
        print_error("Nothing to redo")
        raise typer.Exit(1)
    print_success(f"Redid: {label}")
    report_save(store)


def list_history() -> None:
    """Show the undo and redo stacks, most recent first."""
    store = open_store()
    print_header("HISTORY")
    past = store.history.past
    future = store.history.future
    if not past and not future:
        typer.echo("No changes recorded.")
        return
    for entry in reversed(future):
        typer.echo(f"  redo  {_format_time(entry.timestamp)}  {entry.label}")
    for entry in reversed(past):
        typer.echo(f"  undo  {_format_time(entry.timestamp)}  {entry.label}")


def _format_time(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")
