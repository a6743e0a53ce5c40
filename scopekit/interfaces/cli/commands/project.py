"""Folder management CLI commands."""

import typer

from scopekit.domain.shared import Err
from scopekit.domain.task import SortKey
from scopekit.interfaces.cli.common import (
    open_store,
    print_error,
    print_header,
    print_info,
    print_success,
    report_save,
    resolve_project,
    short_id,
)

app = typer.Typer(help="Folder management commands")


# =============================================================================
# Commands
# =============================================================================


@app.command("list")
def list_projects(
    sort: SortKey = typer.Option(SortKey.ORDER, "--sort", "-s", help="Sort key"),
    descending: bool = typer.Option(False, "--desc", help="Reverse the sort"),
) -> None:
    """List folders with their progress.

    Pinned folders come first and Unassigned last.
    """
    store = open_store()
    print_header("FOLDERS")
    for summary in store.project_summaries(sort, descending):
        pin = "* " if summary.pinned else "  "
        typer.echo(
            f"{pin}{summary.name}  {summary.completed_tasks} done, "
            f"{summary.total_tasks} scopes ({summary.progress_percent:.0f}%)  "
            f"[{short_id(summary.id)}]"
        )


@app.command("create")
def create(
    name: str = typer.Argument(..., help="Folder name"),
    description: str = typer.Option("", "--description", "-d", help="Folder description"),
) -> None:
    """Create a new folder.

    Example:
        scopekit project create "Garden"
    """
    store = open_store()
    result = store.create_project(name, description)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    print_success(f"Created folder '{result.value.name}' [{short_id(result.value.id)}]")
    report_save(store)


@app.command("rename")
def rename(
    project: str = typer.Argument(..., help="Folder id, id prefix or name"),
    name: str = typer.Argument(..., help="New name"),
) -> None:
    """Rename a folder (Unassigned cannot be renamed)."""
    store = open_store()
    target = resolve_project(store, project)
    if not store.update_project(target.id, name=name):
        print_error(f"Could not rename folder '{target.name}'")
        raise typer.Exit(1)
    print_success(f"Renamed folder to '{name.strip()}'")
    report_save(store)


@app.command("describe")
def describe(
    project: str = typer.Argument(..., help="Folder id, id prefix or name"),
    description: str = typer.Argument(..., help="New description"),
) -> None:
    """Set a folder's description."""
    store = open_store()
    target = resolve_project(store, project)
    store.update_project(target.id, description=description)
    print_success(f"Updated description of '{target.name}'")
    report_save(store)


def _set_pinned(project: str, pinned: bool) -> None:
    store = open_store()
    target = resolve_project(store, project)
    if not store.update_project(target.id, pinned=pinned):
        print_error(f"Folder '{target.name}' cannot be {'pinned' if pinned else 'unpinned'}")
        raise typer.Exit(1)
    print_success(f"{'Pinned' if pinned else 'Unpinned'} '{target.name}'")
    report_save(store)


@app.command("pin")
def pin(project: str = typer.Argument(..., help="Folder id, id prefix or name")) -> None:
    """Pin a folder to the top of the list."""
    _set_pinned(project, True)


@app.command("unpin")
def unpin(project: str = typer.Argument(..., help="Folder id, id prefix or name")) -> None:
    """Unpin a folder."""
    _set_pinned(project, False)


@app.command("delete")
def delete(
    project: str = typer.Argument(..., help="Folder id, id prefix or name"),
) -> None:
    """Delete a folder and all of its scopes."""
    store = open_store()
    target = resolve_project(store, project)
    if not store.delete_project(target.id):
        print_error(f"Folder '{target.name}' cannot be deleted")
        raise typer.Exit(1)
    print_success(f"Deleted folder '{target.name}'")
    print_info("Run 'scopekit undo' to restore it.")
    report_save(store)
