"""Scope management CLI commands.

Commands for building and editing scope trees: adding, nesting, status
changes, moving, reordering and showing a folder's tree.
"""

from typing import List

import typer

from scopekit.domain.task import (
    Provenance,
    SortKey,
    Task,
    TaskStatus,
    calculate_project_progress,
    sort_tasks,
)
from scopekit.interfaces.cli.common import (
    format_task_line,
    open_store,
    print_error,
    print_header,
    print_info,
    print_separator,
    print_success,
    print_tree_recursive,
    ProjectOption,
    report_save,
    resolve_project,
    resolve_task,
    short_id,
)

app = typer.Typer(help="Scope management commands")


# =============================================================================
# Commands
# =============================================================================


@app.command("add")
def add(
    text: str = typer.Argument(..., help="Scope text"),
    description: str = typer.Option("", "--description", "-d", help="Scope description"),
    project: ProjectOption = None,
) -> None:
    """Add a root scope to a folder (default: the active folder)."""
    store = open_store()
    target = resolve_project(store, project)
    task_id = store.create_task(target.id, text, description)
    if task_id is None:
        print_error(f"Folder not found: {target.id}")
        raise typer.Exit(1)
    print_success(f"Added '{text}' to '{target.name}' [{short_id(task_id)}]")
    report_save(store)


@app.command("sub")
def sub(
    parent: str = typer.Argument(..., help="Parent scope id or id prefix"),
    text: str = typer.Argument(..., help="Scope text"),
    description: str = typer.Option("", "--description", "-d", help="Scope description"),
) -> None:
    """Add a sub-scope under an existing scope."""
    store = open_store()
    anchor = resolve_task(store, parent)
    child = Task(text=text, description=description, source=Provenance.MANUAL)
    if not store.add_subtasks(anchor.id, [child]):
        print_error(f"Scope not found: {anchor.id}")
        raise typer.Exit(1)
    print_success(f"Added '{text}' under '{anchor.text}' [{short_id(child.id)}]")
    report_save(store)


@app.command("status")
def status(
    task: str = typer.Argument(..., help="Scope id or id prefix"),
    value: TaskStatus = typer.Argument(..., help="New status"),
) -> None:
    """Set the status of a leaf scope.

    Scopes with sub-scopes derive their status from their children, so
    setting it directly has no effect.
    """
    store = open_store()
    target = resolve_task(store, task)
    if target.subtasks:
        print_info(f"'{target.text}' has sub-scopes; its status follows them.")
        return
    store.update_task(target.id, status=value)
    updated = store.find_task(target.id)
    print_success(f"'{updated.text}' is now {updated.status.value}")
    report_save(store)


@app.command("rename")
def rename(
    task: str = typer.Argument(..., help="Scope id or id prefix"),
    text: str = typer.Argument(..., help="New text"),
    description: str | None = typer.Option(
        None, "--description", "-d", help="Also replace the description"
    ),
) -> None:
    """Change a scope's text (and optionally its description)."""
    store = open_store()
    target = resolve_task(store, task)
    store.update_task(target.id, text=text, description=description)
    print_success(f"Renamed '{target.text}' to '{text}'")
    report_save(store)


@app.command("rm")
def remove(
    tasks: List[str] = typer.Argument(..., help="Scope ids or id prefixes"),
) -> None:
    """Delete scopes together with everything under them."""
    store = open_store()
    targets = [resolve_task(store, ref) for ref in tasks]
    if len(targets) == 1:
        deleted = store.delete_task(targets[0].id)
    else:
        deleted = store.delete_selected([t.id for t in targets])
    if not deleted:
        print_error("Nothing was deleted")
        raise typer.Exit(1)
    print_success(f"Deleted {len(targets)} scope(s)")
    report_save(store)


@app.command("move")
def move(
    task: str = typer.Argument(..., help="Scope id or id prefix"),
    target: str = typer.Argument(..., help="Target folder id, id prefix or name"),
) -> None:
    """Move a scope (with its sub-scopes) to another folder as a root."""
    store = open_store()
    scope = resolve_task(store, task)
    project = resolve_project(store, target)
    if not store.move_task_to_project(scope.id, project.id):
        print_error(f"'{scope.text}' is already in '{project.name}'")
        raise typer.Exit(1)
    print_success(f"Moved '{scope.text}' to '{project.name}'")
    report_save(store)


@app.command("promote")
def promote(task: str = typer.Argument(..., help="Scope id or id prefix")) -> None:
    """Turn a sub-scope into a root scope of its folder."""
    store = open_store()
    scope = resolve_task(store, task)
    if not store.promote_subtask(scope.id):
        print_error(f"'{scope.text}' is already a root scope")
        raise typer.Exit(1)
    print_success(f"Promoted '{scope.text}'")
    report_save(store)


@app.command("reorder")
def reorder(
    task: str = typer.Argument(..., help="Scope id or id prefix"),
    position: int = typer.Argument(..., help="New zero-based position among siblings"),
) -> None:
    """Move a scope to another position among its siblings."""
    store = open_store()
    scope = resolve_task(store, task)
    store.reorder_task(scope.id, position)
    print_success(f"Moved '{scope.text}' to position {max(position, 0)}")
    report_save(store)


@app.command("show")
def show(
    project: ProjectOption = None,
    sort: SortKey = typer.Option(SortKey.ORDER, "--sort", "-s", help="Sort key"),
    descending: bool = typer.Option(False, "--desc", help="Reverse the sort"),
) -> None:
    """Show a folder's scope tree with progress."""
    store = open_store()
    target = resolve_project(store, project)
    print_header(f"{target.name} ({calculate_project_progress(target.tasks):.0f}% done)")
    if target.description:
        typer.echo(target.description)
        print_separator("-")
    if not target.tasks:
        typer.echo("No scopes yet.")
        return
    print_tree_recursive(sort_tasks(target.tasks, sort, descending, recursive=True))


@app.command("info")
def info(task: str = typer.Argument(..., help="Scope id or id prefix")) -> None:
    """Show one scope with its description, comments and summaries."""
    store = open_store()
    scope = resolve_task(store, task)
    print_header(" > ".join(store.breadcrumb(scope.id)))
    typer.echo(format_task_line(scope))
    typer.echo(f"Id: {scope.id}")
    typer.echo(f"Source: {scope.source.value}")
    if scope.description:
        typer.echo(f"\n{scope.description}")
    if scope.summaries:
        typer.echo("\n## Summaries")
        for summary in scope.summaries:
            typer.echo(f"- {summary.text}")
    if scope.execution_results:
        typer.echo("\n## Results")
        for record in scope.execution_results:
            typer.echo(record.result_text)
    if scope.comments:
        typer.echo("\n## Comments")
        for comment in scope.comments:
            typer.echo(f"- [{comment.status.value}] {comment.text}  [{short_id(comment.id)}]")
            for reply in comment.replies:
                typer.echo(f"    - {reply.text}")
    if scope.subtasks:
        typer.echo("\n## Sub-scopes")
        print_tree_recursive(scope.subtasks)


@app.command("comment")
def comment(
    task: str = typer.Argument(..., help="Scope id or id prefix"),
    text: str = typer.Argument(..., help="Comment text"),
) -> None:
    """Add a comment to a scope."""
    store = open_store()
    scope = resolve_task(store, task)
    store.add_comment(scope.id, text)
    print_success(f"Commented on '{scope.text}'")
    report_save(store)
