"""Outline ingestion and AI generation CLI commands.

``ingest`` reads an outline from a file or stdin. The other commands ask
the configured text generator (see ``scopekit.config``) for content and
apply the response to the current forest.
"""

import asyncio

import typer

from scopekit.application.generation_service import (
    SUMMARY_MAX_OUTPUT_TOKENS,
    execute_scope,
    generate_alternative,
    generate_scopes,
    generate_subscopes,
    regenerate_subscopes,
    summarize_project,
)
from scopekit.config import load_settings
from scopekit.domain.shared import Err
from scopekit.domain.task import find_owner
from scopekit.infrastructure.ai import create_generator
from scopekit.interfaces.cli.common import (
    ProjectOption,
    open_store,
    print_error,
    print_info,
    print_success,
    print_tree_recursive,
    report_save,
    resolve_project,
    resolve_task,
    short_id,
)


def _fail(message: str) -> None:
    print_error(message)
    raise typer.Exit(1)


def ingest(
    source: typer.FileText = typer.Argument(..., help="Outline file, or - for stdin"),
    project: ProjectOption = None,
    under: str | None = typer.Option(
        None, "--under", "-u", help="Insert as sub-scopes of this scope instead"
    ),
) -> None:
    """Turn a JSON or indented-text outline into scopes.

    Example:
        scopekit ingest plan.json -p Garden
        cat notes.txt | scopekit ingest - --under 3f2a
    """
    content = source.read()
    store = open_store()
    if under is not None:
        anchor = resolve_task(store, under)
        result = store.insert_outline(content, anchor_id=anchor.id, label="Ingest outline")
        where = f"under '{anchor.text}'"
    else:
        target = resolve_project(store, project)
        result = store.insert_outline(content, project_id=target.id, label="Ingest outline")
        where = f"into '{target.name}'"
    if isinstance(result, Err):
        _fail(result.error)

    ingested = result.value
    print_success(f"Ingested {len(ingested.tasks)} scope(s) {where} ({ingested.format.value} outline)")
    print_tree_recursive(ingested.tasks)
    report_save(store)


def generate(
    goal: str = typer.Argument(..., help="What to break down"),
    project: ProjectOption = None,
) -> None:
    """Generate a new root scope for a goal with its breakdown."""
    settings = load_settings()
    store = open_store(settings)
    target = resolve_project(store, project)
    generator = create_generator(settings)

    print_info(f"Generating scopes for '{goal}'...")
    result = asyncio.run(
        generate_scopes(store, generator, goal, target.id, settings.max_output_tokens)
    )
    if isinstance(result, Err):
        _fail(result.error)
    root = store.find_task(result.value)
    print_success(f"Created '{goal}' in '{target.name}' [{short_id(result.value)}]")
    print_tree_recursive(root.subtasks)
    report_save(store)


def expand(
    task: str = typer.Argument(..., help="Scope id or id prefix"),
    replace: bool = typer.Option(
        False, "--replace", help="Replace existing sub-scopes instead of adding to them"
    ),
) -> None:
    """Generate sub-scopes for an existing scope."""
    settings = load_settings()
    store = open_store(settings)
    scope = resolve_task(store, task)
    generator = create_generator(settings)
    flow = regenerate_subscopes if replace else generate_subscopes

    print_info(f"Generating sub-scopes for '{scope.text}'...")
    result = asyncio.run(flow(store, generator, scope.id, settings.max_output_tokens))
    if isinstance(result, Err):
        _fail(result.error)
    print_success(f"Added {len(result.value.tasks)} sub-scope(s) to '{scope.text}'")
    print_tree_recursive(result.value.tasks)
    report_save(store)


def alternative(task: str = typer.Argument(..., help="Scope id or id prefix")) -> None:
    """Replace a scope with a generated alternative.

    Scopes that reference the replaced one may get their text or
    description adjusted; everything else is left alone.
    """
    settings = load_settings()
    store = open_store(settings)
    scope = resolve_task(store, task)
    generator = create_generator(settings)

    print_info(f"Generating an alternative for '{scope.text}'...")
    result = asyncio.run(
        generate_alternative(store, generator, scope.id, settings.max_output_tokens)
    )
    if isinstance(result, Err):
        _fail(result.error)

    outcome = result.value
    replaced = store.find_task(outcome.replaced_id)
    print_success(f"Replaced '{outcome.replaced_title}' with '{replaced.text}'")
    if outcome.updated_ids:
        print_info(f"Adjusted {len(outcome.updated_ids)} related scope(s)")
    for note in outcome.notes:
        typer.echo(f"- {note}")
    report_save(store)


def execute(
    task: str = typer.Argument(..., help="Scope id or id prefix"),
    instructions: str | None = typer.Option(
        None, "--instructions", "-i", help="Extra guidance for the model"
    ),
) -> None:
    """Have the model carry out a scope and keep the result on it."""
    settings = load_settings()
    store = open_store(settings)
    scope = resolve_task(store, task)
    generator = create_generator(settings)

    print_info(f"Executing '{scope.text}'...")
    result = asyncio.run(
        execute_scope(store, generator, scope.id, instructions, settings.max_output_tokens)
    )
    if isinstance(result, Err):
        _fail(result.error)
    typer.echo(result.value)
    print_success(f"Saved the result on '{scope.text}'")
    report_save(store)


def summarize(
    project: ProjectOption = None,
    task: str | None = typer.Option(
        None, "--task", "-t", help="Summarize this scope instead of the whole folder"
    ),
) -> None:
    """Write a progress summary of a folder or a scope.

    Example:
        scopekit summarize -p Garden
        scopekit summarize --task 3f2a
    """
    settings = load_settings()
    store = open_store(settings)
    if task is not None:
        scope = resolve_task(store, task)
        target = find_owner(store.projects, scope.id)
        task_id, name = scope.id, scope.text
    else:
        target = resolve_project(store, project)
        task_id, name = None, target.name
    generator = create_generator(settings)

    print_info(f"Summarizing '{name}'...")
    max_tokens = min(settings.max_output_tokens, SUMMARY_MAX_OUTPUT_TOKENS)
    result = asyncio.run(summarize_project(store, generator, target.id, task_id, max_tokens))
    if isinstance(result, Err):
        _fail(result.error)
    typer.echo(result.value)
    print_success(f"Saved the summary on '{name}'")
    report_save(store)
