"""CLI interface for scopekit using Typer.

Usage:
    scopekit project create Garden     # Create a folder
    scopekit task add "Plan beds" -p Garden
    scopekit task show -p Garden       # Show the scope tree
    scopekit generate "Plant tomatoes" -p Garden
    scopekit undo

The CLI is structured as:
- app: Main Typer application
- commands/: Individual command groups (project, task, ai, history)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from scopekit import __version__

# Import command groups
from scopekit.interfaces.cli.commands import ai, history, project, task
from scopekit.interfaces.cli.common import setup_logging

# Create the main Typer application
app = typer.Typer(
    name="scopekit",
    help="Break goals down into nested scopes",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"scopekit version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """scopekit - Break goals down into nested scopes.

    Scopes live in folders; a scope with sub-scopes takes its status from
    them. Outlines can be ingested from files or generated by a local or
    hosted model, and every change can be undone.
    """
    setup_logging(verbose)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(project.app, name="project")
app.add_typer(task.app, name="task")


# =============================================================================
# Top-Level Commands
# =============================================================================

app.command("ingest")(ai.ingest)
app.command("generate")(ai.generate)
app.command("expand")(ai.expand)
app.command("alternative")(ai.alternative)
app.command("execute")(ai.execute)
app.command("summarize")(ai.summarize)
app.command("undo")(history.undo)
app.command("redo")(history.redo)
app.command("history")(history.list_history)


__all__ = ["app"]
