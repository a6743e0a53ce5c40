"""Entry point for the scopekit CLI.

Usage:
    python -m scopekit.interfaces.cli.main

Or via installed entry point:
    scopekit <command>
"""

from scopekit.interfaces.cli import app


def main() -> None:
    """Run the scopekit CLI application."""
    app()


if __name__ == "__main__":
    main()
