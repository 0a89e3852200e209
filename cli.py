#!/usr/bin/env python3
"""
Notekeeper CLI.

Command-line client for the notes backend.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    python cli.py --help                        # Show help

    # Notes (requires running server)
    python cli.py notes create -t "Title" -c "Content" --tag work
    python cli.py notes list --search milk --tag shopping
    python cli.py notes get <id>
    python cli.py notes update <id> --title "New title"
    python cli.py notes delete <id>
    python cli.py notes tags
    python cli.py notes demo                    # Walk through every procedure

    # Database
    python cli.py db init                       # Create the notes table
    python cli.py db seed                       # Load sample notes

    # Server management
    python cli.py server start                  # Start FastAPI server
    python cli.py server start --reload         # Start with auto-reload

    # Health checks
    python cli.py health status                 # Backend health (requires server)
    python cli.py health ping                   # Ping backend

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --help            Show help message
"""

import sys
from pathlib import Path

import typer
from rich.console import Console

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from notekeeper.cli.commands import db_app, health_app, notes_app, server_app

console = Console()


def _validate_project_root() -> None:
    """Validate that we're running from the project root."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


# Create main app
app = typer.Typer(
    name="cli",
    help="Notekeeper CLI - notes, database, server and health commands.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(notes_app, name="notes")
app.add_typer(db_app, name="db")
app.add_typer(server_app, name="server")
app.add_typer(health_app, name="health")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Notekeeper CLI.

    Manage notes on a running backend, seed the database, start the server.
    """
    _validate_project_root()

    from notekeeper.backend.core.logging import setup_logging

    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING", format_type="console")


if __name__ == "__main__":
    app()
