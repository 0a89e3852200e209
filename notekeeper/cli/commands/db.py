"""
Database Commands.

Commands for creating the notes table and loading sample data.
Both work directly against the configured database (no server needed).
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from notekeeper.backend.core.exceptions import ApplicationError

app = typer.Typer(help="Database commands")
console = Console()


@app.command()
def init() -> None:
    """
    Create the notes table if it does not exist.

    Examples:
        cli.py db init
    """
    asyncio.run(_init())


async def _init() -> None:
    from notekeeper.backend.core.database import create_tables, dispose_engine

    try:
        await create_tables()
    except SQLAlchemyError as e:
        console.print(f"[red]Error: Could not create tables: {e}[/red]")
        raise typer.Exit(1)
    finally:
        await dispose_engine()

    console.print("[green]Database tables ready[/green]")


@app.command()
def seed(
    keep: bool = typer.Option(False, "--keep", "-k", help="Keep existing notes"),
) -> None:
    """
    Load the sample notes.

    Existing notes are deleted first unless --keep is given.

    Examples:
        cli.py db seed
        cli.py db seed --keep
    """
    asyncio.run(_seed(clear=not keep))


async def _seed(clear: bool) -> None:
    from notekeeper.backend.core.database import (
        create_tables,
        dispose_engine,
        get_session_factory,
        session_scope,
    )
    from notekeeper.backend.seed import seed_database

    console.print("[bold]Seeding database...[/bold]\n")

    try:
        await create_tables()
        async with session_scope(get_session_factory()) as session:
            notes = await seed_database(session, clear=clear)
    except (SQLAlchemyError, ApplicationError) as e:
        console.print(f"[red]Error during seeding: {e}[/red]")
        raise typer.Exit(1)
    finally:
        await dispose_engine()

    table = Table(title="Sample notes created", show_header=True)
    table.add_column("Title", style="cyan")
    table.add_column("Tags")
    for note in notes:
        table.add_row(note.title, ", ".join(note.tags))

    console.print(table)
    console.print(f"\n[green]Created {len(notes)} sample notes[/green]")
