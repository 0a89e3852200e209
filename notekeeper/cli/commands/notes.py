"""
Notes Commands.

Commands that call the `notes.*` procedures of a running backend.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, List, Optional

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from notekeeper.cli.client import RPCError, get_rpc_client

app = typer.Typer(help="Note management commands (requires running server)")
console = Console()


def _run(action: Callable[[], Awaitable[None]]) -> None:
    """Run an async command body and report transport or procedure errors."""
    asyncio.run(_guarded(action))


async def _guarded(action: Callable[[], Awaitable[None]]) -> None:
    client = get_rpc_client()
    try:
        await action()
    except RPCError as e:
        console.print(f"[red]Error ({e.code}): {e.message}[/red]")
        raise typer.Exit(1)
    except httpx.ConnectError:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: cli.py server start[/dim]")
        raise typer.Exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        await client.close()


def _format_tags(tags: list[str]) -> str:
    return ", ".join(tags) if tags else "-"


def _display_note(note: dict[str, Any], title: str = "Note") -> None:
    body = (
        f"[bold]{note['title']}[/bold]\n\n"
        f"{note['content']}\n\n"
        f"[cyan]Tags:[/cyan] {_format_tags(note['tags'])}\n"
        f"[dim]ID: {note['id']}[/dim]\n"
        f"[dim]Created: {note['createdAt']}  Updated: {note['updatedAt']}[/dim]"
    )
    console.print(Panel(body, title=title))


def _display_page(page: dict[str, Any]) -> None:
    table = Table(title="Notes", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Tags")
    table.add_column("Updated")

    for note in page["notes"]:
        table.add_row(note["id"], note["title"], _format_tags(note["tags"]), note["updatedAt"])

    console.print(table)
    info = page["pagination"]
    console.print(
        f"[dim]Page {info['page']} of {info['pages']} "
        f"({info['total']} notes, {info['limit']} per page)[/dim]"
    )


@app.command()
def create(
    title: str = typer.Option(..., "--title", "-t", help="Note title"),
    content: str = typer.Option(..., "--content", "-c", help="Note content"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Tag (repeatable)"),
) -> None:
    """
    Create a note.

    Examples:
        cli.py notes create -t "Shopping List" -c "Milk, bread" --tag shopping
    """
    async def action() -> None:
        note = await get_rpc_client().mutate(
            "notes.create",
            {"title": title, "content": content, "tags": list(tag or [])},
        )
        _display_note(note, title="Note created")

    _run(action)


@app.command("list")
def list_notes(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Search title and content"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Tag filter (repeatable, any matches)"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
    limit: int = typer.Option(20, "--limit", "-l", help="Notes per page"),
) -> None:
    """
    List notes, most recently updated first.

    Examples:
        cli.py notes list
        cli.py notes list --search milk --tag shopping --page 2
    """
    query: dict[str, Any] = {"page": page, "limit": limit}
    if search:
        query["search"] = search
    if tag:
        query["tags"] = list(tag)

    async def action() -> None:
        result = await get_rpc_client().query("notes.getAll", query)
        _display_page(result)

    _run(action)


@app.command()
def get(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """Show a single note."""
    async def action() -> None:
        note = await get_rpc_client().query("notes.getById", {"id": note_id})
        _display_note(note)

    _run(action)


@app.command()
def update(
    note_id: str = typer.Argument(..., help="Note ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="New content"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Replacement tag (repeatable)"),
    clear_tags: bool = typer.Option(False, "--clear-tags", help="Remove all tags"),
) -> None:
    """
    Update a note. Only the given fields change.

    Examples:
        cli.py notes update <id> --title "Updated"
        cli.py notes update <id> --tag work --tag urgent
        cli.py notes update <id> --clear-tags
    """
    data: dict[str, Any] = {}
    if title is not None:
        data["title"] = title
    if content is not None:
        data["content"] = content
    if clear_tags:
        data["tags"] = []
    elif tag:
        data["tags"] = list(tag)

    async def action() -> None:
        note = await get_rpc_client().mutate("notes.update", {"id": note_id, "data": data})
        _display_note(note, title="Note updated")

    _run(action)


@app.command()
def delete(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """Permanently delete a note."""
    async def action() -> None:
        result = await get_rpc_client().mutate("notes.delete", {"id": note_id})
        console.print(f"[green]✓ {result['message']}[/green]")

    _run(action)


@app.command()
def tags() -> None:
    """List every tag in use."""
    async def action() -> None:
        result = await get_rpc_client().query("notes.getTags")
        if not result:
            console.print("[dim]No tags yet[/dim]")
            return
        console.print(", ".join(result))

    _run(action)


@app.command()
def demo() -> None:
    """
    Walk through every procedure against the running backend.

    Creates a note, lists, fetches, updates and searches it, shows all
    tags, then deletes the note again.
    """
    async def action() -> None:
        client = get_rpc_client()

        console.print("[bold]1. Creating a new note...[/bold]")
        note = await client.mutate("notes.create", {
            "title": "Test Note from Client",
            "content": "This is a test note created from the client",
            "tags": ["test", "client", "demo"],
        })
        _display_note(note, title="Note created")

        console.print("\n[bold]2. Getting all notes...[/bold]")
        page = await client.query("notes.getAll", {"page": 1, "limit": 10})
        _display_page(page)

        console.print("\n[bold]3. Getting note by ID...[/bold]")
        fetched = await client.query("notes.getById", {"id": note["id"]})
        _display_note(fetched)

        console.print("\n[bold]4. Updating the note...[/bold]")
        updated = await client.mutate("notes.update", {
            "id": note["id"],
            "data": {
                "title": "Updated Test Note",
                "content": "This note has been updated from the client",
                "tags": ["test", "client", "demo", "updated"],
            },
        })
        _display_note(updated, title="Note updated")

        console.print("\n[bold]5. Searching notes and listing tags...[/bold]")
        results, all_tags = await client.batch_query([
            ("notes.getAll", {"search": "test", "tags": ["demo"], "page": 1, "limit": 5}),
            ("notes.getTags", None),
        ])
        console.print(f"Search results: {len(results['notes'])} notes found")
        console.print(f"All tags: {', '.join(all_tags)}")

        console.print("\n[bold]6. Deleting the test note...[/bold]")
        result = await client.mutate("notes.delete", {"id": note["id"]})
        console.print(f"[green]✓ {result['message']}[/green]")

        console.print("\n[green]All procedures completed successfully![/green]")

    _run(action)
