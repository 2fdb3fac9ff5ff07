"""CLI: quickchat chats list|new"""

import json

import click
from rich.console import Console
from rich.table import Table

console = Console()


def _get_app():
    from quickchat.cli.main import _get_app
    return _get_app()


def _run(coro):
    from quickchat.cli.main import _run
    return _run(coro)


@click.group()
def chats():
    """Chat list commands."""


@chats.command("list")
@click.option("--json-output", "--json", is_flag=True)
def chats_list(json_output):
    """List chats, most recently updated first."""

    async def _list():
        app = _get_app()
        try:
            user = await app.start()
            return user, app.chats.chats, app.chats.selected
        finally:
            await app.close()

    user, items, selected = _run(_list())
    if user is None:
        console.print("[yellow]Not logged in. Run `quickchat auth login`.[/yellow]")
        raise SystemExit(1)
    if json_output:
        click.echo(json.dumps([c.model_dump(mode="json") for c in items], indent=2))
        return
    table = Table(title=f"Chats ({len(items)} total)")
    table.add_column("", width=1)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Updated")
    for c in items:
        marker = "*" if selected is not None and c.id == selected.id else ""
        table.add_row(marker, c.id, c.name, c.updated_at.isoformat())
    console.print(table)


@chats.command("new")
def chats_new():
    """Create a new chat."""

    async def _create():
        app = _get_app()
        try:
            await app.start()
            with console.status("Creating chat..."):
                return await app.create_chat()
        finally:
            await app.close()

    chat = _run(_create())
    if chat is None:
        raise SystemExit(1)
    console.print(f"[green]Chat created: {chat.id}[/green]")
