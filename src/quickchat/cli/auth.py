"""CLI: quickchat auth login|status|logout"""

from typing import Optional

import click
from rich.console import Console

console = Console()


def _get_app():
    from quickchat.cli.main import _get_app
    return _get_app()


def _store():
    from quickchat.cli.main import _store
    return _store()


def _server_url():
    from quickchat.cli.main import _server_url
    return _server_url()


def _run(coro):
    from quickchat.cli.main import _run
    return _run(coro)


@click.group()
def auth():
    """Authentication commands."""


@auth.command("login")
@click.option("--token", default=None, help="Bearer token issued by the backend")
def auth_login(token: Optional[str]):
    """Store a token and verify it against the backend."""
    from quickchat.cli.main import SERVER_URL_KEY

    if not token:
        token = click.prompt("Token", hide_input=True)
    url = _server_url()
    if url:
        _store().set(SERVER_URL_KEY, url)

    async def _login():
        app = _get_app()
        try:
            with console.status("Verifying token..."):
                return await app.login(token)
        finally:
            await app.close()

    user = _run(_login())
    if user is None:
        raise SystemExit(1)
    console.print(f"[green]Logged in as {user.name or user.email} (ID: {user.id})[/green]")


@auth.command("status")
def auth_status():
    """Show current auth status."""

    async def _status():
        app = _get_app()
        try:
            user = await app.start()
            return user, app.session.token
        finally:
            await app.close()

    user, token = _run(_status())
    if user is not None:
        console.print(f"[green]Logged in[/green] as {user.name or user.email} (ID: {user.id})")
    elif token:
        console.print("[yellow]Token stored but the user could not be fetched.[/yellow]")
    else:
        console.print("[yellow]Not logged in. Run `quickchat auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Forget the stored token."""

    async def _logout():
        app = _get_app()
        try:
            await app.logout()
        finally:
            await app.close()

    _run(_logout())
    console.print("[green]Logged out.[/green]")
