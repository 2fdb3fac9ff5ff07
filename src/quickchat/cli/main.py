"""
quickchat CLI: `quickchat` command.

Commands:
  quickchat auth login     Store a bearer token and verify it
  quickchat auth status    Show who the stored token belongs to
  quickchat auth logout    Forget the stored token
  quickchat chats list     List chats, newest first
  quickchat chats new      Create a chat
  quickchat theme [value]  Show or change the theme preference
"""

import asyncio
from typing import Any, Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install quickchat[cli]")

from quickchat import __version__
from quickchat.client import STATE_FILE, AsyncChatApp
from quickchat.events import LOGIN_ROUTE, StateEvent
from quickchat.notify import Notice, NoticeKind
from quickchat.storage import JsonFileStore
from quickchat.transport.http import DEFAULT_BASE_URL

console = Console()
CONFIG_FILE = STATE_FILE
SERVER_URL_KEY = "server_url"


def _store() -> JsonFileStore:
    return JsonFileStore(CONFIG_FILE)


def _console_sink(notice: Notice) -> None:
    style = "red" if notice.kind is NoticeKind.ERROR else "cyan"
    console.print(f"[{style}]{notice.message}[/{style}]")


def _on_event(event: str, data: Any) -> None:
    if event == StateEvent.NAVIGATE and data == LOGIN_ROUTE:
        console.print("[dim]Run `quickchat auth login` to sign in again.[/dim]")


def _server_url() -> Optional[str]:
    ctx = click.get_current_context(silent=True)
    if ctx is None or not ctx.find_root().obj:
        return None
    return ctx.find_root().obj.get("server_url")


def _get_app() -> AsyncChatApp:
    store = _store()
    url = _server_url() or store.get(SERVER_URL_KEY) or DEFAULT_BASE_URL
    app = AsyncChatApp(base_url=url, store=store, sink=_console_sink)
    app.add_listener(_on_event)
    return app


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
@click.option("--server-url", envvar="QUICKCHAT_SERVER_URL", default=None, help="Chat backend base URL")
@click.pass_context
def main(ctx: click.Context, server_url: Optional[str]):
    """quickchat CLI: chats on a bearer-token chat backend."""
    ctx.ensure_object(dict)["server_url"] = server_url


# Register subcommands from separate modules
from quickchat.cli.auth import auth
from quickchat.cli.chats import chats
from quickchat.cli.theme import theme_cmd

main.add_command(auth)
main.add_command(chats)
main.add_command(theme_cmd)


if __name__ == "__main__":
    main()
