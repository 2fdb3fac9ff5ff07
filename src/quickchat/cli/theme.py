"""CLI: quickchat theme [light|dark|toggle]"""

from typing import Optional

import click
from rich.console import Console

console = Console()


def _get_app():
    from quickchat.cli.main import _get_app
    return _get_app()


def _run(coro):
    from quickchat.cli.main import _run
    return _run(coro)


@click.command("theme")
@click.argument("value", required=False, type=click.Choice(["light", "dark", "toggle"]))
def theme_cmd(value: Optional[str]):
    """Show or change the theme preference."""

    async def _theme():
        app = _get_app()
        try:
            if value == "toggle":
                await app.theme.toggle()
            elif value:
                await app.theme.set(value)
            return app.theme.theme
        finally:
            await app.close()

    console.print(f"Theme: [bold]{_run(_theme())}[/bold]")
