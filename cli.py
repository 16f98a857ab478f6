"""
CLI tool for running and inspecting the broadcast relay.

Provides commands for starting the server and viewing the effective
settings.
"""

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from relay.settings import app_settings

typer_app = typer.Typer(
    name="relay-cli",
    help="Broadcast Relay CLI - Run and inspect the WebSocket relay",
    add_completion=False,
)
console = Console()


@typer_app.command(name="serve")
def serve(
    host: str = typer.Option(None, help="Listen address (default: HOST setting)"),
    port: int = typer.Option(None, help="Listen port (default: PORT setting)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """
    Start the relay server.

    Example:
        python cli.py serve --port 8000
    """
    host = host or app_settings.HOST
    port = port or app_settings.PORT

    console.print(
        Panel.fit(
            f"[bold cyan]Relay listening on ws://{host}:{port}{app_settings.WS_PATH}[/bold cyan]",
            border_style="cyan",
        )
    )
    uvicorn.run(
        "relay:application", factory=True, host=host, port=port, reload=reload
    )


@typer_app.command(name="settings")
def show_settings():
    """
    Display the effective relay settings.

    Values come from the environment (and .env) on top of the defaults.

    Example:
        python cli.py settings
    """
    table = Table("Setting", "Value", title="Relay Settings", show_lines=True)

    for name, value in app_settings.model_dump().items():
        table.add_row(f"[yellow]{name}[/yellow]", str(value))

    console.print()
    console.print(table)
    console.print()


if __name__ == "__main__":
    typer_app()
