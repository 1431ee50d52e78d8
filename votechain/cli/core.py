"""CLI commands: serve."""

from __future__ import annotations

import click
import uvicorn
from rich.panel import Panel

from votechain import __version__, config
from votechain.cli import cli, console


@cli.command()
@click.option("--host", default=None, help="Bind address (default: VOTECHAIN_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: VOTECHAIN_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload) -> None:
    """Run the VOTECHAIN API server."""
    host = host or config.HOST
    port = port or config.PORT
    console.print(
        Panel(
            f"[bold green]VOTECHAIN v{__version__}[/]\n"
            f"Listening on http://{host}:{port}\n"
            f"Voter store: {config.DB_PATH}\n"
            "[dim]The chain is held in memory and resets on restart.[/]",
            title="🗳  VOTECHAIN",
            border_style="green",
        )
    )
    uvicorn.run("votechain.api:app", host=host, port=port, reload=reload)
