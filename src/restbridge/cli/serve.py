"""
CLI: ``restbridge serve``: start the API server.
"""

from __future__ import annotations

import typer
import uvicorn

from restbridge.cli.utils import console
from restbridge.core.settings import get_settings

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: settings)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: settings)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the REST API server."""
    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[bold green]Starting restbridge API[/bold green] on {host}:{port}")
    # log_config=None keeps uvicorn's records on the root logger, where the
    # bootstrap's logging bridge forwards them to structlog.
    uvicorn.run(
        "restbridge.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
        log_config=None,
    )
