"""
CLI: ``restbridge openapi``: export the OpenAPI document without serving.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer

from restbridge.api.openapi import ApiDescriptorPublisher, build_descriptor
from restbridge.cli.utils import console, err_console
from restbridge.core.errors import RestBridgeError
from restbridge.core.logging import configure_logging
from restbridge.core.settings import get_settings

app = typer.Typer(no_args_is_help=True)


class DocumentFormat(str, Enum):
    json = "json"
    yaml = "yaml"


@app.command("export")
def export(
    fmt: DocumentFormat = typer.Option(DocumentFormat.json, "--format", "-f", help="Output format"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to file instead of stdout"),
    namespace: str | None = typer.Option(None, "--namespace", "-n", help="Override the resource namespace"),
) -> None:
    """Scan the resource namespace and print its OpenAPI document."""
    configure_logging(level="WARNING", json_format=False)

    settings = get_settings()
    if namespace:
        settings = settings.model_copy(update={"resource_namespace": namespace})

    publisher = ApiDescriptorPublisher(
        build_descriptor(settings),
        pretty_print=settings.openapi.pretty_print,
    )
    try:
        document = publisher.build()
    except RestBridgeError as exc:
        err_console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1) from exc

    text = document.to_json() if fmt is DocumentFormat.json else document.to_yaml()
    if output is None:
        typer.echo(text)
        return
    output.write_text(text, encoding="utf-8")
    console.print(f"[green]Wrote {len(document.operations)} operations to {output}[/green]")
