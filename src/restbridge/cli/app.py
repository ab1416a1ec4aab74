"""
Root Typer application for the restbridge CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from restbridge.cli.openapi import app as openapi_app
from restbridge.cli.serve import app as serve_app

app = Typer(
    name="restbridge",
    help="restbridge: container-bridged REST API server.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from restbridge import __version__

        typer.echo(f"restbridge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """restbridge CLI: run the server and export its API description."""


app.add_typer(serve_app, name="serve", help="Start the API server.")
app.add_typer(openapi_app, name="openapi", help="OpenAPI document tools.")
