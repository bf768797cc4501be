"""Root Typer app — global options and command group registration."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from vpclink_cli import __version__
from vpclink_cli.commands import config_cmd, link
from vpclink_cli.logging import configure_logging

app = typer.Typer(
    name="vpclink-cli",
    help="Create, update and delete control-plane VPC links and wait for them to converge.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"vpclink-cli {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Log progress to stderr (-vv for debug)."
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines."),
) -> None:
    """VPC link CLI — converge links to their declared state."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    configure_logging(level, json_logs=json_logs)


# Register command groups
app.add_typer(config_cmd.app, name="config")
app.add_typer(link.app, name="link")


def main() -> None:
    app()
