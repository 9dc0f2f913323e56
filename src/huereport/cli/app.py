from __future__ import annotations

from typing import Annotated

import typer

from huereport.utils.logging import setup_logging

from . import config as config_cmd
from . import serials as serials_cmd
from .monitor import register as register_monitor
from .report import register as register_report
from .rules import register as register_rules

app = typer.Typer(
    help="huereport - read-only reports and live monitoring for Hue bridges",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config")
app.add_typer(serials_cmd.app, name="serials")

register_report(app)
register_rules(app)
register_monitor(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
) -> None:
    """huereport CLI."""
    setup_logging()

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"huereport version {get_version('huereport')}")
        raise typer.Exit()
