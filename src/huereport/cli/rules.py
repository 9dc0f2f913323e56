from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from huereport.core.codes import BUTTON_EVENT_TABLE, SYSTEM_SENSOR_TABLE
from huereport.core.rules import RuleInterpreter, describe_rules, describe_schedules
from huereport.models import BridgeSnapshot

from .common import build_context, fetch_snapshots_or_exit, load_settings_or_exit


def print_rules(console: Console, snapshot: BridgeSnapshot) -> None:
    descriptions = describe_rules(snapshot)
    console.print(f"\n[bold]Rules ({len(descriptions)})[/bold]")
    for description in descriptions:
        console.print(f"  [cyan]{description.name or description.rule_id}[/cyan]")
        for sentence in description.condition_sentences:
            console.print(f"    {sentence}")
        for sentence in description.action_sentences:
            console.print(f"      → {sentence}")


def print_schedules(console: Console, snapshot: BridgeSnapshot) -> None:
    descriptions = describe_schedules(snapshot)
    if not descriptions:
        return
    console.print(f"\n[bold]Schedules ({len(descriptions)})[/bold]")
    for description in descriptions:
        status = "" if description.status == "enabled" else " [dim](disabled)[/dim]"
        console.print(f"  [cyan]{description.name}[/cyan]{status}")
        if description.time_sentence:
            console.print(f"    {description.time_sentence}")
        if description.command is not None:
            console.print(f"      → {description.command.sentence}")


def print_links(console: Console, snapshot: BridgeSnapshot) -> None:
    if not snapshot.resource_links:
        return
    interpreter = RuleInterpreter(snapshot)
    console.print(f"\n[bold]Resource links ({len(snapshot.resource_links)})[/bold]")
    for link in snapshot.resource_links.values():
        members = ", ".join(entity.label for entity in interpreter.describe_links(link))
        console.print(f"  [cyan]{link.name or link.id}[/cyan]: {members}")


def register(app: typer.Typer) -> None:
    @app.command()
    def rules(
        bridge: Annotated[
            list[str] | None,
            typer.Option("--bridge", "-b", help="Only describe these bridges"),
        ] = None,
        schedules: Annotated[
            bool,
            typer.Option(help="Also describe schedules"),
        ] = True,
        links: Annotated[
            bool,
            typer.Option(help="Also list resource links"),
        ] = False,
    ) -> None:
        """Describe automation rules in plain English."""
        console = Console()
        settings = load_settings_or_exit()
        snapshots = fetch_snapshots_or_exit(build_context(settings, bridge))

        for snapshot in snapshots:
            console.rule(f"[bold]{snapshot.name}[/bold]")
            print_rules(console, snapshot)
            if schedules:
                print_schedules(console, snapshot)
            if links:
                print_links(console, snapshot)

    @app.command()
    def codes() -> None:
        """Print the switch button and dynamic-scene reference tables."""
        console = Console()

        table = Table(title="Button event codes")
        table.add_column("Code", justify="right", style="cyan")
        table.add_column("Device")
        table.add_column("Button")
        table.add_column("Action")
        for row in BUTTON_EVENT_TABLE:
            table.add_row(str(row.code), row.device, row.button, row.action)
        console.print(table)

        table = Table(title="Dynamic scene sensors")
        table.add_column("Sensor", style="cyan")
        table.add_column("Status", justify="right")
        table.add_column("Meaning")
        for sensor, status, meaning in SYSTEM_SENSOR_TABLE:
            table.add_row(sensor, str(status), meaning)
        console.print(table)
