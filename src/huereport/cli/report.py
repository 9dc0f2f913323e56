from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from huereport.core.serials import missing_serials
from huereport.core.summary import (
    flatten_lights,
    group_light_counts,
    light_counts,
    lights_by_group,
    low_battery_devices,
    physical_devices,
    unreachable_lights,
)
from huereport.models import BridgeSnapshot, Light, SerialMapping, SensorKind
from huereport.utils.redaction import Redactor

from .common import (
    build_context,
    build_serial_store,
    fetch_snapshots_or_exit,
    load_serials_or_exit,
    load_settings_or_exit,
)

logger = logging.getLogger(__name__)


def _on_off(value: bool | None) -> str:
    if value is None:
        return "-"
    return "[green]On[/green]" if value else "[dim]Off[/dim]"


def _reachable(value: bool | None) -> str:
    if value is False:
        return "[red]UNREACHABLE[/red]"
    return "Reachable"


def _light_row(light: Light, group: str, serials: SerialMapping) -> list[str]:
    state = light.state
    brightness = state.brightness_percent
    kelvin = state.kelvin
    entry = serials.lights.get(light.unique_id)
    return [
        group,
        light.name,
        light.product_name or light.type,
        _on_off(state.on),
        f"{brightness}%" if brightness is not None else "",
        f"{state.color_temp} Mired (~{kelvin} K)" if kelvin else "",
        _reachable(state.reachable),
        entry.serial_number if entry and entry.serial_number else "",
    ]


def print_lights(
    console: Console, snapshot: BridgeSnapshot, serials: SerialMapping
) -> None:
    table = Table(title=f"{snapshot.name}: lights")
    table.add_column("Group", style="cyan")
    table.add_column("Light", style="green")
    table.add_column("Product")
    table.add_column("State")
    table.add_column("Brightness", justify="right")
    table.add_column("Color Temp")
    table.add_column("Status")
    table.add_column("Serial")

    for group, lights in lights_by_group(snapshot).items():
        for light in lights:
            table.add_row(*_light_row(light, group, serials))
    console.print(table)


def print_sensors(console: Console, snapshot: BridgeSnapshot) -> None:
    devices = physical_devices([snapshot])
    hardware = [d for d in devices if d.representative.kind is not SensorKind.VIRTUAL]
    if not hardware:
        return

    table = Table(title=f"{snapshot.name}: sensors")
    table.add_column("Device", style="green")
    table.add_column("Product")
    table.add_column("Battery", justify="right")
    table.add_column("Temperature", justify="right")
    table.add_column("Status")

    for device in hardware:
        battery = device.battery
        temperature = ""
        sensor = device.endpoint(SensorKind.TEMPERATURE)
        if sensor is not None and isinstance(sensor.state.get("temperature"), int):
            temperature = f"{sensor.state['temperature'] / 100:.1f} °C"
        table.add_row(
            device.name,
            device.representative.product_name or device.representative.type,
            f"{battery}%" if battery is not None else "",
            temperature,
            _reachable(device.reachable),
        )
    console.print(table)


def print_counts(console: Console, snapshots: list[BridgeSnapshot]) -> None:
    console.print("\n[bold]--- Light Count Summary ---[/bold]")
    counts = light_counts(snapshots)
    for snapshot in snapshots:
        console.print(f"  - {snapshot.name}: {counts[snapshot.name]} lights found.")
        console.print(f"    [bold]{snapshot.name} Groups:[/bold]")
        for group in group_light_counts(snapshot):
            console.print(f"      - {group.name}: {group.light_count} lights")
    console.print("---------------------------")
    console.print(f"  Total: {sum(counts.values())} lights across all bridges.")


def _print_by_bridge(
    console: Console, title: str, grouped: dict[str, list[str]]
) -> None:
    if not grouped:
        return
    console.print(f"\n[bold]--- {title} ---[/bold]")
    for bridge_name, names in grouped.items():
        console.print(f"  [bold]{bridge_name}[/bold]")
        for name in names:
            console.print(f"    - {name}")


def print_attention(
    console: Console,
    snapshots: list[BridgeSnapshot],
    serials: SerialMapping,
    battery_threshold: int,
    show_missing_serials: bool,
) -> None:
    if show_missing_serials:
        missing = missing_serials(flatten_lights(snapshots), serials)
        _print_by_bridge(console, "Lights Missing Serial Numbers", missing)
    _print_by_bridge(console, "Unreachable Lights", unreachable_lights(snapshots))

    low = low_battery_devices(snapshots, battery_threshold)
    if low:
        console.print(f"\n[bold]--- Low Battery (<= {battery_threshold}%) ---[/bold]")
        for device in low:
            console.print(
                f"  [yellow]{device.name}[/yellow] on {device.bridge_name}: "
                f"{device.battery}%"
            )


def register(app: typer.Typer) -> None:
    @app.command()
    def report(
        bridge: Annotated[
            list[str] | None,
            typer.Option("--bridge", "-b", help="Only report these bridges"),
        ] = None,
        redact: Annotated[
            bool,
            typer.Option("--redact", help="Redact bridge addresses in output"),
        ] = False,
        sensors: Annotated[
            bool,
            typer.Option(help="Include the sensor table"),
        ] = True,
    ) -> None:
        """Fetch every bridge and print an inventory report."""
        console = Console()
        settings = load_settings_or_exit()
        context = build_context(settings, bridge)

        store = build_serial_store(settings)
        serials = load_serials_or_exit(store)
        if not store.exists():
            logger.info(
                "Serials mapping %s not found; serial numbers will not be shown",
                store.path,
            )

        snapshots = fetch_snapshots_or_exit(context)

        redactor = Redactor(enabled=redact)
        for snapshot in snapshots:
            console.rule(
                f"[bold]{snapshot.name}[/bold] ({redactor.redact_ip(snapshot.address)})"
            )
            print_lights(console, snapshot, serials)
            if sensors:
                print_sensors(console, snapshot)

        print_counts(console, snapshots)
        print_attention(
            console,
            snapshots,
            serials,
            context.battery_threshold,
            show_missing_serials=store.exists(),
        )
