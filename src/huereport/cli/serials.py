from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from huereport.core.serials import (
    build_serial_mapping,
    missing_serials,
    parse_serial_inventory,
)
from huereport.core.summary import flatten_lights
from huereport.storage import read_inventory

from .common import (
    build_context,
    build_serial_store,
    fetch_snapshots_or_exit,
    inventory_path,
    load_serials_or_exit,
    load_settings_or_exit,
)

app = typer.Typer(no_args_is_help=True, help="Maintain the light serial-number file.")


@app.command("update")
def update_serials(
    bridge: Annotated[
        list[str] | None,
        typer.Option("--bridge", "-b", help="Only include these bridges"),
    ] = None,
) -> None:
    """Create or refresh the mapping, keeping serials already filled in."""
    console = Console()
    settings = load_settings_or_exit()
    store = build_serial_store(settings)
    existing = load_serials_or_exit(store)

    snapshots = fetch_snapshots_or_exit(build_context(settings, bridge))

    inventory: dict[str, str] = {}
    text = read_inventory(inventory_path(settings))
    if text is not None:
        names = [light.name for light in flatten_lights(snapshots)]
        inventory = parse_serial_inventory(text, names)

    mapping = build_serial_mapping(snapshots, existing=existing, inventory=inventory)
    store.save(mapping)

    filled = sum(1 for entry in mapping.lights.values() if entry.serial_number)
    console.print(
        f"[green]✓[/green] Wrote {len(mapping.lights)} lights to {store.path}"
    )
    console.print(f"{filled} have a serial number.")


@app.command("missing")
def list_missing(
    bridge: Annotated[
        list[str] | None,
        typer.Option("--bridge", "-b", help="Only check these bridges"),
    ] = None,
) -> None:
    """List lights that have no serial number yet."""
    console = Console()
    settings = load_settings_or_exit()
    store = build_serial_store(settings)
    if not store.exists():
        console.print(
            f"No serials file at {store.path}; run 'huereport serials update'"
        )
        raise typer.Exit(1)
    mapping = load_serials_or_exit(store)

    snapshots = fetch_snapshots_or_exit(build_context(settings, bridge))
    missing = missing_serials(flatten_lights(snapshots), mapping)
    if not missing:
        console.print("[green]Every light has a serial number.[/green]")
        return

    for bridge_name, names in missing.items():
        console.print(f"[bold]{bridge_name}[/bold]")
        for name in names:
            console.print(f"  - {name}")
