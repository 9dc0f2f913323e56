from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from huereport.config import (
    BridgeConfig,
    Settings,
    default_inventory_path,
    expand_path,
    get_settings,
    resolve_config_path,
    serials_path_from_settings,
)
from huereport.core import AggregationContext, NoBridgesReachableError, aggregate
from huereport.models import BridgeSnapshot, SerialMapping
from huereport.storage import SerialStore
from huereport.utils.logging import register_credentials


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def select_bridges_or_exit(
    settings: Settings, names: list[str] | None = None
) -> list[BridgeConfig]:
    """Configured bridges, narrowed to ``names`` when any are given."""
    if not settings.bridges:
        path, _ = resolve_config_path_or_exit(allow_missing=True)
        typer.echo(
            f"No bridges configured. Add a [[bridges]] table to {path} "
            "(see 'huereport config init').",
            err=True,
        )
        raise typer.Exit(1)
    if not names:
        return list(settings.bridges)

    selected = []
    for name in names:
        bridge = settings.bridge_named(name)
        if bridge is None:
            known = ", ".join(b.name for b in settings.bridges)
            typer.echo(f"Unknown bridge '{name}'. Configured: {known}", err=True)
            raise typer.Exit(1)
        selected.append(bridge)
    return selected


def build_context(
    settings: Settings, names: list[str] | None = None
) -> AggregationContext:
    bridges = select_bridges_or_exit(settings, names)
    register_credentials(bridge.credential for bridge in bridges)
    return AggregationContext.from_settings(settings, bridges=bridges)


def fetch_snapshots_or_exit(context: AggregationContext) -> list[BridgeSnapshot]:
    try:
        return asyncio.run(aggregate(context))
    except NoBridgesReachableError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def build_serial_store(settings: Settings) -> SerialStore:
    return SerialStore(serials_path_from_settings(settings))


def load_serials_or_exit(store: SerialStore) -> SerialMapping:
    try:
        return store.load()
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def inventory_path(settings: Settings) -> Path | None:
    if settings.serials.inventory:
        return expand_path(settings.serials.inventory)
    default = default_inventory_path()
    return default if default.exists() else None
