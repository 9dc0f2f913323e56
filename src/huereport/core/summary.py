from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from huereport.config import DEFAULT_BATTERY_THRESHOLD
from huereport.models import BridgeSnapshot, Light, PhysicalDevice

from .identity import resolve_physical

UNASSIGNED = "Unassigned"


@dataclass(frozen=True)
class GroupLightCount:
    group_id: str
    name: str
    type: str
    light_count: int


def flatten_lights(snapshots: Iterable[BridgeSnapshot]) -> list[Light]:
    """Every light of every bridge, ordered by bridge then light name."""
    lights = [light for snapshot in snapshots for light in snapshot.lights.values()]
    return sorted(lights, key=lambda light: (light.bridge_name, light.name, light.id))


def light_counts(snapshots: Iterable[BridgeSnapshot]) -> dict[str, int]:
    return {snapshot.name: len(snapshot.lights) for snapshot in snapshots}


def group_light_counts(snapshot: BridgeSnapshot) -> list[GroupLightCount]:
    groups = sorted(snapshot.groups.values(), key=lambda group: (group.name, group.id))
    return [
        GroupLightCount(
            group_id=group.id,
            name=group.name,
            type=group.type,
            light_count=len(group.light_ids),
        )
        for group in groups
    ]


def group_memberships(snapshot: BridgeSnapshot) -> dict[str, list[str]]:
    """Light id to the names of the groups containing it."""
    memberships: dict[str, list[str]] = {}
    for group in snapshot.groups.values():
        for light_id in group.light_ids:
            memberships.setdefault(light_id, []).append(group.name)
    return {light_id: sorted(names) for light_id, names in memberships.items()}


def unassigned_lights(snapshot: BridgeSnapshot) -> list[Light]:
    assigned = group_memberships(snapshot)
    return sorted(
        (light for light in snapshot.lights.values() if light.id not in assigned),
        key=lambda light: (light.name, light.id),
    )


def lights_by_group(snapshot: BridgeSnapshot) -> dict[str, list[Light]]:
    """Group name to member lights; lights in no group land under ``Unassigned``."""
    grouped: dict[str, list[Light]] = {}
    for group in sorted(snapshot.groups.values(), key=lambda group: group.name):
        members = [
            snapshot.lights[light_id]
            for light_id in group.light_ids
            if light_id in snapshot.lights
        ]
        grouped[group.name] = sorted(members, key=lambda light: light.name)
    unassigned = unassigned_lights(snapshot)
    if unassigned:
        grouped[UNASSIGNED] = unassigned
    return grouped


def unreachable_lights(snapshots: Iterable[BridgeSnapshot]) -> dict[str, list[str]]:
    unreachable: dict[str, list[str]] = {}
    for light in flatten_lights(snapshots):
        if light.state.reachable is False:
            unreachable.setdefault(light.bridge_name, []).append(light.name)
    return unreachable


def physical_devices(snapshots: Iterable[BridgeSnapshot]) -> list[PhysicalDevice]:
    return [
        device
        for snapshot in snapshots
        for device in resolve_physical(snapshot.sensors.values())
    ]


def low_battery_devices(
    snapshots: Iterable[BridgeSnapshot],
    threshold: int = DEFAULT_BATTERY_THRESHOLD,
) -> list[PhysicalDevice]:
    return [
        device
        for device in physical_devices(snapshots)
        if device.battery is not None and device.battery <= threshold
    ]


def unreachable_devices(snapshots: Iterable[BridgeSnapshot]) -> list[PhysicalDevice]:
    return [device for device in physical_devices(snapshots) if not device.reachable]
