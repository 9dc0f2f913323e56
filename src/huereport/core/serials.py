"""Light serial-number mapping.

Bridges do not expose serial numbers, so they are kept in a JSON file keyed by
light unique id. The file is regenerated from live data; serials already
filled in are kept, and empty ones may be taken from a plain-text inventory
with lines of the form ``SN: <serial> -> <light name>``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from huereport.models import BridgeSnapshot, Light, SerialEntry, SerialMapping

from .summary import group_memberships

logger = logging.getLogger(__name__)

_INVENTORY_LINE = re.compile(r"SN:\s*(?P<serial>.+?)\s+->\s+(?P<rest>.*)$")


def parse_serial_inventory(text: str, light_names: Iterable[str]) -> dict[str, str]:
    """Map light names to serials found in an inventory text.

    The part after ``->`` may carry trailing notes, so it is matched against
    known light names, longest name first. Comment and blank lines are skipped.
    """
    names = sorted(set(light_names), key=len, reverse=True)
    serials: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _INVENTORY_LINE.search(stripped)
        if not match:
            continue
        rest = match.group("rest")
        for name in names:
            if rest == name or rest.startswith(name + " "):
                serials[name] = match.group("serial").strip()
                break
        else:
            logger.debug("No light matches inventory line %r", stripped)
    return serials


def _entry_order(item: tuple[str, SerialEntry]) -> tuple[str, str, str]:
    entry = item[1]
    return (entry.bridge_name, ", ".join(entry.group_names), entry.name)


def build_serial_mapping(
    snapshots: Iterable[BridgeSnapshot],
    existing: SerialMapping | None = None,
    inventory: dict[str, str] | None = None,
) -> SerialMapping:
    existing = existing or SerialMapping()
    inventory = inventory or {}

    entries: dict[str, SerialEntry] = {}
    for snapshot in snapshots:
        memberships = group_memberships(snapshot)
        for light in snapshot.lights.values():
            if not light.unique_id:
                continue
            serial = ""
            if light.unique_id in existing.lights:
                serial = existing.lights[light.unique_id].serial_number
            if not serial and light.name in inventory:
                serial = inventory[light.name]
                logger.info(
                    "Match for '%s' found. Populating serial: %s", light.name, serial
                )
            entries[light.unique_id] = SerialEntry(
                name=light.name,
                serial_number=serial,
                bridge_name=snapshot.name,
                type=light.type,
                group_names=sorted(memberships.get(light.id, [])),
            )

    return SerialMapping(lights=dict(sorted(entries.items(), key=_entry_order)))


def missing_serials(
    lights: Iterable[Light], mapping: SerialMapping
) -> dict[str, list[str]]:
    """Light names without a serial number, per bridge name."""
    missing: dict[str, list[str]] = {}
    for light in lights:
        entry = mapping.lights.get(light.unique_id)
        if entry is None or not entry.serial_number:
            missing.setdefault(light.bridge_name, []).append(light.name)
    return {bridge: sorted(names) for bridge, names in sorted(missing.items())}
