"""Collapse logical sensor resources into the physical devices exposing them.

A multi-function device (a motion sensor, say) appears on the bridge as one
sensor per endpoint: presence, temperature and light level. Their unique ids
share a hardware prefix and end in ``-<2 hex>-<4 hex>``. Usually only the
presence endpoint carries the name the user gave the device.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from huereport.models import PhysicalDevice, Sensor, SensorKind

logger = logging.getLogger(__name__)

ENDPOINT_SUFFIX = re.compile(r"-[0-9A-Fa-f]{2}-[0-9A-Fa-f]{4}$")


def base_id(unique_id: str) -> str:
    return ENDPOINT_SUFFIX.sub("", unique_id)


def _local_order(sensor: Sensor) -> tuple[str, int, int, str]:
    # lowest local id first, numeric where possible
    if sensor.id.isdigit():
        return (sensor.bridge_id, 0, int(sensor.id), sensor.id)
    return (sensor.bridge_id, 1, 0, sensor.id)


def device_key(sensor: Sensor) -> str:
    """Physical-device key; virtual or id-less sensors stay on their own."""
    if sensor.unique_id and sensor.kind is not SensorKind.VIRTUAL:
        return base_id(sensor.unique_id)
    return f"{sensor.bridge_id}/sensors/{sensor.id}"


def _fallback_name(sensor: Sensor) -> str:
    return sensor.name or sensor.product_name or f"Sensor {sensor.id}"


def _primary_names(sensors: list[Sensor]) -> dict[str, str]:
    names: dict[str, str] = {}
    for sensor in sensors:
        if not sensor.kind.is_primary or not sensor.name:
            continue
        key = device_key(sensor)
        if key in names:
            logger.debug("Device %s has several primary endpoints", key)
            continue
        names[key] = sensor.name
    return names


class DeviceIdentityResolver:
    """Groups logical sensors by physical device.

    Input order never matters: sensors are sorted by ``(bridge, local id)``
    before any choice is made, so resolving a shuffled list gives the same
    devices and names.
    """

    def resolve_physical(self, sensors: Iterable[Sensor]) -> list[PhysicalDevice]:
        ordered = sorted(sensors, key=_local_order)
        names = _primary_names(ordered)

        grouped: dict[str, list[Sensor]] = {}
        for sensor in ordered:
            grouped.setdefault(device_key(sensor), []).append(sensor)

        devices = []
        for key, endpoints in grouped.items():
            primaries = [sensor for sensor in endpoints if sensor.kind.is_primary]
            representative = primaries[0] if primaries else endpoints[0]
            devices.append(
                PhysicalDevice(
                    base_id=key,
                    name=names.get(key) or _fallback_name(representative),
                    bridge_name=representative.bridge_name,
                    representative=representative,
                    endpoints=tuple(endpoints),
                )
            )
        devices.sort(
            key=lambda device: (device.bridge_name, device.name, device.base_id)
        )
        return devices

    def canonical_name(self, sensors: Iterable[Sensor], target_unique_id: str) -> str:
        ordered = sorted(sensors, key=_local_order)
        target_base = base_id(target_unique_id)
        names = _primary_names(ordered)
        if target_base in names:
            return names[target_base]

        for sensor in ordered:
            if sensor.unique_id == target_unique_id:
                return _fallback_name(sensor)
        for sensor in ordered:
            if sensor.unique_id and base_id(sensor.unique_id) == target_base:
                return _fallback_name(sensor)
        return f"Sensor {target_unique_id}"


def resolve_physical(sensors: Iterable[Sensor]) -> list[PhysicalDevice]:
    return DeviceIdentityResolver().resolve_physical(sensors)


def canonical_name(sensors: Iterable[Sensor], target_unique_id: str) -> str:
    return DeviceIdentityResolver().canonical_name(sensors, target_unique_id)
