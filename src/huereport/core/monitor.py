"""Poll bridges on an interval and report what changed between polls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from enum import Enum

import httpx

from huereport.config import DEFAULT_BATTERY_THRESHOLD
from huereport.models import (
    AlertKind,
    BridgeSnapshot,
    DeviceAlert,
    Light,
    LightChange,
    LightState,
    MonitorBaseline,
    MonitorEvents,
    MotionEvent,
    SensorKind,
)

from .aggregator import AggregationContext, BridgeAggregator
from .identity import canonical_name
from .rules import format_value
from .summary import low_battery_devices, unreachable_devices, unreachable_lights

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 10.0
WAIT_SLICE = 1.0


class MonitorPhase(str, Enum):
    PRIMING = "priming"
    STEADY = "steady"


def _brightness(state: LightState) -> str:
    percent = state.brightness_percent
    return f"{percent}%" if percent is not None else "unknown"


def describe_light_changes(previous: LightState, current: LightState) -> list[str]:
    changes = []
    if previous.on != current.on and current.on is not None:
        changes.append("Turned On" if current.on else "Turned Off")
    if previous.brightness != current.brightness:
        changes.append(f"Brightness → {_brightness(current)}")
    if previous.color_temp != current.color_temp:
        kelvin = current.kelvin
        suffix = f" Mired (~{kelvin} K)" if kelvin else ""
        changes.append(f"Color Temp → {format_value(current.color_temp)}{suffix}")
    if previous.hue != current.hue:
        changes.append(f"Hue → {format_value(current.hue)}")
    if previous.saturation != current.saturation:
        changes.append(f"Saturation → {format_value(current.saturation)}")
    if previous.xy != current.xy:
        changes.append(f"Color → xy {format_value(current.xy)}")
    if previous.reachable != current.reachable and current.reachable is not None:
        reachability = "Reachable" if current.reachable else "Unreachable"
        changes.append(f"Became {reachability}")
    return changes


def _lights(snapshots: Iterable[BridgeSnapshot]) -> list[Light]:
    return [light for snapshot in snapshots for light in snapshot.lights.values()]


def collect_alerts(
    snapshots: Iterable[BridgeSnapshot],
    battery_threshold: int = DEFAULT_BATTERY_THRESHOLD,
) -> list[DeviceAlert]:
    """Low-battery and unreachable devices, one row per physical device."""
    snapshots = list(snapshots)
    alerts = [
        DeviceAlert(
            kind=AlertKind.LOW_BATTERY,
            bridge_name=device.bridge_name,
            device_name=device.name,
            battery=device.battery,
        )
        for device in low_battery_devices(snapshots, battery_threshold)
    ]
    alerts += [
        DeviceAlert(
            kind=AlertKind.UNREACHABLE,
            bridge_name=device.bridge_name,
            device_name=device.name,
        )
        for device in unreachable_devices(snapshots)
    ]
    for bridge_name, names in unreachable_lights(snapshots).items():
        alerts += [
            DeviceAlert(
                kind=AlertKind.UNREACHABLE, bridge_name=bridge_name, device_name=name
            )
            for name in names
        ]
    return alerts


class MonitorDiffEngine:
    """Holds the previous poll's baseline and diffs each new poll against it.

    The first call only records the baseline (priming). Every later call
    compares lights present in both polls field by field, and reports motion
    when a presence sensor's ``lastupdated`` moved. Alerts are recomputed
    from scratch every time, including while priming.
    """

    def __init__(self, battery_threshold: int = DEFAULT_BATTERY_THRESHOLD) -> None:
        self.battery_threshold = battery_threshold
        self.phase = MonitorPhase.PRIMING
        self.baseline = MonitorBaseline()

    def _light_changes(self, snapshots: list[BridgeSnapshot]) -> list[LightChange]:
        previous_states = self.baseline.light_states
        changes = []
        for light in _lights(snapshots):
            previous = previous_states.get(light.key)
            if previous is None:
                continue
            described = describe_light_changes(previous, light.state)
            if described:
                changes.append(
                    LightChange(
                        key=light.key,
                        bridge_name=light.bridge_name,
                        light_name=light.name or f"Light {light.id}",
                        changes=tuple(described),
                    )
                )
        return changes

    def _motion(
        self, snapshots: list[BridgeSnapshot], timestamps: dict[str, str]
    ) -> list[MotionEvent]:
        previous_timestamps = self.baseline.motion_timestamps
        events = []
        for snapshot in snapshots:
            sensors = list(snapshot.sensors.values())
            for sensor in sensors:
                if sensor.kind is not SensorKind.PRESENCE:
                    continue
                updated = sensor.state.get("lastupdated")
                if not isinstance(updated, str):
                    continue
                timestamps[sensor.key] = updated
                previous = previous_timestamps.get(sensor.key)
                if previous is None or previous == updated:
                    continue
                name = (
                    canonical_name(sensors, sensor.unique_id)
                    if sensor.unique_id
                    else sensor.name or f"Sensor {sensor.id}"
                )
                events.append(
                    MotionEvent(
                        key=sensor.key,
                        bridge_name=sensor.bridge_name,
                        device_name=name,
                        presence=sensor.state.get("presence"),
                        last_updated=updated,
                    )
                )
        return events

    def diff(
        self,
        snapshots: list[BridgeSnapshot],
        failed_bridges: Iterable[str] = (),
        polled_at: datetime | None = None,
    ) -> MonitorEvents:
        priming = self.phase is MonitorPhase.PRIMING
        timestamps: dict[str, str] = {}
        if priming:
            light_changes: list[LightChange] = []
            motion: list[MotionEvent] = []
            self._motion(snapshots, timestamps)
        else:
            light_changes = self._light_changes(snapshots)
            motion = self._motion(snapshots, timestamps)

        events = MonitorEvents(
            polled_at=polled_at or datetime.now(),
            priming=priming,
            light_changes=tuple(light_changes),
            motion=tuple(motion),
            alerts=tuple(collect_alerts(snapshots, self.battery_threshold)),
            failed_bridges=tuple(failed_bridges),
        )

        self.baseline = MonitorBaseline(
            light_states={light.key: light.state for light in _lights(snapshots)},
            motion_timestamps=timestamps,
        )
        self.phase = MonitorPhase.STEADY
        return events


async def wait_for_next_poll(
    interval: float,
    stop_event: asyncio.Event,
    refresh_event: asyncio.Event,
    tick: float = WAIT_SLICE,
) -> None:
    """Idle for ``interval`` seconds, checking both events every ``tick``."""
    remaining = interval
    while remaining > 0:
        if stop_event.is_set() or refresh_event.is_set():
            break
        step = min(tick, remaining)
        await asyncio.sleep(step)
        remaining -= step
    if refresh_event.is_set():
        logger.debug("Refresh requested")
        refresh_event.clear()


async def run_monitor(
    context: AggregationContext,
    on_cycle: Callable[[MonitorEvents, list[BridgeSnapshot]], None],
    stop_event: asyncio.Event,
    refresh_event: asyncio.Event | None = None,
    interval: float = DEFAULT_INTERVAL,
    transport: httpx.AsyncBaseTransport | None = None,
    tick: float = WAIT_SLICE,
) -> None:
    """Fetch, diff and report until ``stop_event`` is set.

    The stop event is only honoured between fetches; a poll already in flight
    always completes.
    """
    refresh_event = refresh_event or asyncio.Event()
    engine = MonitorDiffEngine(battery_threshold=context.battery_threshold)
    aggregator = BridgeAggregator(context, transport=transport)

    while not stop_event.is_set():
        result = await aggregator.collect()
        if result.snapshots:
            events = engine.diff(
                result.snapshots,
                failed_bridges=[failure.bridge for failure in result.failures],
            )
            on_cycle(events, result.snapshots)
        else:
            logger.error("No bridges could be reached; skipping this cycle")
        await wait_for_next_poll(interval, stop_event, refresh_event, tick=tick)

    logger.info("Monitor stopped")
