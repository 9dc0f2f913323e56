from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .snapshot import LightState


class AlertKind(str, Enum):
    LOW_BATTERY = "low_battery"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class LightChange:
    key: str
    bridge_name: str
    light_name: str
    changes: tuple[str, ...]


@dataclass(frozen=True)
class MotionEvent:
    key: str
    bridge_name: str
    device_name: str
    presence: bool | None
    last_updated: str


@dataclass(frozen=True)
class DeviceAlert:
    kind: AlertKind
    bridge_name: str
    device_name: str
    battery: int | None = None


@dataclass(frozen=True)
class MonitorEvents:
    """Everything one monitor cycle has to report."""

    polled_at: datetime
    priming: bool
    light_changes: tuple[LightChange, ...] = ()
    motion: tuple[MotionEvent, ...] = ()
    alerts: tuple[DeviceAlert, ...] = ()
    failed_bridges: tuple[str, ...] = ()

    @property
    def has_changes(self) -> bool:
        return bool(self.light_changes or self.motion)


@dataclass
class MonitorBaseline:
    """Retained between cycles; replaced wholesale after every poll."""

    light_states: dict[str, LightState] = field(default_factory=dict)
    motion_timestamps: dict[str, str] = field(default_factory=dict)
