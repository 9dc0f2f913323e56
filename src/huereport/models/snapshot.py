"""Bridge asset models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Unknown upstream keys are ignored; entities are frozen once normalized.
_RECORD_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class SensorKind(str, Enum):
    PRESENCE = "presence"
    SWITCH = "switch"
    ROTARY = "rotary"
    TEMPERATURE = "temperature"
    LIGHT_LEVEL = "light_level"
    DAYLIGHT = "daylight"
    VIRTUAL = "virtual"
    OTHER = "other"

    @classmethod
    def from_type(cls, sensor_type: str) -> SensorKind:
        lowered = sensor_type.lower()
        if lowered.startswith("clip"):
            return cls.VIRTUAL
        if "presence" in lowered:
            return cls.PRESENCE
        if "rotary" in lowered:
            return cls.ROTARY
        if "switch" in lowered:
            return cls.SWITCH
        if "temperature" in lowered:
            return cls.TEMPERATURE
        if "lightlevel" in lowered:
            return cls.LIGHT_LEVEL
        if "daylight" in lowered:
            return cls.DAYLIGHT
        return cls.OTHER

    @property
    def is_primary(self) -> bool:
        """Kinds whose endpoint carries the user-assigned device name."""
        return self in (SensorKind.PRESENCE, SensorKind.SWITCH, SensorKind.ROTARY)


class LightState(BaseModel):
    model_config = _RECORD_CONFIG

    on: bool | None = None
    reachable: bool | None = None
    brightness: int | None = Field(default=None, alias="bri")
    hue: int | None = None
    saturation: int | None = Field(default=None, alias="sat")
    color_temp: int | None = Field(default=None, alias="ct")
    xy: tuple[float, ...] | None = None
    color_mode: str | None = Field(default=None, alias="colormode")
    effect: str | None = None
    alert: str | None = None

    @property
    def brightness_percent(self) -> int | None:
        if self.brightness is None:
            return None
        return round(self.brightness / 254 * 100)

    @property
    def kelvin(self) -> int | None:
        if not self.color_temp:
            return None
        return round(1_000_000 / self.color_temp)


class Light(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    bridge_id: str = ""
    bridge_name: str = ""
    unique_id: str = Field(default="", alias="uniqueid")
    name: str = ""
    type: str = ""
    product_id: str | None = Field(default=None, alias="productid")
    product_name: str | None = Field(default=None, alias="productname")
    model_id: str | None = Field(default=None, alias="modelid")
    state: LightState = Field(default_factory=LightState)

    @property
    def key(self) -> str:
        return self.unique_id or f"{self.bridge_id}/lights/{self.id}"


class SensorConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    on: bool | None = None
    reachable: bool | None = None
    battery: int | None = None


class Sensor(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    bridge_id: str = ""
    bridge_name: str = ""
    unique_id: str | None = Field(default=None, alias="uniqueid")
    name: str = ""
    type: str = ""
    product_name: str | None = Field(default=None, alias="productname")
    model_id: str | None = Field(default=None, alias="modelid")
    manufacturer: str | None = Field(default=None, alias="manufacturername")
    config: SensorConfig = Field(default_factory=SensorConfig)
    state: dict[str, Any] = Field(default_factory=dict)

    @property
    def kind(self) -> SensorKind:
        return SensorKind.from_type(self.type)

    @property
    def key(self) -> str:
        return self.unique_id or f"{self.bridge_id}/sensors/{self.id}"


class Group(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    name: str = ""
    type: str = ""
    group_class: str | None = Field(default=None, alias="class")
    light_ids: tuple[str, ...] = Field(default=(), alias="lights")
    action: LightState = Field(default_factory=LightState)
    locations: dict[str, tuple[float, ...]] | None = None

    @property
    def is_entertainment(self) -> bool:
        return self.type == "Entertainment"


class Scene(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    name: str = ""
    type: str = ""
    group_id: str | None = Field(default=None, alias="group")
    light_ids: tuple[str, ...] = Field(default=(), alias="lights")
    action: LightState | None = None
    light_overrides: dict[str, LightState] = Field(
        default_factory=dict, alias="lightstates"
    )

    def state_for(self, light_id: str) -> LightState | None:
        """Per-light override when the detail call provided one, else the action."""
        return self.light_overrides.get(light_id, self.action)


class ScheduleCommand(BaseModel):
    model_config = _RECORD_CONFIG

    address: str = ""
    method: str = ""
    body: dict[str, Any] = Field(default_factory=dict)


class Schedule(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    name: str = ""
    description: str = ""
    local_time: str | None = Field(default=None, alias="localtime")
    time: str | None = None
    status: str = ""
    command: ScheduleCommand = Field(default_factory=ScheduleCommand)

    @property
    def time_spec(self) -> str | None:
        return self.local_time or self.time


class Condition(BaseModel):
    model_config = _RECORD_CONFIG

    address: str
    operator: str
    value: Any = None


class Action(BaseModel):
    model_config = _RECORD_CONFIG

    address: str
    method: str = ""
    body: dict[str, Any] = Field(default_factory=dict)


class Rule(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    name: str = ""
    status: str = ""
    owner: str | None = None
    conditions: tuple[Condition, ...] = ()
    actions: tuple[Action, ...] = ()


class ResourceLink(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    name: str = ""
    description: str = ""
    owner: str | None = None
    links: tuple[str, ...] = ()


class BridgeSnapshot(BaseModel):
    """One point-in-time capture of a single bridge."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bridge_id: str
    name: str
    address: str
    credential: str = Field(repr=False, exclude=True)
    config: dict[str, Any] = Field(default_factory=dict)
    lights: dict[str, Light] = Field(default_factory=dict)
    groups: dict[str, Group] = Field(default_factory=dict)
    scenes: dict[str, Scene] = Field(default_factory=dict)
    sensors: dict[str, Sensor] = Field(default_factory=dict)
    schedules: dict[str, Schedule] = Field(default_factory=dict)
    rules: dict[str, Rule] = Field(default_factory=dict)
    resource_links: dict[str, ResourceLink] = Field(default_factory=dict)
