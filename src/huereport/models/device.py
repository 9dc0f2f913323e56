"""Physical device models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .snapshot import Sensor, SensorKind


class PhysicalDevice(BaseModel):
    """One hardware unit, assembled from the logical sensors it exposes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_id: str
    name: str
    bridge_name: str
    representative: Sensor
    endpoints: tuple[Sensor, ...] = Field(default=())

    @property
    def battery(self) -> int | None:
        if self.representative.config.battery is not None:
            return self.representative.config.battery
        for endpoint in self.endpoints:
            if endpoint.config.battery is not None:
                return endpoint.config.battery
        return None

    @property
    def reachable(self) -> bool:
        return self.representative.config.reachable is not False

    def endpoint(self, kind: SensorKind) -> Sensor | None:
        """The endpoint of a given kind, keeping its own state intact."""
        for sensor in self.endpoints:
            if sensor.kind is kind:
                return sensor
        return None


class SerialEntry(BaseModel):
    """One light in the serial-number mapping file."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str
    serial_number: str = Field(default="", alias="serialNumber")
    bridge_name: str = Field(default="", alias="bridgeName")
    type: str = ""
    group_names: list[str] = Field(default_factory=list, alias="groupNames")


class SerialMapping(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lights: dict[str, SerialEntry] = Field(default_factory=dict)
