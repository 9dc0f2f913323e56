from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ResourceKind(str, Enum):
    LIGHTS = "lights"
    GROUPS = "groups"
    SCENES = "scenes"
    SENSORS = "sensors"
    SCHEDULES = "schedules"
    RULES = "rules"
    RESOURCE_LINKS = "resourcelinks"
    CONFIG = "config"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return {
            ResourceKind.LIGHTS: "light",
            ResourceKind.GROUPS: "group",
            ResourceKind.SCENES: "scene",
            ResourceKind.SENSORS: "sensor",
            ResourceKind.SCHEDULES: "schedule",
            ResourceKind.RULES: "rule",
            ResourceKind.RESOURCE_LINKS: "resource link",
            ResourceKind.CONFIG: "bridge",
            ResourceKind.UNKNOWN: "target",
        }[self]


@dataclass(frozen=True)
class ResourceAddress:
    """A parsed ``/<type>/<id>/(state|config)/<attribute>`` path."""

    raw: str
    kind: ResourceKind
    resource_id: str | None = None
    section: str | None = None
    attribute: str | None = None


@dataclass(frozen=True)
class ResolvedEntity:
    address: ResourceAddress
    name: str | None

    @property
    def found(self) -> bool:
        return self.name is not None

    @property
    def label(self) -> str:
        if self.name is not None:
            return self.name
        if self.address.kind is ResourceKind.CONFIG:
            return "the bridge"
        if self.address.resource_id:
            return f"unnamed {self.address.kind.label} {self.address.resource_id}"
        return f"unnamed {self.address.kind.label}"


@dataclass(frozen=True)
class ConditionDescription:
    entity: ResolvedEntity
    attribute: str | None
    operator: str
    value: object
    sentence: str


@dataclass(frozen=True)
class ActionDescription:
    entity: ResolvedEntity
    method: str
    phrases: tuple[str, ...]

    @property
    def sentence(self) -> str:
        return "; ".join(self.phrases)


@dataclass(frozen=True)
class RuleDescription:
    rule_id: str
    name: str
    conditions: tuple[ConditionDescription, ...] = ()
    actions: tuple[ActionDescription, ...] = ()

    @property
    def condition_sentences(self) -> list[str]:
        return [condition.sentence for condition in self.conditions]

    @property
    def action_sentences(self) -> list[str]:
        return [action.sentence for action in self.actions]


# Schedule time specifications


@dataclass(frozen=True)
class AbsoluteTime:
    timestamp: str


@dataclass(frozen=True)
class DurationTime:
    hours: int | None = None
    minutes: int | None = None
    seconds: int | None = None
    raw: str = ""


@dataclass(frozen=True)
class RecurringTime:
    mask: int
    time: str
    days: tuple[str, ...] = field(default=())

    @property
    def every_day(self) -> bool:
        return len(self.days) == 7


ScheduleSpec = AbsoluteTime | DurationTime | RecurringTime


@dataclass(frozen=True)
class ScheduleDescription:
    schedule_id: str
    name: str
    status: str
    spec: ScheduleSpec | None
    time_sentence: str
    command: ActionDescription | None = None
