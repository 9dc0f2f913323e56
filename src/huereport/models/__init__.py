"""Data models for huereport."""

from huereport.models.descriptions import (
    AbsoluteTime,
    ActionDescription,
    ConditionDescription,
    DurationTime,
    RecurringTime,
    ResolvedEntity,
    ResourceAddress,
    ResourceKind,
    RuleDescription,
    ScheduleDescription,
    ScheduleSpec,
)
from huereport.models.device import PhysicalDevice, SerialEntry, SerialMapping
from huereport.models.monitor import (
    AlertKind,
    DeviceAlert,
    LightChange,
    MonitorBaseline,
    MonitorEvents,
    MotionEvent,
)
from huereport.models.snapshot import (
    Action,
    BridgeSnapshot,
    Condition,
    Group,
    Light,
    LightState,
    ResourceLink,
    Rule,
    Scene,
    Schedule,
    ScheduleCommand,
    Sensor,
    SensorConfig,
    SensorKind,
)

__all__ = [
    "AbsoluteTime",
    "Action",
    "ActionDescription",
    "AlertKind",
    "BridgeSnapshot",
    "Condition",
    "ConditionDescription",
    "DeviceAlert",
    "DurationTime",
    "Group",
    "Light",
    "LightChange",
    "LightState",
    "MonitorBaseline",
    "MonitorEvents",
    "MotionEvent",
    "PhysicalDevice",
    "RecurringTime",
    "ResolvedEntity",
    "ResourceAddress",
    "ResourceKind",
    "ResourceLink",
    "Rule",
    "RuleDescription",
    "Scene",
    "Schedule",
    "ScheduleCommand",
    "ScheduleDescription",
    "ScheduleSpec",
    "Sensor",
    "SensorConfig",
    "SensorKind",
    "SerialEntry",
    "SerialMapping",
]
