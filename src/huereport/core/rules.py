"""Decode bridge automation rules into plain-English sentences.

Conditions and actions reference other resources through address paths such
as ``/sensors/12/state/buttonevent`` or ``/groups/3/action``. Each path is
parsed into a :class:`ResourceAddress`, resolved against the snapshot, and
then rendered. Special cases (switch button codes, dynamic-scene system
sensors, schedule updates) take precedence over the generic sentence.
Missing resources fall back to an "unnamed" label; nothing here raises on
odd upstream data.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from huereport.models import (
    Action,
    ActionDescription,
    BridgeSnapshot,
    Condition,
    ConditionDescription,
    ResolvedEntity,
    ResourceAddress,
    ResourceKind,
    ResourceLink,
    Rule,
    RuleDescription,
    Schedule,
    ScheduleDescription,
)

from .codes import (
    CYCLE_STATE_SENSOR,
    CYCLING_CONDITIONS,
    CYCLING_SENSOR,
    CYCLING_STOP_ACTION,
    CycleState,
    CyclingStatus,
    describe_button_event,
    parse_code,
)
from .schedules import decode_time_spec, parse_time_spec, render_time_spec

logger = logging.getLogger(__name__)

OPERATOR_WORDS = {
    "eq": "is equal to",
    "gt": "is greater than",
    "lt": "is less than",
    "dx": "changes",
    "ddx": "changes for a duration of",
    "stable": "is stable for a duration of",
    "in": "is in the range",
    "not in": "is not in the range",
}

_ADDRESS = re.compile(r"^/(?P<kind>[^/]+)(?:/(?P<id>[^/]+))?(?:/(?P<rest>.+))?$")
# schedule commands carry the full REST path, credential included
_API_PREFIX = re.compile(r"^/api/[^/]+(?P<path>/.+)$")
_KINDS = {kind.value: kind for kind in ResourceKind}


def parse_address(address: str) -> ResourceAddress:
    path = address.strip()
    prefixed = _API_PREFIX.match(path)
    if prefixed:
        path = prefixed.group("path")

    match = _ADDRESS.match(path)
    if not match:
        return ResourceAddress(raw=address, kind=ResourceKind.UNKNOWN)

    kind = _KINDS.get(match.group("kind"), ResourceKind.UNKNOWN)
    resource_id = match.group("id")
    rest = match.group("rest")

    if kind is ResourceKind.CONFIG:
        # bridge-level paths such as /config/localtime have no resource id
        attribute = "/".join(part for part in (resource_id, rest) if part)
        return ResourceAddress(raw=address, kind=kind, attribute=attribute or None)

    section = attribute = None
    if rest:
        head, _, tail = rest.partition("/")
        section = head
        attribute = tail or None
    return ResourceAddress(
        raw=address,
        kind=kind,
        resource_id=resource_id,
        section=section,
        attribute=attribute,
    )


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, list | tuple):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True)
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class RuleInterpreter:
    """Describes rules, schedules and resource links of one snapshot."""

    def __init__(self, snapshot: BridgeSnapshot) -> None:
        self._snapshot = snapshot

    def _table(self, kind: ResourceKind) -> Mapping[str, Any] | None:
        snapshot = self._snapshot
        match kind:
            case ResourceKind.LIGHTS:
                return snapshot.lights
            case ResourceKind.GROUPS:
                return snapshot.groups
            case ResourceKind.SCENES:
                return snapshot.scenes
            case ResourceKind.SENSORS:
                return snapshot.sensors
            case ResourceKind.SCHEDULES:
                return snapshot.schedules
            case ResourceKind.RULES:
                return snapshot.rules
            case ResourceKind.RESOURCE_LINKS:
                return snapshot.resource_links
            case _:
                return None

    def resolve(self, address: str | ResourceAddress) -> ResolvedEntity:
        parsed = parse_address(address) if isinstance(address, str) else address
        table = self._table(parsed.kind)
        record = None
        if table is not None and parsed.resource_id is not None:
            record = table.get(parsed.resource_id)
        name = (record.name or None) if record is not None else None
        if record is None and parsed.resource_id is not None:
            logger.debug("Unresolved reference %s", parsed.raw)
        return ResolvedEntity(address=parsed, name=name)

    def scene_name(self, scene_id: Any) -> str | None:
        scene = self._snapshot.scenes.get(str(scene_id))
        return scene.name if scene is not None and scene.name else None

    # conditions

    def _dynamic_condition(
        self, entity: ResolvedEntity, condition: Condition
    ) -> str | None:
        code = parse_code(condition.value)
        if code is None:
            return None
        operator = condition.operator

        if entity.name == CYCLE_STATE_SENSOR and operator == "eq":
            if code in CycleState._value2member_map_:
                return CycleState(code).condition_phrase
        elif entity.name == CYCLING_SENSOR:
            if (operator == "lt" and code == 1) or (operator == "eq" and code == 0):
                return CYCLING_CONDITIONS[CyclingStatus.INACTIVE]
            if (operator == "gt" and code == 0) or (operator == "eq" and code == 1):
                return CYCLING_CONDITIONS[CyclingStatus.ACTIVE]
        return None

    def describe_condition(self, condition: Condition) -> ConditionDescription:
        entity = self.resolve(condition.address)
        attribute = entity.address.attribute
        label = entity.label
        operator_words = OPERATOR_WORDS.get(condition.operator, condition.operator)

        sentence = None
        if attribute == "buttonevent" and condition.operator == "eq":
            sentence = "If " + describe_button_event(condition.value, label)
        elif (
            attribute == "status"
            and entity.address.kind is ResourceKind.SENSORS
            and entity.found
        ):
            phrase = self._dynamic_condition(entity, condition)
            if phrase:
                sentence = f"If {phrase}"

        if sentence is None:
            subject = f"{label}'s {attribute}" if attribute else label
            sentence = f"If {subject} {operator_words}"
            if condition.operator != "dx":
                sentence += f" {format_value(condition.value)}"

        return ConditionDescription(
            entity=entity,
            attribute=attribute,
            operator=condition.operator,
            value=condition.value,
            sentence=sentence,
        )

    # actions

    def _body_phrase(self, entity: ResolvedEntity, key: str, value: Any) -> str:
        label = entity.label
        kind = entity.address.kind

        if key == "on" and isinstance(value, bool):
            return f"Turn {'on' if value else 'off'} {label}"
        if key == "bri" and _is_number(value):
            return f"Set brightness to {round(value / 254 * 100)}%"
        if key == "ct":
            return f"Set color temperature to {format_value(value)} Mired"
        if key == "hue":
            return f"Set hue to {format_value(value)}"
        if key == "sat":
            return f"Set saturation to {format_value(value)}"
        if key == "xy" and isinstance(value, list | tuple):
            return f"Set color to xy {format_value(value)}"
        if key == "alert":
            return f"Set alert to {format_value(value)}"
        if key == "effect":
            return f"Set effect to {format_value(value)}"
        if key == "transitiontime" and _is_number(value):
            return f"Set transition time to {value / 10:g}s"
        if key == "scene":
            scene = self.scene_name(value)
            if scene:
                return f"Activate scene {scene}"

        if kind is ResourceKind.SCHEDULES:
            if key == "status":
                verb = "Enable" if value == "enabled" else "Disable"
                return f"{verb} the schedule {label}"
            if key == "localtime" and isinstance(value, str):
                return f"{decode_time_spec(value)} for schedule {label}"

        if kind is ResourceKind.SENSORS and key == "status":
            code = parse_code(value)
            if entity.name == CYCLING_SENSOR and code == CyclingStatus.INACTIVE:
                return CYCLING_STOP_ACTION
            if (
                entity.name == CYCLE_STATE_SENSOR
                and code is not None
                and code in CycleState._value2member_map_
            ):
                return CycleState(code).action_phrase

        return f"Set {label}'s {key} to {format_value(value)}"

    def describe_action(self, action: Action) -> ActionDescription:
        entity = self.resolve(action.address)
        phrases = tuple(
            self._body_phrase(entity, key, value) for key, value in action.body.items()
        )
        if not phrases:
            phrases = (f"Send {action.method or 'a request'} to {entity.label}",)
        return ActionDescription(entity=entity, method=action.method, phrases=phrases)

    def describe(self, rule: Rule) -> RuleDescription:
        return RuleDescription(
            rule_id=rule.id,
            name=rule.name,
            conditions=tuple(self.describe_condition(c) for c in rule.conditions),
            actions=tuple(self.describe_action(a) for a in rule.actions),
        )

    # schedules and links

    def describe_schedule(self, schedule: Schedule) -> ScheduleDescription:
        time_spec = schedule.time_spec
        spec = parse_time_spec(time_spec) if time_spec else None
        command = None
        if schedule.command.address:
            command = self.describe_action(
                Action(
                    address=schedule.command.address,
                    method=schedule.command.method,
                    body=schedule.command.body,
                )
            )
        return ScheduleDescription(
            schedule_id=schedule.id,
            name=schedule.name,
            status=schedule.status,
            spec=spec,
            time_sentence=render_time_spec(spec) if spec is not None else "",
            command=command,
        )

    def describe_links(self, link: ResourceLink) -> list[ResolvedEntity]:
        return [self.resolve(path) for path in link.links]


def describe_rule(rule: Rule, snapshot: BridgeSnapshot) -> RuleDescription:
    return RuleInterpreter(snapshot).describe(rule)


def describe_rules(snapshot: BridgeSnapshot) -> list[RuleDescription]:
    """Every rule of a snapshot, ordered by name then id."""
    interpreter = RuleInterpreter(snapshot)
    rules = sorted(snapshot.rules.values(), key=lambda rule: (rule.name, rule.id))
    return [interpreter.describe(rule) for rule in rules]


def describe_schedules(snapshot: BridgeSnapshot) -> list[ScheduleDescription]:
    interpreter = RuleInterpreter(snapshot)
    schedules = sorted(
        snapshot.schedules.values(), key=lambda schedule: (schedule.name, schedule.id)
    )
    return [interpreter.describe_schedule(schedule) for schedule in schedules]
