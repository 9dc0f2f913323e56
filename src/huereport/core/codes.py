"""Fixed reference tables for switch button events and dynamic-scene sensors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

BUTTON_NAMES = {
    1: "the 'On' / Smart / Upper button",
    2: "the 'Dim Up' / Lower button",
    3: "the 'Dim Down' button",
    4: "the 'Off' button",
}

BUTTON_ACTIONS = {
    0: "is initially pressed",
    1: "is held down",
    2: "is short-released",
    3: "is long-released",
}

# tap switch event code -> physical button number
TAP_BUTTONS = {34: 1, 16: 2, 17: 3, 18: 4}


@dataclass(frozen=True)
class ButtonCode:
    code: int
    device: str
    button: str
    action: str


BUTTON_EVENT_TABLE: tuple[ButtonCode, ...] = (
    ButtonCode(1000, "Dimmer / Smart Button / Wall Switch", "On / Smart / Upper", "Initial Press"),
    ButtonCode(1001, "Dimmer / Smart Button / Wall Switch", "On / Smart / Upper", "Hold"),
    ButtonCode(1002, "Dimmer / Smart Button / Wall Switch", "On / Smart / Upper", "Short Release"),
    ButtonCode(1003, "Dimmer / Smart Button / Wall Switch", "On / Smart / Upper", "Long Release"),
    ButtonCode(2000, "Dimmer / Wall Switch", "Dim Up / Lower", "Initial Press"),
    ButtonCode(2001, "Dimmer / Wall Switch", "Dim Up / Lower", "Hold"),
    ButtonCode(2002, "Dimmer / Wall Switch", "Dim Up / Lower", "Short Release"),
    ButtonCode(2003, "Dimmer / Wall Switch", "Dim Up / Lower", "Long Release"),
    ButtonCode(3000, "Dimmer Switch", "Dim Down", "Initial Press"),
    ButtonCode(3001, "Dimmer Switch", "Dim Down", "Hold"),
    ButtonCode(3002, "Dimmer Switch", "Dim Down", "Short Release"),
    ButtonCode(3003, "Dimmer Switch", "Dim Down", "Long Release"),
    ButtonCode(4000, "Dimmer Switch", "Off", "Initial Press"),
    ButtonCode(4001, "Dimmer Switch", "Off", "Hold"),
    ButtonCode(4002, "Dimmer Switch", "Off", "Short Release"),
    ButtonCode(4003, "Dimmer Switch", "Off", "Long Release"),
    ButtonCode(16, "Tap Switch", "Button 2", "Press"),
    ButtonCode(17, "Tap Switch", "Button 3", "Press"),
    ButtonCode(18, "Tap Switch", "Button 4", "Press"),
    ButtonCode(34, "Tap Switch", "Button 1", "Press"),
)  # fmt: skip


def parse_code(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def describe_button_event(value: object, sensor_name: str | None = None) -> str:
    """Plain-English meaning of a ``buttonevent`` value.

    Codes 1000-4999 split into a button digit (thousands) and an action digit
    (units); 16, 17, 18 and 34 are the four tap switch buttons.
    """
    name_part = f" on '{sensor_name}'" if sensor_name else ""
    code = parse_code(value)
    if code is None:
        return f"received an unknown event code ({value}){name_part}"

    if code in TAP_BUTTONS:
        return f"Hue Tap Button {TAP_BUTTONS[code]}{name_part} is pressed"
    if 1000 <= code <= 4999:
        button = BUTTON_NAMES.get(code // 1000, "an unknown button")
        action = BUTTON_ACTIONS.get(code % 10, "has an unknown action")
        return f"{button}{name_part} {action}"
    return f"received an unknown event code ({code}){name_part}"


class CyclingStatus(IntEnum):
    INACTIVE = 0
    ACTIVE = 1


class CycleState(IntEnum):
    STOP = 0
    START = 1
    UPDATE_SPEED = 2
    UNDOCUMENTED = 3  # observed upstream, meaning unknown
    FIXED_COLOR = 4
    RANDOM_COLORS = 5

    @property
    def condition_phrase(self) -> str:
        return _CYCLE_STATE_CONDITIONS[self]

    @property
    def action_phrase(self) -> str:
        return _CYCLE_STATE_ACTIONS[self]


_CYCLE_STATE_CONDITIONS = {
    CycleState.STOP: "dynamic scenes are inactive",
    CycleState.START: "a dynamic scene is active",
    CycleState.UPDATE_SPEED: "a dynamic scene is active and set to update speed",
    CycleState.UNDOCUMENTED: "a dynamic scene is in an undocumented '3' state",
    CycleState.FIXED_COLOR: "the dynamic scene is set to a fixed color",
    CycleState.RANDOM_COLORS: "the dynamic scene is set to random colors",
}

_CYCLE_STATE_ACTIONS = {
    CycleState.STOP: "Stop the dynamic scene",
    CycleState.START: "Start the dynamic scene",
    CycleState.UPDATE_SPEED: "Update the speed of the active dynamic scene",
    CycleState.UNDOCUMENTED: "Set dynamic scene to an undocumented '3' state",
    CycleState.FIXED_COLOR: "Set dynamic scene to a fixed color",
    CycleState.RANDOM_COLORS: "Set dynamic scene to random colors",
}

CYCLING_CONDITIONS = {
    CyclingStatus.INACTIVE: "no dynamic scene is active",
    CyclingStatus.ACTIVE: "a dynamic scene is currently active",
}

CYCLING_STOP_ACTION = "Stop the current color cycle"

SYSTEM_SENSOR_TABLE: tuple[tuple[str, int, str], ...] = (
    ("cycling", 0, "No dynamic color cycle is active."),
    ("cycling", 1, "A dynamic color cycle is currently active."),
    ("cycleState", 0, "Action: Stop the current dynamic scene."),
    ("cycleState", 1, "Action: Start or activate the dynamic scene."),
    ("cycleState", 2, "Action: Update the speed of the currently active scene."),
    ("cycleState", 3, "Action: (Undocumented) Sets a specific, unknown state."),
    ("cycleState", 4, "Action: Set the dynamic scene to a fixed, single color."),
    ("cycleState", 5, "Action: Set the dynamic scene to random colors."),
)

CYCLING_SENSOR = "cycling"
CYCLE_STATE_SENSOR = "cycleState"
