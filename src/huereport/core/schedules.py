from __future__ import annotations

import re

from huereport.models import AbsoluteTime, DurationTime, RecurringTime, ScheduleSpec

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
ALL_DAYS_MASK = 127

_DURATION_UNITS = re.compile(r"PT(?:(?P<h>\d+)H)?(?:(?P<m>\d+)M)?(?:(?P<s>\d+)S)?$")
_DURATION_CLOCK = re.compile(r"PT(?P<h>\d+):(?P<m>\d+):(?P<s>\d+)$")
_RECURRING = re.compile(r"W(?P<mask>\d+)/T(?P<time>.+)$")


def weekdays_from_mask(mask: int) -> tuple[str, ...]:
    """Bit 6 is Monday, bit 0 is Sunday."""
    return tuple(
        day for k, day in zip(range(6, -1, -1), WEEKDAYS) if (mask // 2**k) % 2 == 1
    )


def _parse_duration(spec: str) -> DurationTime:
    clock = _DURATION_CLOCK.match(spec)
    if clock:
        # zero units of the clock notation are treated as absent
        hours, minutes, seconds = (int(clock.group(unit)) for unit in "hms")
        return DurationTime(
            hours=hours or None,
            minutes=minutes or None,
            seconds=seconds or None,
            raw=spec,
        )

    units = _DURATION_UNITS.match(spec)
    if not units:
        return DurationTime(raw=spec)
    values = {
        unit: int(units.group(unit)) if units.group(unit) is not None else None
        for unit in "hms"
    }
    return DurationTime(
        hours=values["h"], minutes=values["m"], seconds=values["s"], raw=spec
    )


def parse_time_spec(spec: str) -> ScheduleSpec:
    """Classify a schedule time string; never raises."""
    spec = spec.strip()
    if spec.startswith("P"):
        return _parse_duration(spec)
    if "W" in spec:
        recurring = _RECURRING.match(spec)
        if recurring:
            mask = int(recurring.group("mask"))
            if 0 <= mask <= ALL_DAYS_MASK:
                return RecurringTime(
                    mask=mask,
                    time=recurring.group("time"),
                    days=weekdays_from_mask(mask),
                )
    return AbsoluteTime(timestamp=spec)


def render_time_spec(parsed: ScheduleSpec) -> str:
    if isinstance(parsed, DurationTime):
        parts = []
        if parsed.hours is not None:
            parts.append(f"{parsed.hours} hour(s)")
        if parsed.minutes is not None:
            parts.append(f"{parsed.minutes} minute(s)")
        if parsed.seconds is not None:
            parts.append(f"{parsed.seconds} second(s)")
        if not parts:
            return f"Set a timer to run in {parsed.raw}"
        return "Set a timer to run in " + ", ".join(parts)

    if isinstance(parsed, RecurringTime):
        if parsed.every_day:
            days = "every day"
        elif parsed.days:
            days = ", ".join(parsed.days)
        else:
            days = "no days"
        return f"Set to run at {parsed.time} on {days}"

    return f"Set to run at {parsed.timestamp}"


def decode_time_spec(spec: str | None) -> str:
    if not spec:
        return ""
    return render_time_spec(parse_time_spec(spec))
