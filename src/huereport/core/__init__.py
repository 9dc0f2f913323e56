from __future__ import annotations

from .aggregator import (
    AggregationContext,
    AggregationResult,
    BridgeAggregator,
    aggregate,
    normalize_dump,
)
from .client import BridgeClient
from .errors import (
    BridgeFetchError,
    BridgeUnauthorizedError,
    BridgeUnreachableError,
    HueReportError,
    MalformedResponseError,
    NoBridgesReachableError,
)
from .identity import DeviceIdentityResolver, base_id, canonical_name, resolve_physical
from .monitor import MonitorDiffEngine, run_monitor
from .rules import RuleInterpreter, describe_rule, describe_rules, describe_schedules
from .schedules import decode_time_spec, parse_time_spec, render_time_spec
from .serials import build_serial_mapping, missing_serials, parse_serial_inventory

__all__ = [
    "AggregationContext",
    "AggregationResult",
    "BridgeAggregator",
    "BridgeClient",
    "BridgeFetchError",
    "BridgeUnauthorizedError",
    "BridgeUnreachableError",
    "DeviceIdentityResolver",
    "HueReportError",
    "MalformedResponseError",
    "MonitorDiffEngine",
    "NoBridgesReachableError",
    "RuleInterpreter",
    "aggregate",
    "base_id",
    "build_serial_mapping",
    "canonical_name",
    "decode_time_spec",
    "describe_rule",
    "describe_rules",
    "describe_schedules",
    "missing_serials",
    "normalize_dump",
    "parse_serial_inventory",
    "parse_time_spec",
    "render_time_spec",
    "resolve_physical",
    "run_monitor",
]
