"""huereport - inventory, automation and live-change reports for Hue bridges."""

from __future__ import annotations

from importlib.metadata import version

from .config import BridgeConfig, Settings, get_settings
from .core import AggregationContext, aggregate, describe_rule, resolve_physical
from .models import BridgeSnapshot, PhysicalDevice, RuleDescription

__all__ = [
    "AggregationContext",
    "BridgeConfig",
    "BridgeSnapshot",
    "PhysicalDevice",
    "RuleDescription",
    "Settings",
    "__version__",
    "aggregate",
    "describe_rule",
    "get_settings",
    "resolve_physical",
]

__version__ = version("huereport")
