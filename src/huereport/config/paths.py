from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "huereport"
CONFIG_FILENAME = "config.toml"
SERIALS_FILENAME = "serials.json"
INVENTORY_FILENAME = "serials.txt"


def _xdg_dir(variable: str, fallback: Path) -> Path:
    # relative or empty values are invalid per the base directory rules
    value = os.environ.get(variable, "")
    base = Path(value) if value and os.path.isabs(value) else fallback
    return base / APP_NAME


def default_config_path() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / CONFIG_FILENAME


def default_data_dir() -> Path:
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share")


def default_serials_path() -> Path:
    """Serial-number mapping written by ``huereport serials update``."""
    return default_data_dir() / SERIALS_FILENAME


def default_inventory_path() -> Path:
    """Hand-kept ``SN: <serial> -> <light>`` list, read when present."""
    return default_data_dir() / INVENTORY_FILENAME


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))
