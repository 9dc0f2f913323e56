from __future__ import annotations

from .paths import (
    APP_NAME,
    CONFIG_FILENAME,
    default_config_path,
    default_data_dir,
    default_inventory_path,
    default_serials_path,
    expand_path,
)
from .settings import (
    CONFIG_ENV_VAR,
    DEFAULT_BATTERY_THRESHOLD,
    BridgeConfig,
    FetchingConfig,
    MonitorConfig,
    SerialsConfig,
    Settings,
    default_concurrency,
    get_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    serials_path_from_settings,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "DEFAULT_BATTERY_THRESHOLD",
    "BridgeConfig",
    "FetchingConfig",
    "MonitorConfig",
    "SerialsConfig",
    "Settings",
    "default_concurrency",
    "default_config_path",
    "default_data_dir",
    "default_inventory_path",
    "default_serials_path",
    "expand_path",
    "get_settings",
    "load_settings",
    "render_settings_toml",
    "resolve_config_path",
    "serials_path_from_settings",
    "write_settings",
]
