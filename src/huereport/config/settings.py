from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .paths import default_config_path, default_serials_path, expand_path

CONFIG_ENV_VAR = "HUEREPORT_CONFIG"

DEFAULT_BATTERY_THRESHOLD = 10


def default_concurrency() -> int:
    return max(os.cpu_count() or 2, 2)


class BridgeConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    name: str
    address: str
    credential: str = Field(repr=False)


class FetchingConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    timeout: float = Field(default=10.0, gt=0)
    connect_timeout: float = Field(default=5.0, gt=0)
    concurrency: int = Field(default_factory=default_concurrency, ge=1, le=256)


class MonitorConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    interval: float = Field(default=10.0, gt=0)
    battery_threshold: int = Field(default=DEFAULT_BATTERY_THRESHOLD, ge=0, le=100)


class SerialsConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    path: str = Field(default_factory=lambda: str(default_serials_path()))
    inventory: str | None = None


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    bridges: list[BridgeConfig] = Field(default_factory=list)
    fetching: FetchingConfig = Field(default_factory=FetchingConfig)
    monitor: MonitorConfig = Field(default_factory=MonitorConfig)
    serials: SerialsConfig = Field(default_factory=SerialsConfig)

    def bridge_named(self, name: str) -> BridgeConfig | None:
        for bridge in self.bridges:
            if bridge.name == name:
                return bridge
        return None


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def serials_path_from_settings(settings: Settings) -> Path:
    return expand_path(settings.serials.path)


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings, redact: bool = False) -> str:
    lines = ["# huereport configuration", ""]

    if not settings.bridges:
        lines += [
            "# [[bridges]]",
            '# name = "Living Room"',
            '# address = "192.168.1.10"',
            '# credential = "YOUR_API_USERNAME"',
            "",
        ]
    for bridge in settings.bridges:
        credential = "********" if redact else bridge.credential
        lines += [
            "[[bridges]]",
            f"name = {_toml_string(bridge.name)}",
            f"address = {_toml_string(bridge.address)}",
            f"credential = {_toml_string(credential)}",
            "",
        ]

    lines += [
        "[fetching]",
        f"timeout = {settings.fetching.timeout}",
        f"connect_timeout = {settings.fetching.connect_timeout}",
        f"concurrency = {settings.fetching.concurrency}",
        "",
        "[monitor]",
        f"interval = {settings.monitor.interval}",
        f"battery_threshold = {settings.monitor.battery_threshold}",
        "",
        "[serials]",
        f"path = {_toml_string(settings.serials.path)}",
    ]
    if settings.serials.inventory:
        lines.append(f"inventory = {_toml_string(settings.serials.inventory)}")
    lines.append("")
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
