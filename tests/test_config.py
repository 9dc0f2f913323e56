from __future__ import annotations

import pytest

from huereport.config import (
    BridgeConfig,
    MonitorConfig,
    Settings,
    default_config_path,
    default_inventory_path,
    default_serials_path,
    get_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    write_settings,
)
from huereport.core import AggregationContext


def test_config_roundtrip(tmp_path):
    path = tmp_path / "config.toml"
    settings = Settings(
        bridges=[
            BridgeConfig(name="Upstairs", address="10.0.0.1", credential="abc123"),
            BridgeConfig(name='Say "hi"', address="10.0.0.2", credential="def456"),
        ],
        monitor=MonitorConfig(interval=5, battery_threshold=20),
    )
    write_settings(settings, path)

    loaded = load_settings(path)
    assert loaded == settings
    assert loaded.bridge_named('Say "hi"').address == "10.0.0.2"
    assert loaded.bridge_named("Nope") is None


def test_defaults_without_config_file():
    settings = get_settings()

    assert settings.bridges == []
    assert settings.monitor.battery_threshold == 10
    assert settings.fetching.connect_timeout == 5.0
    assert settings.serials.path == str(default_serials_path())


def test_env_var_points_to_config(tmp_path, monkeypatch):
    path = tmp_path / "custom.toml"
    path.write_text(
        '[[bridges]]\nname = "A"\naddress = "10.0.0.1"\ncredential = "x"\n'
        "[fetching]\nconcurrency = 3\n"
    )
    monkeypatch.setenv("HUEREPORT_CONFIG", str(path))

    settings = get_settings()

    assert [bridge.name for bridge in settings.bridges] == ["A"]
    context = AggregationContext.from_settings(settings)
    assert context.concurrency == 3
    assert context.battery_threshold == 10


def test_env_var_to_missing_file(tmp_path, monkeypatch):
    monkeypatch.setenv("HUEREPORT_CONFIG", str(tmp_path / "missing.toml"))

    with pytest.raises(FileNotFoundError):
        resolve_config_path()
    path, exists = resolve_config_path(allow_missing=True)
    assert exists is False


@pytest.mark.parametrize(
    "content",
    [
        "[[bridges]\nname=",
        '[monitor]\nbattery_threshold = 150\n',
        '[[bridges]]\nname = "A"\naddress = "10.0.0.1"\n',
        "[surprise]\nkey = 1\n",
    ],
)
def test_invalid_config(tmp_path, content: str):
    path = tmp_path / "config.toml"
    path.write_text(content)

    with pytest.raises(ValueError):
        load_settings(path)


def test_render_redacts_credentials():
    settings = Settings(
        bridges=[BridgeConfig(name="A", address="10.0.0.1", credential="sekrit")]
    )

    assert "sekrit" not in render_settings_toml(settings, redact=True)
    assert "sekrit" in render_settings_toml(settings)
    assert "sekrit" not in repr(settings)


def test_render_without_bridges_shows_template():
    rendered = render_settings_toml(Settings())

    assert "# [[bridges]]" in rendered


def test_relative_xdg_dirs_are_ignored(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", "relative/dir")
    monkeypatch.setenv("XDG_DATA_HOME", "")

    assert default_config_path() == tmp_path / ".config" / "huereport" / "config.toml"
    assert default_inventory_path() == (
        tmp_path / ".local" / "share" / "huereport" / "serials.txt"
    )
