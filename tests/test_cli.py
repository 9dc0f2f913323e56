from __future__ import annotations

import json

import pytest
from conftest import bridge, make_dump
from typer.testing import CliRunner

import huereport.cli.common as common
from huereport.cli.app import app
from huereport.config import (
    SerialsConfig,
    Settings,
    default_inventory_path,
    get_settings,
    write_settings,
)
from huereport.core import AggregationContext, NoBridgesReachableError
from huereport.core.aggregator import normalize_dump
from huereport.core.errors import BridgeUnreachableError
from huereport.utils.logging import CREDENTIAL_FILTER

runner = CliRunner()


@pytest.fixture(autouse=True)
def _wide_console(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("COLUMNS", "200")


@pytest.fixture
def configured(tmp_path, monkeypatch: pytest.MonkeyPatch):
    config_path = tmp_path / "config.toml"
    inventory = tmp_path / "inventory.txt"
    inventory.write_text("SN: H1 -> Ceiling\n")
    settings = Settings(
        bridges=[
            bridge("Upstairs", "192.168.1.10"),
            bridge("Cellar", "192.168.1.11"),
        ],
        serials=SerialsConfig(
            path=str(tmp_path / "serials.json"), inventory=str(inventory)
        ),
    )
    write_settings(settings, config_path)
    monkeypatch.setenv("HUEREPORT_CONFIG", str(config_path))
    get_settings.cache_clear()
    return tmp_path


@pytest.fixture
def fake_bridges(monkeypatch: pytest.MonkeyPatch):
    seen: list[AggregationContext] = []

    async def _fake_aggregate(context: AggregationContext, transport=None):
        seen.append(context)
        return [
            normalize_dump(config, make_dump(config.name, config.address))
            for config in context.bridges
        ]

    monkeypatch.setattr(common, "aggregate", _fake_aggregate)
    return seen


def test_report_prints_inventory(configured, fake_bridges):
    result = runner.invoke(app, ["report", "--redact"])

    assert result.exit_code == 0, result.output
    assert "Desk Lamp" in result.output
    assert "Hallway sensor" in result.output
    assert "Light Count Summary" in result.output
    assert "Total: 6 lights across all bridges." in result.output
    assert "Unreachable Lights" in result.output
    assert "x.x.x.10" in result.output
    assert "192.168.1.10" not in result.output


def test_report_bridge_selection(configured, fake_bridges):
    result = runner.invoke(app, ["report", "--bridge", "Cellar"])

    assert result.exit_code == 0, result.output
    assert [b.name for b in fake_bridges[0].bridges] == ["Cellar"]


def test_report_unknown_bridge(configured, fake_bridges):
    result = runner.invoke(app, ["report", "--bridge", "Nowhere"])

    assert result.exit_code == 1
    assert fake_bridges == []


def test_report_exits_when_no_bridge_answers(configured, monkeypatch):
    async def _failing(context, transport=None):
        raise NoBridgesReachableError(
            [BridgeUnreachableError(b.address, "timed out") for b in context.bridges]
        )

    monkeypatch.setattr(common, "aggregate", _failing)

    result = runner.invoke(app, ["report"])

    assert result.exit_code == 1
    assert "Could not fetch data from any bridge" in result.output


def test_report_without_bridges_configured():
    result = runner.invoke(app, ["report"])

    assert result.exit_code == 1
    assert "No bridges configured" in result.output


def test_rules_command(configured, fake_bridges):
    result = runner.invoke(app, ["rules", "--bridge", "Upstairs", "--links"])

    assert result.exit_code == 0, result.output
    assert "Dimmer on" in result.output
    assert "short-released" in result.output
    assert "Activate scene Relax" in result.output
    assert "Set to run at 07:00:00 on Mon, Tue, Wed, Thu, Fri" in result.output
    assert "unnamed light 99" in result.output


def test_codes_command():
    result = runner.invoke(app, ["codes"])

    assert result.exit_code == 0
    assert "1002" in result.output
    assert "cycleState" in result.output


def test_serials_update_and_missing(configured, fake_bridges):
    result = runner.invoke(app, ["serials", "update", "--bridge", "Upstairs"])
    assert result.exit_code == 0, result.output

    data = json.loads((configured / "serials.json").read_text())
    by_name = {entry["name"]: entry["serialNumber"] for entry in data.values()}
    assert by_name == {"Ceiling": "H1", "Desk Lamp": "", "Porch": ""}

    result = runner.invoke(app, ["serials", "missing", "--bridge", "Upstairs"])
    assert result.exit_code == 0, result.output
    assert "Desk Lamp" in result.output
    assert "Ceiling" not in result.output


def test_config_show_redacts(configured):
    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    assert "testuser" not in result.output
    assert "Upstairs" in result.output


def test_config_init_writes_template(tmp_path, monkeypatch):
    path = tmp_path / "new.toml"
    monkeypatch.setenv("HUEREPORT_CONFIG", str(path))

    result = runner.invoke(app, ["config", "init"])

    assert result.exit_code == 0
    assert "# [[bridges]]" in path.read_text()

    again = runner.invoke(app, ["config", "init"])
    assert "already exists" in again.output


def test_serials_update_reads_default_inventory(tmp_path, monkeypatch, fake_bridges):
    config_path = tmp_path / "config.toml"
    write_settings(
        Settings(
            bridges=[bridge("Upstairs", "192.168.1.10", credential="s3cret-user")],
            serials=SerialsConfig(path=str(tmp_path / "serials.json")),
        ),
        config_path,
    )
    monkeypatch.setenv("HUEREPORT_CONFIG", str(config_path))
    get_settings.cache_clear()
    inventory = default_inventory_path()
    inventory.parent.mkdir(parents=True)
    inventory.write_text("SN: P9 -> Porch\n")

    result = runner.invoke(app, ["serials", "update"])

    assert result.exit_code == 0, result.output
    data = json.loads((tmp_path / "serials.json").read_text())
    by_name = {entry["name"]: entry["serialNumber"] for entry in data.values()}
    assert by_name["Porch"] == "P9"
    assert "s3cret-user" in CREDENTIAL_FILTER.credentials
