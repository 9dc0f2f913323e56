from __future__ import annotations

import copy
import json
from typing import Any

import httpx
import pytest

from huereport.config import BridgeConfig, get_settings

SAMPLE_DUMP: dict[str, Any] = {
    "config": {
        "name": "Upstairs",
        "bridgeid": "001788FFFE000001",
        "whitelist": {"secret-user": {"name": "some app"}},
    },
    "lights": {
        "2": {
            "name": "Desk Lamp",
            "type": "Extended color light",
            "uniqueid": "00:17:88:01:00:00:00:02-0b",
            "productname": "Hue color lamp",
            "state": {"on": False, "bri": 100, "ct": 366, "reachable": True},
        },
        "1": {
            "name": "Ceiling",
            "type": "Dimmable light",
            "uniqueid": "00:17:88:01:00:00:00:01-0b",
            "state": {"on": True, "bri": 254, "reachable": True},
        },
        "3": {
            "name": "Porch",
            "type": "Dimmable light",
            "uniqueid": "00:17:88:01:00:00:00:03-0b",
            "state": {"on": False, "reachable": False},
        },
    },
    "groups": {
        "1": {
            "name": "Office",
            "type": "Room",
            "class": "Office",
            "lights": ["1", "2"],
        },
    },
    "scenes": {
        "abc": {
            "name": "Relax",
            "type": "GroupScene",
            "group": "1",
            "lights": ["1", "2"],
        },
    },
    "sensors": {
        "5": {
            "name": "Hallway sensor",
            "type": "ZLLPresence",
            "uniqueid": "00:17:88:01:02:00:aa:bb-02-0406",
            "productname": "Hue motion sensor",
            "config": {"on": True, "reachable": True, "battery": 8},
            "state": {"presence": False, "lastupdated": "2025-01-01T10:00:00"},
        },
        "6": {
            "name": "Hue temperature sensor 1",
            "type": "ZLLTemperature",
            "uniqueid": "00:17:88:01:02:00:aa:bb-02-0402",
            "config": {"on": True, "reachable": True, "battery": 8},
            "state": {"temperature": 2150},
        },
        "7": {
            "name": "Hue ambient light sensor 1",
            "type": "ZLLLightLevel",
            "uniqueid": "00:17:88:01:02:00:aa:bb-02-0400",
            "config": {"on": True, "reachable": True, "battery": 8},
            "state": {"lightlevel": 1200},
        },
        "8": {
            "name": "Office dimmer",
            "type": "ZLLSwitch",
            "uniqueid": "00:17:88:01:03:00:cc:dd-02-fc00",
            "config": {"on": True, "reachable": True, "battery": 90},
            "state": {"buttonevent": 1002},
        },
        "9": {
            "name": "cycling",
            "type": "CLIPGenericStatus",
            "uniqueid": "cycling-1",
            "state": {"status": 0},
        },
        "10": {
            "name": "cycleState",
            "type": "CLIPGenericStatus",
            "uniqueid": "cycleState-1",
            "state": {"status": 0},
        },
    },
    "schedules": {
        "1": {
            "name": "Wake up",
            "localtime": "W124/T07:00:00",
            "status": "enabled",
            "command": {
                "address": "/api/user/groups/1/action",
                "method": "PUT",
                "body": {"on": True},
            },
        },
    },
    "rules": {
        "1": {
            "name": "Dimmer on",
            "status": "enabled",
            "conditions": [
                {
                    "address": "/sensors/8/state/buttonevent",
                    "operator": "eq",
                    "value": "1002",
                },
                {"address": "/sensors/8/state/lastupdated", "operator": "dx"},
            ],
            "actions": [
                {
                    "address": "/groups/1/action",
                    "method": "PUT",
                    "body": {"scene": "abc"},
                },
            ],
        },
    },
    "resourcelinks": {
        "1": {
            "name": "Dimmer setup",
            "links": ["/sensors/8", "/rules/1", "/lights/99"],
        },
    },
}

SCENE_DETAIL = {
    "name": "Relax",
    "lights": ["1", "2"],
    "lightstates": {
        "1": {"on": True, "bri": 144, "ct": 447},
        "2": {"on": True, "bri": 77},
    },
}


def make_dump(name: str = "Upstairs", bridge_id: str = "001788FFFE000001") -> dict:
    dump = copy.deepcopy(SAMPLE_DUMP)
    dump["config"]["name"] = name
    dump["config"]["bridgeid"] = bridge_id
    return dump


def bridge_handler(
    dumps: dict[str, Any], scene_details: dict[str, Any] | None = None
):
    """Serve ``dumps`` keyed by bridge host.

    A value may be a dict (served as JSON), a string (served as the raw body)
    or an exception instance (raised as a transport error).
    """
    scene_details = scene_details or {}

    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        value = dumps.get(host)
        if isinstance(value, Exception):
            raise value
        parts = request.url.path.strip("/").split("/")
        if len(parts) == 4 and parts[2] == "scenes":
            detail = scene_details.get(parts[3])
            if detail is None:
                return httpx.Response(404, text="not found")
            return httpx.Response(200, json=detail)
        if value is None:
            raise httpx.ConnectError("unreachable", request=request)
        if isinstance(value, str):
            return httpx.Response(200, text=value)
        return httpx.Response(200, text=json.dumps(value))

    return handler


def mock_transport(
    dumps: dict[str, Any], scene_details: dict[str, Any] | None = None
) -> httpx.MockTransport:
    return httpx.MockTransport(bridge_handler(dumps, scene_details))


def bridge(name: str, address: str, credential: str = "testuser") -> BridgeConfig:
    return BridgeConfig(name=name, address=address, credential=credential)


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.delenv("HUEREPORT_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
