from __future__ import annotations

import asyncio

import httpx
import pytest
from conftest import SCENE_DETAIL, bridge, bridge_handler, make_dump, mock_transport

from huereport.core.aggregator import (
    AggregationContext,
    BridgeAggregator,
    aggregate,
    normalize_dump,
)
from huereport.core.errors import (
    BridgeUnauthorizedError,
    BridgeUnreachableError,
    MalformedResponseError,
    NoBridgesReachableError,
)


def test_normalize_dump_tags_and_sorts():
    snapshot = normalize_dump(bridge("Fallback", "10.0.0.1"), make_dump())

    assert snapshot.name == "Upstairs"
    assert snapshot.bridge_id == "001788FFFE000001"
    assert "whitelist" not in snapshot.config
    assert list(snapshot.lights) == ["1", "2", "3"]
    assert list(snapshot.sensors) == ["5", "6", "7", "8", "9", "10"]

    light = snapshot.lights["2"]
    assert light.id == "2"
    assert light.bridge_name == "Upstairs"
    assert light.state.brightness == 100
    assert light.state.kelvin == 2732
    assert snapshot.sensors["5"].bridge_id == "001788FFFE000001"
    assert snapshot.groups["1"].light_ids == ("1", "2")
    assert snapshot.rules["1"].conditions[0].value == "1002"


def test_normalize_dump_falls_back_to_configured_name():
    dump = make_dump()
    del dump["config"]["name"]
    del dump["config"]["bridgeid"]

    snapshot = normalize_dump(bridge("Garage", "10.0.0.9"), dump)

    assert snapshot.name == "Garage"
    assert snapshot.bridge_id == "10.0.0.9"


def test_normalize_dump_keeps_credential_out_of_dumps():
    snapshot = normalize_dump(bridge("A", "10.0.0.1", "sekrit"), make_dump())

    assert "credential" not in snapshot.model_dump()
    assert "sekrit" not in repr(snapshot)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda dump: dump.update(lights=["not", "a", "map"]),
        lambda dump: dump["lights"].update({"4": "nope"}),
        lambda dump: dump["rules"]["1"].update(conditions="broken"),
    ],
)
def test_normalize_dump_rejects_unexpected_shapes(mutate):
    dump = make_dump()
    mutate(dump)

    with pytest.raises(MalformedResponseError):
        normalize_dump(bridge("A", "10.0.0.1"), dump)


def test_aggregate_skips_failing_bridges():
    context = AggregationContext(
        bridges=[
            bridge("Upstairs", "10.0.0.1"),
            bridge("Cellar", "10.0.0.2"),
            bridge("Attic", "10.0.0.3"),
            bridge("Shed", "10.0.0.4"),
        ],
        concurrency=2,
    )
    transport = mock_transport(
        {
            "10.0.0.1": make_dump("Upstairs", "B1"),
            "10.0.0.2": "",
            "10.0.0.3": make_dump("Attic", "B3"),
            "10.0.0.4": "<html>oops</html>",
        }
    )

    result = asyncio.run(BridgeAggregator(context, transport=transport).collect())

    assert [snapshot.name for snapshot in result.snapshots] == ["Attic", "Upstairs"]
    failures = {failure.bridge: type(failure) for failure in result.failures}
    assert failures == {
        "10.0.0.2": BridgeUnauthorizedError,
        "10.0.0.4": MalformedResponseError,
    }


def test_aggregate_raises_when_every_bridge_fails():
    context = AggregationContext(
        bridges=[bridge("A", "10.0.0.1"), bridge("B", "10.0.0.2")]
    )
    transport = mock_transport(
        {"10.0.0.1": httpx.ConnectError("down"), "10.0.0.2": "unauthorized user"}
    )

    with pytest.raises(NoBridgesReachableError) as excinfo:
        asyncio.run(aggregate(context, transport=transport))

    kinds = sorted(type(failure).__name__ for failure in excinfo.value.failures)
    assert kinds == [BridgeUnauthorizedError.__name__, BridgeUnreachableError.__name__]


def test_aggregate_result_order_is_stable():
    names = ["Zeta", "alpha", "Mid", "Beta"]
    context = AggregationContext(
        bridges=[bridge(name, f"10.0.0.{i}") for i, name in enumerate(names, 1)],
        concurrency=4,
    )
    dumps = {f"10.0.0.{i}": make_dump(name, name) for i, name in enumerate(names, 1)}

    first = asyncio.run(aggregate(context, transport=mock_transport(dumps)))
    second = asyncio.run(aggregate(context, transport=mock_transport(dumps)))

    assert [s.name for s in first] == sorted(names)
    assert [s.name for s in first] == [s.name for s in second]


def test_scene_details_are_merged():
    context = AggregationContext(bridges=[bridge("Upstairs", "10.0.0.1")])
    transport = mock_transport({"10.0.0.1": make_dump()}, {"abc": SCENE_DETAIL})

    (snapshot,) = asyncio.run(aggregate(context, transport=transport))

    scene = snapshot.scenes["abc"]
    assert scene.state_for("1").brightness == 144
    assert scene.state_for("2").on is True


def test_scene_detail_failure_keeps_fallback_action():
    dump = make_dump()
    dump["scenes"]["abc"]["action"] = {"on": True, "bri": 50}
    context = AggregationContext(bridges=[bridge("Upstairs", "10.0.0.1")])

    transport = mock_transport({"10.0.0.1": dump})

    (snapshot,) = asyncio.run(aggregate(context, transport=transport))

    scene = snapshot.scenes["abc"]
    assert scene.light_overrides == {}
    assert scene.state_for("1").brightness == 50


def _garbled_gzip() -> httpx.Response:
    return httpx.Response(
        200, headers={"Content-Encoding": "gzip"}, content=b"definitely not gzip"
    )


def test_undecodable_bridge_does_not_sink_the_others():
    context = AggregationContext(
        bridges=[bridge("Good", "10.0.0.1"), bridge("Broken", "10.0.0.2")]
    )
    serve = bridge_handler({"10.0.0.1": make_dump("Good", "B1")})

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "10.0.0.2":
            return _garbled_gzip()
        return serve(request)

    result = asyncio.run(
        BridgeAggregator(context, transport=httpx.MockTransport(handler)).collect()
    )

    assert [snapshot.name for snapshot in result.snapshots] == ["Good"]
    (failure,) = result.failures
    assert isinstance(failure, MalformedResponseError)
    assert failure.bridge == "10.0.0.2"


def test_undecodable_scene_detail_keeps_the_scene():
    context = AggregationContext(bridges=[bridge("Upstairs", "10.0.0.1")])
    serve = bridge_handler({"10.0.0.1": make_dump()}, {"abc": SCENE_DETAIL})

    def handler(request: httpx.Request) -> httpx.Response:
        if "/scenes/" in request.url.path:
            return _garbled_gzip()
        return serve(request)

    (snapshot,) = asyncio.run(
        aggregate(context, transport=httpx.MockTransport(handler))
    )

    assert snapshot.scenes["abc"].name == "Relax"
    assert snapshot.scenes["abc"].light_overrides == {}


class _SlowTransport(httpx.AsyncBaseTransport):
    """Delays every request and records the peak of concurrent bulk fetches."""

    def __init__(self, dumps, delay: float = 0.05) -> None:
        self._serve = bridge_handler(dumps)
        self._delay = delay
        self.active = 0
        self.peak = 0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        bulk = request.url.path == "/api/testuser"
        if bulk:
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(self._delay)
        finally:
            if bulk:
                self.active -= 1
        return self._serve(request)


@pytest.mark.parametrize("concurrency", [2, 3])
def test_concurrency_bounds_parallel_fetches(concurrency: int):
    names = {f"10.0.0.{i}": f"Bridge {i}" for i in range(1, 7)}
    context = AggregationContext(
        bridges=[bridge(name, address) for address, name in names.items()],
        concurrency=concurrency,
    )
    dumps = {address: make_dump(name, address) for address, name in names.items()}
    # two bridges refuse the connection
    dumps["10.0.0.2"] = None
    dumps["10.0.0.5"] = None
    transport = _SlowTransport(dumps)

    result = asyncio.run(BridgeAggregator(context, transport=transport).collect())

    assert transport.peak == concurrency
    assert len(result.snapshots) == len(names) - 2
    assert len(result.failures) == 2
    assert all(isinstance(f, BridgeUnreachableError) for f in result.failures)
