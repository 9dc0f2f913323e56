from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from huereport.config import (
    DEFAULT_BATTERY_THRESHOLD,
    BridgeConfig,
    Settings,
    default_concurrency,
)
from huereport.models import BridgeSnapshot

from .client import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT, BridgeClient
from .errors import BridgeFetchError, MalformedResponseError, NoBridgesReachableError
from .scenes import augment_scenes

logger = logging.getLogger(__name__)

# dump section -> snapshot field
_SECTIONS = {
    "lights": "lights",
    "groups": "groups",
    "scenes": "scenes",
    "sensors": "sensors",
    "schedules": "schedules",
    "rules": "rules",
    "resourcelinks": "resource_links",
}
_TAGGED_SECTIONS = ("lights", "sensors")


class AggregationContext(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    bridges: list[BridgeConfig]
    concurrency: int = Field(default_factory=default_concurrency, ge=1)
    battery_threshold: int = Field(default=DEFAULT_BATTERY_THRESHOLD, ge=0, le=100)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    connect_timeout: float = Field(default=DEFAULT_CONNECT_TIMEOUT, gt=0)

    @classmethod
    def from_settings(
        cls, settings: Settings, bridges: list[BridgeConfig] | None = None
    ) -> AggregationContext:
        return cls(
            bridges=settings.bridges if bridges is None else bridges,
            concurrency=settings.fetching.concurrency,
            battery_threshold=settings.monitor.battery_threshold,
            timeout=settings.fetching.timeout,
            connect_timeout=settings.fetching.connect_timeout,
        )


@dataclass
class AggregationResult:
    snapshots: list[BridgeSnapshot] = field(default_factory=list)
    failures: list[BridgeFetchError] = field(default_factory=list)


def _natural_key(value: str) -> tuple[int, int | str]:
    return (0, int(value)) if value.isdigit() else (1, value)


def _section(bridge: BridgeConfig, dump: dict[str, Any], key: str) -> dict[str, Any]:
    section = dump.get(key) or {}
    if not isinstance(section, dict):
        raise MalformedResponseError(
            bridge.address, f"'{key}' is a {type(section).__name__}, not an object"
        )
    return section


def normalize_dump(bridge: BridgeConfig, dump: dict[str, Any]) -> BridgeSnapshot:
    """Reshape a raw asset dump into a snapshot, tagging lights and sensors."""
    config = {
        key: value
        for key, value in _section(bridge, dump, "config").items()
        if key != "whitelist"  # other applications' credentials
    }
    name = config.get("name") or bridge.name
    bridge_id = config.get("bridgeid") or bridge.address

    data: dict[str, Any] = {
        "bridge_id": bridge_id,
        "name": name,
        "address": bridge.address,
        "credential": bridge.credential,
        "config": config,
    }
    for key, target in _SECTIONS.items():
        records: dict[str, Any] = {}
        for local_id, record in sorted(
            _section(bridge, dump, key).items(), key=lambda item: _natural_key(item[0])
        ):
            if not isinstance(record, dict):
                raise MalformedResponseError(
                    bridge.address, f"{key}/{local_id} is not an object"
                )
            record = {**record, "id": local_id}
            if key in _TAGGED_SECTIONS:
                record.update(bridge_id=bridge_id, bridge_name=name)
            records[local_id] = record
        data[target] = records

    try:
        return BridgeSnapshot.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponseError(
            bridge.address, f"unexpected shape: {exc}"
        ) from exc


class BridgeAggregator:
    """Fetch, augment and normalize every configured bridge in parallel."""

    def __init__(
        self,
        context: AggregationContext,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._context = context
        self._transport = transport

    async def _collect_bridge(
        self, client: BridgeClient, bridge: BridgeConfig, gate: asyncio.Semaphore
    ) -> BridgeSnapshot | BridgeFetchError:
        async with gate:
            logger.info("Contacting '%s'...", bridge.name)
            try:
                dump = await client.fetch(bridge.address, bridge.credential)
                dump = await augment_scenes(
                    client, bridge.address, bridge.credential, dump
                )
                snapshot = normalize_dump(bridge, dump)
            except BridgeFetchError as exc:
                logger.warning(
                    "Could not fetch data from '%s': %s. Skipping.",
                    bridge.name,
                    exc.reason,
                )
                return exc
        logger.info("Processed data for '%s'", snapshot.name)
        return snapshot

    async def collect(self) -> AggregationResult:
        context = self._context
        logger.debug(
            "Fetching %d bridge(s) with up to %d parallel jobs",
            len(context.bridges),
            context.concurrency,
        )
        gate = asyncio.Semaphore(context.concurrency)
        async with BridgeClient(
            timeout=context.timeout,
            connect_timeout=context.connect_timeout,
            transport=self._transport,
        ) as client:
            outcomes = await asyncio.gather(
                *(
                    self._collect_bridge(client, bridge, gate)
                    for bridge in context.bridges
                )
            )

        # single collector once every unit has finished
        result = AggregationResult()
        for outcome in outcomes:
            if isinstance(outcome, BridgeFetchError):
                result.failures.append(outcome)
            else:
                result.snapshots.append(outcome)
        result.snapshots.sort(key=lambda snapshot: (snapshot.name, snapshot.address))
        return result

    async def aggregate(self) -> list[BridgeSnapshot]:
        result = await self.collect()
        if not result.snapshots:
            raise NoBridgesReachableError(result.failures)
        return result.snapshots


async def aggregate(
    context: AggregationContext,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[BridgeSnapshot]:
    return await BridgeAggregator(context, transport=transport).aggregate()
