from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from huereport.utils.redaction import Redactor

from .errors import (
    BridgeUnauthorizedError,
    BridgeUnreachableError,
    MalformedResponseError,
)

logger = logging.getLogger(__name__)

UNAUTHORIZED_MARKER = "unauthorized user"
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_TIMEOUT = 10.0


def bridge_url(address: str, credential: str, *parts: str) -> str:
    path = "/".join((credential, *parts))
    return f"http://{address}/api/{path}"


class BridgeClient:
    """Read-only access to the bridge REST API.

    One instance is shared by every unit of work in an aggregation run; it
    owns a single ``httpx.AsyncClient`` and must be used as an async context
    manager. Requests are never retried.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout, connect=connect_timeout)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._redactor = Redactor()

    async def __aenter__(self) -> BridgeClient:
        self._client = httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("BridgeClient must be used as an async context manager")
        return await self._client.get(url)

    async def fetch(self, address: str, credential: str) -> dict[str, Any]:
        """Fetch the full asset dump of one bridge."""
        url = bridge_url(address, credential)
        logger.debug("GET %s", self._redactor.redact_url(url, credential))
        try:
            resp = await self._get(url)
        except httpx.DecodingError as exc:
            raise MalformedResponseError(
                address, f"response could not be decoded: {exc!r}"
            ) from exc
        except httpx.RequestError as exc:
            raise BridgeUnreachableError(address, f"request failed: {exc!r}") from exc

        body = resp.text
        if not body.strip() or UNAUTHORIZED_MARKER in body:
            raise BridgeUnauthorizedError(address, "credential was rejected")
        if resp.status_code != 200:
            raise BridgeUnreachableError(
                address, f"bridge returned '{resp.status_code}' status"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponseError(address, "response is not JSON") from exc
        if not isinstance(data, dict):
            raise MalformedResponseError(
                address, f"expected an object, got {type(data).__name__}"
            )
        return data

    async def fetch_scene(
        self, address: str, credential: str, scene_id: str
    ) -> dict[str, Any] | None:
        """Fetch one scene's detail record, or ``None`` when unavailable."""
        url = bridge_url(address, credential, "scenes", scene_id)
        try:
            resp = await self._get(url)
            data = resp.json()
        except (httpx.RequestError, ValueError) as exc:
            logger.debug("Scene %s on %s has no detail: %r", scene_id, address, exc)
            return None
        if resp.status_code != 200 or not isinstance(data, dict):
            return None
        return data
