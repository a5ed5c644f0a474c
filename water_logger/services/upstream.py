from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..core.exceptions import InvalidLevelError, UpstreamError
from ..domain.levels import parse_level
from ..domain.models import Level

logger = logging.getLogger(__name__)


class SensorBackendClient:
    """Fetches the latest water level from the sensor backend's JSON API."""

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    async def fetch_level(self) -> Level:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(self._url)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request to {self._url} failed: {e!r}") from e

        if resp.status_code != 200:
            raise UpstreamError(f"Sensor backend returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError("Sensor backend returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise UpstreamError("Sensor backend returned an unexpected payload")

        try:
            level = parse_level(data.get("level"))
        except InvalidLevelError:
            raise UpstreamError(f"Sensor backend returned an invalid level: {data.get('level')!r}")

        logger.debug("Sensor backend level=%s", level)
        return level
