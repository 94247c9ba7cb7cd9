"""Geoawareness service client (U-space list and live channel)."""

from __future__ import annotations

import os
from urllib.parse import urlsplit

import httpx

from uplanner.contracts.geoawareness import USpace

GEOAWARENESS_SERVICE_URL = os.getenv("GEOAWARENESS_SERVICE_URL", "http://localhost:8002")


class GeoawarenessClient:
    """Async HTTP client for the geoawareness service."""

    def __init__(
        self,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = (base_url or GEOAWARENESS_SERVICE_URL).rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=15.0)

    async def list_airspaces(self) -> list[USpace]:
        """Fetch the U-spaces a plan can be checked against."""
        resp = await self._client.get(f"{self._base_url}/uspaces")
        resp.raise_for_status()
        data = resp.json()
        return [USpace.model_validate(item) for item in data.get("u_spaces", [])]

    async def check(self, plan_id: str, airspace_context: str) -> str:
        """Confirm the U-space is served and return its live channel URL."""
        resp = await self._client.get(f"{self._base_url}/uspaces/{airspace_context}")
        resp.raise_for_status()
        return self.live_channel_ref(airspace_context)

    def live_channel_ref(self, airspace_context: str) -> str:
        parts = urlsplit(self._base_url)
        scheme = "wss" if parts.scheme == "https" else "ws"
        return f"{scheme}://{parts.netloc}/ws/gas/{airspace_context}"

    async def aclose(self) -> None:
        await self._client.aclose()
