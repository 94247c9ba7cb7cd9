"""Operation volume generator client."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx

from uplanner.services.errors import VolumeGenerationError

logger = logging.getLogger(__name__)

VOLUME_SERVICE_URL = os.getenv("VOLUME_SERVICE_URL", "http://localhost:8001")


@dataclass
class GeneratedVolumes:
    authorization_document: dict[str, Any]
    volumes_generated: int


class VolumeClient:
    """Turns a trajectory into U-Plan operation volumes."""

    def __init__(
        self,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = (base_url or VOLUME_SERVICE_URL).rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=60.0)

    async def generate_volumes(
        self,
        plan_id: str,
        trajectory_csv: str,
        scheduled_at: datetime | None = None,
        document: dict[str, Any] | None = None,
        randomize: bool = False,
    ) -> GeneratedVolumes:
        """Request volumes for a plan's trajectory.

        The existing document, if any, is sent along so that the generator
        completes it instead of starting over.
        """
        payload: dict[str, Any] = {"csv": trajectory_csv, "randomize": randomize}
        if scheduled_at is not None:
            payload["scheduledAt"] = int(scheduled_at.timestamp())
        if document:
            payload["uplan"] = document

        resp = await self._client.post(
            f"{self._base_url}/flight-plans/{plan_id}/volumes", json=payload
        )
        if resp.is_error:
            raise VolumeGenerationError(
                f"Volume generator returned {resp.status_code}: {resp.text[:200]}"
            )

        data = resp.json()
        uplan = data.get("uplan")
        if not isinstance(uplan, dict):
            raise VolumeGenerationError("Volume generator returned no U-Plan document")

        volumes = uplan.get("operationVolumes")
        count = data.get("volumesGenerated")
        if count is None:
            count = len(volumes) if isinstance(volumes, list) else 0
        logger.info("Generated %d operation volume(s) for plan %s", count, plan_id)
        return GeneratedVolumes(authorization_document=uplan, volumes_generated=count)

    async def aclose(self) -> None:
        await self._client.aclose()
