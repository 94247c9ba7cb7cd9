"""Flight Authorization Service (FAS) client.

FAS answers a submission with a reference number only. The
approve/deny decision arrives later through the callback endpoint.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

FAS_API_URL = os.getenv("FAS_API_URL", "http://localhost:8000/uplan")


@dataclass
class FasSubmission:
    """Raw FAS answer. ``status_code`` is not checked by the client."""

    status_code: int
    external_response_number: str | None = None
    message: str | None = None

    @property
    def accepted(self) -> bool:
        return 200 <= self.status_code < 300


class FasClient:
    """Async HTTP client for U-Plan submission."""

    def __init__(
        self,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._url = base_url or FAS_API_URL
        self._client = http_client or httpx.AsyncClient(timeout=30.0)

    async def submit(self, plan_id: str, document: dict[str, Any]) -> FasSubmission:
        """POST a U-Plan document.

        Timeouts and transport failures propagate as ``httpx`` exceptions.
        """
        resp = await self._client.post(self._url, json=document)
        logger.debug("FAS answered %s for plan %s", resp.status_code, plan_id)

        if resp.is_success:
            return FasSubmission(
                status_code=resp.status_code,
                external_response_number=_body_text(resp),
            )
        return FasSubmission(status_code=resp.status_code, message=_body_text(resp))

    async def aclose(self) -> None:
        await self._client.aclose()


def _body_text(resp: httpx.Response) -> str:
    """Body as text; JSON bodies that are not plain strings are re-encoded."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    if isinstance(data, str):
        return data
    return json.dumps(data)
