"""Constants and HTTP mocking helpers shared by service tests."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx

USER_ID = "operator-1"
SCHEDULE = datetime(2026, 11, 2, 9, 0, tzinfo=timezone.utc)


class RecordingHandler:
    """MockTransport handler replaying queued responses and recording requests.

    The last queued response (or exception) is repeated once the others
    are used up.
    """

    def __init__(self, *responses):
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self._responses) > 1:
            response = self._responses.pop(0)
        else:
            response = self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def calls(self) -> int:
        return len(self.requests)

    def json_body(self, index: int = -1):
        return json.loads(self.requests[index].content)


def mock_http(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
