"""Shared fixtures for API tests."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from uplanner.api.app import app
from uplanner.api.deps import get_current_user
from uplanner.contracts.enums import ProcessingStatus
from uplanner.contracts.flight_plan import FlightPlan
from uplanner.persistence.plan_store import FirestorePlanStore
from uplanner.services.clients.fas_client import FasClient
from uplanner.services.clients.geoawareness_client import GeoawarenessClient
from uplanner.services.clients.volume_client import VolumeClient
from uplanner.services.loading_set import OperationLoadingSet
from tests.persistence.fake_firestore import FakeFirestoreClient
from tests.services.helpers import SCHEDULE, RecordingHandler, mock_http

TEST_USER_ID = "api-test-user"
FAS_URL = "http://fas.test/uplan"
VOLUMES_URL = "http://volumes.test"
GEOAWARENESS_URL = "http://geo.test"


def _unused() -> RecordingHandler:
    return RecordingHandler(httpx.Response(500, text="should not be called"))


@pytest.fixture
def fake_client():
    """In-memory Firestore fake, shared across all repos in a single test."""
    return FakeFirestoreClient()


@pytest.fixture
def test_app(fake_client):
    """FastAPI app with auth overridden and collaborators on mock transports."""
    app.dependency_overrides[get_current_user] = lambda: TEST_USER_ID

    with patch(
        "uplanner.persistence.repositories.base.get_firestore_client",
        return_value=fake_client,
    ):
        # ASGITransport does not run the lifespan, so state is set here.
        app.state.loading_set = OperationLoadingSet()
        app.state.snapshot_caches = {}
        app.state.fas_client = FasClient(base_url=FAS_URL, http_client=mock_http(_unused()))
        app.state.volume_client = VolumeClient(
            base_url=VOLUMES_URL, http_client=mock_http(_unused())
        )
        app.state.geoawareness_client = GeoawarenessClient(
            base_url=GEOAWARENESS_URL, http_client=mock_http(_unused())
        )
        yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def use_fas(test_app):
    """Answer FAS submissions with the given responses."""

    def _install(*responses) -> RecordingHandler:
        handler = RecordingHandler(*responses)
        test_app.state.fas_client = FasClient(base_url=FAS_URL, http_client=mock_http(handler))
        return handler

    return _install


@pytest.fixture
def use_geoawareness(test_app):
    """Answer geoawareness service calls with the given responses."""

    def _install(*responses) -> RecordingHandler:
        handler = RecordingHandler(*responses)
        test_app.state.geoawareness_client = GeoawarenessClient(
            base_url=GEOAWARENESS_URL, http_client=mock_http(handler)
        )
        return handler

    return _install


@pytest.fixture
def store(test_app):
    return FirestorePlanStore(TEST_USER_ID)


@pytest.fixture
def seed_plan(store):
    """Store a plan directly, processed and scheduled unless overridden."""

    async def _seed(**fields) -> FlightPlan:
        fields.setdefault("name", "Port inspection")
        fields.setdefault("scheduled_at", SCHEDULE)
        fields.setdefault("processing_status", ProcessingStatus.PROCESSED)
        return await store.create_plan(FlightPlan(**fields))

    return _seed
