"""Shared fixtures for service tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from uplanner.contracts.enums import ProcessingStatus
from uplanner.contracts.flight_plan import FlightPlan, TrajectoryArtifact
from uplanner.persistence.plan_store import FirestorePlanStore
from uplanner.persistence.repositories.trajectory_repo import TrajectoryRepository
from uplanner.services.loading_set import OperationLoadingSet
from uplanner.services.snapshots import PlanSnapshotCache
from tests.persistence.fake_firestore import FakeFirestoreClient
from tests.services.helpers import SCHEDULE, USER_ID


@pytest.fixture
def fake_client():
    return FakeFirestoreClient()


@pytest.fixture(autouse=True)
def patch_firestore(fake_client):
    with patch(
        "uplanner.persistence.repositories.base.get_firestore_client",
        return_value=fake_client,
    ):
        yield


@pytest.fixture
def store():
    return FirestorePlanStore(USER_ID)


@pytest.fixture
def loading():
    return OperationLoadingSet()


@pytest.fixture
def cache():
    return PlanSnapshotCache()


@pytest.fixture
def seed_plan(store):
    """Create a plan in the store. Processed and scheduled unless overridden."""

    async def _seed(trajectory_csv: str | None = None, **fields) -> FlightPlan:
        fields.setdefault("name", "Port inspection")
        fields.setdefault("scheduled_at", SCHEDULE)
        fields.setdefault("processing_status", ProcessingStatus.PROCESSED)
        if trajectory_csv is not None:
            fields.setdefault("trajectory_ref", "trajectories")
        plan = await store.create_plan(FlightPlan(**fields))
        if trajectory_csv is not None:
            await TrajectoryRepository().create(
                USER_ID, TrajectoryArtifact(id=plan.id, csv=trajectory_csv)
            )
        return plan

    return _seed

