"""Tests for FirestorePlanStore on top of the in-memory Firestore fake."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from uplanner.contracts.enums import AuthorizationStatus, ProcessingStatus
from uplanner.contracts.flight_plan import FlightPlan, Folder, TrajectoryArtifact, submission_id
from uplanner.persistence.errors import DocumentNotFoundError, ResetNotAllowedError
from uplanner.persistence.plan_store import FirestorePlanStore
from uplanner.persistence.repositories.trajectory_repo import TrajectoryRepository
from tests.contracts.uplan_samples import complete_uplan
from tests.persistence.fake_firestore import FakeFirestoreClient

USER_ID = "operator-1"
SCHEDULE = datetime(2026, 11, 2, 9, 0, tzinfo=timezone.utc)


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


async def _submitted_plan(store: FirestorePlanStore) -> FlightPlan:
    plan = await store.create_plan(
        FlightPlan(
            name="Port inspection",
            scheduled_at=SCHEDULE,
            processing_status=ProcessingStatus.PROCESSED,
            authorization_status=AuthorizationStatus.PENDING,
            authorization_document=complete_uplan(),
            authorization_message="FAS processing...",
            external_response_number="FAS-100",
            airspace_context="PuertoVLC",
            trajectory_ref="traj",
        )
    )
    await TrajectoryRepository().create(
        USER_ID, TrajectoryArtifact(id=plan.id, csv="t,lat,lon\n")
    )
    return plan


class TestFlightPlans:
    async def test_create_assigns_id(self, store):
        plan = await store.create_plan(FlightPlan(name="Upload"))
        assert plan.id
        fetched = await store.get_plan(plan.id)
        assert fetched.name == "Upload"
        assert [p.id for p in await store.list_plans()] == [plan.id]

    async def test_patch_plan(self, store):
        plan = await store.create_plan(FlightPlan(name="Upload"))

        updated = await store.patch_plan(plan.id, scheduled_at=SCHEDULE, name="Renamed")

        assert updated.name == "Renamed"
        assert updated.scheduled_at == SCHEDULE
        assert updated.updated_at is not None
        assert (await store.get_plan(plan.id)).name == "Renamed"

    async def test_patch_rejects_invariant_violation(self, store):
        plan = await store.create_plan(FlightPlan(name="Upload"))

        with pytest.raises(ValidationError):
            await store.patch_plan(plan.id, authorization_status=AuthorizationStatus.PENDING)

        stored = await store.get_plan(plan.id)
        assert stored.authorization_status == AuthorizationStatus.NONE

    async def test_patch_missing_plan(self, store):
        with pytest.raises(DocumentNotFoundError):
            await store.patch_plan("missing", name="x")

    async def test_patch_records_submission_index(self, store, fake_client):
        plan = await store.create_plan(
            FlightPlan(
                name="Upload",
                scheduled_at=SCHEDULE,
                processing_status=ProcessingStatus.PROCESSED,
            )
        )

        await store.patch_plan(
            plan.id,
            authorization_status=AuthorizationStatus.PENDING,
            external_response_number="FAS-7",
        )

        index = fake_client.documents("fas_submissions")
        entry = index[submission_id("FAS-7")]
        assert entry["plan_id"] == plan.id
        assert entry["user_id"] == USER_ID

    async def test_plans_are_user_scoped(self, store):
        await store.create_plan(FlightPlan(name="Mine"))
        other = FirestorePlanStore("operator-2")
        assert await other.list_plans() == []

    async def test_delete_plan_removes_trajectory(self, store):
        plan = await _submitted_plan(store)
        await store.delete_plan(plan.id)
        assert await store.get_plan(plan.id) is None
        assert await store.get_trajectory(plan.id) is None


class TestResetPlan:
    async def test_reset_clears_derived_data(self, store, fake_client):
        plan = await _submitted_plan(store)

        reset = await store.reset_plan(plan.id)

        assert reset.processing_status == ProcessingStatus.UNPROCESSED
        assert reset.authorization_status == AuthorizationStatus.NONE
        assert reset.authorization_document is None
        assert reset.authorization_message is None
        assert reset.external_response_number is None
        assert reset.trajectory_ref is None
        # Schedule and U-space survive a reset
        assert reset.scheduled_at == SCHEDULE
        assert reset.airspace_context == "PuertoVLC"

        stored = fake_client.documents(f"users/{USER_ID}/flight_plans")[plan.id]
        assert "authorization_document" not in stored
        assert await store.get_trajectory(plan.id) is None

    async def test_reset_unprocessed_plan_is_refused(self, store):
        plan = await store.create_plan(FlightPlan(name="Fresh"))
        with pytest.raises(ResetNotAllowedError):
            await store.reset_plan(plan.id)

    async def test_reset_missing_plan(self, store):
        with pytest.raises(DocumentNotFoundError):
            await store.reset_plan("missing")


class TestFolders:
    async def test_create_and_rename(self, store):
        folder = await store.create_folder(Folder(name="Harbour"))
        renamed = await store.patch_folder(folder.id, name="Harbour 2026")
        assert renamed.name == "Harbour 2026"
        assert (await store.get_folder(folder.id)).name == "Harbour 2026"

    async def test_patch_missing_folder(self, store):
        with pytest.raises(DocumentNotFoundError):
            await store.patch_folder("missing", name="x")

    async def test_delete_folder_cascades(self, store):
        folder = await store.create_folder(Folder(name="Harbour"))
        other = await store.create_folder(Folder(name="Fields"))
        inside = await store.create_plan(FlightPlan(name="In", folder_id=folder.id))
        outside = await store.create_plan(FlightPlan(name="Out", folder_id=other.id))
        loose = await store.create_plan(FlightPlan(name="Loose"))

        await store.delete_folder(folder.id)

        assert await store.get_folder(folder.id) is None
        assert await store.get_plan(inside.id) is None
        assert await store.get_plan(outside.id) is not None
        assert await store.get_plan(loose.id) is not None
        assert [f.name for f in await store.list_folders()] == ["Fields"]
