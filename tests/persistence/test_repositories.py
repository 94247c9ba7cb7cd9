"""Unit tests for Firestore repositories using FakeFirestoreClient."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from uplanner.contracts.enums import ProcessingStatus
from uplanner.contracts.flight_plan import (
    FasSubmissionRef,
    FlightPlan,
    Folder,
    TrajectoryArtifact,
    submission_id,
)
from uplanner.persistence.repositories.flight_plan_repo import FlightPlanRepository
from uplanner.persistence.repositories.folder_repo import FolderRepository
from uplanner.persistence.repositories.submission_repo import SubmissionIndexRepository
from uplanner.persistence.repositories.trajectory_repo import TrajectoryRepository
from tests.persistence.fake_firestore import FakeFirestoreClient

USER_ID = "test-user-123"


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


def _make_plan(name: str, **fields) -> FlightPlan:
    return FlightPlan(name=name, created_at=datetime.now(timezone.utc), **fields)


class TestFlightPlanRepository:
    async def test_create_and_get(self, fake_client):
        repo = FlightPlanRepository()
        doc_id = await repo.create(USER_ID, _make_plan("Survey north field"))

        assert doc_id
        stored = fake_client.documents(f"users/{USER_ID}/flight_plans")
        assert stored[doc_id]["processing_status"] == "unprocessed"
        assert "id" not in stored[doc_id]

        plan = await repo.get(USER_ID, doc_id)
        assert plan is not None
        assert plan.id == doc_id
        assert plan.name == "Survey north field"

    async def test_get_missing_returns_none(self):
        assert await FlightPlanRepository().get(USER_ID, "nope") is None

    async def test_list_scoped_to_user(self):
        repo = FlightPlanRepository()
        await repo.create(USER_ID, _make_plan("Mine"))
        await repo.create("someone-else", _make_plan("Theirs"))

        names = [p.name for p in await repo.list_all(USER_ID)]
        assert names == ["Mine"]

    async def test_list_by_folder(self):
        repo = FlightPlanRepository()
        await repo.create(USER_ID, _make_plan("A", folder_id="f1"))
        await repo.create(USER_ID, _make_plan("B", folder_id="f2"))
        await repo.create(USER_ID, _make_plan("C", folder_id="f1"))

        names = sorted(p.name for p in await repo.list_by_folder(USER_ID, "f1"))
        assert names == ["A", "C"]

    async def test_list_by_status(self):
        repo = FlightPlanRepository()
        await repo.create(USER_ID, _make_plan("Raw"))
        await repo.create(
            USER_ID,
            _make_plan(
                "Done",
                processing_status=ProcessingStatus.PROCESSED,
                scheduled_at=datetime(2026, 11, 2, 9, 0, tzinfo=timezone.utc),
            ),
        )

        done = await repo.list_by_status(USER_ID, ProcessingStatus.PROCESSED)
        assert [p.name for p in done] == ["Done"]

    async def test_update_merges(self, fake_client):
        repo = FlightPlanRepository()
        doc_id = await repo.create(USER_ID, _make_plan("Old", file_content="raw"))

        await repo.update(USER_ID, doc_id, _make_plan("New"))

        stored = fake_client.documents(f"users/{USER_ID}/flight_plans")[doc_id]
        assert stored["name"] == "New"
        assert stored["file_content"] == "raw"

    async def test_replace_drops_cleared_fields(self, fake_client):
        repo = FlightPlanRepository()
        doc_id = await repo.create(USER_ID, _make_plan("Plan", trajectory_ref="t-1"))

        await repo.replace(USER_ID, doc_id, _make_plan("Plan"))

        stored = fake_client.documents(f"users/{USER_ID}/flight_plans")[doc_id]
        assert "trajectory_ref" not in stored

    async def test_delete(self):
        repo = FlightPlanRepository()
        doc_id = await repo.create(USER_ID, _make_plan("Gone"))
        await repo.delete(USER_ID, doc_id)
        assert await repo.get(USER_ID, doc_id) is None


class TestFolderAndTrajectoryRepositories:
    async def test_folder_roundtrip(self):
        repo = FolderRepository()
        doc_id = await repo.create(USER_ID, Folder(name="Valencia port"))
        folder = await repo.get(USER_ID, doc_id)
        assert folder.name == "Valencia port"

    async def test_trajectory_keyed_by_plan_id(self, fake_client):
        repo = TrajectoryRepository()
        doc_id = await repo.create(
            USER_ID, TrajectoryArtifact(id="plan-1", csv="t,lat,lon\n0,39.46,-0.33\n")
        )
        assert doc_id == "plan-1"
        assert "plan-1" in fake_client.documents(f"users/{USER_ID}/trajectories")


class TestSubmissionIndexRepository:
    async def test_record_at_root_collection(self, fake_client):
        repo = SubmissionIndexRepository()
        doc_id = await repo.record(
            FasSubmissionRef(
                external_response_number="FAS/2026/0001",
                user_id=USER_ID,
                plan_id="plan-1",
            )
        )

        assert doc_id == submission_id("FAS/2026/0001")
        assert "/" not in doc_id
        assert doc_id in fake_client.documents("fas_submissions")

    async def test_lookup(self):
        repo = SubmissionIndexRepository()
        await repo.record(
            FasSubmissionRef(
                external_response_number="FAS-42", user_id=USER_ID, plan_id="plan-9"
            )
        )

        entry = await repo.lookup("FAS-42")
        assert entry.user_id == USER_ID
        assert entry.plan_id == "plan-9"
        assert await repo.lookup("FAS-43") is None
