"""Tests for the FlightPlan contract and its companions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from uplanner.contracts.enums import AuthorizationStatus, ProcessingStatus
from uplanner.contracts.flight_plan import FasSubmissionRef, FlightPlan, submission_id
from tests.contracts.uplan_samples import complete_uplan, uplan_without_volumes


class TestFlightPlan:
    def test_defaults(self):
        plan = FlightPlan(name="Upload")
        assert plan.processing_status == ProcessingStatus.UNPROCESSED
        assert plan.authorization_status == AuthorizationStatus.NONE
        assert plan.scheduled_at is None
        assert plan.created_at.tzinfo is not None

    def test_name_required(self):
        with pytest.raises(ValidationError):
            FlightPlan(name="")

    def test_naive_schedule_taken_as_utc(self):
        plan = FlightPlan(name="p", scheduled_at=datetime(2026, 11, 2, 9, 30))
        assert plan.scheduled_at == datetime(2026, 11, 2, 9, 30, tzinfo=timezone.utc)

    def test_aware_schedule_converted_to_utc(self):
        madrid = timezone(timedelta(hours=1))
        plan = FlightPlan(name="p", scheduled_at=datetime(2026, 11, 2, 10, 30, tzinfo=madrid))
        assert plan.scheduled_at == datetime(2026, 11, 2, 9, 30, tzinfo=timezone.utc)
        assert plan.scheduled_at.utcoffset() == timedelta(0)

    @pytest.mark.parametrize(
        "processing",
        [
            ProcessingStatus.UNPROCESSED,
            ProcessingStatus.QUEUED,
            ProcessingStatus.PROCESSING,
            ProcessingStatus.ERROR,
        ],
    )
    def test_authorization_requires_processed(self, processing):
        with pytest.raises(ValidationError, match="processed"):
            FlightPlan(
                name="p",
                processing_status=processing,
                authorization_status=AuthorizationStatus.PENDING,
            )

    def test_pending_allowed_when_processed(self):
        plan = FlightPlan(
            name="p",
            processing_status=ProcessingStatus.PROCESSED,
            authorization_status=AuthorizationStatus.PENDING,
        )
        assert plan.authorization_status == AuthorizationStatus.PENDING

    def test_enum_values_serialize_as_strings(self):
        data = FlightPlan(name="p").to_firestore()
        assert data["processing_status"] == "unprocessed"
        assert data["authorization_status"] == "none"
        assert "scheduled_at" not in data

    def test_firestore_roundtrip_keeps_document(self):
        plan = FlightPlan(
            name="p",
            scheduled_at=datetime(2026, 11, 2, 9, 0, tzinfo=timezone.utc),
            authorization_document=complete_uplan(),
            authorization_message={"reason": "overlaps CTR"},
        )
        restored = FlightPlan.from_firestore(plan.to_firestore())
        assert restored.authorization_document == plan.authorization_document
        assert restored.authorization_message == {"reason": "overlaps CTR"}
        assert restored.scheduled_at == plan.scheduled_at


class TestOperationVolumes:
    def test_no_document(self):
        assert FlightPlan(name="p").operation_volumes == []

    def test_document_without_volumes(self):
        plan = FlightPlan(name="p", authorization_document=uplan_without_volumes())
        assert plan.operation_volumes == []

    def test_document_with_volumes(self):
        plan = FlightPlan(name="p", authorization_document=complete_uplan())
        assert len(plan.operation_volumes) == 1

    def test_malformed_volumes(self):
        plan = FlightPlan(name="p", authorization_document={"operationVolumes": "x"})
        assert plan.operation_volumes == []


class TestSubmissionRef:
    def test_submission_id_is_stable_and_path_safe(self):
        ref = "FAS/2026/000123"
        assert submission_id(ref) == submission_id(ref)
        assert len(submission_id(ref)) == 16
        assert "/" not in submission_id(ref)
        assert submission_id(ref) != submission_id("FAS/2026/000124")

    def test_to_firestore_uses_submission_id(self):
        entry = FasSubmissionRef(external_response_number="FAS-1", user_id="u", plan_id="p")
        assert entry.to_firestore()["id"] == submission_id("FAS-1")
