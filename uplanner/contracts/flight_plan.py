"""FlightPlan, Folder, TrajectoryArtifact and the FAS submission index.

Stored at:
- ``/users/{user_id}/flight_plans/{plan_id}``
- ``/users/{user_id}/folders/{folder_id}``
- ``/users/{user_id}/trajectories/{plan_id}``
- ``/fas_submissions/{submission_id}``
"""

import hashlib
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from uplanner.contracts.common import FirestoreModel, to_utc, utc_now
from uplanner.contracts.enums import AuthorizationStatus, ProcessingStatus


class FlightPlan(FirestoreModel):
    """A flight plan moving through processing, geoawareness and authorization.

    **Persisted fields** (Firestore source of truth):
    - name, processing_status, authorization_status, scheduled_at
    - authorization_document (U-Plan), airspace_context, authorization_message
    - trajectory_ref, folder_id, external_response_number

    **Derived fields** (computed at runtime, never stored):
    - workflow step, completed steps, schedule lock
      (see ``uplanner.services.workflow``)

    ``authorization_status`` can only move past ``none`` once the plan is
    processed. Approved/denied values are written exclusively by the FAS
    callback path.
    """

    id: str | None = None
    name: str = Field(..., min_length=1, description="Free-text plan name")
    processing_status: ProcessingStatus = ProcessingStatus.UNPROCESSED
    authorization_status: AuthorizationStatus = AuthorizationStatus.NONE
    scheduled_at: datetime | None = Field(
        default=None, description="Scheduled flight start, UTC"
    )

    # U-Plan document as sent to FAS (camelCase wire keys). Kept as a raw
    # mapping so that incomplete drafts can be stored and edited.
    authorization_document: dict[str, Any] | None = None

    airspace_context: str | None = Field(
        default=None, description="U-space identifier used for geoawareness"
    )
    authorization_message: Any | None = Field(
        default=None, description="Free-form FAS response payload"
    )
    external_response_number: str | None = Field(
        default=None, description="FAS reference returned on submission"
    )
    trajectory_ref: str | None = Field(
        default=None, description="Reference to the generated trajectory artifact"
    )
    folder_id: str | None = None
    file_content: str | None = Field(
        default=None, description="Raw uploaded flight plan file"
    )

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = None

    @field_validator("scheduled_at")
    @classmethod
    def _normalize_schedule(cls, value: datetime | None) -> datetime | None:
        return to_utc(value) if value is not None else None

    @model_validator(mode="after")
    def _authorization_requires_processing(self) -> "FlightPlan":
        if (
            self.authorization_status != AuthorizationStatus.NONE
            and self.processing_status != ProcessingStatus.PROCESSED
        ):
            raise ValueError(
                "authorization_status can only leave 'none' once the plan is processed"
            )
        return self

    @property
    def operation_volumes(self) -> list[dict[str, Any]]:
        """Operation volumes of the authorization document, if any."""
        if not self.authorization_document:
            return []
        volumes = self.authorization_document.get("operationVolumes")
        return volumes if isinstance(volumes, list) else []


class Folder(FirestoreModel):
    """Named group of flight plans. Deleting it deletes its plans."""

    id: str | None = None
    name: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = None


class TrajectoryArtifact(FirestoreModel):
    """CSV trajectory produced by the trajectory engine for a plan."""

    id: str | None = None
    csv: str = Field(..., description="Trajectory samples as CSV text")
    generated_at: datetime = Field(default_factory=utc_now)


def submission_id(external_response_number: str) -> str:
    """Deterministic document ID for a FAS reference: MD5(reference)[:16]."""
    return hashlib.md5(external_response_number.encode()).hexdigest()[:16]


class FasSubmissionRef(FirestoreModel):
    """Index entry resolving a FAS reference back to its plan.

    Stored at ``/fas_submissions/{submission_id}`` (not user-scoped, the
    FAS callback carries no user identity).
    """

    id: str | None = None
    external_response_number: str
    user_id: str
    plan_id: str
    submitted_at: datetime = Field(default_factory=utc_now)

    def to_firestore(self) -> dict[str, Any]:
        data = super().to_firestore()
        data["id"] = submission_id(self.external_response_number)
        return data
