"""Typed outcomes returned by the orchestration services."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from uplanner.contracts.common import utc_now
from uplanner.contracts.enums import OutcomeKind
from uplanner.contracts.flight_plan import FlightPlan
from uplanner.contracts.workflow import GateDecision

T = TypeVar("T")

_RETRYABLE = (
    OutcomeKind.TRANSIENT_UNAVAILABLE,
    OutcomeKind.SUBMISSION_FAILED,
    OutcomeKind.VOLUME_GENERATION_FAILED,
    OutcomeKind.NETWORK_OR_UNKNOWN,
)

_SUCCESS = (
    OutcomeKind.SUBMITTED,
    OutcomeKind.READY,
    OutcomeKind.COMPLETED,
)


class CompletenessReport(BaseModel):
    """Result of validating an authorization document field by field."""

    is_complete: bool
    missing_fields: list[str] = Field(default_factory=list)
    field_errors: dict[str, list[str]] = Field(default_factory=dict)


class Outcome(BaseModel, Generic[T]):
    """Result of a workflow operation.

    Services return an ``Outcome`` instead of raising past their boundary.
    ``retryable`` tells the presentation layer to offer a manual retry that
    calls the same entry point again; nothing retries automatically.
    """

    model_config = ConfigDict(use_enum_values=True)

    kind: OutcomeKind
    message: str | None = None
    plan: FlightPlan | None = None
    data: T | None = None
    decision: GateDecision | None = None
    missing_fields: list[str] = Field(default_factory=list)
    field_errors: dict[str, list[str]] = Field(default_factory=dict)
    status_code: int | None = None
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def ok(self) -> bool:
        return self.kind in _SUCCESS

    @property
    def retryable(self) -> bool:
        return self.kind in _RETRYABLE

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def submitted(cls, plan: FlightPlan, message: str | None = None) -> "Outcome[T]":
        return cls(kind=OutcomeKind.SUBMITTED, plan=plan, message=message)

    @classmethod
    def submitted_unrecorded(
        cls, plan: FlightPlan, external_response_number: str | None
    ) -> "Outcome[T]":
        """FAS accepted the plan but its pending state could not be saved.

        Not retryable: the next authorize call records the reference
        without submitting again.
        """
        return cls(
            kind=OutcomeKind.SUBMITTED,
            message=(
                f"Submitted to FAS as {external_response_number}, but the flight plan "
                "could not be updated. Authorize again to record the reference."
            ),
            plan=plan,
            data={"external_response_number": external_response_number},
        )

    @classmethod
    def ready(cls, data: T, plan: FlightPlan | None = None) -> "Outcome[T]":
        return cls(kind=OutcomeKind.READY, data=data, plan=plan)

    @classmethod
    def completed(
        cls,
        plan: FlightPlan | None = None,
        data: T | None = None,
        message: str | None = None,
    ) -> "Outcome[T]":
        return cls(kind=OutcomeKind.COMPLETED, plan=plan, data=data, message=message)

    @classmethod
    def from_gate(cls, decision: GateDecision, plan: FlightPlan | None = None) -> "Outcome[T]":
        """Wrap a gate decision that did not allow the action to run."""
        if decision.prompt is not None:
            return cls(
                kind=OutcomeKind.NEEDS_CONFIRMATION,
                message=decision.prompt,
                decision=decision,
                plan=plan,
            )
        return cls(
            kind=OutcomeKind.PRECONDITION_FAILED,
            message=decision.reason,
            decision=decision,
            plan=plan,
        )

    @classmethod
    def needs_airspace_selection(cls, plan: FlightPlan) -> "Outcome[T]":
        return cls(
            kind=OutcomeKind.NEEDS_AIRSPACE_SELECTION,
            message="Select the U-space to check this plan against",
            plan=plan,
        )

    @classmethod
    def already_in_flight(cls, operation: str, plan_id: str) -> "Outcome[T]":
        return cls(
            kind=OutcomeKind.ALREADY_IN_FLIGHT,
            message=f"{operation} already in progress for {plan_id}",
        )

    @classmethod
    def precondition_failed(cls, reason: str, plan: FlightPlan | None = None) -> "Outcome[T]":
        return cls(kind=OutcomeKind.PRECONDITION_FAILED, message=reason, plan=plan)

    @classmethod
    def not_found(cls, what: str, item_id: str) -> "Outcome[T]":
        return cls(
            kind=OutcomeKind.PRECONDITION_FAILED,
            message=f"{what} {item_id} not found",
            status_code=404,
        )

    @property
    def is_not_found(self) -> bool:
        return self.kind == OutcomeKind.PRECONDITION_FAILED and self.status_code == 404

    @classmethod
    def validation_failed(
        cls, report: CompletenessReport, plan: FlightPlan | None = None
    ) -> "Outcome[T]":
        return cls(
            kind=OutcomeKind.VALIDATION_FAILED,
            message="The authorization document is incomplete",
            missing_fields=list(report.missing_fields),
            field_errors=dict(report.field_errors),
            plan=plan,
        )

    @classmethod
    def transient_unavailable(cls, message: str, status_code: int = 503) -> "Outcome[T]":
        return cls(
            kind=OutcomeKind.TRANSIENT_UNAVAILABLE,
            message=message,
            status_code=status_code,
        )

    @classmethod
    def submission_failed(cls, message: str, status_code: int | None = None) -> "Outcome[T]":
        return cls(
            kind=OutcomeKind.SUBMISSION_FAILED,
            message=message,
            status_code=status_code,
        )

    @classmethod
    def volume_generation_failed(cls, message: str) -> "Outcome[T]":
        return cls(kind=OutcomeKind.VOLUME_GENERATION_FAILED, message=message)

    @classmethod
    def network_or_unknown(cls, message: str) -> "Outcome[T]":
        return cls(kind=OutcomeKind.NETWORK_OR_UNKNOWN, message=message)

    def to_response(self) -> dict[str, Any]:
        """JSON-safe dump for API responses."""
        data = self.model_dump(mode="json", exclude_none=True)
        data["ok"] = self.ok
        data["retryable"] = self.retryable
        return data
