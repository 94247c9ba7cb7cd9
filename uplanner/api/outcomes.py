"""Translation of service outcomes into HTTP responses."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from uplanner.contracts.enums import OutcomeKind
from uplanner.contracts.result import Outcome

_ERROR_STATUS: dict[str, int] = {
    OutcomeKind.ALREADY_IN_FLIGHT.value: 409,
    OutcomeKind.PRECONDITION_FAILED.value: 409,
    OutcomeKind.VALIDATION_FAILED.value: 422,
    OutcomeKind.TRANSIENT_UNAVAILABLE.value: 503,
    OutcomeKind.SUBMISSION_FAILED.value: 502,
    OutcomeKind.VOLUME_GENERATION_FAILED.value: 502,
    OutcomeKind.NETWORK_OR_UNKNOWN.value: 502,
}


def outcome_response(outcome: Outcome) -> dict[str, Any]:
    """Return the outcome body, or raise ``HTTPException`` for failures.

    Outcomes that ask the operator for something (a confirmation, a
    U-space) are not errors and are returned as-is.
    """
    if outcome.is_not_found:
        raise HTTPException(status_code=404, detail=outcome.message)
    status = _ERROR_STATUS.get(outcome.kind)
    if status is not None:
        raise HTTPException(status_code=status, detail=outcome.to_response())
    return outcome.to_response()
