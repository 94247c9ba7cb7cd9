"""Confirmation and precondition gate for costly transitions."""

from __future__ import annotations

import logging

from uplanner.contracts.enums import AuthorizationStatus, ProcessingStatus, TransitionKind
from uplanner.contracts.flight_plan import FlightPlan
from uplanner.contracts.workflow import GateDecision

logger = logging.getLogger(__name__)

PROMPTS: dict[TransitionKind, str] = {
    TransitionKind.PROCESS: (
        "Processing locks the schedule and the flight plan. "
        "They cannot be edited afterwards without a reset."
    ),
    TransitionKind.RESET: (
        "Resetting deletes the trajectory, the authorization state and all "
        "associated data. The plan goes back to unprocessed."
    ),
    TransitionKind.AUTHORIZE: (
        "The authorization request is final. Only send it once the flight "
        "plan data has been verified."
    ),
}

_PROCESS_STARTED = (
    ProcessingStatus.QUEUED,
    ProcessingStatus.PROCESSING,
    ProcessingStatus.PROCESSED,
)

_AUTHORIZABLE = (AuthorizationStatus.NONE, AuthorizationStatus.DENIED)


class TransitionGate:
    """Decide whether a transition may run now.

    Preconditions are checked first and reject outright. A transition that
    passes them needs an explicit confirmation before it is allowed to
    proceed. The gate never performs the mutation itself.
    """

    def request_transition(
        self,
        kind: TransitionKind | str,
        plan: FlightPlan,
        confirmed: bool = False,
    ) -> GateDecision:
        kind = TransitionKind(kind)
        reason = self._precondition(kind, plan)
        if reason is not None:
            logger.debug("Transition %s rejected for %s: %s", kind.value, plan.id, reason)
            return GateDecision.rejected(kind, reason)
        if not confirmed:
            return GateDecision.needs_confirmation(kind, PROMPTS[kind])
        return GateDecision.proceed(kind)

    @staticmethod
    def _precondition(kind: TransitionKind, plan: FlightPlan) -> str | None:
        if kind == TransitionKind.PROCESS:
            if plan.scheduled_at is None:
                return "missing schedule"
            if plan.processing_status in _PROCESS_STARTED:
                return f"processing already {ProcessingStatus(plan.processing_status).value}"
        elif kind == TransitionKind.AUTHORIZE:
            if plan.processing_status != ProcessingStatus.PROCESSED:
                return "plan is not processed"
            if plan.authorization_status not in _AUTHORIZABLE:
                return f"authorization already {AuthorizationStatus(plan.authorization_status).value}"
        return None
