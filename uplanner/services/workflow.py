"""Workflow step derivation.

The step a plan is at is never stored: it is recomputed from the
persisted attributes every time the plan snapshot changes.
"""

from __future__ import annotations

from uplanner.contracts.enums import AuthorizationStatus, ProcessingStatus, WorkflowStep
from uplanner.contracts.flight_plan import FlightPlan
from uplanner.contracts.workflow import WorkflowState

_BEFORE_PROCESSED = (
    ProcessingStatus.UNPROCESSED,
    ProcessingStatus.QUEUED,
    ProcessingStatus.PROCESSING,
)

_DECIDED = (AuthorizationStatus.APPROVED, AuthorizationStatus.DENIED)

STEP_ORDER: tuple[WorkflowStep, ...] = (
    WorkflowStep.SELECT,
    WorkflowStep.DATETIME,
    WorkflowStep.PROCESS,
    WorkflowStep.GEOAWARENESS,
    WorkflowStep.AUTHORIZE,
)


def derive_step(plan: FlightPlan | None) -> WorkflowStep:
    """Return the step the operator should act on next.

    Rules are evaluated in order and the first match wins. A plan whose
    processing ended in ``error``, or whose authorization is decided,
    falls through to ``select``.
    """
    if plan is None:
        return WorkflowStep.SELECT
    if plan.scheduled_at is None:
        return WorkflowStep.DATETIME
    if plan.processing_status in _BEFORE_PROCESSED:
        return WorkflowStep.PROCESS
    if (
        plan.processing_status == ProcessingStatus.PROCESSED
        and plan.authorization_status == AuthorizationStatus.NONE
    ):
        return WorkflowStep.GEOAWARENESS
    if plan.authorization_status == AuthorizationStatus.PENDING:
        return WorkflowStep.AUTHORIZE
    return WorkflowStep.SELECT


def derive_completed(plan: FlightPlan | None) -> set[WorkflowStep]:
    """Return the steps already done for a plan."""
    if plan is None:
        return set()

    done = {WorkflowStep.SELECT}
    if plan.scheduled_at is not None:
        done.add(WorkflowStep.DATETIME)
    if plan.processing_status in (ProcessingStatus.PROCESSED, ProcessingStatus.PROCESSING):
        done.add(WorkflowStep.PROCESS)
    if (
        plan.processing_status == ProcessingStatus.PROCESSED
        and plan.authorization_status != AuthorizationStatus.NONE
    ):
        done.add(WorkflowStep.GEOAWARENESS)
    if plan.authorization_status in _DECIDED:
        done.add(WorkflowStep.AUTHORIZE)
    return done


def is_schedule_locked(plan: FlightPlan) -> bool:
    """The schedule can only be edited while the plan is unprocessed."""
    return plan.processing_status != ProcessingStatus.UNPROCESSED


def derive_state(plan: FlightPlan | None) -> WorkflowState:
    completed = derive_completed(plan)
    return WorkflowState(
        current_step=derive_step(plan),
        completed_steps=[step for step in STEP_ORDER if step in completed],
        schedule_locked=is_schedule_locked(plan) if plan is not None else False,
    )
