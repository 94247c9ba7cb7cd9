"""uplanner data contracts: Pydantic v2 models for the flight plan workflow.

Data authority
--------------

**Firestore** (source of truth for user-owned data):
- ``FlightPlan``: ``/users/{uid}/flight_plans/{id}``
- ``Folder``: ``/users/{uid}/folders/{id}``
- ``TrajectoryArtifact``: ``/users/{uid}/trajectories/{plan_id}``

**External services** (consumed over HTTP, never persisted here):
- FAS: receives the ``Uplan`` document, answers through a callback
- Volume generator: fills ``Uplan.operation_volumes``
- Geoawareness: ``USpace`` list and live sessions

Calculated (never persisted)
----------------------------
- ``WorkflowState``: current step, completed steps, schedule lock
- ``GateDecision``: confirmation/precondition verdicts
- ``Outcome`` / ``CompletenessReport``: operation results
"""

from uplanner.contracts.enums import (
    AuthorizationStatus,
    GateVerdict,
    OperationKind,
    OutcomeKind,
    ProcessingStatus,
    TransitionKind,
    WorkflowStep,
)
from uplanner.contracts.common import FirestoreModel, to_utc
from uplanner.contracts.flight_plan import FlightPlan, Folder, TrajectoryArtifact
from uplanner.contracts.workflow import GateDecision, WorkflowState
from uplanner.contracts.geoawareness import BoundaryPoint, GeoawarenessSession, USpace
from uplanner.contracts.uplan import OperationVolume, Uplan
from uplanner.contracts.result import CompletenessReport, Outcome

__all__ = [
    # Enums
    "AuthorizationStatus",
    "GateVerdict",
    "OperationKind",
    "OutcomeKind",
    "ProcessingStatus",
    "TransitionKind",
    "WorkflowStep",
    # Common
    "FirestoreModel",
    "to_utc",
    # Domain models
    "FlightPlan",
    "Folder",
    "TrajectoryArtifact",
    "Uplan",
    "OperationVolume",
    "USpace",
    "BoundaryPoint",
    "GeoawarenessSession",
    # Derived
    "GateDecision",
    "WorkflowState",
    # Results
    "CompletenessReport",
    "Outcome",
]
