"""Entry points a presentation layer calls for each user action.

Every method returns an ``Outcome``. Network-bound actions hold their
(kind, id) pair in the loading set for their whole duration, so a second
click while the first request is running gets ``already_in_flight``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable

from uplanner.contracts.enums import OperationKind, ProcessingStatus, TransitionKind
from uplanner.contracts.flight_plan import FlightPlan, Folder
from uplanner.contracts.result import Outcome
from uplanner.persistence.errors import DocumentNotFoundError, ResetNotAllowedError
from uplanner.persistence.plan_store import PlanStore
from uplanner.services.authorization import AuthorizationOrchestrator
from uplanner.services.errors import OperationInFlightError
from uplanner.services.geoawareness import GeoawarenessDispatcher
from uplanner.services.loading_set import OperationLoadingSet
from uplanner.services.snapshots import PlanSnapshotCache
from uplanner.services.transition_gate import TransitionGate
from uplanner.services.uplan_validator import validate_uplan_draft
from uplanner.services.workflow import derive_state, is_schedule_locked

logger = logging.getLogger(__name__)


class WorkflowController:
    def __init__(
        self,
        store: PlanStore,
        loading: OperationLoadingSet,
        orchestrator: AuthorizationOrchestrator,
        dispatcher: GeoawarenessDispatcher,
        cache: PlanSnapshotCache | None = None,
        gate: TransitionGate | None = None,
    ):
        self._store = store
        self._loading = loading
        self._orchestrator = orchestrator
        self._dispatcher = dispatcher
        self._cache = cache or PlanSnapshotCache()
        self._gate = gate or TransitionGate()

    @property
    def cache(self) -> PlanSnapshotCache:
        return self._cache

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _guarded(
        self,
        kind: OperationKind,
        op_id: str,
        action: Callable[[], Awaitable[Outcome]],
    ) -> Outcome:
        try:
            with self._loading.track(kind, op_id):
                return await action()
        except OperationInFlightError:
            return Outcome.already_in_flight(kind.value, op_id)
        except DocumentNotFoundError as exc:
            return Outcome.not_found(exc.collection, exc.doc_id)
        except Exception:
            logger.exception("%s of %s failed unexpectedly", kind.value, op_id)
            return Outcome.network_or_unknown(f"{kind.value} of {op_id} failed, retry")

    async def _load(self, plan_id: str) -> FlightPlan | None:
        plan = await self._store.get_plan(plan_id)
        if plan is not None:
            self._cache.upsert(plan)
        return plan

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    async def workflow_state(self, plan_id: str) -> Outcome:
        if await self._load(plan_id) is None:
            return Outcome.not_found("Flight plan", plan_id)
        # Read back through the cache so a pending overlay is reflected.
        plan = self._cache.get(plan_id)
        return Outcome.ready(derive_state(plan), plan)

    async def set_schedule(self, plan_id: str, scheduled_at: datetime) -> Outcome:
        plan = await self._load(plan_id)
        if plan is None:
            return Outcome.not_found("Flight plan", plan_id)
        if is_schedule_locked(plan):
            return Outcome.precondition_failed(
                "the schedule is locked once processing has started", plan
            )
        plan = await self._store.patch_plan(plan_id, scheduled_at=scheduled_at)
        self._cache.upsert(plan)
        return Outcome.completed(plan)

    async def process(self, plan_id: str, confirmed: bool = False) -> Outcome:
        plan = await self._load(plan_id)
        if plan is None:
            return Outcome.not_found("Flight plan", plan_id)
        decision = self._gate.request_transition(TransitionKind.PROCESS, plan, confirmed)
        if not decision.may_proceed:
            return Outcome.from_gate(decision, plan)

        async def queue() -> Outcome:
            self._cache.overlay(plan_id, processing_status=ProcessingStatus.QUEUED)
            try:
                updated = await self._store.patch_plan(
                    plan_id, processing_status=ProcessingStatus.QUEUED
                )
            except Exception:
                self._cache.clear_overlay(plan_id)
                raise
            self._cache.upsert(updated)
            logger.info("Flight plan %s queued for processing", plan_id)
            return Outcome.completed(self._cache.get(plan_id))

        return await self._guarded(OperationKind.PROCESSING, plan_id, queue)

    async def reset(self, plan_id: str, confirmed: bool = False) -> Outcome:
        plan = await self._load(plan_id)
        if plan is None:
            return Outcome.not_found("Flight plan", plan_id)
        decision = self._gate.request_transition(TransitionKind.RESET, plan, confirmed)
        if not decision.may_proceed:
            return Outcome.from_gate(decision, plan)

        async def reset() -> Outcome:
            try:
                updated = await self._store.reset_plan(plan_id)
            except ResetNotAllowedError as exc:
                return Outcome.precondition_failed(str(exc), plan)
            self._cache.forget_unrecorded_submission(plan_id)
            self._cache.upsert(updated)
            return Outcome.completed(updated)

        return await self._guarded(OperationKind.RESETTING, plan_id, reset)

    async def authorize(
        self, plan_id: str, confirmed: bool = False, randomize: bool | None = None
    ) -> Outcome:
        plan = await self._load(plan_id)
        if plan is None:
            return Outcome.not_found("Flight plan", plan_id)
        decision = self._gate.request_transition(TransitionKind.AUTHORIZE, plan, confirmed)
        if not decision.may_proceed:
            return Outcome.from_gate(decision, plan)
        return await self._orchestrator.submit_for_authorization(plan_id, randomize=randomize)

    async def check_geoawareness(
        self, plan_id: str, airspace_context: str | None = None
    ) -> Outcome:
        return await self._dispatcher.check_geoawareness(plan_id, airspace_context)

    async def list_airspaces(self) -> Outcome:
        return await self._dispatcher.list_airspaces()

    async def update_authorization_document(
        self, plan_id: str, document: dict[str, Any]
    ) -> Outcome:
        """Save an edited U-Plan, tolerating fields that are still empty."""
        plan = await self._load(plan_id)
        if plan is None:
            return Outcome.not_found("Flight plan", plan_id)
        decision = self._gate.request_transition(TransitionKind.AUTHORIZE, plan, confirmed=True)
        if not decision.may_proceed:
            return Outcome.from_gate(decision, plan)
        report = validate_uplan_draft(document)
        if not report.is_complete:
            return Outcome.validation_failed(report, plan)
        plan = await self._store.patch_plan(plan_id, authorization_document=document)
        self._cache.upsert(plan)
        return Outcome.completed(plan)

    # ------------------------------------------------------------------
    # Plan management
    # ------------------------------------------------------------------

    async def upload_plan(
        self, name: str, file_content: str | None = None, folder_id: str | None = None
    ) -> Outcome:
        if folder_id is not None and await self._store.get_folder(folder_id) is None:
            return Outcome.not_found("Folder", folder_id)
        plan = await self._store.create_plan(
            FlightPlan(name=name, file_content=file_content, folder_id=folder_id)
        )
        self._cache.upsert(plan)
        logger.info("Flight plan %s uploaded", plan.id)
        return Outcome.completed(plan)

    async def rename_plan(self, plan_id: str, name: str) -> Outcome:
        if not name.strip():
            return Outcome.precondition_failed("name must not be empty")

        async def rename() -> Outcome:
            plan = await self._store.patch_plan(plan_id, name=name.strip())
            self._cache.upsert(plan)
            return Outcome.completed(plan)

        return await self._guarded(OperationKind.RENAMING, plan_id, rename)

    async def move_plan(self, plan_id: str, folder_id: str | None) -> Outcome:
        async def move() -> Outcome:
            if folder_id is not None and await self._store.get_folder(folder_id) is None:
                return Outcome.not_found("Folder", folder_id)
            plan = await self._store.patch_plan(plan_id, folder_id=folder_id)
            self._cache.upsert(plan)
            return Outcome.completed(plan)

        return await self._guarded(OperationKind.MOVING, plan_id, move)

    async def delete_plan(self, plan_id: str) -> Outcome:
        async def delete() -> Outcome:
            if await self._store.get_plan(plan_id) is None:
                return Outcome.not_found("Flight plan", plan_id)
            await self._store.delete_plan(plan_id)
            self._cache.remove(plan_id)
            return Outcome.completed(message=f"Flight plan {plan_id} deleted")

        return await self._guarded(OperationKind.DELETING, plan_id, delete)

    async def download_trajectory(self, plan_id: str) -> Outcome:
        async def download() -> Outcome:
            trajectory = await self._store.get_trajectory(plan_id)
            if trajectory is None:
                return Outcome.not_found("Trajectory", plan_id)
            return Outcome.ready(trajectory)

        return await self._guarded(OperationKind.DOWNLOADING, plan_id, download)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    async def create_folder(self, name: str) -> Outcome:
        if not name.strip():
            return Outcome.precondition_failed("name must not be empty")
        folder = await self._store.create_folder(Folder(name=name.strip()))
        self._cache.upsert_folder(folder)
        return Outcome.completed(data=folder)

    async def rename_folder(self, folder_id: str, name: str) -> Outcome:
        if not name.strip():
            return Outcome.precondition_failed("name must not be empty")

        async def rename() -> Outcome:
            folder = await self._store.patch_folder(folder_id, name=name.strip())
            self._cache.upsert_folder(folder)
            return Outcome.completed(data=folder)

        return await self._guarded(OperationKind.RENAMING, folder_id, rename)

    async def delete_folder(self, folder_id: str) -> Outcome:
        async def delete() -> Outcome:
            if await self._store.get_folder(folder_id) is None:
                return Outcome.not_found("Folder", folder_id)
            await self._store.delete_folder(folder_id)
            self._cache.remove_folder(folder_id)
            return Outcome.completed(message=f"Folder {folder_id} deleted")

        return await self._guarded(OperationKind.DELETING, folder_id, delete)
