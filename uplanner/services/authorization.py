"""Authorization orchestration: volumes, completeness, FAS submission.

A submission runs three dependent stages and stops at the first one that
fails:

1. generate operation volumes when the document has none and a
   trajectory is available,
2. check that the document is complete,
3. POST it to FAS and classify the answer.

Only ``pending`` is ever written here. The FAS decision is applied by
``uplanner.services.fas_callback``.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from uplanner.contracts.common import utc_now
from uplanner.contracts.enums import AuthorizationStatus, OperationKind, TransitionKind
from uplanner.contracts.flight_plan import FlightPlan
from uplanner.contracts.result import Outcome
from uplanner.persistence.plan_store import PlanStore
from uplanner.services.clients.fas_client import FasClient
from uplanner.services.clients.volume_client import VolumeClient
from uplanner.services.errors import VolumeGenerationError
from uplanner.services.loading_set import OperationLoadingSet
from uplanner.services.snapshots import PlanSnapshotCache
from uplanner.services.transition_gate import TransitionGate
from uplanner.services.uplan_validator import OPERATION_VOLUMES, validate_uplan

logger = logging.getLogger(__name__)

RANDOMIZE_UPLAN = os.getenv("UPLANNER_RANDOMIZE_UPLAN", "0").lower() in ("1", "true", "yes")

PENDING_MESSAGE = "FAS processing..."
UNAVAILABLE_MESSAGE = (
    "The authorization service is temporarily unavailable. "
    "Nothing was submitted, try again in a moment."
)


class AuthorizationOrchestrator:
    def __init__(
        self,
        store: PlanStore,
        loading: OperationLoadingSet,
        fas: FasClient,
        volumes: VolumeClient,
        cache: PlanSnapshotCache | None = None,
        gate: TransitionGate | None = None,
        randomize: bool | None = None,
    ):
        self._store = store
        self._loading = loading
        self._fas = fas
        self._volumes = volumes
        self._cache = cache
        self._gate = gate or TransitionGate()
        self._randomize = RANDOMIZE_UPLAN if randomize is None else randomize

    async def submit_for_authorization(
        self, plan_id: str, randomize: bool | None = None
    ) -> Outcome:
        """Submit a processed plan to FAS.

        ``randomize`` skips the completeness check and asks the volume
        generator to fill missing fields with test data. It defaults to
        the ``UPLANNER_RANDOMIZE_UPLAN`` setting.
        """
        if not self._loading.begin(OperationKind.AUTHORIZING, plan_id):
            return Outcome.already_in_flight(OperationKind.AUTHORIZING.value, plan_id)
        try:
            return await self._submit(
                plan_id, self._randomize if randomize is None else randomize
            )
        except Exception:
            logger.exception("Authorization of plan %s failed unexpectedly", plan_id)
            return Outcome.network_or_unknown(
                f"Authorization of {plan_id} failed, check your connection and retry"
            )
        finally:
            self._loading.end(OperationKind.AUTHORIZING, plan_id)

    async def _submit(self, plan_id: str, randomize: bool) -> Outcome:
        plan = await self._store.get_plan(plan_id)
        if plan is None:
            return Outcome.not_found("Flight plan", plan_id)

        decision = self._gate.request_transition(TransitionKind.AUTHORIZE, plan, confirmed=True)
        if not decision.may_proceed:
            return Outcome.from_gate(decision, plan)

        document: dict[str, Any] = dict(plan.authorization_document or {})

        # FAS already accepted this plan but the store write failed.
        reference = self._cache.unrecorded_submission(plan_id) if self._cache else None
        if reference is not None:
            logger.info("Recording earlier FAS reference %s for plan %s", reference, plan_id)
            return await self._record_pending(plan, document, reference)

        # Stage 1: operation volumes
        if not document.get(OPERATION_VOLUMES) and plan.trajectory_ref:
            trajectory = await self._store.get_trajectory(plan_id)
            if trajectory is not None:
                try:
                    generated = await self._volumes.generate_volumes(
                        plan_id,
                        trajectory.csv,
                        scheduled_at=plan.scheduled_at,
                        document=document or None,
                        randomize=randomize,
                    )
                except (VolumeGenerationError, httpx.HTTPError) as exc:
                    logger.warning("Volume generation failed for plan %s: %s", plan_id, exc)
                    return Outcome.volume_generation_failed(
                        f"Could not generate operation volumes: {exc}"
                    )
                # Generated values win over local edits.
                document = {**document, **generated.authorization_document}
                plan = await self._store.patch_plan(plan_id, authorization_document=document)
                self._remember(plan)

        # Stage 2: completeness
        if not randomize:
            report = validate_uplan(document)
            if not report.is_complete:
                logger.info(
                    "Plan %s is missing %d field(s)", plan_id, len(report.missing_fields)
                )
                return Outcome.validation_failed(report, plan)

        # Stage 3: submission
        now = utc_now().isoformat()
        document.setdefault("creationTime", now)
        document["updateTime"] = now

        try:
            submission = await self._fas.submit(plan_id, document)
        except httpx.TransportError as exc:
            logger.warning("No response from FAS for plan %s: %s", plan_id, exc)
            return Outcome.submission_failed(f"No response from the authorization service: {exc}")

        if submission.accepted:
            logger.info(
                "Plan %s submitted to FAS (reference %s)",
                plan_id,
                submission.external_response_number,
            )
            return await self._record_pending(
                plan, document, submission.external_response_number
            )

        if submission.status_code == 503:
            logger.warning("FAS unavailable while submitting plan %s", plan_id)
            return Outcome.transient_unavailable(UNAVAILABLE_MESSAGE)

        logger.warning(
            "FAS rejected plan %s with %s: %s",
            plan_id,
            submission.status_code,
            submission.message,
        )
        return Outcome.submission_failed(
            submission.message or f"Authorization service answered {submission.status_code}",
            status_code=submission.status_code,
        )

    async def _record_pending(
        self, plan: FlightPlan, document: dict[str, Any], reference: str | None
    ) -> Outcome:
        """Write the pending state after FAS accepted the document.

        A failed write is not retryable: resubmitting would create a second
        FAS request. The reference is kept in the cache and returned so the
        next call records it without contacting FAS again.
        """
        try:
            updated = await self._store.patch_plan(
                plan.id,
                authorization_document=document,
                authorization_status=AuthorizationStatus.PENDING,
                authorization_message=PENDING_MESSAGE,
                external_response_number=reference,
            )
        except Exception:
            logger.exception(
                "FAS accepted plan %s (reference %s) but the plan could not be updated",
                plan.id,
                reference,
            )
            if self._cache is not None and reference:
                self._cache.note_unrecorded_submission(plan.id, reference)
            return Outcome.submitted_unrecorded(plan, reference)

        if self._cache is not None:
            self._cache.forget_unrecorded_submission(plan.id)
        self._remember(updated)
        return Outcome.submitted(updated, PENDING_MESSAGE)

    def _remember(self, plan: FlightPlan) -> None:
        if self._cache is not None:
            self._cache.upsert(plan)
