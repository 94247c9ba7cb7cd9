"""Geoawareness check dispatch.

Resolves which U-space a processed plan must be checked against, asks
the geoawareness service for it and hands a session over to the live
view.
"""

from __future__ import annotations

import logging

import httpx

from uplanner.contracts.enums import OperationKind, ProcessingStatus
from uplanner.contracts.geoawareness import GeoawarenessSession
from uplanner.contracts.result import Outcome
from uplanner.persistence.plan_store import PlanStore
from uplanner.services.clients.geoawareness_client import GeoawarenessClient
from uplanner.services.loading_set import OperationLoadingSet
from uplanner.services.snapshots import PlanSnapshotCache

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "The geoawareness service is temporarily unavailable, try again in a moment"
)


class GeoawarenessDispatcher:
    def __init__(
        self,
        store: PlanStore,
        loading: OperationLoadingSet,
        client: GeoawarenessClient,
        cache: PlanSnapshotCache | None = None,
    ):
        self._store = store
        self._loading = loading
        self._client = client
        self._cache = cache

    async def check_geoawareness(
        self, plan_id: str, airspace_context: str | None = None
    ) -> Outcome:
        """Start a geoawareness check.

        A supplied ``airspace_context`` is stored on the plan first. Without
        a stored or supplied context the caller is asked to pick one.
        """
        if not self._loading.begin(OperationKind.GEOAWARENESS, plan_id):
            return Outcome.already_in_flight(OperationKind.GEOAWARENESS.value, plan_id)
        try:
            return await self._check(plan_id, airspace_context)
        except Exception:
            logger.exception("Geoawareness check of plan %s failed unexpectedly", plan_id)
            return Outcome.network_or_unknown(f"Geoawareness check of {plan_id} failed")
        finally:
            self._loading.end(OperationKind.GEOAWARENESS, plan_id)

    async def _check(self, plan_id: str, airspace_context: str | None) -> Outcome:
        plan = await self._store.get_plan(plan_id)
        if plan is None:
            return Outcome.not_found("Flight plan", plan_id)
        if plan.processing_status != ProcessingStatus.PROCESSED:
            return Outcome.precondition_failed("plan is not processed", plan)
        if plan.authorization_document is None:
            return Outcome.precondition_failed("plan has no authorization document", plan)

        if airspace_context:
            plan = await self._store.patch_plan(plan_id, airspace_context=airspace_context)
            if self._cache is not None:
                self._cache.upsert(plan)

        if not plan.airspace_context:
            return Outcome.needs_airspace_selection(plan)

        try:
            channel = await self._client.check(plan_id, plan.airspace_context)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 503:
                logger.warning("Geoawareness service unavailable for plan %s", plan_id)
                return Outcome.transient_unavailable(UNAVAILABLE_MESSAGE)
            if status == 404:
                return Outcome.precondition_failed(
                    f"unknown U-space {plan.airspace_context}", plan
                )
            logger.warning("Geoawareness check of plan %s answered %s", plan_id, status)
            return Outcome.network_or_unknown(f"Geoawareness service answered {status}")
        except httpx.TransportError as exc:
            logger.warning("Geoawareness service unreachable: %s", exc)
            return Outcome.network_or_unknown("Geoawareness service unreachable")

        session = GeoawarenessSession(
            plan_id=plan_id,
            airspace_context=plan.airspace_context,
            live_channel_ref=channel,
        )
        return Outcome.ready(session, plan)

    async def list_airspaces(self) -> Outcome:
        """U-spaces offered when the operator has to pick one."""
        try:
            airspaces = await self._client.list_airspaces()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 503:
                logger.warning("Geoawareness service unavailable while listing U-spaces")
                return Outcome.transient_unavailable(UNAVAILABLE_MESSAGE)
            return Outcome.network_or_unknown(
                f"Geoawareness service answered {exc.response.status_code}"
            )
        except httpx.TransportError as exc:
            logger.warning("Geoawareness service unreachable: %s", exc)
            return Outcome.network_or_unknown("Geoawareness service unreachable")
        return Outcome.ready(airspaces)
