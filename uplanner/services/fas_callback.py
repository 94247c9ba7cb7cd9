"""Application of the FAS decision delivered through its callback.

This is the only place where a plan becomes ``approved`` or ``denied``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from uplanner.contracts.enums import AuthorizationStatus
from uplanner.contracts.flight_plan import FlightPlan
from uplanner.persistence.errors import DocumentNotFoundError
from uplanner.persistence.plan_store import FirestorePlanStore, PlanStore
from uplanner.persistence.repositories.submission_repo import SubmissionIndexRepository
from uplanner.services.errors import InvalidCallbackError

logger = logging.getLogger(__name__)

ACCEPTED = "ACCEPTED"


class FasCallbackService:
    def __init__(
        self,
        submissions: SubmissionIndexRepository | None = None,
        store_for_user: Callable[[str], PlanStore] = FirestorePlanStore,
    ):
        self._submissions = submissions or SubmissionIndexRepository()
        self._store_for_user = store_for_user

    async def apply(
        self, external_response_number: str, state: str | None, message: Any = None
    ) -> FlightPlan:
        """Record FAS's answer on the plan it refers to.

        ``state == "ACCEPTED"`` approves the plan, any other state denies
        it. Raises ``InvalidCallbackError`` when the payload has no state or
        the plan no longer waits for this reference, and
        ``DocumentNotFoundError`` for an unknown reference.
        """
        if not state:
            raise InvalidCallbackError("state is required")

        entry = await self._submissions.lookup(external_response_number)
        if entry is None:
            raise DocumentNotFoundError(
                self._submissions.collection_name, external_response_number
            )

        store = self._store_for_user(entry.user_id)
        plan = await store.get_plan(entry.plan_id)
        if plan is None:
            raise DocumentNotFoundError("flight_plans", entry.plan_id)
        if plan.external_response_number != external_response_number:
            raise InvalidCallbackError(
                f"flight plan {entry.plan_id} is no longer waiting for "
                f"{external_response_number}"
            )

        status = (
            AuthorizationStatus.APPROVED if state == ACCEPTED else AuthorizationStatus.DENIED
        )
        if message is not None and not isinstance(message, str):
            message = json.dumps(message)

        updated = await store.patch_plan(
            entry.plan_id,
            authorization_status=status,
            authorization_message=message,
        )
        logger.info(
            "FAS %s for plan %s (reference %s)",
            status.value,
            entry.plan_id,
            external_response_number,
        )
        return updated
