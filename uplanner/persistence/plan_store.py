"""Plan and folder record store.

``PlanStore`` is the interface the workflow services depend on.
``FirestorePlanStore`` implements it on top of the user-scoped
repositories for one authenticated user.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from uplanner.contracts.common import utc_now
from uplanner.contracts.enums import AuthorizationStatus, ProcessingStatus
from uplanner.contracts.flight_plan import (
    FasSubmissionRef,
    FlightPlan,
    Folder,
    TrajectoryArtifact,
)
from uplanner.persistence.errors import DocumentNotFoundError, ResetNotAllowedError
from uplanner.persistence.repositories.flight_plan_repo import FlightPlanRepository
from uplanner.persistence.repositories.folder_repo import FolderRepository
from uplanner.persistence.repositories.submission_repo import SubmissionIndexRepository
from uplanner.persistence.repositories.trajectory_repo import TrajectoryRepository

logger = logging.getLogger(__name__)

# Fields cleared by a reset. The schedule and the U-space are kept.
_RESET_FIELDS: dict[str, Any] = {
    "processing_status": ProcessingStatus.UNPROCESSED,
    "authorization_status": AuthorizationStatus.NONE,
    "authorization_document": None,
    "authorization_message": None,
    "external_response_number": None,
    "trajectory_ref": None,
}


class PlanStore(Protocol):
    async def list_plans(self) -> list[FlightPlan]: ...

    async def list_plans_by_status(self, status: ProcessingStatus) -> list[FlightPlan]: ...

    async def get_plan(self, plan_id: str) -> FlightPlan | None: ...

    async def create_plan(self, plan: FlightPlan) -> FlightPlan: ...

    async def patch_plan(self, plan_id: str, **fields: Any) -> FlightPlan: ...

    async def delete_plan(self, plan_id: str) -> None: ...

    async def reset_plan(self, plan_id: str) -> FlightPlan: ...

    async def get_trajectory(self, plan_id: str) -> TrajectoryArtifact | None: ...

    async def list_folders(self) -> list[Folder]: ...

    async def get_folder(self, folder_id: str) -> Folder | None: ...

    async def create_folder(self, folder: Folder) -> Folder: ...

    async def patch_folder(self, folder_id: str, **fields: Any) -> Folder: ...

    async def delete_folder(self, folder_id: str) -> None: ...


class FirestorePlanStore:
    """``PlanStore`` backed by ``/users/{user_id}/...`` collections.

    Patches are read-modify-write: the merged record is validated against
    the ``FlightPlan`` contract before it is written, so a patch that would
    break a model invariant raises ``pydantic.ValidationError`` and nothing
    is stored.
    """

    def __init__(
        self,
        user_id: str,
        plans: FlightPlanRepository | None = None,
        folders: FolderRepository | None = None,
        trajectories: TrajectoryRepository | None = None,
        submissions: SubmissionIndexRepository | None = None,
    ):
        self.user_id = user_id
        self._plans = plans or FlightPlanRepository()
        self._folders = folders or FolderRepository()
        self._trajectories = trajectories or TrajectoryRepository()
        self._submissions = submissions or SubmissionIndexRepository()

    # ------------------------------------------------------------------
    # Flight plans
    # ------------------------------------------------------------------

    async def list_plans(self) -> list[FlightPlan]:
        return await self._plans.list_all(self.user_id)

    async def list_plans_by_status(self, status: ProcessingStatus) -> list[FlightPlan]:
        return await self._plans.list_by_status(self.user_id, status)

    async def get_plan(self, plan_id: str) -> FlightPlan | None:
        return await self._plans.get(self.user_id, plan_id)

    async def create_plan(self, plan: FlightPlan) -> FlightPlan:
        doc_id = await self._plans.create(self.user_id, plan)
        return plan.model_copy(update={"id": doc_id})

    async def patch_plan(self, plan_id: str, **fields: Any) -> FlightPlan:
        current = await self._require_plan(plan_id)
        data = current.model_dump()
        data.update(fields)
        data["id"] = plan_id
        data["updated_at"] = utc_now()
        updated = FlightPlan.model_validate(data)

        await self._plans.replace(self.user_id, plan_id, updated)

        reference = fields.get("external_response_number")
        if reference:
            await self._submissions.record(
                FasSubmissionRef(
                    external_response_number=reference,
                    user_id=self.user_id,
                    plan_id=plan_id,
                )
            )
        return updated

    async def delete_plan(self, plan_id: str) -> None:
        await self._trajectories.delete(self.user_id, plan_id)
        await self._plans.delete(self.user_id, plan_id)

    async def reset_plan(self, plan_id: str) -> FlightPlan:
        """Return a plan to ``unprocessed`` and drop everything derived from it."""
        current = await self._require_plan(plan_id)
        if current.processing_status == ProcessingStatus.UNPROCESSED:
            raise ResetNotAllowedError(plan_id)

        await self._trajectories.delete(self.user_id, plan_id)
        plan = await self.patch_plan(plan_id, **_RESET_FIELDS)
        logger.info("Flight plan %s reset for user %s", plan_id, self.user_id)
        return plan

    async def get_trajectory(self, plan_id: str) -> TrajectoryArtifact | None:
        return await self._trajectories.get(self.user_id, plan_id)

    async def _require_plan(self, plan_id: str) -> FlightPlan:
        plan = await self.get_plan(plan_id)
        if plan is None:
            raise DocumentNotFoundError(self._plans.collection_name, plan_id)
        return plan

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    async def list_folders(self) -> list[Folder]:
        return await self._folders.list_all(self.user_id)

    async def get_folder(self, folder_id: str) -> Folder | None:
        return await self._folders.get(self.user_id, folder_id)

    async def create_folder(self, folder: Folder) -> Folder:
        doc_id = await self._folders.create(self.user_id, folder)
        return folder.model_copy(update={"id": doc_id})

    async def patch_folder(self, folder_id: str, **fields: Any) -> Folder:
        current = await self.get_folder(folder_id)
        if current is None:
            raise DocumentNotFoundError(self._folders.collection_name, folder_id)
        data = current.model_dump()
        data.update(fields)
        data["id"] = folder_id
        data["updated_at"] = utc_now()
        updated = Folder.model_validate(data)
        await self._folders.replace(self.user_id, folder_id, updated)
        return updated

    async def delete_folder(self, folder_id: str) -> None:
        """Delete a folder together with every plan it contains."""
        plans = await self._plans.list_by_folder(self.user_id, folder_id)
        for plan in plans:
            await self.delete_plan(plan.id)
        await self._folders.delete(self.user_id, folder_id)
        logger.info(
            "Folder %s deleted with %d flight plan(s)", folder_id, len(plans)
        )
