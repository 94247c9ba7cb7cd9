"""Repository for flight plans."""

from __future__ import annotations

from uplanner.contracts.enums import ProcessingStatus
from uplanner.contracts.flight_plan import FlightPlan
from uplanner.persistence.repositories.base import BaseRepository


class FlightPlanRepository(BaseRepository[FlightPlan]):
    def __init__(self):
        super().__init__(FlightPlan, "flight_plans")

    async def list_by_folder(self, user_id: str, folder_id: str) -> list[FlightPlan]:
        """Return all plans belonging to a folder."""
        return await self.list_where(user_id, "folder_id", folder_id)

    async def list_by_status(
        self, user_id: str, status: ProcessingStatus
    ) -> list[FlightPlan]:
        """Return all plans with a given processing status."""
        return await self.list_where(user_id, "processing_status", ProcessingStatus(status).value)
