"""Top-level index of FAS submissions, used to route FAS callbacks."""

from __future__ import annotations

from uplanner.contracts.flight_plan import FasSubmissionRef, submission_id
from uplanner.persistence.repositories.base import BaseRepository


class SubmissionIndexRepository(BaseRepository[FasSubmissionRef]):
    """``/fas_submissions/{submission_id}``, not scoped to a user."""

    def __init__(self):
        super().__init__(FasSubmissionRef, "fas_submissions", user_scoped=False)

    async def record(self, entry: FasSubmissionRef) -> str:
        return await self.create(None, entry)

    async def lookup(self, external_response_number: str) -> FasSubmissionRef | None:
        return await self.get(None, submission_id(external_response_number))
