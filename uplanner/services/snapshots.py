"""Local snapshot of the user's plans and folders.

The store stays the source of truth. The cache only holds the last
refreshed copy plus short-lived optimistic overlays, which are merged
over the server data on read and dropped as soon as a fresh copy of the
plan arrives, through a single upsert or a full refresh.

It also remembers FAS references that were accepted but could not be
written to the store, so the same plan is not submitted twice.
"""

from __future__ import annotations

from typing import Any, Iterable

from uplanner.contracts.flight_plan import FlightPlan, Folder


class PlanSnapshotCache:
    def __init__(self):
        self._plans: dict[str, FlightPlan] = {}
        self._folders: dict[str, Folder] = {}
        self._overlays: dict[str, dict[str, Any]] = {}
        self._unrecorded: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def replace_all(
        self, plans: Iterable[FlightPlan], folders: Iterable[Folder]
    ) -> None:
        """Swap in a full server snapshot and drop every overlay."""
        self._plans = {p.id: p for p in plans if p.id is not None}
        self._folders = {f.id: f for f in folders if f.id is not None}
        self._overlays.clear()

    def upsert(self, plan: FlightPlan) -> None:
        """Store a fresh copy read from the store. Its overlay is dropped."""
        if plan.id is not None:
            self._plans[plan.id] = plan
            self._overlays.pop(plan.id, None)

    def upsert_folder(self, folder: Folder) -> None:
        if folder.id is not None:
            self._folders[folder.id] = folder

    def remove(self, plan_id: str) -> None:
        self._plans.pop(plan_id, None)
        self._overlays.pop(plan_id, None)
        self._unrecorded.pop(plan_id, None)

    def remove_folder(self, folder_id: str) -> None:
        self._folders.pop(folder_id, None)
        for plan in self.by_folder(folder_id):
            self.remove(plan.id)

    # ------------------------------------------------------------------
    # Optimistic overlay
    # ------------------------------------------------------------------

    def overlay(self, plan_id: str, **fields: Any) -> None:
        self._overlays.setdefault(plan_id, {}).update(fields)

    def clear_overlay(self, plan_id: str) -> None:
        self._overlays.pop(plan_id, None)

    def has_overlay(self, plan_id: str) -> bool:
        return plan_id in self._overlays

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, plan_id: str) -> FlightPlan | None:
        plan = self._plans.get(plan_id)
        if plan is None:
            return None
        overlay = self._overlays.get(plan_id)
        if not overlay:
            return plan
        return FlightPlan.model_validate({**plan.model_dump(), **overlay})

    def plans(self) -> list[FlightPlan]:
        return [self.get(plan_id) for plan_id in self._plans]

    def folders(self) -> list[Folder]:
        return list(self._folders.values())

    def get_folder(self, folder_id: str) -> Folder | None:
        return self._folders.get(folder_id)

    def by_folder(self, folder_id: str | None) -> list[FlightPlan]:
        return [p for p in self.plans() if p.folder_id == folder_id]

    # ------------------------------------------------------------------
    # Accepted submissions not yet written to the store
    # ------------------------------------------------------------------

    def note_unrecorded_submission(self, plan_id: str, reference: str) -> None:
        self._unrecorded[plan_id] = reference

    def unrecorded_submission(self, plan_id: str) -> str | None:
        return self._unrecorded.get(plan_id)

    def forget_unrecorded_submission(self, plan_id: str) -> None:
        self._unrecorded.pop(plan_id, None)
