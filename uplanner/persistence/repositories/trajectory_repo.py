"""Repository for trajectory artifacts (one per plan, keyed by plan ID)."""

from __future__ import annotations

from uplanner.contracts.flight_plan import TrajectoryArtifact
from uplanner.persistence.repositories.base import BaseRepository


class TrajectoryRepository(BaseRepository[TrajectoryArtifact]):
    def __init__(self):
        super().__init__(TrajectoryArtifact, "trajectories")
