"""Repository for flight plan folders."""

from __future__ import annotations

from uplanner.contracts.flight_plan import Folder
from uplanner.persistence.repositories.base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    def __init__(self):
        super().__init__(Folder, "folders")
