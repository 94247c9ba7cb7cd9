"""Per-operation tracking of in-flight requests.

An ``OperationLoadingSet`` is owned by whoever wires the services (the
API app, a controller, a test) and passed to them explicitly. It keeps,
for each operation kind, the identifiers that currently have a request
in flight so that the same (kind, id) pair is never started twice.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from uplanner.contracts.enums import OperationKind
from uplanner.services.errors import OperationInFlightError

logger = logging.getLogger(__name__)


class OperationLoadingSet:
    def __init__(self):
        self._active: dict[str, set[str]] = {kind.value: set() for kind in OperationKind}

    @staticmethod
    def _key(kind: OperationKind | str) -> str:
        return OperationKind(kind).value

    def begin(self, kind: OperationKind | str, op_id: str) -> bool:
        """Register ``op_id`` under ``kind``.

        Returns False, and changes nothing, if the pair is already active.
        """
        ids = self._active[self._key(kind)]
        if op_id in ids:
            return False
        ids.add(op_id)
        return True

    def end(self, kind: OperationKind | str, op_id: str) -> None:
        """Deregister ``op_id``. Ending an absent pair is a no-op."""
        self._active[self._key(kind)].discard(op_id)

    def is_active(self, kind: OperationKind | str, op_id: str) -> bool:
        return op_id in self._active[self._key(kind)]

    def active_ids(self, kind: OperationKind | str) -> frozenset[str]:
        return frozenset(self._active[self._key(kind)])

    def is_busy(self, op_id: str) -> bool:
        """True if any operation is in flight for ``op_id``."""
        return any(op_id in ids for ids in self._active.values())

    @contextmanager
    def track(self, kind: OperationKind | str, op_id: str) -> Iterator[None]:
        """Hold the (kind, id) pair for the duration of the block.

        Raises ``OperationInFlightError`` if it is already held.
        """
        if not self.begin(kind, op_id):
            raise OperationInFlightError(self._key(kind), op_id)
        try:
            yield
        finally:
            self.end(kind, op_id)

    def snapshot(self) -> dict[str, list[str]]:
        """Sorted copy of the in-flight ids, keyed by operation kind."""
        return {kind: sorted(ids) for kind, ids in self._active.items()}
