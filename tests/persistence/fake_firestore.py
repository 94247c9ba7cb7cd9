"""In-memory Firestore fake for repository and service tests.

Mimics the google-cloud-firestore AsyncClient interface just enough to
run the repositories and the plan store without network access. Every
document lives in one flat ``store`` dict keyed by its full path.
"""

from __future__ import annotations

import uuid
from typing import Any


class FakeDocumentSnapshot:
    def __init__(self, data: dict[str, Any] | None, doc_id: str):
        self._data = data
        self.id = doc_id
        self.exists = data is not None

    def to_dict(self) -> dict[str, Any]:
        if self._data is None:
            raise ValueError("Document does not exist")
        return dict(self._data)


class FakeDocumentRef:
    def __init__(self, store: dict[str, dict], path: str):
        self._store = store
        self._path = path
        self.id = path.rsplit("/", 1)[-1]

    async def get(self) -> FakeDocumentSnapshot:
        return FakeDocumentSnapshot(self._store.get(self._path), self.id)

    async def set(self, data: dict, merge: bool = False) -> None:
        if merge and self._path in self._store:
            self._store[self._path].update(data)
        else:
            self._store[self._path] = dict(data)

    async def delete(self) -> None:
        self._store.pop(self._path, None)

    def collection(self, name: str) -> "FakeCollectionRef":
        return FakeCollectionRef(self._store, f"{self._path}/{name}")


class FakeWriteResult:
    pass


def _children(store: dict[str, dict], path: str):
    prefix = path + "/"
    for doc_path, data in sorted(store.items()):
        if doc_path.startswith(prefix):
            rest = doc_path[len(prefix):]
            # Direct children only, not nested subcollections
            if "/" not in rest:
                yield rest, data


class FakeCollectionRef:
    def __init__(self, store: dict[str, dict], path: str):
        self._store = store
        self._path = path

    def document(self, doc_id: str | None = None) -> FakeDocumentRef:
        if doc_id is None:
            doc_id = uuid.uuid4().hex[:20]
        return FakeDocumentRef(self._store, f"{self._path}/{doc_id}")

    async def add(self, data: dict) -> tuple[FakeWriteResult, FakeDocumentRef]:
        doc_ref = self.document()
        self._store[doc_ref._path] = dict(data)
        return FakeWriteResult(), doc_ref

    async def stream(self):
        for doc_id, data in _children(self._store, self._path):
            yield FakeDocumentSnapshot(dict(data), doc_id)

    def where(self, field: str, op: str, value: Any) -> "FakeQuery":
        return FakeQuery(self._store, self._path, field, op, value)


class FakeQuery:
    def __init__(self, store: dict[str, dict], path: str, field: str, op: str, value: Any):
        self._store = store
        self._path = path
        self._field = field
        self._op = op
        self._value = value

    async def stream(self):
        for doc_id, data in _children(self._store, self._path):
            if self._matches(data):
                yield FakeDocumentSnapshot(dict(data), doc_id)

    def _matches(self, data: dict) -> bool:
        if self._op == "==":
            return data.get(self._field) == self._value
        raise NotImplementedError(f"operator {self._op!r} not supported by the fake")


class FakeFirestoreClient:
    """Drop-in replacement for ``google.cloud.firestore.AsyncClient``."""

    def __init__(self):
        self.store: dict[str, dict] = {}

    def collection(self, name: str) -> FakeCollectionRef:
        return FakeCollectionRef(self.store, name)

    def documents(self, path: str) -> dict[str, dict]:
        """Raw documents directly under a collection path, keyed by ID."""
        return {doc_id: dict(data) for doc_id, data in _children(self.store, path)}
