"""Generic async Firestore repository for user-scoped collections."""

from __future__ import annotations

from typing import Any, Generic, TypeVar, Type

from uplanner.contracts.common import FirestoreModel
from uplanner.persistence.firestore_client import get_firestore_client

T = TypeVar("T", bound=FirestoreModel)


class BaseRepository(Generic[T]):
    """CRUD for a Firestore subcollection under ``/users/{user_id}/``.

    With ``user_scoped=False`` the collection lives at the database root
    and ``user_id`` arguments are ignored.

    Serialization relies entirely on the contract's ``to_firestore()``
    and ``from_firestore()`` methods.
    """

    def __init__(
        self,
        model_class: Type[T],
        collection_name: str,
        user_scoped: bool = True,
    ):
        self._model_class = model_class
        self._collection_name = collection_name
        self._user_scoped = user_scoped

    @property
    def collection_name(self) -> str:
        return self._collection_name

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _collection_ref(self, user_id: str | None):
        db = get_firestore_client()
        if not self._user_scoped:
            return db.collection(self._collection_name)
        return (
            db.collection("users")
            .document(user_id)
            .collection(self._collection_name)
        )

    def _hydrate(self, doc) -> T:
        data = doc.to_dict()
        data["id"] = doc.id
        return self._model_class.from_firestore(data)

    async def _stream(self, query) -> list[T]:
        results: list[T] = []
        async for doc in query.stream():
            results.append(self._hydrate(doc))
        return results

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get(self, user_id: str | None, doc_id: str) -> T | None:
        """Fetch a single document by ID. Returns *None* if missing."""
        doc = await self._collection_ref(user_id).document(doc_id).get()
        if not doc.exists:
            return None
        return self._hydrate(doc)

    async def list_all(self, user_id: str) -> list[T]:
        """Stream every document in the collection."""
        return await self._stream(self._collection_ref(user_id))

    async def list_where(self, user_id: str, field: str, value: Any) -> list[T]:
        """Return every document whose ``field`` equals ``value``."""
        return await self._stream(
            self._collection_ref(user_id).where(field, "==", value)
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, user_id: str | None, entity: T) -> str:
        """Create a document.

        If ``to_firestore()`` includes an ``id`` key it is used as the
        document ID. Otherwise Firestore auto-generates one.

        Returns the document ID.
        """
        data = entity.to_firestore()
        doc_id = data.pop("id", None)
        if doc_id:
            await self._collection_ref(user_id).document(doc_id).set(data)
            return doc_id
        ref = await self._collection_ref(user_id).add(data)
        return ref[1].id  # (write_result, doc_ref) tuple

    async def update(self, user_id: str, doc_id: str, entity: T) -> None:
        """Partial update (merge) of an existing document."""
        data = entity.to_firestore()
        data.pop("id", None)
        await (
            self._collection_ref(user_id)
            .document(doc_id)
            .set(data, merge=True)
        )

    async def replace(self, user_id: str, doc_id: str, entity: T) -> None:
        """Overwrite a document so that cleared (None) fields are dropped."""
        data = entity.to_firestore()
        data.pop("id", None)
        await self._collection_ref(user_id).document(doc_id).set(data)

    async def delete(self, user_id: str, doc_id: str) -> None:
        """Delete a document."""
        await self._collection_ref(user_id).document(doc_id).delete()
