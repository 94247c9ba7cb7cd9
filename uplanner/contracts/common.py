"""Base classes and shared helpers for uplanner contracts.

Conventions (all contracts and API responses):
- **Datetimes**: always UTC, ISO 8601 in serialized form. Naive values
  coming from clients are taken as UTC.
- **Identifiers**: opaque strings (Firestore document IDs).
- **U-Plan documents**: kept with their camelCase wire keys, everything
  else is snake_case.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict


class FirestoreModel(BaseModel):
    """Base model with Firestore-friendly serialization.

    - Enums serialize as string values (Firestore stores strings).
    - ``to_firestore()`` produces a JSON-safe dict (datetimes as ISO 8601).
    - ``from_firestore()`` hydrates from a Firestore document dict.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_firestore(self) -> dict[str, Any]:
        """Dump to Firestore-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_firestore(cls, data: dict[str, Any]) -> "FirestoreModel":
        """Create model instance from Firestore document dict."""
        return cls.model_validate(data)


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to an aware UTC datetime."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)
